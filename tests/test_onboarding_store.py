import pytest
from welcome_gate.core.errors import StorageFailure
from welcome_gate.core.onboarding import OnboardingState, OnboardingStore, UserChoice
from welcome_gate.core.storage import JsonFilePreferences, MemoryPreferences


def test_defaults_when_never_written(store):
    state = store.get()

    assert state == OnboardingState()
    assert state.first_launch is True
    assert state.user_choice is UserChoice.NONE
    assert state.choice_timestamp is None
    assert state.schema_version == 0


def test_record_choice_commits_everything_at_once(store, onboarding_prefs, clock):
    state = store.record_choice(UserChoice.LOCAL)

    assert onboarding_prefs.commits == 1
    assert state.first_launch is False
    assert state.user_choice is UserChoice.LOCAL
    assert state.choice_timestamp == clock.now
    assert state.schema_version == 1
    assert store.get() == state
    assert onboarding_prefs.read() == {
        "is_first_launch": False,
        "user_choice": "local",
        "choice_timestamp": clock.now,
        "welcome_version": 1,
    }


def test_record_choice_accepts_strings(store):
    store.record_choice("cloud")
    assert store.is_cloud_choice_selected()
    assert not store.is_local_choice_selected()
    assert store.has_user_made_choice()


def test_record_none_is_rejected(store, onboarding_prefs):
    with pytest.raises(ValueError):
        store.record_choice(UserChoice.NONE)
    with pytest.raises(ValueError):
        store.record_choice("remote")
    assert onboarding_prefs.commits == 0


def test_timestamps_strictly_increase_with_a_frozen_clock(store):
    first = store.record_choice(UserChoice.LOCAL)
    second = store.record_choice(UserChoice.CLOUD)
    third = store.record_choice(UserChoice.CLOUD)

    assert first.choice_timestamp < second.choice_timestamp < third.choice_timestamp
    assert store.get().user_choice is UserChoice.CLOUD


def test_failed_commit_leaves_previous_state(store, onboarding_prefs):
    before = store.record_choice(UserChoice.LOCAL)
    onboarding_prefs.fail_write = True

    with pytest.raises(StorageFailure):
        store.record_choice(UserChoice.CLOUD)

    onboarding_prefs.fail_write = False
    assert store.get() == before


def test_unreadable_record_propagates(store, onboarding_prefs):
    onboarding_prefs.fail_read = True
    with pytest.raises(StorageFailure):
        store.get()


def test_mark_schema_satisfied_keeps_choice(store):
    store.record_choice(UserChoice.CLOUD)
    state = store.mark_schema_satisfied(5)

    assert state.schema_version == 5
    assert state.user_choice is UserChoice.CLOUD
    assert store.get().schema_version == 5


def test_mark_first_launch_completed_without_choice(store):
    state = store.mark_first_launch_completed()

    assert state.first_launch is False
    assert state.user_choice is UserChoice.NONE
    assert state.schema_version == 1


def test_reset_returns_to_defaults(store):
    store.record_choice(UserChoice.LOCAL)
    assert store.reset() == OnboardingState()
    assert store.get() == OnboardingState()
    assert not store.has_user_made_choice()


def test_from_record_drops_choice_without_timestamp():
    state = OnboardingState.from_record({"is_first_launch": False, "user_choice": "local"})
    assert state.user_choice is UserChoice.NONE
    assert state.choice_timestamp is None


def test_from_record_drops_invalid_timestamp():
    for bad in (0, -5, "123", 1.5, True):
        state = OnboardingState.from_record({"user_choice": "cloud", "choice_timestamp": bad})
        assert state.user_choice is UserChoice.NONE
        assert state.choice_timestamp is None


def test_from_record_choice_implies_not_first_launch():
    state = OnboardingState.from_record(
        {"is_first_launch": True, "user_choice": "cloud", "choice_timestamp": 10, "welcome_version": 1}
    )
    assert state.first_launch is False
    assert state.user_choice is UserChoice.CLOUD


def test_from_record_unknown_choice_is_none():
    state = OnboardingState.from_record({"user_choice": "hologram", "choice_timestamp": 10})
    assert state.user_choice is UserChoice.NONE


def test_summary_mentions_choice(store):
    store.record_choice(UserChoice.LOCAL)
    summary = store.summary(current_version=2)

    assert "Local digital human" in summary
    assert "current 2" in summary
    assert "onboarding required: True" in summary


def test_summary_for_fresh_install():
    store = OnboardingStore(MemoryPreferences("onboarding"))

    summary = store.summary()
    assert "chosen at: never" in summary
    assert "Not selected" in summary


def test_record_choice_replaces_corrupt_record(tmp_path):
    path = tmp_path / "welcome_config.json"
    path.write_text("{not json", encoding="utf-8")
    store = OnboardingStore(JsonFilePreferences("onboarding", path), schema_version=1)

    with pytest.raises(StorageFailure):
        store.get()

    state = store.record_choice(UserChoice.LOCAL)

    assert state.user_choice is UserChoice.LOCAL
    assert state.choice_timestamp is not None
    assert store.get() == state


def test_mark_first_launch_completed_over_unreadable_record(store, onboarding_prefs):
    onboarding_prefs.fail_read = True

    state = store.mark_first_launch_completed()

    assert state.first_launch is False
    assert onboarding_prefs.commits == 1
