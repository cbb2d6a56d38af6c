from itertools import product

import pytest
from welcome_gate.core.decision import (CURRENT_SCHEMA_VERSION, OnboardingVerdict, evaluate,
                                        resolve_choice, should_show_onboarding)
from welcome_gate.core.onboarding import OnboardingState, UserChoice


@pytest.mark.parametrize("choice, version", product(list(UserChoice), [0, 1, 2]))
def test_first_launch_always_shows(choice, version):
    state = OnboardingState(
        first_launch=True,
        user_choice=choice,
        choice_timestamp=10 if choice is not UserChoice.NONE else None,
        schema_version=version,
    )
    assert should_show_onboarding(state, CURRENT_SCHEMA_VERSION) is True


@pytest.mark.parametrize("choice", [UserChoice.LOCAL, UserChoice.CLOUD])
def test_satisfied_state_routes_to_stored_choice(choice):
    state = OnboardingState(False, choice, 10, CURRENT_SCHEMA_VERSION)

    assert should_show_onboarding(state) is False
    assert resolve_choice(state) is choice
    assert evaluate(state) == OnboardingVerdict(show_onboarding=False, choice=choice)
    assert evaluate(state).routable


def test_no_choice_after_first_launch_shows():
    state = OnboardingState(False, UserChoice.NONE, None, CURRENT_SCHEMA_VERSION)
    assert should_show_onboarding(state) is True


def test_newer_stored_version_does_not_force_onboarding():
    state = OnboardingState(False, UserChoice.CLOUD, 10, CURRENT_SCHEMA_VERSION + 1)
    assert should_show_onboarding(state) is False


def test_version_bump_hides_stale_choice_in_verdict():
    state = OnboardingState(False, UserChoice.LOCAL, 10, CURRENT_SCHEMA_VERSION - 1)

    assert should_show_onboarding(state) is True
    # The stored value survives; only the combined verdict masks it
    assert resolve_choice(state) is UserChoice.LOCAL
    verdict = evaluate(state)
    assert verdict.show_onboarding is True
    assert verdict.choice is UserChoice.NONE
    assert not verdict.routable


def test_version_bump_then_reselect(store):
    store._prefs.commit(OnboardingState(False, UserChoice.LOCAL, 10, CURRENT_SCHEMA_VERSION - 1).to_record())
    assert should_show_onboarding(store.get(), CURRENT_SCHEMA_VERSION) is True

    store.record_choice(UserChoice.LOCAL)

    state = store.get()
    assert state.schema_version == CURRENT_SCHEMA_VERSION
    assert state.choice_timestamp > 10
    assert should_show_onboarding(state, CURRENT_SCHEMA_VERSION) is False


def test_reset_shows_again(store):
    store.record_choice(UserChoice.CLOUD)
    store.reset()

    state = store.get()
    assert state == OnboardingState(True, UserChoice.NONE, None, 0)
    assert should_show_onboarding(state) is True


def test_explicit_current_version_argument():
    state = OnboardingState(False, UserChoice.LOCAL, 10, 3)
    assert should_show_onboarding(state, 3) is False
    assert should_show_onboarding(state, 4) is True
