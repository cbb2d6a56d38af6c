"""
Onboarding State - persisted outcome of the welcome flow.

Record layout (onboarding namespace):
    is_first_launch:  bool
    user_choice:      "" | "local" | "cloud"
    choice_timestamp: int, epoch millis (omitted while no choice exists)
    welcome_version:  int, version of the flow the user last satisfied
"""
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Callable, Optional
import threading
import time

from loguru import logger

from .errors import StorageFailure
from .storage import Preferences

KEY_FIRST_LAUNCH = "is_first_launch"
KEY_USER_CHOICE = "user_choice"
KEY_CHOICE_TIMESTAMP = "choice_timestamp"
KEY_WELCOME_VERSION = "welcome_version"


class UserChoice(Enum):
    """Mode selected on the welcome page."""
    NONE = ""
    LOCAL = "local"
    CLOUD = "cloud"

    @classmethod
    def from_value(cls, value) -> "UserChoice":
        """Total mapping: anything that is not a known mode is NONE."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for choice in cls:
                if choice.value == normalized:
                    return choice
        return cls.NONE

    @property
    def display_name(self) -> str:
        return {
            UserChoice.LOCAL: "Local digital human",
            UserChoice.CLOUD: "Cloud digital human",
            UserChoice.NONE: "Not selected",
        }[self]


@dataclass(frozen=True)
class OnboardingState:
    first_launch: bool = True
    user_choice: UserChoice = UserChoice.NONE
    choice_timestamp: Optional[int] = None
    schema_version: int = 0

    @classmethod
    def from_record(cls, record: Optional[dict]) -> "OnboardingState":
        """Build a state from a stored record, enforcing the choice/timestamp invariant."""
        if not record:
            return cls()

        choice = UserChoice.from_value(record.get(KEY_USER_CHOICE, ""))
        timestamp = record.get(KEY_CHOICE_TIMESTAMP)
        if not isinstance(timestamp, int) or isinstance(timestamp, bool) or timestamp <= 0:
            timestamp = None
        if choice is UserChoice.NONE or timestamp is None:
            choice, timestamp = UserChoice.NONE, None

        version = record.get(KEY_WELCOME_VERSION, 0)
        if not isinstance(version, int) or isinstance(version, bool):
            version = 0

        first_launch = bool(record.get(KEY_FIRST_LAUNCH, True))
        if choice is not UserChoice.NONE:
            first_launch = False

        return cls(
            first_launch=first_launch,
            user_choice=choice,
            choice_timestamp=timestamp,
            schema_version=version,
        )

    def to_record(self) -> dict:
        record = {
            KEY_FIRST_LAUNCH: self.first_launch,
            KEY_USER_CHOICE: self.user_choice.value,
            KEY_WELCOME_VERSION: self.schema_version,
        }
        if self.choice_timestamp is not None:
            record[KEY_CHOICE_TIMESTAMP] = self.choice_timestamp
        return record


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class OnboardingStore:
    """
    Reads and writes OnboardingState.

    `get()` raises StorageFailure for an unreadable record and every write raises
    StorageFailure when the commit fails. Writes start from defaults when the
    previous record is unreadable and replace it. A namespace that was never
    written reads back as defaults.

    Usage:
        store = OnboardingStore(JsonFilePreferences("onboarding", path), schema_version=1)
        store.record_choice(UserChoice.LOCAL)
        store.get().user_choice  # UserChoice.LOCAL
    """

    def __init__(self, prefs: Preferences, schema_version: int = 1,
                 clock: Callable[[], int] = _epoch_millis):
        self._prefs = prefs
        self.schema_version = schema_version
        self._clock = clock
        self._lock = threading.Lock()

    def get(self) -> OnboardingState:
        return OnboardingState.from_record(self._prefs.read())

    def record_choice(self, choice: UserChoice) -> OnboardingState:
        """
        Persist a resolved choice: sets the choice, stamps the time, clears
        first launch and stamps the current schema version in one commit.

        Re-recording is allowed and always moves the timestamp forward.
        """
        choice = UserChoice.from_value(choice)
        if choice is UserChoice.NONE:
            raise ValueError("record_choice requires LOCAL or CLOUD")

        with self._lock:
            previous = self._read_for_update()
            timestamp = self._clock()
            if previous.choice_timestamp is not None and timestamp <= previous.choice_timestamp:
                timestamp = previous.choice_timestamp + 1

            state = OnboardingState(
                first_launch=False,
                user_choice=choice,
                choice_timestamp=timestamp,
                schema_version=self.schema_version,
            )
            self._prefs.commit(state.to_record())

        logger.info(f"User choice recorded: {choice.value} at {timestamp} (welcome v{self.schema_version})")
        return state

    def mark_schema_satisfied(self, version: int) -> OnboardingState:
        """Stamp the flow version the user has satisfied; other fields are kept."""
        with self._lock:
            state = replace(self._read_for_update(), schema_version=version)
            self._prefs.commit(state.to_record())
        return state

    def mark_first_launch_completed(self) -> OnboardingState:
        """Leave first-launch state without recording a choice."""
        with self._lock:
            state = replace(self._read_for_update(), first_launch=False,
                            schema_version=self.schema_version)
            self._prefs.commit(state.to_record())
        return state

    def reset(self) -> OnboardingState:
        """Drop everything; the next launch onboards again."""
        with self._lock:
            self._prefs.clear()
        logger.info("Onboarding state reset")
        return OnboardingState()

    def _read_for_update(self) -> OnboardingState:
        # Every write replaces the whole record, so an unreadable one is overwritten.
        try:
            return OnboardingState.from_record(self._prefs.read())
        except StorageFailure as e:
            logger.warning(f"Onboarding record unreadable, replacing it: {e}")
            return OnboardingState()

    # Convenience queries
    def has_user_made_choice(self) -> bool:
        return self.get().user_choice is not UserChoice.NONE

    def is_local_choice_selected(self) -> bool:
        return self.get().user_choice is UserChoice.LOCAL

    def is_cloud_choice_selected(self) -> bool:
        return self.get().user_choice is UserChoice.CLOUD

    def summary(self, current_version: Optional[int] = None) -> str:
        """Human-readable state dump for diagnostics."""
        from .decision import should_show_onboarding

        state = self.get()
        version = self.schema_version if current_version is None else current_version
        if state.choice_timestamp is not None:
            chosen_at = datetime.fromtimestamp(state.choice_timestamp / 1000).isoformat(timespec="seconds")
        else:
            chosen_at = "never"
        return "\n".join([
            "Welcome page configuration:",
            f"- first launch: {state.first_launch}",
            f"- user choice: {state.user_choice.display_name}",
            f"- chosen at: {chosen_at}",
            f"- welcome version: {state.schema_version} (current {version})",
            f"- onboarding required: {should_show_onboarding(state, version)}",
        ])
