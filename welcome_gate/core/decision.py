"""
Onboarding decision rules.

Pure functions over OnboardingState. Callers should go through `evaluate()`:
after a version bump the previous choice is still stored, and only the
combined verdict hides it while onboarding is pending.
"""
from dataclasses import dataclass

from .onboarding import OnboardingState, UserChoice

# Bump to re-prompt every user (changed onboarding content needs fresh consent).
CURRENT_SCHEMA_VERSION = 1


def should_show_onboarding(state: OnboardingState, current_version: int = CURRENT_SCHEMA_VERSION) -> bool:
    if state.first_launch:
        return True
    if state.schema_version < current_version:
        return True
    return state.user_choice is UserChoice.NONE


def resolve_choice(state: OnboardingState) -> UserChoice:
    return state.user_choice


@dataclass(frozen=True)
class OnboardingVerdict:
    show_onboarding: bool
    choice: UserChoice

    @property
    def routable(self) -> bool:
        return not self.show_onboarding and self.choice is not UserChoice.NONE


def evaluate(state: OnboardingState, current_version: int = CURRENT_SCHEMA_VERSION) -> OnboardingVerdict:
    """Decide and resolve together; the choice is NONE whenever onboarding is required."""
    if should_show_onboarding(state, current_version):
        return OnboardingVerdict(show_onboarding=True, choice=UserChoice.NONE)
    return OnboardingVerdict(show_onboarding=False, choice=resolve_choice(state))
