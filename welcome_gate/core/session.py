"""
Host Session State Machine.

INIT -> DECIDING -> SHOWING_ONBOARDING | ROUTED
SHOWING_ONBOARDING -> ROUTED (choice recorded) | ERROR (page failed to load) | CANCELLED (closed)
"""
from enum import Enum
from typing import Callable, List
from loguru import logger

from .errors import SessionError


class SessionPhase(Enum):
    """Host controller states."""
    INIT = "init"
    DECIDING = "deciding"
    SHOWING_ONBOARDING = "showing_onboarding"
    ROUTED = "routed"
    ERROR = "error"
    CANCELLED = "cancelled"


class SessionMachine:
    """
    Tracks the host session phase and notifies listeners on every transition.

    Usage:
        machine = SessionMachine()
        machine.add_listener(lambda old, new: print(old, new))
        machine.transition_to(SessionPhase.DECIDING)
    """

    VALID_TRANSITIONS = {
        SessionPhase.INIT: [SessionPhase.DECIDING],
        SessionPhase.DECIDING: [SessionPhase.SHOWING_ONBOARDING, SessionPhase.ROUTED],
        SessionPhase.SHOWING_ONBOARDING: [SessionPhase.ROUTED, SessionPhase.ERROR, SessionPhase.CANCELLED],
        SessionPhase.ROUTED: [],
        SessionPhase.ERROR: [],
        SessionPhase.CANCELLED: [],
    }

    TERMINAL = (SessionPhase.ROUTED, SessionPhase.ERROR, SessionPhase.CANCELLED)

    def __init__(self):
        self._phase = SessionPhase.INIT
        self._listeners: List[Callable[[SessionPhase, SessionPhase], None]] = []

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_terminal(self) -> bool:
        return self._phase in self.TERMINAL

    def can_transition(self, target: SessionPhase) -> bool:
        return target in self.VALID_TRANSITIONS.get(self._phase, [])

    def transition_to(self, target: SessionPhase) -> None:
        """
        Raises:
            SessionError: If transition is invalid
        """
        if not self.can_transition(target):
            raise SessionError(
                f"Invalid transition: {self._phase.value} -> {target.value}"
            )

        old_phase = self._phase
        self._phase = target
        logger.info(f"Session: {old_phase.value} -> {target.value}")

        for listener in list(self._listeners):
            try:
                listener(old_phase, target)
            except Exception as e:
                logger.error(f"Session listener error: {e}")

    def add_listener(self, listener: Callable[[SessionPhase, SessionPhase], None]) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
