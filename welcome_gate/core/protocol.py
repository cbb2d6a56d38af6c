"""
Bridge Protocol - the fixed contract between the welcome page and the host.

Page -> host (methods of the `HostInterface` channel object):
    onUserChoice(choice: str)        "local" | "cloud"; ends the onboarding session
    onPageLoaded()                   page finished its own initialization
    getCurrentLanguage() -> str      active language code
    changeLanguage(code: str)        persist, notify, rebuild the host screen
    onLanguageChanged(code: str)     legacy alias of changeLanguage

Host -> page:
    setLanguageFromHost(code: str)   evaluated once per page session, after onPageLoaded

There is no generic dispatch: a name outside this table is rejected.
"""
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional
import json
import threading
import time

from loguru import logger

from .errors import SessionError
from .onboarding import UserChoice

BRIDGE_PROTOCOL_VERSION = 1
BRIDGE_OBJECT_NAME = "HostInterface"
PUSH_LANGUAGE_FUNCTION = "setLanguageFromHost"


class Direction(Enum):
    PAGE_TO_HOST = "page_to_host"
    HOST_TO_PAGE = "host_to_page"


class BridgeCall(Enum):
    USER_CHOICE = "onUserChoice"
    PAGE_LOADED = "onPageLoaded"
    CURRENT_LANGUAGE = "getCurrentLanguage"
    CHANGE_LANGUAGE = "changeLanguage"
    PUSH_LANGUAGE = PUSH_LANGUAGE_FUNCTION

    @property
    def direction(self) -> Direction:
        if self is BridgeCall.PUSH_LANGUAGE:
            return Direction.HOST_TO_PAGE
        return Direction.PAGE_TO_HOST

    @property
    def takes_argument(self) -> bool:
        return self in (BridgeCall.USER_CHOICE, BridgeCall.CHANGE_LANGUAGE, BridgeCall.PUSH_LANGUAGE)


CALL_ALIASES = {
    "onLanguageChanged": BridgeCall.CHANGE_LANGUAGE,
}


def lookup_call(name: str) -> BridgeCall:
    """Map a page-visible method name to its BridgeCall; unknown names raise ValueError."""
    if name in CALL_ALIASES:
        return CALL_ALIASES[name]
    try:
        return BridgeCall(name)
    except ValueError:
        raise ValueError(f"Unknown bridge call: {name!r}") from None


@dataclass(frozen=True)
class BridgeMessage:
    """One crossing of the page/host boundary. Consumed once, never replayed."""
    call: BridgeCall
    argument: Optional[str] = None
    timestamp: float = field(default_factory=time.monotonic, compare=False)

    def __post_init__(self):
        if self.call.takes_argument and not isinstance(self.argument, str):
            raise ValueError(f"{self.call.value} requires a string argument")
        if not self.call.takes_argument and self.argument is not None:
            raise ValueError(f"{self.call.value} takes no argument")

    @classmethod
    def from_call(cls, name: str, argument: Optional[str] = None) -> "BridgeMessage":
        return cls(lookup_call(name), argument)

    @property
    def direction(self) -> Direction:
        return self.call.direction


class SessionResult(IntEnum):
    """Outcome reported to the routing layer when an onboarding session ends."""
    CANCELLED = 0
    LOCAL_CHOICE = 100
    CLOUD_CHOICE = 101

    @classmethod
    def from_choice(cls, choice: UserChoice) -> "SessionResult":
        return {
            UserChoice.LOCAL: cls.LOCAL_CHOICE,
            UserChoice.CLOUD: cls.CLOUD_CHOICE,
        }.get(choice, cls.CANCELLED)

    @property
    def choice(self) -> UserChoice:
        return {
            SessionResult.LOCAL_CHOICE: UserChoice.LOCAL,
            SessionResult.CLOUD_CHOICE: UserChoice.CLOUD,
        }.get(self, UserChoice.NONE)


def parse_choice(value) -> UserChoice:
    """Choice sent by the page; NONE for anything that is not a selectable mode."""
    return UserChoice.from_value(value)


def push_language_script(code: str) -> str:
    """JavaScript that hands the active language to the page."""
    return (
        f"if (typeof {PUSH_LANGUAGE_FUNCTION} === 'function') "
        f"{{ {PUSH_LANGUAGE_FUNCTION}({json.dumps(code)}); }}"
    )


class BridgeSession:
    """
    Ordering and delivery rules for one page load.

    - the language push is only allowed after onPageLoaded, and at most once
    - the first accepted user choice wins; later ones are ignored
    - once closed, every page call is ignored

    A new BridgeSession is started for every (re)load of the page.
    """

    def __init__(self, session_id: int = 0):
        self.session_id = session_id
        self._lock = threading.Lock()
        self._loaded = False
        self._pushed = False
        self._choice_taken = False
        self._closed = False
        self.trace: List[BridgeMessage] = []

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def pushed(self) -> bool:
        return self._pushed

    @property
    def closed(self) -> bool:
        return self._closed

    def page_loaded(self) -> bool:
        """Record onPageLoaded. True when the language push should go out now."""
        with self._lock:
            if self._closed:
                logger.debug(f"Bridge session {self.session_id}: onPageLoaded after close ignored")
                return False
            self.trace.append(BridgeMessage(BridgeCall.PAGE_LOADED))
            first = not self._loaded
            self._loaded = True
            return first and not self._pushed

    def record_push(self, code: str) -> BridgeMessage:
        with self._lock:
            if not self._loaded:
                raise SessionError("Language push before the page reported load completion")
            if self._pushed:
                raise SessionError("Language already pushed in this page session")
            message = BridgeMessage(BridgeCall.PUSH_LANGUAGE, code)
            self._pushed = True
            self.trace.append(message)
            return message

    def accept_choice(self, value: str) -> bool:
        """True exactly once per session for the choice that should be acted on."""
        with self._lock:
            if self._closed or self._choice_taken:
                logger.debug(f"Bridge session {self.session_id}: extra choice {value!r} ignored")
                return False
            self.trace.append(BridgeMessage(BridgeCall.USER_CHOICE, value))
            self._choice_taken = True
            return True

    def rearm_choice(self) -> None:
        """Allow another choice after the previous one could not be persisted."""
        with self._lock:
            if not self._closed:
                self._choice_taken = False

    def close(self) -> bool:
        """True the first time only."""
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            return True
