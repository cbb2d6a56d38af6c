"""
Host Controller - runs one onboarding session.

    INIT -> DECIDING -> ROUTED
    INIT -> DECIDING -> SHOWING_ONBOARDING -> ROUTED | ERROR | CANCELLED

All handlers run on the UI thread: bridge signals arrive through queued
connections, so a language change (persist -> notify -> rebuild) is never
interleaved with another bridge call.
"""
from itertools import count
from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, Signal, Slot
from loguru import logger

from welcome_gate.core.decision import evaluate
from welcome_gate.core.errors import StorageFailure, SurfaceLoadFailure
from welcome_gate.core.language import Language, LanguageRegistry
from welcome_gate.core.onboarding import OnboardingState, OnboardingStore, UserChoice
from welcome_gate.core.protocol import BridgeSession, SessionResult, parse_choice, push_language_script
from welcome_gate.core.session import SessionMachine, SessionPhase
from welcome_gate.core.strings import text
from welcome_gate.ui.bridge import WelcomeBridge
from welcome_gate.ui.locale_context import apply_language
from welcome_gate.ui.router import ChoiceRouter
from welcome_gate.ui.welcome_screen import ScreenState, Toast

ScreenFactory = Callable[[Language, WelcomeBridge, ScreenState], "WelcomeScreen"]


class HostController(QObject):
    """
    Decides, shows the welcome screen if needed, and routes the outcome once.

    Usage:
        controller = HostController(store, registry, router, screen_factory, page_url)
        controller.start()
    """

    phaseChanged = Signal(object)      # SessionPhase
    sessionFinished = Signal(object)   # SessionResult

    def __init__(self, onboarding: OnboardingStore, languages: LanguageRegistry,
                 router: ChoiceRouter, screen_factory: ScreenFactory, page_url: str,
                 schema_version: Optional[int] = None, show_animation: bool = True,
                 notifier: Optional[Callable[[str], None]] = None, parent=None):
        super().__init__(parent)
        self._onboarding = onboarding
        self._languages = languages
        self._router = router
        self._screen_factory = screen_factory
        self._page_url = page_url
        self._schema_version = onboarding.schema_version if schema_version is None else schema_version
        self._show_animation = show_animation
        self._notifier = notifier

        self._machine = SessionMachine()
        self._machine.add_listener(lambda old, new: self.phaseChanged.emit(new))
        self._session_ids = count(1)
        self._session: Optional[BridgeSession] = None
        self._bridge: Optional[WelcomeBridge] = None
        self._screen = None
        self._result: Optional[SessionResult] = None

    # --- Queries for the routing layer ---
    @property
    def phase(self) -> SessionPhase:
        return self._machine.phase

    @property
    def result(self) -> Optional[SessionResult]:
        return self._result

    @property
    def screen(self):
        return self._screen

    @property
    def bridge_session(self) -> Optional[BridgeSession]:
        return self._session

    def should_show_onboarding(self) -> bool:
        return evaluate(self._read_state(), self._schema_version).show_onboarding

    def resolve_choice(self) -> UserChoice:
        """NONE while onboarding is pending, even if an older choice is stored."""
        return evaluate(self._read_state(), self._schema_version).choice

    def record_choice(self, choice: UserChoice) -> OnboardingState:
        return self._onboarding.record_choice(choice)

    def reset(self) -> OnboardingState:
        return self._onboarding.reset()

    # --- Lifecycle ---
    def start(self) -> SessionPhase:
        self._machine.transition_to(SessionPhase.DECIDING)
        verdict = evaluate(self._read_state(), self._schema_version)

        if verdict.show_onboarding:
            self._machine.transition_to(SessionPhase.SHOWING_ONBOARDING)
            self._build_screen(ScreenState(show_animation=self._show_animation))
        else:
            logger.info(f"Onboarding satisfied, routing to {verdict.choice.value}")
            self._machine.transition_to(SessionPhase.ROUTED)
            self._finish_routing(SessionResult.from_choice(verdict.choice))
        return self.phase

    def pause(self):
        if self._screen is not None:
            self._screen.pause()

    def resume(self):
        if self._screen is not None:
            self._screen.resume()

    def shutdown(self):
        """Host is going away: release the screen without routing."""
        self._destroy_screen()

    # --- Bridge handlers ---
    @Slot(int)
    def _on_page_loaded(self, session_id: int):
        if not self._is_live(session_id):
            return
        if self._session.page_loaded():
            code = self._languages.current().code
            self._session.record_push(code)
            self._screen.push_language(push_language_script(code))
            logger.debug(f"Pushed language '{code}' to page session {session_id}")

    @Slot(int, str)
    def _on_user_choice(self, session_id: int, value: str):
        if not self._is_live(session_id):
            return
        choice = parse_choice(value)
        if choice is UserChoice.NONE:
            logger.warning(f"Ignoring invalid choice from page: {value!r}")
            return
        if not self._session.accept_choice(value):
            return

        try:
            self._onboarding.record_choice(choice)
        except StorageFailure as e:
            logger.error(f"Could not persist choice '{choice.value}': {e}")
            self._session.rearm_choice()
            self._notify(text(self._languages.current(), "save_failed"))
            return

        self._machine.transition_to(SessionPhase.ROUTED)
        self._destroy_screen()
        self._finish_routing(SessionResult.from_choice(choice))

    @Slot(int, str)
    def _on_language_change_requested(self, session_id: int, code: str):
        if not self._is_live(session_id):
            return
        language = self._languages.resolve(code)

        try:
            self._languages.set_language(language)
        except StorageFailure as e:
            logger.error(f"Could not persist language '{language.code}': {e}")
            self._notify(text(self._languages.current(), "language_save_failed"))
            return

        self._rebuild_screen()
        self._notify(text(language, "language_changed"))

    def _on_language_changed(self, language: Language):
        if self._bridge is not None:
            self._bridge.set_language_code(language.code)

    # --- Screen handlers ---
    @Slot(str)
    def _on_load_failed(self, reason: str):
        if self.phase is not SessionPhase.SHOWING_ONBOARDING:
            return
        failure = SurfaceLoadFailure(self._page_url, reason)
        logger.error(str(failure))
        self._machine.transition_to(SessionPhase.ERROR)
        self._destroy_screen()
        self._notify(text(self._languages.current(), "load_failed", reason=reason or "-"))
        self._finish_routing(SessionResult.CANCELLED)

    @Slot()
    def _on_screen_closed(self):
        if self.phase is not SessionPhase.SHOWING_ONBOARDING:
            return
        self._machine.transition_to(SessionPhase.CANCELLED)
        self._destroy_screen()
        self._finish_routing(SessionResult.CANCELLED)

    # --- Internals ---
    def _read_state(self) -> OnboardingState:
        try:
            return self._onboarding.get()
        except StorageFailure as e:
            logger.warning(f"Onboarding state unreadable, using defaults: {e}")
            return OnboardingState()

    def _is_live(self, session_id: int) -> bool:
        if (self._session is None or self._session.closed
                or self._session.session_id != session_id
                or self.phase is not SessionPhase.SHOWING_ONBOARDING):
            logger.debug(f"Dropping bridge call from stale page session {session_id}")
            return False
        return True

    def _build_screen(self, state: ScreenState):
        language = self._languages.current()
        # Locale first: the screen and the bridge read it while being built.
        apply_language(language)

        session_id = next(self._session_ids)
        self._session = BridgeSession(session_id)
        self._bridge = WelcomeBridge(language.code, session_id, self)
        self._bridge.pageLoadReported.connect(self._on_page_loaded, Qt.QueuedConnection)
        self._bridge.userChoiceReported.connect(self._on_user_choice, Qt.QueuedConnection)
        self._bridge.languageChangeRequested.connect(self._on_language_change_requested, Qt.QueuedConnection)
        self._languages.register_listener(self._on_language_changed)

        self._screen = self._screen_factory(language, self._bridge, state)
        self._screen.loadFailed.connect(self._on_load_failed)
        self._screen.closed.connect(self._on_screen_closed)
        self._screen.show()
        self._screen.load(self._page_url)
        logger.info(f"Welcome screen shown in '{language.code}' (page session {session_id})")

    def _rebuild_screen(self):
        if self._screen is None:
            return
        state = self._screen.save_state()
        self._destroy_screen()
        self._build_screen(state)

    def _destroy_screen(self):
        if self._screen is None:
            return
        screen, self._screen = self._screen, None
        self._session.close()
        self._languages.unregister_listener(self._on_language_changed)
        screen.teardown()
        if self._bridge is not None:
            self._bridge.deleteLater()
            self._bridge = None

    def _finish_routing(self, result: SessionResult):
        if self._result is not None:
            logger.debug(f"Session already finished with {self._result.name}; {result.name} ignored")
            return
        self._result = result
        self.sessionFinished.emit(result)
        self._router.route(result)

    def _notify(self, message: str):
        if self._notifier is not None:
            self._notifier(message)
        elif self._screen is not None:
            self._screen.notify(message)
        else:
            Toast.show_message(message)
