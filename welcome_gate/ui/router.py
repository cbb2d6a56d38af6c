"""
Choice Router - hands a finished onboarding session to the rest of the app.

The controller only knows result codes; what LOCAL_CHOICE or CLOUD_CHOICE
opens is decided by whoever registers handlers here.
"""
from typing import Callable, Dict, List
from loguru import logger

from welcome_gate.core.protocol import SessionResult

RouteHandler = Callable[[SessionResult], None]


class ChoiceRouter:
    """
    Usage:
        router = ChoiceRouter()
        router.register_handler(SessionResult.LOCAL_CHOICE, open_local_mode)
        router.route(SessionResult.LOCAL_CHOICE)
    """

    def __init__(self):
        self._handlers: Dict[SessionResult, List[RouteHandler]] = {r: [] for r in SessionResult}
        self.history: List[SessionResult] = []

    def register_handler(self, result: SessionResult, handler: RouteHandler):
        if handler not in self._handlers[result]:
            self._handlers[result].append(handler)
            logger.debug(f"Registered route handler for {result.name}: {handler}")

    def unregister_handler(self, result: SessionResult, handler: RouteHandler):
        if handler in self._handlers[result]:
            self._handlers[result].remove(handler)

    def route(self, result: SessionResult) -> bool:
        """
        Dispatch `result` to its handlers.

        Returns:
            True if at least one handler ran without raising.
        """
        self.history.append(result)
        handlers = list(self._handlers[result])
        if not handlers:
            logger.warning(f"No route handler for {result.name}")
            return False

        logger.info(f"Routing {result.name} ({int(result)})")
        handled = False
        for handler in handlers:
            try:
                handler(result)
                handled = True
            except Exception as e:
                logger.error(f"Route handler {handler} failed for {result.name}: {e}")
        return handled
