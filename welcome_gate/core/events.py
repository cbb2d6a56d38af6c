"""
Synchronous observer used for config changes and language fan-out.
"""
import threading
from typing import Callable, List

from loguru import logger


class Signal:
    """
    A simple observer pattern implementation (Synchronous).

    Subscribers are notified in connection order. Emission iterates over a
    snapshot of the subscriber list, so a subscriber may connect or disconnect
    (itself included) from inside its callback without disturbing the
    in-progress fan-out. An exception raised by one subscriber is logged and
    never prevents the remaining subscribers from being called.
    """
    def __init__(self, name: str = "Signal"):
        self.name = name
        self._subscribers: List[Callable] = []
        self._lock = threading.RLock()

    def connect(self, callback: Callable):
        """Connect a callback function to this signal. Connecting twice is a no-op."""
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def disconnect(self, callback: Callable):
        """Disconnect a callback function from this signal."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def is_connected(self, callback: Callable) -> bool:
        with self._lock:
            return callback in self._subscribers

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def emit(self, *args, **kwargs) -> int:
        """
        Broadcast arguments to all subscribers synchronously.

        Returns:
            Number of subscribers that raised.
        """
        with self._lock:
            snapshot = list(self._subscribers)

        failures = 0
        for sub in snapshot:
            try:
                sub(*args, **kwargs)
            except Exception as e:
                failures += 1
                logger.error(f"Signal '{self.name}' error in subscriber '{sub}': {e}")
        return failures
