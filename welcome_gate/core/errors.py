"""
Error taxonomy for the onboarding subsystem.
"""


class WelcomeGateError(Exception):
    """Base class for all welcome_gate errors."""
    pass


class StorageFailure(WelcomeGateError):
    """A preference namespace could not be read or written."""

    def __init__(self, namespace: str, operation: str, cause: Exception = None):
        self.namespace = namespace
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Storage {operation} failed for '{namespace}'{detail}")


class SurfaceLoadFailure(WelcomeGateError):
    """The embedded surface failed to load its page."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load {url}: {reason or 'unknown error'}")


class BridgeUnavailable(WelcomeGateError):
    """The page runs without the injected host bridge object."""

    def __init__(self, object_name: str):
        self.object_name = object_name
        super().__init__(f"Host bridge '{object_name}' is not injected into the page")


class SessionError(WelcomeGateError):
    """Invalid host session state transition."""
    pass
