"""Exception hierarchy shared by every xrozen module.

Backends translate their library errors into these types so the session
manager can recover from any collaborator failure with a single
``except XrozenError``.
"""


class XrozenError(Exception):
    """Base class for all recoverable xrozen failures."""


class AuthExpiredError(XrozenError):
    """The identity provider reported no signed-in user."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class TransportError(XrozenError):
    """A network or backend call failed.

    Attributes:
        status_code: HTTP status reported by the backend, if any
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(XrozenError):
    """A backend or provider could not be built from the given settings."""
