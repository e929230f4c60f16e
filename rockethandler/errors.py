"""
Exception hierarchy for Rocket Handler.

Everything raised on purpose derives from HandlerError so the CLI can
turn it into a single non-zero exit.
"""


class HandlerError(Exception):
    """Base class for all handler errors."""


class ConfigError(HandlerError):
    """Invalid, conflicting or incomplete handler configuration."""


class EventError(HandlerError):
    """The monitoring event could not be read or validated."""


class TemplateError(HandlerError):
    """The description template failed to render."""


class ApiError(HandlerError):
    """
    A Rocket.Chat API call failed.

    Attributes:
        response: Raw response body, if the service answered at all
    """

    def __init__(self, message: str, response: str = ""):
        super().__init__(message)
        self.response = response


class AuthError(ApiError):
    """Login failed or the service rejected the credentials."""


class PostError(ApiError):
    """The message could not be posted."""


class LogoutError(ApiError):
    """The session could not be closed."""
