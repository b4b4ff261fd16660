"""
Error taxonomy for the weather MCP stack.
Every failure surfaced to a caller is tagged with an ErrorKind.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Categories of failure understood by the dispatcher and the gateway."""

    UNKNOWN_TOOL = "unknown_tool"
    INVALID_ARGUMENTS = "invalid_arguments"
    PROVIDER_FAILURE = "provider_failure"
    SESSION_REJECTED = "session_rejected"
    TRANSPORT_FAILURE = "transport_failure"


class WeatherChatError(Exception):
    """Base error carrying an ErrorKind."""

    kind: ErrorKind = ErrorKind.PROVIDER_FAILURE

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class DuplicateToolError(WeatherChatError, ValueError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str):
        super().__init__(f"duplicate tool name: {name}", ErrorKind.INVALID_ARGUMENTS)
        self.name = name


class ProviderError(WeatherChatError):
    """Weather or completion provider failed (network, quota, malformed reply)."""

    kind = ErrorKind.PROVIDER_FAILURE


class SessionRejectedError(WeatherChatError):
    """The MCP server does not recognise the session id we sent."""

    kind = ErrorKind.SESSION_REJECTED

    def __init__(self, message: str, session_id: str | None = None):
        super().__init__(message)
        self.session_id = session_id


class TransportError(WeatherChatError):
    """The connection to a provider could not be established at all."""

    kind = ErrorKind.TRANSPORT_FAILURE


class SessionFatalError(WeatherChatError):
    """Session could not be recovered after one re-initialization."""

    kind = ErrorKind.SESSION_REJECTED
