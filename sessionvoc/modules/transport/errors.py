"""Failure values reported by the SessionVOC client.

None of these are raised out of the client's public methods. They are
handed to the caller as the ``error`` of a ``Result`` and as the first
argument of the continuation.
"""

from typing import Any, Dict, Optional


class SessionVOCError(Exception):
    """Base class for all client failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(SessionVOCError):
    """The connection could not be established or broke mid-flight."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
        self.__cause__ = cause


class ApplicationError(SessionVOCError):
    """The server answered with a status other than 200."""

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        message = None
        if isinstance(payload, dict):
            message = payload.get("message")
        super().__init__(message or f"request failed with status {status_code}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, payload={self.payload!r})"


class SessionNotFoundError(ApplicationError):
    """The session identifier is unknown, expired or was deleted."""


class ParseError(SessionVOCError):
    """A body that should have been JSON could not be decoded."""

    def __init__(self, body: str, cause: Optional[BaseException] = None):
        super().__init__(f"invalid JSON body: {cause}")
        self.body = body
        self.__cause__ = cause


# Server message marking a missing session. Only classify_not_found may look at it.
UNKNOWN_SESSION_MESSAGE = "unknown session identifier"


def classify_not_found(error: Optional[SessionVOCError]) -> Optional[SessionVOCError]:
    """
    Turn an application failure about an unknown session into SessionNotFoundError.

    Any other error (or None) is returned unchanged.
    """
    if type(error) is not ApplicationError:
        return error

    payload: Dict[str, Any] = error.payload if isinstance(error.payload, dict) else {}
    if payload.get("message") == UNKNOWN_SESSION_MESSAGE:
        return SessionNotFoundError(error.status_code, error.payload)
    return error
