"""
SessionVOC - asynchronous client for a SessionVOC session store

Creates, reads, updates and deletes sessions, form data and nonces over
the SessionVOC HTTP interface.

Modules:
- config: Endpoint configuration
- transport: Request dispatch, status classification, JSON decoding
- events: "ready"/"error" observer registration
- client: The public SessionVOCClient
"""

from .config import ClientConfig, EnvConfigProvider
from .modules.client import CreatedSession, SessionPatch, SessionVOCClient, connect
from .modules.transport import (
    ApplicationError,
    ParseError,
    Result,
    SessionNotFoundError,
    SessionVOCError,
    TransportError,
)

__version__ = "1.0.0"

__all__ = [
    "SessionVOCClient",
    "connect",
    "ClientConfig",
    "EnvConfigProvider",
    "CreatedSession",
    "SessionPatch",
    "Result",
    "SessionVOCError",
    "TransportError",
    "ApplicationError",
    "SessionNotFoundError",
    "ParseError",
]
