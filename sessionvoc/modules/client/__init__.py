"""
Client Module - Black Box Interface

Purpose: One coroutine per SessionVOC action (sessions, form data, nonces)
Interface: SessionVOCClient, connect()
Hidden: URL layout, body filtering, not-found classification

Every operation returns a Result and optionally calls callback(error, value).
"""

from .client import SessionVOCClient, connect
from .models import CreatedSession, LoginRequest, SessionPatch

__all__ = ["SessionVOCClient", "connect", "CreatedSession", "LoginRequest", "SessionPatch"]
