"""
Shared pytest fixtures for SessionVOC client tests.

This module provides common fixtures including:
- FakeSessionVOC: In-memory SessionVOC server behind httpx.MockTransport
- Clients wired to the fake server or to an unreachable endpoint
"""

import json
import os
import sys
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sessionvoc import SessionVOCClient


# =============================================================================
# Fake SessionVOC server
# =============================================================================

@dataclass
class RecordedRequest:
    """Record of a request received by the fake server."""
    method: str
    path: str
    raw_path: bytes
    headers: Dict[str, str]
    body: bytes


@dataclass
class FakeSessionVOC:
    """
    In-memory stand-in for a SessionVOC server.

    Implements the /datainfo, /session, /formdata and /nonce resources with
    the same status codes and JSON shapes as the real service, and records
    every request it receives.

    Usage:
        def test_something(fake_server, client):
            result = await client.create_session()
            assert fake_server.requests[-1].path == "/session"
    """
    descriptor: Dict[str, Any] = field(default_factory=lambda: {
        "transData": {"message": {"type": "string"}},
        "userData": {"uid": {"type": "string"}},
        "version": "1.0",
    })
    users: Dict[str, str] = field(default_factory=lambda: {"plain": "plain"})
    sessions: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    forms: Dict[Tuple[str, str], bytes] = field(default_factory=dict)
    nonces: Dict[str, bool] = field(default_factory=dict)
    requests: List[RecordedRequest] = field(default_factory=list)

    # Responses

    @staticmethod
    def _json(payload: Any, status_code: int = 200) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))

    @classmethod
    def _error(cls, status_code: int, message: str) -> httpx.Response:
        return cls._json({"error": True, "code": status_code, "message": message}, status_code)

    def _unknown_session(self) -> httpx.Response:
        return self._error(404, "unknown session identifier")

    # Routing

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(RecordedRequest(
            method=request.method,
            path=request.url.path,
            raw_path=request.url.raw_path,
            headers=dict(request.headers),
            body=request.content,
        ))
        parts = [part for part in request.url.path.split("/") if part]

        if parts == ["datainfo"] and request.method == "GET":
            return self._json(self.descriptor)
        if parts and parts[0] == "session":
            return self._session(request, parts[1:])
        if parts and parts[0] == "formdata":
            return self._formdata(request, parts[1:])
        if parts and parts[0] == "nonce":
            return self._nonce(request, parts[1:])
        return self._error(404, "unknown path")

    def _session(self, request: httpx.Request, parts: List[str]) -> httpx.Response:
        if not parts:
            if request.method != "POST":
                return self._error(405, "method not allowed")
            sid = uuid.uuid4().hex
            self.sessions[sid] = {
                "sid": sid,
                "urlSecret": uuid.uuid4().hex[:8],
                "transData": {"message": ""},
                "userData": None,
            }
            return self._json(self.sessions[sid])

        sid = parts[0]
        record = self.sessions.get(sid)
        if record is None:
            return self._unknown_session()

        if len(parts) == 1:
            if request.method == "GET":
                return self._json(record)
            if request.method == "PUT":
                try:
                    body = json.loads(request.content)
                except ValueError:
                    return self._error(400, "cannot parse body")
                for partition in ("transData", "userData"):
                    if partition in body:
                        record[partition] = body[partition]
                return self._json(record)
            if request.method == "DELETE":
                del self.sessions[sid]
                return self._json({"deleted": True})

        if parts[1:] == ["authenticate"] and request.method == "PUT":
            body = json.loads(request.content)
            if self.users.get(body.get("uid")) != body.get("password"):
                return self._error(401, "authentication failed")
            record["userData"] = {"uid": body["uid"]}
            return self._json(record)

        if parts[1:] == ["logout"] and request.method == "PUT":
            record["userData"] = None
            return self._json(record)

        return self._error(405, "method not allowed")

    def _formdata(self, request: httpx.Request, parts: List[str]) -> httpx.Response:
        if not parts or parts[0] not in self.sessions:
            return self._unknown_session()
        sid = parts[0]

        if len(parts) == 1 and request.method == "POST":
            fid = uuid.uuid4().hex
            self.forms[(sid, fid)] = request.content
            return self._json({"sid": sid, "fid": fid})

        key = (sid, parts[1]) if len(parts) == 2 else None
        if key not in self.forms:
            return self._error(404, "unknown form identifier")

        if request.method == "GET":
            return httpx.Response(200, content=self.forms[key])
        if request.method == "PUT":
            self.forms[key] = request.content
            return self._json({"sid": sid, "fid": key[1], "updated": True})
        if request.method == "DELETE":
            del self.forms[key]
            return self._json({"deleted": True})
        return self._error(405, "method not allowed")

    def _nonce(self, request: httpx.Request, parts: List[str]) -> httpx.Response:
        if request.method != "POST":
            return self._error(405, "method not allowed")
        if not parts:
            nonce = uuid.uuid4().hex
            self.nonces[nonce] = False
            return self._json({"nonce": nonce})

        used = self.nonces.get(parts[0])
        if used is None:
            return self._error(404, "unknown nonce")
        self.nonces[parts[0]] = True
        return self._json({"status": not used})

    def count(self, method: str, path: Optional[str] = None) -> int:
        """Number of recorded requests matching method (and path, if given)."""
        return sum(
            1 for r in self.requests
            if r.method == method and (path is None or r.path == path)
        )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_server():
    """Fresh in-memory SessionVOC server."""
    return FakeSessionVOC()


@pytest.fixture
def client(fake_server):
    """Client talking to the fake server."""
    return SessionVOCClient(transport=httpx.MockTransport(fake_server.handler))


def refuse_connection(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("[Errno 111] Connection refused", request=request)


@pytest.fixture
def unreachable_client():
    """Client whose every connection attempt is refused."""
    return SessionVOCClient(port=1234, transport=httpx.MockTransport(refuse_connection))


class CallbackRecorder:
    """Continuation that remembers every (error, value) it was called with."""

    def __init__(self):
        self.calls: List[Tuple[Any, Any]] = []

    def __call__(self, error, value):
        self.calls.append((error, value))

    @property
    def error(self):
        return self.calls[-1][0]

    @property
    def value(self):
        return self.calls[-1][1]


@pytest.fixture
def recorder():
    return CallbackRecorder()
