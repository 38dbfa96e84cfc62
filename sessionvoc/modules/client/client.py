"""
SessionVOC client.

One client wraps one (host, port) endpoint and exposes a coroutine per
logical action on the session, form-data and nonce resources. The only
state it keeps is the endpoint and the descriptor fetched from /datainfo.
"""

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from ...config.provider import ClientConfig, EnvConfigProvider
from ..events import ERROR, READY, EventRegistry
from ..events.observers import Listener
from ..transport import (
    ParseError,
    RequestDispatcher,
    Result,
    SessionVOCError,
    TransportError,
    classify_not_found,
    decode_json_or_text,
)
from .models import CreatedSession, LoginRequest, SessionPatch

logger = logging.getLogger(__name__)

# callback(error, value); may return an awaitable
Callback = Callable[[Optional[SessionVOCError], Any], Union[None, Awaitable[None]]]


def _path(*segments: str) -> str:
    return "/" + "/".join(quote(str(segment), safe="") for segment in segments)


def _field(name: str) -> Callable[[Any], Result[Any]]:
    """Pick one key out of a decoded JSON object, failing if it is absent."""

    def pick(payload: Any) -> Result[Any]:
        if isinstance(payload, dict) and name in payload:
            return Result.success(payload[name])
        return Result.failure(
            ParseError(json.dumps(payload), KeyError(f"response has no '{name}' field"))
        )

    return pick


def _boolean(value: Any) -> Result[bool]:
    if isinstance(value, bool):
        return Result.success(value)
    return Result.failure(
        ParseError(json.dumps(value), TypeError(f"expected a boolean, got {value!r}"))
    )


class SessionVOCClient:
    """Asynchronous client for a SessionVOC server."""

    description = "Client to interface with a SessionVOC"

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        host: Optional[str] = None,
        port: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            config: Endpoint configuration; built from host/port when omitted
            host: Server host name (default localhost)
            port: Server port (default 8208)
            transport: Optional httpx transport, mainly for tests
        """
        if config is None:
            config = ClientConfig.from_mapping({"host": host, "port": port})

        self._config = config
        self._events = EventRegistry()
        self._dispatcher = RequestDispatcher(
            config, transport=transport, on_transport_error=self._report_transport_error
        )

        self._descriptor: Optional[Dict[str, Any]] = None
        self._descriptor_loaded = False
        self._descriptor_lock = asyncio.Lock()

    @classmethod
    def from_env(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "SessionVOCClient":
        """Create a client configured from SESSIONVOC_* environment variables."""
        return cls(EnvConfigProvider().get_client_config(), transport=transport)

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def descriptor(self) -> Optional[Dict[str, Any]]:
        """Descriptor from the first successful fetch_descriptor(), else None."""
        return self._descriptor

    def __repr__(self) -> str:
        return f"SessionVOCClient(host={self.host!r}, port={self.port})"

    async def __aenter__(self) -> "SessionVOCClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    # Observers

    def on(self, event: str, listener: Listener) -> Listener:
        """Register listener for "ready" or "error" notifications."""
        return self._events.on(event, listener)

    def once(self, event: str, listener: Listener) -> Listener:
        return self._events.once(event, listener)

    def off(self, event: str, listener: Listener) -> bool:
        return self._events.off(event, listener)

    async def _report_transport_error(self, error: TransportError) -> None:
        await self._events.emit(ERROR, error)

    async def _deliver(self, result: Result[Any], callback: Optional[Callback]) -> Result[Any]:
        """Hand result to the continuation (if any) and return it."""
        if callback is not None:
            outcome = callback(result.error, result.value)
            if inspect.isawaitable(outcome):
                await outcome
        return result

    # Descriptor

    async def fetch_descriptor(self, callback: Optional[Callback] = None) -> Result[Dict[str, Any]]:
        """
        Load the server descriptor from /datainfo.

        Only the first successful call goes to the network; later calls
        complete with the cached descriptor. The "ready" event fires once,
        when the descriptor is first stored.
        """
        loaded_now = False
        async with self._descriptor_lock:
            if self._descriptor_loaded:
                result = Result.success(self._descriptor)
            else:
                result = await self._dispatcher.request_json("GET", "/datainfo", notify=False)
                if result.ok:
                    self._descriptor = result.value
                    self._descriptor_loaded = loaded_now = True
                    logger.debug(f"Descriptor loaded from {self._config.base_url}")

        # Listeners may call fetch_descriptor() themselves
        if loaded_now:
            await self._events.emit(READY, result.value)
        elif isinstance(result.error, TransportError):
            await self._report_transport_error(result.error)
        return await self._deliver(result, callback)

    # Sessions

    async def create_session(self, callback: Optional[Callback] = None) -> Result[CreatedSession]:
        """Create a new session; the value is a CreatedSession(sid, record)."""
        result = await self._dispatcher.request_json("POST", "/session")
        result = result.then(
            lambda record: _field("sid")(record).map(lambda sid: CreatedSession(sid, record))
        )
        if result.ok:
            logger.debug(f"Created session {result.value.sid}")
        return await self._deliver(result, callback)

    async def load_session(self, sid: str, callback: Optional[Callback] = None) -> Result[Dict[str, Any]]:
        """
        Load a session record.

        An unknown, expired or deleted session fails with SessionNotFoundError.
        """
        result = await self._dispatcher.request_json("GET", _path("session", sid))
        if not result.ok:
            result = Result.failure(classify_not_found(result.error))
        return await self._deliver(result, callback)

    async def update_session(
        self,
        sid: str,
        data: Union[str, bytes, Mapping[str, Any], BaseModel],
        callback: Optional[Callback] = None,
    ) -> Result[Dict[str, Any]]:
        """
        Update the transient and/or user data of a session.

        Args:
            sid: Session identifier
            data: JSON string, mapping or model; only transData and userData
                are transmitted, anything else (sid, urlSecret, ...) is dropped
            callback: Optional continuation

        Returns:
            Result holding the updated session record
        """
        try:
            patch = SessionPatch.from_input(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raw = data if isinstance(data, str) else repr(data)
            return await self._deliver(Result.failure(ParseError(raw, e)), callback)

        result = await self._dispatcher.request_json("PUT", _path("session", sid), patch.to_body())
        if not result.ok:
            result = Result.failure(classify_not_found(result.error))
        return await self._deliver(result, callback)

    async def delete_session(self, sid: str, callback: Optional[Callback] = None) -> Result[Dict[str, Any]]:
        """Delete a session; the value is the server confirmation ({"deleted": true})."""
        result = await self._dispatcher.request_json("DELETE", _path("session", sid))
        return await self._deliver(result, callback)

    async def login(
        self,
        sid: str,
        username: str,
        password: str,
        callback: Optional[Callback] = None,
    ) -> Result[Dict[str, Any]]:
        """Authenticate a session directly, without a challenge step."""
        body = LoginRequest(uid=username, password=password).model_dump()
        result = await self._dispatcher.request_json("PUT", _path("session", sid, "authenticate"), body)
        return await self._deliver(result, callback)

    async def logout(self, sid: str, callback: Optional[Callback] = None) -> Result[Dict[str, Any]]:
        """Drop the authenticated user from a session."""
        result = await self._dispatcher.request_json("PUT", _path("session", sid, "logout"))
        return await self._deliver(result, callback)

    # Form data

    async def create_formdata(self, sid: str, content: Any, callback: Optional[Callback] = None) -> Result[Dict[str, Any]]:
        """Store content for a session; the value is {"sid": ..., "fid": ...}."""
        result = await self._dispatcher.request_json("POST", _path("formdata", sid), json.dumps(content))
        return await self._deliver(result, callback)

    async def load_formdata(self, sid: str, fid: str, callback: Optional[Callback] = None) -> Result[Any]:
        """Load stored form content, JSON-decoded when possible."""
        result = await self._dispatcher.request("GET", _path("formdata", sid, fid))
        return await self._deliver(result.map(decode_json_or_text), callback)

    async def update_formdata(
        self,
        sid: str,
        fid: str,
        content: Any,
        callback: Optional[Callback] = None,
    ) -> Result[Dict[str, Any]]:
        """Replace stored form content; the value is {"sid", "fid", "updated"}."""
        result = await self._dispatcher.request_json("PUT", _path("formdata", sid, fid), json.dumps(content))
        return await self._deliver(result, callback)

    async def delete_formdata(self, sid: str, fid: str, callback: Optional[Callback] = None) -> Result[Dict[str, Any]]:
        result = await self._dispatcher.request_json("DELETE", _path("formdata", sid, fid))
        return await self._deliver(result, callback)

    # Nonces

    async def create_nonce(self, callback: Optional[Callback] = None) -> Result[str]:
        """Ask the server for a fresh single-use nonce."""
        result = await self._dispatcher.request_json("POST", "/nonce")
        return await self._deliver(result.then(_field("nonce")), callback)

    async def consume_nonce(self, nonce: str, callback: Optional[Callback] = None) -> Result[bool]:
        """
        Use up a nonce.

        The value is True when the nonce was still unused, False when it had
        already been consumed.
        """
        result = await self._dispatcher.request_json("POST", _path("nonce", nonce))
        return await self._deliver(result.then(_field("status")).then(_boolean), callback)


async def connect(
    host: Optional[str] = None,
    port: Optional[int] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    callback: Optional[Callback] = None,
    on_ready: Optional[Listener] = None,
    on_error: Optional[Listener] = None,
) -> SessionVOCClient:
    """
    Create a client and load its descriptor.

    on_ready/on_error are registered before the first request so they see
    the outcome of that fetch. The client is returned whether or not the
    descriptor could be loaded.
    """
    client = SessionVOCClient(host=host, port=port, transport=transport)
    if on_ready is not None:
        client.on(READY, on_ready)
    if on_error is not None:
        client.on(ERROR, on_error)
    await client.fetch_descriptor(callback)
    return client
