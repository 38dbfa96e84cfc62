"""
Request dispatcher for the SessionVOC HTTP interface.

Every client operation becomes exactly one request/response cycle here:
no retries, no timeout, no redirect handling. The outcome is classified
into a Result:

- status 200: success, the raw body is the value
- any other status: ApplicationError carrying the JSON-decoded body
  (a body that does not decode yields ParseError instead)
- connection problems: TransportError, also reported to on_transport_error
- a response body httpx cannot decode (bad Content-Encoding): ParseError
"""

import json
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from ...config.provider import ClientConfig
from .decoding import Result, decode_json
from .errors import ApplicationError, ParseError, TransportError

logger = logging.getLogger(__name__)

TransportErrorHook = Callable[[TransportError], Awaitable[Any]]


def encode_body(data: Any) -> bytes:
    """
    Serialize a request body.

    None becomes an empty payload, str/bytes are sent as given and any other
    value is encoded as JSON.
    """
    if data is None:
        return b""
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    return json.dumps(data).encode("utf-8")


class RequestDispatcher:
    """Sends single HTTP requests to one SessionVOC endpoint."""

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_transport_error: Optional[TransportErrorHook] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            config: Endpoint configuration
            transport: Optional httpx transport (tests use httpx.MockTransport)
            on_transport_error: Coroutine called with every TransportError
        """
        self.config = config
        self.transport = transport
        self.on_transport_error = on_transport_error

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            transport=self.transport,
            timeout=httpx.Timeout(None),
            follow_redirects=False,
        )

    async def request(
        self, method: str, path: str, data: Any = None, notify: bool = True
    ) -> Result[str]:
        """
        Perform one request and classify the response.

        Args:
            method: HTTP method
            path: Resource path, e.g. /session/<sid>
            data: Optional body (see encode_body)
            notify: Call on_transport_error for a TransportError; callers that
                hold a lock pass False and report the error themselves

        Returns:
            Result holding the raw body text on success
        """
        content = encode_body(data)
        headers = dict(self.config.headers)
        headers["Content-Length"] = str(len(content))

        if content:
            logger.debug(f"sessionvoc request {method} {path} body: {content.decode('utf-8', 'replace')}")
        else:
            logger.debug(f"sessionvoc request {method} {path}")

        try:
            # The connection lives only as long as this block
            async with self._client() as client:
                response = await client.request(method, path, content=content, headers=headers)
        except httpx.DecodingError as e:
            logger.warning(f"Undecodable response from {self.config.base_url}: {e}")
            return Result.failure(ParseError("", e))
        except httpx.RequestError as e:
            logger.warning(f"Connection to {self.config.base_url} failed: {type(e).__name__}: {e}")
            error = TransportError(str(e) or type(e).__name__, e)
            if notify and self.on_transport_error is not None:
                await self.on_transport_error(error)
            return Result.failure(error)

        logger.debug(f"status code: {response.status_code}")
        body = response.text

        if response.status_code == 200:
            return Result.success(body)

        return decode_json(body).then(
            lambda payload: Result.failure(ApplicationError(response.status_code, payload))
        )

    async def request_json(
        self, method: str, path: str, data: Any = None, notify: bool = True
    ) -> Result[Any]:
        """Like request(), but the success body must also decode as JSON."""
        result = await self.request(method, path, data, notify)
        return result.then(decode_json)
