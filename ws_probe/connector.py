"""
WebSocket Connector
===================

Opens the single WebSocket connection a probe runs over and captures the
raw handshake response headers for inspection.

TLS state is created once at program entry by ``init_tls()`` and passed
down explicitly; nothing here builds an SSL context on demand.
"""

import asyncio
import base64
import logging
import os
import ssl
from types import SimpleNamespace
from typing import Mapping, Optional

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy

from .errors import WSConnectionError
from .target import Target

logger = logging.getLogger(__name__)

WS_VERSION = "13"


def init_tls() -> ssl.SSLContext:
    """Build the process-wide TLS context from the default trust store.

    Raises:
        WSConnectionError: if no usable TLS context can be created.
    """
    try:
        ctx = ssl.create_default_context()
    except (ssl.SSLError, OSError) as e:
        raise WSConnectionError(f"Failed to initialize TLS: {e}") from e
    logger.debug(f"TLS initialized ({ssl.OPENSSL_VERSION})")
    return ctx


def generate_key() -> str:
    """Fresh Sec-WebSocket-Key: base64 of a random 16-byte nonce."""
    return base64.b64encode(os.urandom(16)).decode("ascii")


def _host_header(target: Target) -> str:
    host = f"[{target.host}]" if ":" in target.host else target.host
    default_port = 443 if target.secure else 80
    return host if target.port == default_port else f"{host}:{target.port}"


def handshake_headers(target: Target, extensions: str) -> dict:
    """Explicit upgrade request headers asking for ``extensions``."""
    return {
        "Host": _host_header(target),
        "Connection": "Upgrade",
        "Upgrade": "websocket",
        "Sec-WebSocket-Version": WS_VERSION,
        "Sec-WebSocket-Key": generate_key(),
        "Sec-WebSocket-Extensions": extensions,
    }


class Connection:
    """An open WebSocket session, exclusively owned by one probe.

    Use as an async context manager; the socket and HTTP session are
    released exactly once whichever way the block exits.

    Args:
        session: Client session the socket was opened on.
        ws:      The established WebSocket.
        handshake_headers: Headers of the server's upgrade response.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        ws: aiohttp.ClientWebSocketResponse,
        handshake_headers: CIMultiDictProxy,
    ):
        self._session = session
        self.ws = ws
        self.handshake_headers = handshake_headers
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self):
        """Send a close frame (if still open) and release the session."""
        if self._closed:
            return
        self._closed = True
        try:
            if not self.ws.closed:
                await self.ws.close()
        finally:
            await self._session.close()
        logger.debug("Connection released")

    async def __aenter__(self) -> "Connection":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


def _capture_response_headers() -> tuple[aiohttp.TraceConfig, SimpleNamespace]:
    """Trace hook recording the headers of the upgrade response."""
    captured = SimpleNamespace(headers=None)

    async def on_request_end(session, ctx, params):
        captured.headers = params.response.headers

    trace = aiohttp.TraceConfig()
    trace.on_request_end.append(on_request_end)
    return trace, captured


async def connect(
    target: Target,
    headers: Optional[Mapping[str, str]] = None,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> Connection:
    """Open a WebSocket to ``target``.

    Auto-ping is disabled so pong frames are delivered to the caller.

    Raises:
        WSConnectionError: on handshake, transport or TLS failure.
    """
    trace, captured = _capture_response_headers()
    session = aiohttp.ClientSession(trace_configs=[trace])
    try:
        ws = await session.ws_connect(
            target.url,
            headers=headers,
            autoping=False,
            autoclose=True,
            ssl=ssl_context if ssl_context is not None else True,
        )
    except aiohttp.WSServerHandshakeError as e:
        await session.close()
        raise WSConnectionError(f"Handshake with {target} failed: {e.status} {e.message}") from e
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
        await session.close()
        raise WSConnectionError(f"Failed to connect to {target}: {e}") from e

    response_headers = captured.headers
    if response_headers is None:
        response_headers = CIMultiDictProxy(CIMultiDict())
    logger.debug(f"Handshake response headers: {dict(response_headers)}")
    return Connection(session, ws, response_headers)
