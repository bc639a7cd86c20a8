"""
Compression Negotiator
======================

Single-shot handshake requesting permessage-deflate. The connection is
closed right after the upgrade; only the response headers matter.
"""

import logging
import ssl
from dataclasses import dataclass
from typing import Optional

from .connector import connect, handshake_headers
from .target import Target

logger = logging.getLogger(__name__)

PERMESSAGE_DEFLATE = "permessage-deflate"
EXTENSIONS_HEADER = "Sec-WebSocket-Extensions"


@dataclass(frozen=True)
class ExtensionResult:
    """Negotiated extension header value, or None if the server sent none."""

    value: Optional[str]

    @property
    def accepted(self) -> bool:
        return self.value is not None

    def __str__(self) -> str:
        if self.value is None:
            return "No extensions in response"
        return f"Extensions: {self.value}"


async def negotiate_compression(
    target: Target,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> ExtensionResult:
    """Ask ``target`` for permessage-deflate and report what it answered.

    Raises:
        WSConnectionError: if the handshake cannot be completed.
    """
    headers = handshake_headers(target, PERMESSAGE_DEFLATE)
    async with await connect(target, headers=headers, ssl_context=ssl_context) as conn:
        value = conn.handshake_headers.get(EXTENSIONS_HEADER)
    logger.debug(f"{EXTENSIONS_HEADER}: {value!r}")
    return ExtensionResult(value=value)
