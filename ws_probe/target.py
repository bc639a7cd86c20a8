"""
Probe Target
============

Parsed WebSocket endpoint. Created once from the command line and
handed to the connector unchanged.
"""

from dataclasses import dataclass

from yarl import URL

from .errors import InvalidUrl

WS_SCHEMES = ("ws", "wss")


@dataclass(frozen=True)
class Target:
    url: str
    scheme: str
    host: str
    port: int
    path: str

    @property
    def secure(self) -> bool:
        return self.scheme == "wss"

    def __str__(self) -> str:
        return self.url


def parse_target(raw: str) -> Target:
    """Parse a ws:// or wss:// URL.

    Raises:
        InvalidUrl: if the string is not an absolute WebSocket URL.
    """
    try:
        url = URL(raw)
    except (TypeError, ValueError) as e:
        raise InvalidUrl(f"Invalid URL {raw!r}: {e}") from e

    if url.scheme not in WS_SCHEMES:
        raise InvalidUrl(f"Invalid URL {raw!r}: scheme must be ws or wss")
    if not url.host:
        raise InvalidUrl(f"Invalid URL {raw!r}: missing host")

    try:
        port = url.port
    except ValueError as e:
        raise InvalidUrl(f"Invalid URL {raw!r}: {e}") from e

    return Target(
        url=raw,
        scheme=url.scheme,
        host=url.host,
        port=port if port is not None else (443 if url.scheme == "wss" else 80),
        path=url.raw_path_qs or "/",
    )
