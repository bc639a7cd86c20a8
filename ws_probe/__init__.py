"""
WebSocket Probe Package
=======================

Command-line diagnostics for WebSocket endpoints: ping/pong latency
and permessage-deflate negotiation.

Modules:
    target       - ws:// / wss:// URL parsing
    connector    - Connection setup, TLS initialization, handshake headers
    prober       - Sequential ping/pong latency loop
    stats        - Min/avg/max aggregation
    compression  - permessage-deflate negotiation check
    errors       - Error taxonomy
"""

__version__ = "0.1.0"

from .errors import ProbeError, InvalidUrl, WSConnectionError, TransportError
from .target import Target, parse_target
from .connector import Connection, connect, init_tls, generate_key, handshake_headers
from .prober import LatencyProber, ProbeRecord, ping_payload, perf_counter_us
from .stats import Summary, summarize
from .compression import ExtensionResult, negotiate_compression

__all__ = [
    "ProbeError",
    "InvalidUrl",
    "WSConnectionError",
    "TransportError",
    "Target",
    "parse_target",
    "Connection",
    "connect",
    "init_tls",
    "generate_key",
    "handshake_headers",
    "LatencyProber",
    "ProbeRecord",
    "ping_payload",
    "perf_counter_us",
    "Summary",
    "summarize",
    "ExtensionResult",
    "negotiate_compression",
]
