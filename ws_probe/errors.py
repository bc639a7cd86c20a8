"""
Probe Errors
============

Every failure the probes report to the user. None of them are retried;
each one ends the current invocation.
"""


class ProbeError(Exception):
    """Base class for errors surfaced to the user as a single message."""


class InvalidUrl(ProbeError):
    """The target URL is malformed or not a WebSocket URL."""


class WSConnectionError(ProbeError):
    """Handshake, transport setup or TLS setup failed."""


class TransportError(ProbeError):
    """A send or receive on an open connection failed."""
