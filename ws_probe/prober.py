"""
Latency Prober
==============

Strictly sequential ping/pong loop over one connection. Each ping carries
a 1-byte payload of ``index % 256`` and must be answered by a pong before
the next one is sent.

Timing:
    Tick k (0-based) is scheduled at ``start + k * interval``; the first
    ping goes out immediately. A late tick fires as soon as the previous
    round trip finishes.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import aiohttp

from .connector import Connection
from .errors import TransportError

logger = logging.getLogger(__name__)

_END_TYPES = (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED)


def perf_counter_us() -> int:
    """High-precision counter in microseconds (for measuring durations)."""
    return time.perf_counter_ns() // 1000


def ping_payload(index: int) -> bytes:
    return bytes([index % 256])


@dataclass(frozen=True)
class ProbeRecord:
    """One measured round trip.

    Args:
        index:      1-based sequence number, matching send order.
        elapsed_us: Ping send to pong receive, μs.
    """

    index: int
    elapsed_us: int

    @property
    def latency_ms(self) -> float:
        return self.elapsed_us / 1000


class LatencyProber:
    """Runs ``count`` ping/pong exchanges ``interval`` seconds apart.

    Args:
        connection: Open connection; closing it remains the caller's job.
        count:      Number of pings to send.
        interval:   Seconds between ping ticks.
        on_record:  Optional callback invoked with each new record.
    """

    def __init__(
        self,
        connection: Connection,
        count: int = 5,
        interval: float = 1.0,
        on_record: Optional[Callable[[ProbeRecord], None]] = None,
    ):
        if count < 0:
            raise ValueError("count must be >= 0")
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self._conn = connection
        self.count = count
        self.interval = interval
        self.on_record = on_record

    async def run(self) -> list[ProbeRecord]:
        """Probe until ``count`` pongs are recorded.

        Raises:
            TransportError: on any send/receive failure. Records gathered
                before the failure are dropped with the exception.
        """
        records: list[ProbeRecord] = []
        loop = asyncio.get_running_loop()
        start = loop.time()

        for index in range(1, self.count + 1):
            await self._wait_tick(loop, start + (index - 1) * self.interval)
            record = await self._round_trip(index)
            records.append(record)
            logger.debug(f"Pong #{record.index}: {record.elapsed_us}μs")
            if self.on_record:
                self.on_record(record)

        return records

    @staticmethod
    async def _wait_tick(loop: asyncio.AbstractEventLoop, deadline: float):
        delay = deadline - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)

    async def _round_trip(self, index: int) -> ProbeRecord:
        """Send ping #index and block until its pong arrives."""
        ws = self._conn.ws
        sent = perf_counter_us()
        try:
            await ws.ping(ping_payload(index))
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
            raise TransportError(f"Failed to send ping #{index}: {e}") from e

        while True:
            try:
                msg = await ws.receive()
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                raise TransportError(f"Receive failed awaiting pong #{index}: {e}") from e

            if msg.type == aiohttp.WSMsgType.PONG:
                return ProbeRecord(index=index, elapsed_us=perf_counter_us() - sent)
            if msg.type == aiohttp.WSMsgType.ERROR:
                raise TransportError(f"Receive failed awaiting pong #{index}: {ws.exception()}")
            if msg.type in _END_TYPES:
                raise TransportError(
                    f"Connection closed before pong #{index} (code={ws.close_code})"
                )
            logger.debug(f"Discarding {msg.type.name} frame while awaiting pong #{index}")
