"""
Entry point for `ws-probe` / `python -m ws_probe`.

Usage:
    ws-probe ping <url> [--interval 1] [--count 5]
    ws-probe compression <url>
"""

import asyncio
import argparse
import logging
import ssl
import sys
from dataclasses import dataclass

from . import __version__
from .compression import negotiate_compression
from .connector import connect, init_tls
from .errors import ProbeError
from .prober import LatencyProber, ProbeRecord
from .stats import summarize
from .target import Target, parse_target

logger = logging.getLogger("ws_probe")


@dataclass(frozen=True)
class PingOptions:
    target: Target
    interval: float = 1.0
    count: int = 5


@dataclass(frozen=True)
class CompressionOptions:
    target: Target


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def _positive_float(value: str) -> float:
    f = float(value)
    if f <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return f


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="ws-probe", description="WebSocket diagnostics")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("ping", help="Measure ping/pong round-trip latency")
    p.add_argument("url")
    p.add_argument("--interval", "-i", type=_positive_float, default=1.0,
                   help="Seconds between pings")
    p.add_argument("--count", "-c", type=_non_negative_int, default=5,
                   help="Number of pings to send")

    c = sub.add_parser("compression", help="Check permessage-deflate negotiation")
    c.add_argument("url")

    return parser.parse_args(argv)


async def ping(opts: PingOptions, ssl_context: ssl.SSLContext) -> int:
    def report(record: ProbeRecord):
        print(f"Ping {record.index}/{opts.count} - Latency: {record.latency_ms:.2f} ms")

    async with await connect(opts.target, ssl_context=ssl_context) as conn:
        print(f"Connected to {opts.target}")
        prober = LatencyProber(conn, count=opts.count, interval=opts.interval, on_record=report)
        records = await prober.run()
        await conn.close()
        print("Connection closed")

    summary = summarize(records)
    if summary:
        print(f"--- {opts.target} ping statistics ---")
        print(summary)
    return 0


async def compression(opts: CompressionOptions, ssl_context: ssl.SSLContext) -> int:
    result = await negotiate_compression(opts.target, ssl_context=ssl_context)
    print(f"Connected to {opts.target}")
    print("Connection closed")
    print(result)
    return 0


async def run(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        ssl_context = init_tls()
        target = parse_target(args.url)
        if args.command == "ping":
            return await ping(PingOptions(target, args.interval, args.count), ssl_context)
        return await compression(CompressionOptions(target), ssl_context)
    except ProbeError as e:
        logger.debug("Probe failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv=None):
    try:
        sys.exit(asyncio.run(run(argv)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
