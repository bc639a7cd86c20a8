"""
Local WebSocket endpoints for the probe tests.
"""

import aiohttp
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer


async def pong_handler(request):
    """Answers every ping; aiohttp's autoping sends the pong."""
    ws = web.WebSocketResponse(autoping=True)
    await ws.prepare(request)
    async for _ in ws:
        pass
    return ws


def recording_handler(payloads: list, noise: bool = False):
    """Records ping payloads and pongs by hand, optionally sending a
    text and a binary frame ahead of each pong."""

    async def handler(request):
        ws = web.WebSocketResponse(autoping=False)
        await ws.prepare(request)
        async for msg in ws:
            if msg.type == aiohttp.WSMsgType.PING:
                payloads.append(msg.data)
                if noise:
                    await ws.send_str("noise")
                    await ws.send_bytes(b"\x00\x01")
                await ws.pong(msg.data)
        return ws

    return handler


def closing_handler(pongs: int):
    """Answers ``pongs`` pings, then closes instead of answering the next."""

    async def handler(request):
        ws = web.WebSocketResponse(autoping=False)
        await ws.prepare(request)
        answered = 0
        async for msg in ws:
            if msg.type == aiohttp.WSMsgType.PING:
                if answered >= pongs:
                    await ws.close()
                    break
                await ws.pong(msg.data)
                answered += 1
        return ws

    return handler


def compression_handler(compress: bool):
    async def handler(request):
        ws = web.WebSocketResponse(compress=compress)
        await ws.prepare(request)
        async for _ in ws:
            pass
        return ws

    return handler


async def plain_http_handler(request):
    return web.Response(text="not a websocket")


@pytest_asyncio.fixture
async def ws_server():
    """Factory: start an app serving ``handler`` at / and return its ws:// URL."""
    servers = []

    async def start(handler) -> str:
        app = web.Application()
        app.router.add_get("/", handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return str(server.make_url("/").with_scheme("ws"))

    yield start

    for server in servers:
        await server.close()
