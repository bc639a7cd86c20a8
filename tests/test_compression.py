"""
Tests for the permessage-deflate negotiation check.
"""

import pytest

from ws_probe.compression import ExtensionResult, negotiate_compression
from ws_probe.errors import WSConnectionError
from ws_probe.target import parse_target

from .conftest import compression_handler, plain_http_handler


def test_result_strings():
    assert str(ExtensionResult("permessage-deflate")) == "Extensions: permessage-deflate"
    assert str(ExtensionResult(None)) == "No extensions in response"
    assert not ExtensionResult(None).accepted


@pytest.mark.asyncio
async def test_server_accepts_deflate(ws_server):
    url = await ws_server(compression_handler(compress=True))
    result = await negotiate_compression(parse_target(url))
    assert result.accepted
    assert result.value == "permessage-deflate"


@pytest.mark.asyncio
async def test_server_without_deflate_never_reports_extensions(ws_server):
    url = await ws_server(compression_handler(compress=False))
    target = parse_target(url)
    for _ in range(3):
        result = await negotiate_compression(target)
        assert result.value is None


@pytest.mark.asyncio
async def test_handshake_failure(ws_server):
    url = await ws_server(plain_http_handler)
    with pytest.raises(WSConnectionError):
        await negotiate_compression(parse_target(url))
