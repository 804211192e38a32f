import asyncio
import json
from typing import AsyncGenerator, Callable, List

import httpx
import pytest
import pytest_asyncio

from kupo_scripts.indexer import KupoClient

KUPO_URL = "http://kupo.test:1442"
SLOW_SCRIPT = "slow"


@pytest.fixture
def requests_seen() -> List[httpx.Request]:
    return []


@pytest.fixture
def kupo_factory(requests_seen) -> Callable[..., KupoClient]:
    """Build a KupoClient whose HTTP layer is served by `handler`."""

    def _factory(handler, url: str = KUPO_URL, **kwargs) -> KupoClient:
        def _record(request: httpx.Request):
            requests_seen.append(request)
            return handler(request)

        return KupoClient(url=url, transport_factory=lambda: httpx.MockTransport(_record), **kwargs)

    return _factory


async def _serve_script(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
    """Answer one GET /v1/scripts/<hash> with the hash echoed back as a native script."""
    head = await reader.readuntil(b"\r\n\r\n")
    script = head.split(b" ", 2)[1].decode().rsplit("/", 1)[-1]
    if script == SLOW_SCRIPT:
        await asyncio.sleep(0.3)
        script = "01"
    body = json.dumps({"Language": "native", "Script": script}).encode()
    writer.write(
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: application/json\r\n"
        b"Content-Length: %d\r\n"
        b"Connection: close\r\n\r\n" % len(body)
        + body
    )
    await writer.drain()
    writer.close()


@pytest_asyncio.fixture
async def kupo_server() -> AsyncGenerator[str, None]:
    """A local HTTP server speaking the Kupo scripts API; yields its base URL."""
    server = await asyncio.start_server(_serve_script, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    yield f"http://127.0.0.1:{port}"
    server.close()
    await server.wait_closed()
