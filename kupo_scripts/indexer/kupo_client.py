"""Kupo HTTP client for fetching scripts by hash."""

import asyncio
import logging
import time
from typing import Callable, Optional

import httpx

from kupo_scripts.types import DecodeError, Script

logger = logging.getLogger(__name__)


def _describe(e: Exception) -> str:
    return str(e) or type(e).__name__


class KupoError(Exception):
    """Base exception for Kupo errors."""

class RequestBuildError(KupoError):
    """Endpoint or request could not be built; nothing was sent."""

class TransportError(KupoError):
    """Network-level failure, timeout or missing response."""

class StatusError(TransportError):
    """Kupo answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: bytes = b""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

class BodyReadError(KupoError):
    """Response arrived but its body could not be read."""


class KupoClient:
    """
    Async client for the Kupo scripts API.

    Configuration is read-only after construction, so one client can be
    shared by concurrent tasks. Every call opens its own connection and
    closes it afterwards. `transport_factory` builds the transport for one
    call; that call owns it and closes it.
    """

    def __init__(
        self,
        url: str = "http://localhost:1442",
        timeout: float = 30.0,
        logger: Optional[logging.Logger] = None,
        transport_factory: Optional[Callable[[], httpx.AsyncBaseTransport]] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.transport_factory = transport_factory

    def script_url(self, script_hash: str) -> httpx.URL:
        """Build <endpoint>/v1/scripts/<script_hash>. The hash is not validated."""
        try:
            url = httpx.URL(self.url)
        except httpx.InvalidURL as e:
            raise RequestBuildError(f"unable to parse endpoint {self.url}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise RequestBuildError(f"unable to parse endpoint {self.url}: expected http(s)://host[:port]")
        try:
            return url.copy_with(path="/v1/scripts/" + script_hash, query=None, fragment=None)
        except httpx.InvalidURL as e:
            raise RequestBuildError(f"unable to build script url for {script_hash!r}: {e}") from e

    async def fetch_script(self, script_hash: str, timeout: Optional[float] = None) -> Optional[Script]:
        """
        Fetch a script by its hash.

        Returns None when Kupo does not know the script. `timeout` bounds the
        whole exchange on top of the client's request timeout. Cancelling the
        calling task aborts the request.
        """
        start = time.monotonic()
        err = ""
        try:
            url = self.script_url(script_hash)
            if timeout is None:
                return await self._get_script(url)
            try:
                return await asyncio.wait_for(self._get_script(url), timeout=timeout)
            except asyncio.TimeoutError as e:
                raise TransportError(f"unable to fetch script: deadline of {timeout}s exceeded") from e
        except (Exception, asyncio.CancelledError) as e:
            err = _describe(e)
            raise
        finally:
            duration = time.monotonic() - start
            self.logger.info(
                f"fetch_script() finished duration={duration * 1000:.0f}ms err={err!r}",
                extra={"duration": duration, "err": err},
            )

    async def _get_script(self, url: httpx.URL) -> Optional[Script]:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_keepalive_connections=0),
            transport=self.transport_factory() if self.transport_factory else None,
        ) as client:
            try:
                request = client.build_request("GET", url, headers={"Connection": "close"})
            except httpx.InvalidURL as e:
                raise RequestBuildError(f"unable to build request: {e}") from e

            try:
                response = await client.send(request, stream=True)
            except httpx.HTTPError as e:
                raise TransportError(f"unable to fetch script: {_describe(e)}") from e
            if response is None:
                raise TransportError("failed with a nil response")

            try:
                body = await response.aread()
            except httpx.HTTPError as e:
                raise BodyReadError(f"error reading response body: {_describe(e)}") from e
            finally:
                await response.aclose()

        if not response.is_success:
            raise StatusError(
                f"unexpected status {response.status_code} from {url}: {body[:200]!r}",
                status_code=response.status_code,
                body=body,
            )
        return self._parse_body(body)

    @staticmethod
    def _parse_body(body: bytes) -> Optional[Script]:
        if body.strip() == b"null":
            return None
        try:
            return Script.from_json(body)
        except DecodeError as e:
            raise DecodeError(f"unable to parse body {body[:200]!r}: {e}", value=e.value) from e
