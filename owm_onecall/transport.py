"""
HTTP Transports

A transport performs one GET and returns the raw body. The client only
depends on the Transport / AsyncTransport protocols, so anything with a
matching get() can be injected: the httpx-backed defaults below, a test
double returning canned bytes, a recording proxy, ...

Transports raise on failure. The defaults raise httpx.HTTPError
subclasses: ConnectError, TimeoutException, HTTPStatusError for non-2xx.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Protocol

import httpx

from .config import DEFAULT_TIMEOUT_SECONDS, HTTP_SUCCESS_RANGE


class Transport(Protocol):
    """Anything that can GET an absolute URL and return the body."""

    def get(self, url: str) -> bytes:
        ...


class AsyncTransport(Protocol):
    """Async counterpart of Transport."""

    async def get(self, url: str) -> bytes:
        ...


def _deadline_exceeded(timeout: float, url: str) -> httpx.TimeoutException:
    return httpx.TimeoutException(
        f"No complete response within {timeout}s",
        request=httpx.Request("GET", url),
    )


class _Exchange:
    """One GET running on a worker thread, abandoned once its deadline passes."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.abandoned = threading.Event()
        self.body: bytes | None = None
        self.error: Exception | None = None


class HttpxTransport:
    """
    Default transport over httpx.Client.

    timeout (seconds) is a hard bound on the whole exchange: connect,
    headers and body together. httpx only bounds each phase, so the
    exchange runs on a worker thread and get() stops waiting at the
    deadline. An abandoned exchange stops reading at its next chunk (or
    as soon as headers arrive) and its response is closed by the
    with-block, as on every other exit path.

    httpx.Client is safe to share between threads, so one transport can
    serve concurrent lookups.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ) -> None:
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def get(self, url: str) -> bytes:
        exchange = _Exchange()
        worker = threading.Thread(
            target=self._run, args=(url, exchange), name="owm-onecall-get", daemon=True
        )
        worker.start()
        if not exchange.done.wait(self.timeout):
            exchange.abandoned.set()
            raise _deadline_exceeded(self.timeout, url)
        if exchange.error is not None:
            raise exchange.error
        return exchange.body  # type: ignore[return-value]

    def _run(self, url: str, exchange: _Exchange) -> None:
        try:
            with self._client.stream("GET", url, timeout=self.timeout) as response:
                if exchange.abandoned.is_set():
                    return
                if response.status_code not in HTTP_SUCCESS_RANGE:
                    response.read()
                    response.raise_for_status()
                body = bytearray()
                for chunk in response.iter_bytes():
                    if exchange.abandoned.is_set():
                        return
                    body.extend(chunk)
                exchange.body = bytes(body)
        except Exception as e:
            exchange.error = e
        finally:
            exchange.done.set()

    def close(self) -> None:
        """Release the connection pool (only when this transport created it)."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncHttpxTransport:
    """
    Default async transport over httpx.AsyncClient. Same contract as HttpxTransport.

    The exchange is cancelled at the deadline, which closes the response.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def get(self, url: str) -> bytes:
        try:
            return await asyncio.wait_for(self._exchange(url), self.timeout)
        except asyncio.TimeoutError as e:
            raise _deadline_exceeded(self.timeout, url) from e

    async def _exchange(self, url: str) -> bytes:
        async with self._client.stream("GET", url, timeout=self.timeout) as response:
            if response.status_code not in HTTP_SUCCESS_RANGE:
                await response.aread()
                response.raise_for_status()
            return await response.aread()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpxTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def default_transport(timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> HttpxTransport:
    """Create the default network-backed transport."""
    return HttpxTransport(timeout=timeout_seconds)
