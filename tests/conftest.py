"""
Shared test fixtures for the One Call client tests.

Provides transport doubles, httpx mock transports, and the sample
payload from the One Call documentation.
"""

from __future__ import annotations

import copy
import json
import socket
import threading
from typing import Any

import httpx
import pytest


# -----------------------------------------------------------------------------
# Transport Doubles
# -----------------------------------------------------------------------------


class CannedTransport:
    """Returns the same body for every GET and records each URL."""

    def __init__(self, body: bytes):
        self.body = body
        self.urls: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.urls)

    def get(self, url: str) -> bytes:
        self.urls.append(url)
        return self.body


class AsyncCannedTransport(CannedTransport):
    async def get(self, url: str) -> bytes:
        self.urls.append(url)
        return self.body


class FailingTransport:
    """Raises the given error on every GET."""

    def __init__(self, error: Exception):
        self.error = error
        self.calls = 0

    def get(self, url: str) -> bytes:
        self.calls += 1
        raise self.error


class AsyncFailingTransport(FailingTransport):
    async def get(self, url: str) -> bytes:
        self.calls += 1
        raise self.error


# -----------------------------------------------------------------------------
# Mock HTTP Transport
# -----------------------------------------------------------------------------


class MockTransport(httpx.BaseTransport):
    """
    Mock httpx transport that returns predefined responses.

    Lets the real HttpxTransport run without hitting the network.
    """

    def __init__(self, responses: dict[str, tuple[int, Any]]):
        """
        Args:
            responses: Dict mapping URL paths to (status_code, response_data) tuples
        """
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        path = request.url.path
        if path in self.responses:
            status, data = self.responses[path]
            return httpx.Response(status, json=data)

        return httpx.Response(404, json={"cod": "404", "message": "Internal error"})


class AsyncMockTransport(httpx.AsyncBaseTransport):
    """Async variant of MockTransport."""

    def __init__(self, responses: dict[str, tuple[int, Any]]):
        self.responses = responses
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        path = request.url.path
        if path in self.responses:
            status, data = self.responses[path]
            return httpx.Response(status, json=data)

        return httpx.Response(404, json={"cod": "404", "message": "Internal error"})


# -----------------------------------------------------------------------------
# Test Data
# -----------------------------------------------------------------------------


ONECALL_PATH = "/data/2.5/onecall"
TIMEMACHINE_PATH = "/data/2.5/onecall/timemachine"

# Sample response from the One Call documentation (trimmed lists)
SAMPLE_PAYLOAD: dict[str, Any] = {
    "lat": 33.44,
    "lon": -94.04,
    "timezone": "America/Chicago",
    "timezone_offset": -18000,
    "current": {
        "dt": 1588935779,
        "sunrise": 1588936856,
        "sunset": 1588986260,
        "temp": 16.75,
        "feels_like": 16.07,
        "pressure": 1009,
        "humidity": 93,
        "dew_point": 15.61,
        "uvi": 8.97,
        "clouds": 90,
        "visibility": 12874,
        "wind_speed": 3.6,
        "wind_deg": 280,
        "weather": [
            {"id": 501, "main": "Rain", "description": "moderate rain", "icon": "10n"},
            {
                "id": 200,
                "main": "Thunderstorm",
                "description": "thunderstorm with light rain",
                "icon": "11n",
            },
        ],
        "rain": {"1h": 2.79},
    },
    "minutely": [
        {"dt": 1588935780, "precipitation": 2.789},
        {"dt": 1588935840, "precipitation": 2.573},
    ],
    "hourly": [
        {
            "dt": 1588935600,
            "temp": 16.75,
            "feels_like": 13.93,
            "pressure": 1009,
            "humidity": 93,
            "dew_point": 15.61,
            "clouds": 90,
            "wind_speed": 6.66,
            "wind_deg": 203,
            "weather": [
                {"id": 501, "main": "Rain", "description": "moderate rain", "icon": "10n"}
            ],
            "rain": {"1h": 2.92},
        }
    ],
    "daily": [
        {
            "dt": 1588960800,
            "sunrise": 1588936856,
            "sunset": 1588986260,
            "temp": {"day": 22.49, "min": 10.96, "max": 22.49},
            "pressure": 1014,
            "humidity": 60,
            "wind_speed": 7.36,
            "wind_deg": 342,
            "weather": [
                {
                    "id": 502,
                    "main": "Rain",
                    "description": "heavy intensity rain",
                    "icon": "10d",
                }
            ],
            "clouds": 68,
            "rain": 15.38,
            "uvi": 8.97,
        }
    ],
    "alerts": [
        {
            "sender_name": "NWS Tulsa",
            "event": "Heat Advisory",
            "start": 1597341600,
            "end": 1597366800,
            "description": "...HEAT ADVISORY REMAINS IN EFFECT...",
        }
    ],
}


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """A fresh copy of the documented sample payload."""
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def sample_body(sample_payload: dict[str, Any]) -> bytes:
    return json.dumps(sample_payload).encode()


@pytest.fixture
def canned_transport(sample_body: bytes) -> CannedTransport:
    return CannedTransport(sample_body)


@pytest.fixture
def async_canned_transport(sample_body: bytes) -> AsyncCannedTransport:
    return AsyncCannedTransport(sample_body)


@pytest.fixture
def mock_transport(sample_payload: dict[str, Any]) -> MockTransport:
    """Mock httpx transport serving the sample on both endpoints."""
    return MockTransport({
        ONECALL_PATH: (200, sample_payload),
        TIMEMACHINE_PATH: (200, sample_payload),
    })


@pytest.fixture
def slow_header_server():
    """
    Local HTTP server that sends a status line, then drips one header
    byte every 50ms for about 10s. Yields a One Call URL pointing at it.
    """
    stop = threading.Event()
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen()
    listener.settimeout(5)

    def serve() -> None:
        try:
            conn, _ = listener.accept()
        except OSError:
            return
        with conn:
            try:
                conn.recv(65536)
                conn.sendall(b"HTTP/1.1 200 OK\r\n")
                for byte in b"X-Slow: " + b"a" * 200:
                    if stop.wait(0.05):
                        break
                    conn.sendall(bytes([byte]))
            except OSError:
                pass

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    host, port = listener.getsockname()

    yield f"http://{host}:{port}/data/2.5/onecall?lat=1&lon=2&exclude=hourly,daily&appid=K"

    stop.set()
    listener.close()
    thread.join(timeout=5)
