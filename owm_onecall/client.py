"""
One Call Client

Turns a coordinate lookup into exactly one GET against the One Call
endpoint and decodes the body into a Response.

Every lookup is the same single-shot pipeline:
1. Check the API key (fail before touching the network)
2. Build the URL
3. Fetch the body through the injected transport
4. Decode the body into a Response

There is no retry, no caching, no partial result. Each step either
hands over to the next one or raises a typed OneCallError.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .config import (
    BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    EXCLUDE_SECTIONS,
    ONECALL_PATH,
    TIMEMACHINE_PATH,
)
from .errors import DecodeError, MissingApiKey, OneCallError, TransportError
from .models import Response
from .transport import (
    AsyncHttpxTransport,
    AsyncTransport,
    Transport,
    default_transport,
)

logger = logging.getLogger(__name__)

_API_KEY_PATTERN = re.compile(r"appid=[^&'\"\s]*")


# -----------------------------------------------------------------------------
# URL Construction
# -----------------------------------------------------------------------------


def _format_coordinate(value: float) -> str:
    """Shortest decimal form that round-trips: 60.99, 30.9, 60 (not 60.0)."""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _with_units(url: str, unit: str) -> str:
    # No units parameter means the upstream default (standard / Kelvin)
    return f"{url}&units={unit}" if unit else url


def build_onecall_url(lat: float, lon: float, api_key: str, unit: str = "") -> str:
    """
    Build the forecast lookup URL.

    The key is substituted verbatim and the exclude list is sent
    unencoded (hourly,daily), matching what the endpoint documents.
    """
    url = (
        f"{BASE_URL}{ONECALL_PATH}"
        f"?lat={_format_coordinate(lat)}&lon={_format_coordinate(lon)}"
        f"&exclude={EXCLUDE_SECTIONS}&appid={api_key}"
    )
    return _with_units(url, unit)


def build_timemachine_url(
    lat: float, lon: float, timestamp: int, api_key: str, unit: str = ""
) -> str:
    """Build the historical (time machine) lookup URL for a UNIX timestamp."""
    url = (
        f"{BASE_URL}{TIMEMACHINE_PATH}"
        f"?lat={_format_coordinate(lat)}&lon={_format_coordinate(lon)}"
        f"&dt={int(timestamp)}&appid={api_key}"
    )
    return _with_units(url, unit)


def redact_url(text: str, api_key: str = "") -> str:
    """
    Mask the API key in a URL (or in a message quoting one) before logging it.

    The appid pattern stops at the first '&', quote or whitespace. Pass the
    key itself so one containing those characters is masked whole, both
    verbatim and percent-encoded.
    """
    if api_key:
        forms = {api_key, quote(api_key, safe="&"), quote(api_key, safe="")}
        for form in sorted(forms, key=len, reverse=True):
            text = text.replace(form, "***")
    return _API_KEY_PATTERN.sub("appid=***", text)


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


def decode_response(payload: bytes | str) -> Response:
    """
    Decode a One Call body.

    Raises:
        DecodeError: If the payload is not JSON or does not match the
            Response shape. The pydantic ValidationError is the cause.
    """
    try:
        return Response.model_validate_json(payload)
    except ValidationError as e:
        logger.warning("Undecodable One Call response (%d errors)", e.error_count())
        raise DecodeError(f"Invalid One Call response: {e}", cause=e) from e


def _transport_failure(exc: Exception, url: str, api_key: str = "") -> TransportError:
    status_code = None
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        message = f"GET {url} returned HTTP {status_code}"
    else:
        message = f"GET {url} failed: {exc}"
    message = redact_url(message, api_key)
    logger.warning(message)
    return TransportError(message, status_code=status_code, cause=exc)


# -----------------------------------------------------------------------------
# Clients
# -----------------------------------------------------------------------------


class _OneCallBase:
    """Configuration and URL selection shared by the sync and async clients."""

    def __init__(self, api_key: str = "", unit: str = "") -> None:
        self._api_key = api_key
        self._unit = unit

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def unit(self) -> str:
        return self._unit

    def _require_api_key(self) -> None:
        if not self._api_key:
            raise MissingApiKey()

    def _forecast_url(self, lat: float, lon: float, timestamp: int | None) -> str:
        self._require_api_key()
        if timestamp is not None:
            logger.debug(
                "Forecast lookups do not send a time; ignoring timestamp=%s", timestamp
            )
        return build_onecall_url(lat, lon, self._api_key, self._unit)

    def _historical_url(self, lat: float, lon: float, timestamp: int) -> str:
        self._require_api_key()
        return build_timemachine_url(lat, lon, timestamp, self._api_key, self._unit)


class OneCallClient(_OneCallBase):
    """
    Synchronous One Call client.

    Any object with a get(url) -> bytes method can serve as transport.
    When none is given, an httpx-backed transport is created (and owned:
    close() releases it). The configuration is read-only, so a client can
    be shared between threads as long as its transport can.
    """

    def __init__(
        self,
        api_key: str = "",
        unit: str = "",
        transport: Transport | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(api_key, unit)
        self._owns_transport = transport is None
        self.transport: Transport = transport or default_transport(timeout)

    def get_weather_from_lat_lon(
        self, lat: float, lon: float, timestamp: int | None = None
    ) -> Response:
        """
        Current conditions (plus minutely precipitation) for a location.

        timestamp is accepted for call compatibility but is not sent: the
        forecast endpoint has no time parameter. Use get_historical_weather
        for a point in the past.

        Raises:
            MissingApiKey: No API key configured; no request is made.
            TransportError: The request failed, timed out, or got a non-2xx.
            DecodeError: The body did not decode into a Response.
        """
        return self._fetch(self._forecast_url(lat, lon, timestamp))

    def get_historical_weather(self, lat: float, lon: float, timestamp: int) -> Response:
        """Conditions at a past UNIX timestamp (time machine endpoint)."""
        return self._fetch(self._historical_url(lat, lon, timestamp))

    def _fetch(self, url: str) -> Response:
        logger.debug("GET %s", redact_url(url, self._api_key))
        try:
            body = self.transport.get(url)
        except OneCallError:
            raise
        except Exception as e:
            raise _transport_failure(e, url, self._api_key) from e
        return decode_response(body)

    def close(self) -> None:
        """Release the default transport, if this client created it."""
        if self._owns_transport:
            self.transport.close()  # type: ignore[attr-defined]

    def __enter__(self) -> OneCallClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncOneCallClient(_OneCallBase):
    """Async twin of OneCallClient, over an AsyncTransport."""

    def __init__(
        self,
        api_key: str = "",
        unit: str = "",
        transport: AsyncTransport | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(api_key, unit)
        self._owns_transport = transport is None
        self.transport: AsyncTransport = transport or AsyncHttpxTransport(timeout=timeout)

    async def get_weather_from_lat_lon(
        self, lat: float, lon: float, timestamp: int | None = None
    ) -> Response:
        """See OneCallClient.get_weather_from_lat_lon."""
        return await self._fetch(self._forecast_url(lat, lon, timestamp))

    async def get_historical_weather(
        self, lat: float, lon: float, timestamp: int
    ) -> Response:
        return await self._fetch(self._historical_url(lat, lon, timestamp))

    async def _fetch(self, url: str) -> Response:
        logger.debug("GET %s", redact_url(url, self._api_key))
        try:
            body = await self.transport.get(url)
        except OneCallError:
            raise
        except Exception as e:
            raise _transport_failure(e, url, self._api_key) from e
        return decode_response(body)

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()  # type: ignore[attr-defined]

    async def __aenter__(self) -> AsyncOneCallClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
