"""OpenWeatherMap One Call API client package."""

from .client import (
    AsyncOneCallClient,
    OneCallClient,
    build_onecall_url,
    build_timemachine_url,
    decode_response,
    redact_url,
)
from .config import (
    API_VERSION,
    BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    EXCLUDE_SECTIONS,
)
from .errors import (
    DecodeError,
    MissingApiKey,
    OneCallError,
    TransportError,
)
from .models import (
    Clouds,
    Coordinate,
    MainReadings,
    Observation,
    Precipitation,
    Response,
    SunTimes,
    TimezoneInfo,
    UVIndex,
    WeatherCondition,
    Wind,
)
from .transport import (
    AsyncHttpxTransport,
    AsyncTransport,
    HttpxTransport,
    Transport,
    default_transport,
)

__all__ = [
    # Client
    "OneCallClient",
    "AsyncOneCallClient",
    "build_onecall_url",
    "build_timemachine_url",
    "decode_response",
    "redact_url",
    # Transport
    "Transport",
    "AsyncTransport",
    "HttpxTransport",
    "AsyncHttpxTransport",
    "default_transport",
    # Config
    "API_VERSION",
    "BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "EXCLUDE_SECTIONS",
    # Errors
    "OneCallError",
    "MissingApiKey",
    "TransportError",
    "DecodeError",
    # Models
    "Response",
    "Observation",
    "Coordinate",
    "TimezoneInfo",
    "SunTimes",
    "MainReadings",
    "WeatherCondition",
    "Clouds",
    "Wind",
    "Precipitation",
    "UVIndex",
]
