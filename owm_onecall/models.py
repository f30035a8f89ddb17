"""
One Call Response Models

Pydantic records for the JSON returned by the One Call endpoint.

The upstream payload is flat: an observation carries temp, wind_speed,
sunrise, clouds, uvi, ... side by side. These models group those keys
into named records, and each container spells out its own key mapping
in a before-validator. to_payload() is the inverse mapping and yields
the upstream shape again.

Reference: https://openweathermap.org/api/one-call-api
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _pick(data: dict[str, Any], keys: dict[str, str]) -> dict[str, Any] | None:
    """Copy the upstream keys present in data under their field names."""
    picked = {field: data[key] for key, field in keys.items() if key in data}
    return picked or None


class _Record(BaseModel):
    """Immutable record; unknown upstream keys are dropped."""

    model_config = ConfigDict(frozen=True, extra="ignore")


# -----------------------------------------------------------------------------
# Leaf Records
# -----------------------------------------------------------------------------


class Coordinate(_Record):
    """Location echoed back by the service."""

    lat: float
    lon: float


class TimezoneInfo(_Record):
    """Timezone of the queried location."""

    name: str
    offset_seconds: int


class SunTimes(_Record):
    """Sunrise and sunset, epoch seconds (UTC)."""

    sunrise: int = Field(ge=0)
    sunset: int = Field(ge=0)


class MainReadings(_Record):
    """Temperature, pressure and humidity readings."""

    temp: float
    feels_like: float
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: int
    humidity: int


class WeatherCondition(_Record):
    """
    Classification of the atmospheric condition.

    id is the OpenWeatherMap condition code (e.g. 501 = moderate rain).
    An observation may list several conditions, primary first.
    """

    id: int
    main: str
    description: str
    icon: str


class Clouds(_Record):
    coverage_percent: int


class Wind(_Record):
    speed: float
    direction_deg: int = Field(ge=0, le=0xFFFF)


class Precipitation(_Record):
    """Rain volume in mm for the last hour and the last three hours."""

    last_hour: float | None = None
    last_three_hours: float | None = None


class UVIndex(_Record):
    value: float


# -----------------------------------------------------------------------------
# Upstream Key Mappings
# -----------------------------------------------------------------------------

_COORDINATE_KEYS = {"lat": "lat", "lon": "lon"}
_TIMEZONE_KEYS = {"timezone": "name", "timezone_offset": "offset_seconds"}
_SUN_KEYS = {"sunrise": "sunrise", "sunset": "sunset"}
_MAIN_KEYS = {
    "temp": "temp",
    "feels_like": "feels_like",
    "temp_min": "temp_min",
    "temp_max": "temp_max",
    "pressure": "pressure",
    "humidity": "humidity",
}
_WIND_KEYS = {"wind_speed": "speed", "wind_deg": "direction_deg"}
_RAIN_KEYS = {"1h": "last_hour", "3h": "last_three_hours"}


# -----------------------------------------------------------------------------
# Observation
# -----------------------------------------------------------------------------


class Observation(_Record):
    """
    One point in time: the shape shared by current, hourly and minutely.

    Only timestamp is always present. Hourly entries carry no sun times,
    and minutely entries carry nothing but the timestamp and a bare
    precipitation volume (precipitation_mm).
    """

    timestamp: int
    sun_times: SunTimes | None = None
    main_readings: MainReadings | None = None
    wind: Wind | None = None
    precipitation: Precipitation | None = None
    clouds: Clouds | None = None
    uv_index: UVIndex | None = None
    precipitation_mm: float | None = None
    conditions: list[WeatherCondition] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _group_upstream_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "dt" not in data:
            return data

        rain = data.get("rain")
        if isinstance(rain, dict):
            rain = {field: rain[key] for key, field in _RAIN_KEYS.items() if key in rain}

        return {
            "timestamp": data["dt"],
            "sun_times": _pick(data, _SUN_KEYS),
            "main_readings": _pick(data, _MAIN_KEYS),
            "wind": _pick(data, _WIND_KEYS),
            "precipitation": rain,
            "clouds": {"coverage_percent": data["clouds"]} if "clouds" in data else None,
            "uv_index": {"value": data["uvi"]} if "uvi" in data else None,
            "precipitation_mm": data.get("precipitation"),
            "conditions": data.get("weather") or [],
        }

    def to_payload(self) -> dict[str, Any]:
        """Render this observation in the upstream (flat) JSON shape."""
        payload: dict[str, Any] = {"dt": self.timestamp}
        if self.sun_times is not None:
            payload.update(self.sun_times.model_dump())
        if self.main_readings is not None:
            payload.update(self.main_readings.model_dump(exclude_none=True))
        if self.wind is not None:
            payload["wind_speed"] = self.wind.speed
            payload["wind_deg"] = self.wind.direction_deg
        if self.precipitation is not None:
            rain = self.precipitation.model_dump()
            payload["rain"] = {
                key: rain[field]
                for key, field in _RAIN_KEYS.items()
                if rain[field] is not None
            }
        if self.clouds is not None:
            payload["clouds"] = self.clouds.coverage_percent
        if self.uv_index is not None:
            payload["uvi"] = self.uv_index.value
        if self.precipitation_mm is not None:
            payload["precipitation"] = self.precipitation_mm
        if self.conditions:
            payload["weather"] = [condition.model_dump() for condition in self.conditions]
        return payload


# -----------------------------------------------------------------------------
# Response
# -----------------------------------------------------------------------------


class Response(_Record):
    """
    Decoded One Call response.

    hourly and minutely are ordered sequences, as the upstream returns
    them; they are empty when the request excluded them. daily, alerts
    and any other top-level keys are dropped.
    """

    coordinate: Coordinate
    timezone_info: TimezoneInfo
    current: Observation
    hourly: list[Observation] = Field(default_factory=list)
    minutely: list[Observation] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _group_upstream_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "coordinate" in data:
            return data
        return {
            "coordinate": _pick(data, _COORDINATE_KEYS),
            "timezone_info": _pick(data, _TIMEZONE_KEYS),
            "current": data.get("current"),
            "hourly": data.get("hourly") or [],
            "minutely": data.get("minutely") or [],
        }

    def to_payload(self) -> dict[str, Any]:
        """Render this response in the upstream JSON shape."""
        payload: dict[str, Any] = {
            "lat": self.coordinate.lat,
            "lon": self.coordinate.lon,
            "timezone": self.timezone_info.name,
            "timezone_offset": self.timezone_info.offset_seconds,
            "current": self.current.to_payload(),
        }
        if self.hourly:
            payload["hourly"] = [entry.to_payload() for entry in self.hourly]
        if self.minutely:
            payload["minutely"] = [entry.to_payload() for entry in self.minutely]
        return payload
