"""
One Call MCP Server

Exposes the weather lookups as MCP tools so an agent can ask for the
weather at a coordinate. The API key, units and timeout come from the
environment (OWM_API_KEY, OWM_UNITS, OWM_TIMEOUT_SECONDS).

Run with: python -m owm_onecall.server
"""

from __future__ import annotations

import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import AsyncOneCallClient
from .config import DEFAULT_TIMEOUT_SECONDS, SERVER_NAME

mcp = FastMCP(SERVER_NAME)


def build_client() -> AsyncOneCallClient:
    """
    Create a client from the current OWM_* environment.

    The client owns its transport; close it after use. A malformed
    OWM_TIMEOUT_SECONDS raises ValueError here, not at import.
    """
    return AsyncOneCallClient(
        api_key=os.environ.get("OWM_API_KEY", ""),
        unit=os.environ.get("OWM_UNITS", "metric"),
        timeout=float(os.environ.get("OWM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
    )


@mcp.tool()
async def current_weather(lat: float, lon: float) -> dict[str, Any]:
    """Current conditions and minute-by-minute precipitation for a coordinate."""
    async with build_client() as client:
        response = await client.get_weather_from_lat_lon(lat, lon)
    return response.model_dump()


@mcp.tool()
async def historical_weather(lat: float, lon: float, timestamp: int) -> dict[str, Any]:
    """Conditions at a coordinate at a past UNIX timestamp (seconds, UTC)."""
    async with build_client() as client:
        response = await client.get_historical_weather(lat, lon, timestamp)
    return response.model_dump()


if __name__ == "__main__":
    mcp.run()
