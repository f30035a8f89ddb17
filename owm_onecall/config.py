"""
Centralized configuration for the One Call client.

All URL pieces, API constants, and defaults in one place.
Nothing here reads the environment; the embedding server (see
server.py) reads its OWM_* settings when it builds a client.
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# API Location
# -----------------------------------------------------------------------------

SCHEME = "https"
DOMAIN = "api.openweathermap.org"
API_VERSION = "2.5"

BASE_URL = f"{SCHEME}://{DOMAIN}/data/{API_VERSION}"

ONECALL_PATH = "/onecall"
TIMEMACHINE_PATH = "/onecall/timemachine"

# Sections dropped from the forecast lookup
EXCLUDE_SECTIONS = "hourly,daily"

# -----------------------------------------------------------------------------
# HTTP Configuration
# -----------------------------------------------------------------------------

DEFAULT_TIMEOUT_SECONDS = 5.0
HTTP_SUCCESS_RANGE = range(200, 300)

# -----------------------------------------------------------------------------
# Server Configuration
# -----------------------------------------------------------------------------

SERVER_NAME = "owm-onecall"
