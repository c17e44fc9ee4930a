"""
Configuration management with environment variable support.

All settings can be overridden via environment variables.
Automatically loads .env file if present.
"""

import os
from pathlib import Path
from typing import Literal
from dotenv import load_dotenv

# Load .env file from project root (one level up from suntrack/)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Logging configuration
LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = os.getenv("LOG_LEVEL", "INFO")

# Sun path sampling
SUN_PATH_INTERVAL: int = int(os.getenv("SUN_PATH_INTERVAL", "15"))  # minutes

# Timezone resolution
TIMEZONE_PROVIDER: Literal["regions", "timezonefinder"] = os.getenv("TIMEZONE_PROVIDER", "regions")
FALLBACK_TIMEZONE: str | None = os.getenv("FALLBACK_TIMEZONE") or None  # None = system local zone

# Default location for API requests (New York City)
DEFAULT_LATITUDE: float = float(os.getenv("DEFAULT_LATITUDE", "40.7128"))
DEFAULT_LONGITUDE: float = float(os.getenv("DEFAULT_LONGITUDE", "-74.0060"))


def build_timezone_resolver():
    """
    Build a TimezoneResolver from TIMEZONE_PROVIDER and FALLBACK_TIMEZONE.

    Returns:
        TimezoneResolver with its own empty cache
    """
    from suntrack.timezones import RegionTableProvider, TimezoneFinderProvider, TimezoneResolver

    if TIMEZONE_PROVIDER == "timezonefinder":
        provider = TimezoneFinderProvider()
    else:
        if TIMEZONE_PROVIDER != "regions":
            print(f"Warning: Unknown TIMEZONE_PROVIDER '{TIMEZONE_PROVIDER}', using 'regions'")
        provider = RegionTableProvider()

    return TimezoneResolver(provider=provider, fallback_zone=FALLBACK_TIMEZONE)
