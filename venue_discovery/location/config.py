from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _float_env(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class LocationConfig:
    """
    Server-side position source.

    mode is one of ``off``, ``static`` (fixed coordinate) or ``ip`` (IP geolocation).
    A poll interval of 0 makes the IP lookup one-shot.
    """

    mode: str = os.getenv("LOCATION_MODE", "off").lower()
    latitude: float | None = _float_env("LOCATION_LATITUDE")
    longitude: float | None = _float_env("LOCATION_LONGITUDE")
    ip_url: str = os.getenv("LOCATION_IP_URL", "https://ipapi.co/json/")
    timeout: float = float(os.getenv("LOCATION_TIMEOUT", "10.0"))
    poll_interval: float = float(os.getenv("LOCATION_POLL_INTERVAL", "0"))


DEFAULT_LOCATION_CONFIG = LocationConfig()
