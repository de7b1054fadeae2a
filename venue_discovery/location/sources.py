from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Protocol

import httpx

from ..venues.models import Coordinate
from .config import DEFAULT_LOCATION_CONFIG, LocationConfig

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "VenueDiscovery/1.0",
    "Accept": "application/json",
}


class LocationUnavailable(Exception):
    """The position source cannot produce a coordinate (denied, no fix, lookup failed)."""


class PositionSource(Protocol):
    def watch(self) -> AsyncIterator[Coordinate]:
        """Yield zero or more coordinates; may raise LocationUnavailable."""
        ...


class StaticPositionSource:
    """A fixed, configured coordinate delivered once."""

    def __init__(self, coordinate: Coordinate) -> None:
        self.coordinate = coordinate

    async def watch(self) -> AsyncIterator[Coordinate]:
        yield self.coordinate


def _parse_ip_payload(data: Any) -> Coordinate:
    try:
        lat = float(data.get("latitude", data.get("lat")))
        lon = float(data.get("longitude", data.get("lon")))
    except (AttributeError, TypeError, ValueError) as exc:
        raise LocationUnavailable(f"Unexpected IP geolocation payload: {data!r}") from exc
    return Coordinate(latitude=lat, longitude=lon)


class IpPositionSource:
    """
    Best-effort coordinate from an IP geolocation service.

    With ``interval`` set the lookup repeats, giving continuous tracking;
    otherwise a single fix is produced.
    """

    def __init__(self, url: str, timeout: float = 10.0, interval: float = 0.0) -> None:
        self.url = url
        self.timeout = timeout
        self.interval = interval

    async def _lookup(self, client: httpx.AsyncClient) -> Coordinate:
        try:
            r = await client.get(self.url)
        except httpx.HTTPError as exc:
            raise LocationUnavailable(f"IP geolocation request failed: {exc}") from exc
        if r.status_code != 200:
            raise LocationUnavailable(f"IP geolocation returned HTTP {r.status_code}")
        try:
            data = r.json()
        except ValueError as exc:
            raise LocationUnavailable("IP geolocation returned invalid JSON") from exc
        return _parse_ip_payload(data)

    async def watch(self) -> AsyncIterator[Coordinate]:
        async with httpx.AsyncClient(timeout=self.timeout, headers=HEADERS) as client:
            yield await self._lookup(client)
            while self.interval > 0:
                await asyncio.sleep(self.interval)
                try:
                    yield await self._lookup(client)
                except LocationUnavailable:
                    logger.warning("IP geolocation refresh failed", exc_info=True)


def build_position_source(config: LocationConfig = DEFAULT_LOCATION_CONFIG) -> PositionSource | None:
    if config.mode == "static":
        if config.latitude is None or config.longitude is None:
            logger.warning("LOCATION_MODE=static needs LOCATION_LATITUDE and LOCATION_LONGITUDE")
            return None
        return StaticPositionSource(Coordinate(latitude=config.latitude, longitude=config.longitude))
    if config.mode == "ip":
        return IpPositionSource(config.ip_url, timeout=config.timeout, interval=config.poll_interval)
    return None
