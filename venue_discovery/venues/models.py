from __future__ import annotations

from datetime import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

ANY_VALUE = "Allt"
UNLIMITED_DISTANCE_KM = 50.0
NO_HAPPY_HOUR = "Nei"


class Region(str, Enum):
    northern = "northern"
    southern = "southern"


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Venue(BaseModel):
    """Canonical venue record. Every field is optional because the feed is loose."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    category: str | None = None
    mood_tags: str | None = None
    price_tier: str | None = None
    rating: str | None = None
    opening_hours: str | None = None
    happy_hour_time: str | None = None
    review: str | None = None
    image: str | None = None

    @property
    def coordinate(self) -> Coordinate | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class FilterCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    region: Region = Region.northern
    search: str = ""
    category: str = ANY_VALUE
    mood: str = ANY_VALUE
    price: str = ANY_VALUE
    min_rating: float = 0.0
    max_distance_km: float = UNLIMITED_DISTANCE_KM
    happy_hour_only: bool = False
    open_now_only: bool = False
    user_position: Coordinate | None = None
    now: time | None = Field(
        default=None, description="Local time of day used by the open-now check"
    )


class SearchRequest(FilterCriteria):
    min_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    max_distance_km: float = Field(default=UNLIMITED_DISTANCE_KM, ge=1.0, le=UNLIMITED_DISTANCE_KM)


class VenueOut(BaseModel):
    id: str | None
    name: str | None
    latitude: float | None
    longitude: float | None
    category: str | None
    mood_tags: str | None
    price_tier: str | None
    rating: str | None
    opening_hours: str | None
    happy_hour_time: str | None
    review: str | None
    image: str | None
    distance_km: float | None = None
    distance_label: str | None = None


class SearchResponse(BaseModel):
    venues: list[VenueOut]
    visible: int
    total_venues: int
    user_position: Coordinate | None = None


class FocusCommand(BaseModel):
    venue_id: str | None
    latitude: float
    longitude: float
    zoom: int = 16


class LocationOut(BaseModel):
    status: str
    coordinate: Coordinate | None = None
