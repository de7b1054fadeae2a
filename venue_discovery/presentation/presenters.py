from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from ..venues.config import DEFAULT_FILTER_SETTINGS, FilterSettings
from ..venues.engine import venue_distance_km
from ..venues.models import Coordinate, FocusCommand, Region, Venue, VenueOut

DEFAULT_MAP_CENTER = Coordinate(latitude=64.1467, longitude=-21.9333)
DEFAULT_MAP_ZOOM = 13
FOCUS_ZOOM = 16


@dataclass(frozen=True)
class VenueView:
    venue: Venue
    distance_km: float | None = None

    @property
    def distance_label(self) -> str | None:
        if self.distance_km is None:
            return None
        return f"{self.distance_km:.1f} km"

    def to_out(self) -> VenueOut:
        return VenueOut(
            **self.venue.model_dump(),
            distance_km=round(self.distance_km, 2) if self.distance_km is not None else None,
            distance_label=self.distance_label,
        )


@dataclass(frozen=True)
class MapMarker:
    venue_id: str | None
    name: str | None
    latitude: float
    longitude: float


class Presenter(Protocol):
    def render(self, views: Sequence[VenueView]) -> None: ...

    def focus(self, command: FocusCommand) -> None: ...


def build_views(
    venues: Sequence[Venue],
    region: Region,
    user_position: Coordinate | None,
    settings: FilterSettings = DEFAULT_FILTER_SETTINGS,
) -> list[VenueView]:
    """Attach a display distance where it is meaningful (known fix, distance region)."""
    show_distance = user_position is not None and region == settings.distance_region
    return [
        VenueView(venue, venue_distance_km(venue, user_position) if show_distance else None)
        for venue in venues
    ]


def focus_command(venue: Venue, zoom: int = FOCUS_ZOOM) -> FocusCommand | None:
    """Center/zoom command for *venue*, or None when it has no coordinates."""
    if venue.latitude is None or venue.longitude is None:
        return None
    return FocusCommand(
        venue_id=venue.id, latitude=venue.latitude, longitude=venue.longitude, zoom=zoom
    )


class ListPresenter:
    def __init__(self) -> None:
        self.rows: list[VenueOut] = []
        self.selected: str | None = None

    def render(self, views: Sequence[VenueView]) -> None:
        self.rows = [view.to_out() for view in views]

    def focus(self, command: FocusCommand) -> None:
        self.selected = command.venue_id

    @property
    def is_empty(self) -> bool:
        return not self.rows


class MapPresenter:
    def __init__(self, center: Coordinate = DEFAULT_MAP_CENTER, zoom: int = DEFAULT_MAP_ZOOM) -> None:
        self.center = center
        self.zoom = zoom
        self.markers: list[MapMarker] = []
        self.last_focus: FocusCommand | None = None

    def render(self, views: Sequence[VenueView]) -> None:
        # Venues without coordinates stay in the list but get no marker
        self.markers = [
            MapMarker(v.venue.id, v.venue.name, v.venue.latitude, v.venue.longitude)
            for v in views
            if v.venue.latitude is not None and v.venue.longitude is not None
        ]

    def focus(self, command: FocusCommand) -> None:
        self.center = Coordinate(latitude=command.latitude, longitude=command.longitude)
        self.zoom = command.zoom
        self.last_focus = command
