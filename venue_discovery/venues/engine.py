from __future__ import annotations

from datetime import time
from typing import Iterable

from .config import DEFAULT_FILTER_SETTINGS, FilterSettings
from .distance import haversine_km
from .models import Coordinate, FilterCriteria, Venue
from .predicates import (
    matches_category,
    matches_happy_hour,
    matches_max_distance,
    matches_min_rating,
    matches_mood,
    matches_open_now,
    matches_price,
    matches_region,
    matches_search,
)


def venue_matches(
    venue: Venue,
    criteria: FilterCriteria,
    settings: FilterSettings = DEFAULT_FILTER_SETTINGS,
) -> bool:
    """Logical AND of every criterion for a single venue."""
    return (
        matches_region(venue, criteria.region)
        and matches_search(venue, criteria.search)
        and matches_mood(venue, criteria.mood, settings)
        and matches_category(venue, criteria.category, settings)
        and matches_price(venue, criteria.price, settings)
        and matches_min_rating(venue, criteria.min_rating)
        and matches_happy_hour(venue, criteria.happy_hour_only, settings)
        and matches_open_now(venue, criteria.open_now_only, criteria.now, settings)
        and matches_max_distance(
            venue,
            criteria.region,
            criteria.max_distance_km,
            criteria.user_position,
            settings,
        )
    )


def with_context(
    criteria: FilterCriteria,
    user_position: Coordinate | None,
    now: time | None,
) -> FilterCriteria:
    """Fill a missing user position and time of day from the caller's tracker and clock."""
    changes: dict = {}
    if criteria.user_position is None and user_position is not None:
        changes["user_position"] = user_position
    if criteria.now is None and now is not None:
        changes["now"] = now
    return criteria.model_copy(update=changes) if changes else criteria


def filter_venues(
    venues: Iterable[Venue],
    criteria: FilterCriteria,
    settings: FilterSettings = DEFAULT_FILTER_SETTINGS,
) -> list[Venue]:
    """
    Return the visible subset of *venues* for *criteria*.

    Pure and order-preserving: no clock, network or cached state is consulted,
    so calling it again on its own output with the same criteria is a no-op.
    """
    return [venue for venue in venues if venue_matches(venue, criteria, settings)]


def venue_distance_km(venue: Venue, position: Coordinate | None) -> float | None:
    """Distance from *position* to the venue, or None when either side lacks coordinates."""
    if position is None or venue.latitude is None or venue.longitude is None:
        return None
    return haversine_km(position.latitude, position.longitude, venue.latitude, venue.longitude)
