"""
Per-criterion venue predicates.

Each predicate is total: it never raises, and it matches everything when its
criterion is in the neutral state ("Allt", empty text, 0, unlimited, flag off).
A predicate whose venue field is missing does not exclude the venue unless the
criterion says otherwise (non-empty search, happy hour, open now).
"""
from __future__ import annotations

import math
import re
from datetime import time

from .config import DEFAULT_FILTER_SETTINGS, FilterSettings
from .distance import haversine_km
from .models import Coordinate, Region, Venue

_LEADING_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+(?:[.,]\d*)?|[.,]\d+))")
_HOURS_RE = re.compile(r"^\s*(\d{1,2})[:.](\d{2})\s*[-–]\s*(\d{1,2})[:.](\d{2})\s*$")


def _is_neutral(selection: str | None, settings: FilterSettings) -> bool:
    return selection is None or selection == settings.any_value


def region_of(latitude: float | None) -> Region:
    """Negative latitude is southern; anything else, including unknown, is northern."""
    if latitude is not None and latitude < 0:
        return Region.southern
    return Region.northern


def parse_rating(rating: str | None) -> float:
    """Return the leading number of a ``"4.6/5"`` style rating, or 0 when there is none."""
    if not rating:
        return 0.0
    match = _LEADING_NUMBER_RE.match(str(rating))
    if not match:
        return 0.0
    value = float(match.group(1).replace(",", "."))
    return value if math.isfinite(value) else 0.0


def parse_opening_hours(text: str | None) -> tuple[int, int] | None:
    """Parse ``"HH:MM-HH:MM"`` into (start, end) minutes of day, or None."""
    if not text:
        return None
    match = _HOURS_RE.match(text)
    if not match:
        return None
    h1, m1, h2, m2 = (int(g) for g in match.groups())
    if h1 > 24 or h2 > 24 or m1 > 59 or m2 > 59:
        return None
    return h1 * 60 + m1, h2 * 60 + m2


def matches_region(venue: Venue, region: Region) -> bool:
    return region_of(venue.latitude) == region


def matches_search(venue: Venue, term: str | None) -> bool:
    if not term:
        return True
    if not venue.name:
        return False
    return term.lower() in venue.name.lower()


def matches_mood(venue: Venue, mood: str | None, settings: FilterSettings = DEFAULT_FILTER_SETTINGS) -> bool:
    if _is_neutral(mood, settings) or venue.mood_tags is None:
        return True
    return mood.lower() in venue.mood_tags.lower()


def matches_category(
    venue: Venue, category: str | None, settings: FilterSettings = DEFAULT_FILTER_SETTINGS
) -> bool:
    if _is_neutral(category, settings) or venue.category is None:
        return True
    return venue.category == category


def matches_price(venue: Venue, price: str | None, settings: FilterSettings = DEFAULT_FILTER_SETTINGS) -> bool:
    if _is_neutral(price, settings) or venue.price_tier is None:
        return True
    return price.lower() in venue.price_tier.lower()


def matches_min_rating(venue: Venue, threshold: float) -> bool:
    if threshold == 0:
        return True
    return parse_rating(venue.rating) >= threshold


def matches_happy_hour(
    venue: Venue, happy_hour_only: bool, settings: FilterSettings = DEFAULT_FILTER_SETTINGS
) -> bool:
    if not happy_hour_only:
        return True
    value = (venue.happy_hour_time or "").strip()
    return bool(value) and value != settings.no_happy_hour


def matches_open_now(
    venue: Venue,
    open_now_only: bool,
    now: time | None,
    settings: FilterSettings = DEFAULT_FILTER_SETTINGS,
) -> bool:
    if not open_now_only:
        return True
    if now is None:
        return False
    hours = (venue.opening_hours or "").strip()
    if hours.lower() in settings.closed_markers:
        return False
    interval = parse_opening_hours(hours)
    if interval is None:
        return False

    start, end = interval
    minute = now.hour * 60 + now.minute
    if start <= end:
        return start <= minute <= end
    # Interval runs past midnight, e.g. 18:00-02:00
    return minute >= start or minute <= end


def matches_max_distance(
    venue: Venue,
    region: Region,
    max_distance_km: float,
    user_position: Coordinate | None,
    settings: FilterSettings = DEFAULT_FILTER_SETTINGS,
) -> bool:
    if (
        user_position is None
        or region != settings.distance_region
        or venue.latitude is None
        or venue.longitude is None
        or max_distance_km >= settings.unlimited_distance_km
    ):
        return True
    distance = haversine_km(
        user_position.latitude, user_position.longitude, venue.latitude, venue.longitude
    )
    return distance <= max_distance_km
