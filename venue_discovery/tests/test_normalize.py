import math

from venue_discovery.venues.engine import filter_venues
from venue_discovery.venues.models import FilterCriteria
from venue_discovery.venues.normalize import normalize_records


def test_aliases_resolved_per_record():
    records = [
        {"id": 1, "name": "Sushi Bar", "lat": "64.14", "lng": "-21.93",
         "best for": "Vini", "price": "Miðlungs", "happy hour time": "Nei",
         "opening hours": "11:00-22:00", "reviews": "Great fish"},
        {"id": 2, "name": "Tapas Bar", "lat": -8.4, "lng": 115.19,
         "mood": "Rómantík", "cost": "Lágt", "review": "Olé"},
    ]
    first, second = normalize_records(records)

    assert first.id == "1"
    assert first.latitude == 64.14
    assert first.longitude == -21.93
    assert first.mood_tags == "Vini"
    assert first.price_tier == "Miðlungs"
    assert first.happy_hour_time == "Nei"
    assert first.opening_hours == "11:00-22:00"
    assert first.review == "Great fish"

    assert second.mood_tags == "Rómantík"
    assert second.price_tier == "Lágt"
    assert second.review == "Olé"
    assert second.happy_hour_time is None


def test_empty_alias_falls_back_to_next():
    (venue,) = normalize_records([{"name": "X", "best for": "  ", "mood": "Fjölskylda"}])
    assert venue.mood_tags == "Fjölskylda"


def test_invalid_coordinates_become_none():
    venues = normalize_records([
        {"id": "a", "lat": "not a number", "lng": "1"},
        {"id": "b", "lat": float("nan"), "lng": float("inf")},
        {"id": "c"},
    ])
    for venue in venues:
        assert venue.latitude is None or not math.isnan(venue.latitude)
        assert venue.latitude is None
    assert venues[0].longitude == 1.0
    assert venues[1].longitude is None


def test_text_is_stripped_and_blank_is_none():
    (venue,) = normalize_records([{"id": "x", "name": "  Kaffi  ", "category": ""}])
    assert venue.name == "Kaffi"
    assert venue.category is None


def test_numeric_rating_is_stringified():
    venues = normalize_records([{"id": "1", "rating": 4.5}, {"id": "2", "rating": "4.1/5"}])
    assert venues[0].rating == "4.5"
    assert venues[1].rating == "4.1/5"


def test_missing_id_uses_record_position():
    venues = normalize_records([{"name": "A"}, {"name": "B", "id": "b-1"}, {"name": "C"}])
    assert [v.id for v in venues] == ["row-0", "b-1", "row-2"]


def test_fallback_ids_never_collide_with_real_ids():
    venues = normalize_records([
        {"id": 1, "name": "Real one"},
        {"name": "No id"},
        {"id": "row-2", "name": "Awkward id"},
        {"name": "Also no id"},
    ])
    ids = [v.id for v in venues]
    assert len(set(ids)) == len(ids)
    assert ids[0] == "1"
    assert ids[1] == "row-1"
    assert ids[2] == "row-2"
    assert ids[3] == "row-3"


def test_fallback_id_skips_taken_position_id():
    venues = normalize_records([{"id": "row-1", "name": "A"}, {"name": "B"}])
    assert [v.id for v in venues] == ["row-1", "row-1-1"]


def test_boolean_happy_hour_means_none():
    venues = normalize_records([
        {"id": "a", "happy_hour": False},
        {"id": "b", "happy_hour": True},
        {"id": "c", "happy_hour": "16:00-18:00"},
    ])
    assert [v.happy_hour_time for v in venues] == [None, None, "16:00-18:00"]
    visible = filter_venues(venues, FilterCriteria(happy_hour_only=True))
    assert [v.id for v in visible] == ["c"]


def test_empty_feed():
    assert normalize_records([]) == []
