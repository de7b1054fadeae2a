from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List

import pandas as pd

from .models import Venue

logger = logging.getLogger(__name__)

# Feed columns per canonical field, in priority order. The first non-empty
# value wins for each record, so rows may mix aliases.
FIELD_ALIASES: dict[str, List[str]] = {
    "id": ["id", "uuid"],
    "name": ["name", "title"],
    "latitude": ["lat", "latitude"],
    "longitude": ["lng", "lon", "longitude"],
    "category": ["category", "type"],
    "mood_tags": ["best for", "best_for", "mood"],
    "price_tier": ["price", "cost", "price_tier"],
    "rating": ["rating"],
    "opening_hours": ["opening hours", "opening_hours", "hours"],
    "happy_hour_time": ["happy hour time", "happy_hour_time", "happy_hour"],
    "review": ["reviews", "review"],
    "image": ["image", "image_url"],
}

_NUMERIC_FIELDS = {"latitude", "longitude"}


def _clean_text(value: Any) -> str | None:
    # Booleans carry no text, e.g. happy_hour=False means there is none
    if value is None or pd.api.types.is_bool(value):
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        # Numbers read from CSV come back as floats, e.g. a bare "4.5" rating
        if value.is_integer():
            value = int(value)
    text = str(value).strip()
    return text or None


def _coalesce(df: pd.DataFrame, columns: List[str]) -> pd.Series:
    """Per-row first non-empty value across *columns*; None when none is present."""
    result = pd.Series([None] * len(df), index=df.index, dtype=object)
    for col in reversed(columns):
        if col not in df.columns:
            continue
        values = df[col].astype(object)
        present = values.notna() & (values.astype(str).str.strip() != "")
        result = values.where(present, result)
    return result


def _clean_coordinate(value: Any) -> float | None:
    if value is None or value is pd.NA:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_records(records: Iterable[dict[str, Any]]) -> list[Venue]:
    """
    Normalize raw feed records into canonical Venues.

    Steps:
    - Resolve aliased columns per record (e.g. ``best for`` / ``mood``).
    - Coerce coordinates to floats, dropping invalid or non-finite values.
    - Strip text fields and map empty strings and NaN to None.
    - Fall back to a ``row-<position>`` id when none is present, skipping ids
      already used by other records.
    """
    rows = list(records)
    if not rows:
        return []

    df = pd.DataFrame.from_records(rows)
    canonical = pd.DataFrame(index=df.index)
    for field, aliases in FIELD_ALIASES.items():
        column = _coalesce(df, aliases)
        if field in _NUMERIC_FIELDS:
            column = pd.to_numeric(column, errors="coerce")
        canonical[field] = column

    cleaned_rows: list[dict[str, Any]] = []
    for record in canonical.astype(object).to_dict("records"):
        cleaned: dict[str, Any] = {}
        for field, value in record.items():
            if field in _NUMERIC_FIELDS:
                cleaned[field] = _clean_coordinate(value)
            else:
                cleaned[field] = _clean_text(None if value is pd.NA else value)
        cleaned_rows.append(cleaned)

    taken = {row["id"] for row in cleaned_rows if row["id"] is not None}
    for position, row in enumerate(cleaned_rows):
        if row["id"] is None:
            candidate = f"row-{position}"
            suffix = 1
            while candidate in taken:
                candidate = f"row-{position}-{suffix}"
                suffix += 1
            row["id"] = candidate
            taken.add(candidate)

    venues = [Venue(**row) for row in cleaned_rows]

    skipped = sum(1 for v in venues if v.latitude is None or v.longitude is None)
    if skipped:
        logger.info("%d of %d venues have no usable coordinates", skipped, len(venues))
    return venues
