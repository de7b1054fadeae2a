from __future__ import annotations

import logging
from typing import Iterable

from .models import Venue
from .normalize import normalize_records
from .sources import VenueSource

logger = logging.getLogger(__name__)


class VenueStore:
    """
    Holds the current venue collection.

    The collection is an immutable tuple replaced wholesale on every load;
    a failed load leaves the previous collection (initially empty) in place.
    """

    def __init__(self, venues: Iterable[Venue] = ()) -> None:
        self._venues: tuple[Venue, ...] = tuple(venues)

    @property
    def venues(self) -> tuple[Venue, ...]:
        return self._venues

    def replace(self, venues: Iterable[Venue]) -> None:
        self._venues = tuple(venues)

    def clear(self) -> None:
        self._venues = ()

    def get_venue(self, venue_id: str) -> Venue | None:
        for venue in self._venues:
            if venue.id == venue_id:
                return venue
        return None

    def categories(self) -> list[str]:
        return sorted({v.category for v in self._venues if v.category})

    async def load(self, source: VenueSource | None) -> int:
        """Fetch once from *source* and replace the collection. Returns the venue count."""
        if source is None:
            return len(self._venues)
        try:
            records = await source.fetch_all()
            venues = normalize_records(records)
        except Exception:
            logger.warning("Venue fetch failed, keeping current collection", exc_info=True)
            return len(self._venues)

        self.replace(venues)
        logger.info("Loaded %d venues from %s", len(venues), type(source).__name__)
        return len(venues)


_store: VenueStore | None = None


def get_store() -> VenueStore:
    """Return the process-wide venue store, creating it on first call."""
    global _store
    if _store is None:
        _store = VenueStore()
    return _store
