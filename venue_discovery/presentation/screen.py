from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable, Sequence

from ..location.tracker import LocationTracker
from ..venues.config import DEFAULT_FILTER_SETTINGS, FilterSettings
from ..venues.data_store import VenueStore
from ..venues.engine import filter_venues, with_context
from ..venues.models import Coordinate, FilterCriteria, FocusCommand, Venue
from ..venues.sources import VenueSource
from .presenters import Presenter, build_views, focus_command

logger = logging.getLogger(__name__)


class DiscoveryScreen:
    """
    Wires the venue store, location tracker and filter engine to presenters.

    Every change (criteria, venues, coordinate) re-runs the engine over the
    whole collection and pushes the result to all attached presenters.
    """

    def __init__(
        self,
        store: VenueStore,
        tracker: LocationTracker,
        presenters: Sequence[Presenter],
        settings: FilterSettings = DEFAULT_FILTER_SETTINGS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.tracker = tracker
        self.presenters = list(presenters)
        self.settings = settings
        self.clock = clock
        self.criteria = FilterCriteria()
        self.visible: list[Venue] = []
        self._disposed = False

    def effective_criteria(self) -> FilterCriteria:
        """Current criteria with the latest coordinate and the clock's time of day."""
        return with_context(self.criteria, self.tracker.coordinate, self.clock().time())

    def render(self) -> list[Venue]:
        if self._disposed:
            return self.visible
        criteria = self.effective_criteria()
        self.visible = filter_venues(self.store.venues, criteria, self.settings)
        views = build_views(self.visible, criteria.region, criteria.user_position, self.settings)
        for presenter in self.presenters:
            presenter.render(views)
        return self.visible

    def update(self, **changes) -> list[Venue]:
        """Replace the given criteria fields and re-render."""
        self.criteria = self.criteria.model_copy(update=changes)
        return self.render()

    def focus(self, venue_id: str) -> FocusCommand | None:
        venue = self.store.get_venue(venue_id)
        command = focus_command(venue) if venue is not None else None
        if command is None or self._disposed:
            return command
        for presenter in self.presenters:
            presenter.focus(command)
        return command

    def _on_location(self, coordinate: Coordinate) -> None:
        logger.debug("New location fix %s, re-rendering", coordinate)
        self.render()

    @asynccontextmanager
    async def open(self, source: VenueSource | None) -> AsyncIterator["DiscoveryScreen"]:
        """Load venues, start tracking and render; release everything on exit."""
        self._disposed = False
        unsubscribe = self.tracker.subscribe(self._on_location)
        try:
            await self.tracker.start()
            await self.store.load(source)
            self.render()
            yield self
        finally:
            unsubscribe()
            self._disposed = True
            await self.tracker.stop()
