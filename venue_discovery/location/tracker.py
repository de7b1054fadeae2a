from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable

from ..venues.models import Coordinate
from .sources import LocationUnavailable, PositionSource

logger = logging.getLogger(__name__)

Listener = Callable[[Coordinate], None]


class LocationStatus(str, Enum):
    pending = "pending"
    resolved = "resolved"
    unavailable = "unavailable"


class LocationTracker:
    """
    Best-effort holder of the latest user coordinate.

    ``start()`` consumes the source in a background task; every new fix is
    stored and pushed to subscribers. Use ``async with tracker:`` to guarantee
    the task is cancelled and no listener fires after teardown.
    """

    def __init__(self, source: PositionSource | None) -> None:
        self.source = source
        self._status = LocationStatus.pending
        self._coordinate: Coordinate | None = None
        self._listeners: list[Listener] = []
        self._task: asyncio.Task | None = None
        self._stopped = False

    @property
    def status(self) -> LocationStatus:
        return self._status

    @property
    def coordinate(self) -> Coordinate | None:
        return self._coordinate

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for new fixes. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, coordinate: Coordinate) -> None:
        self._coordinate = coordinate
        self._status = LocationStatus.resolved
        for listener in list(self._listeners):
            if self._stopped:
                return
            try:
                listener(coordinate)
            except Exception:
                logger.warning("Location listener failed", exc_info=True)

    async def _run(self) -> None:
        try:
            async for coordinate in self.source.watch():
                if self._stopped:
                    return
                self._publish(coordinate)
        except LocationUnavailable as exc:
            logger.info("Location unavailable: %s", exc)
        except Exception:
            logger.warning("Position source failed", exc_info=True)

        if self._coordinate is None:
            self._status = LocationStatus.unavailable

    async def start(self) -> None:
        if self._task is not None:
            return
        self._stopped = False
        # A restart begins a fresh acquisition
        self._status = LocationStatus.pending
        self._coordinate = None
        if self.source is None:
            self._status = LocationStatus.unavailable
            return
        self._task = asyncio.create_task(self._run())

    async def wait(self) -> None:
        """Block until the source is exhausted (one-shot sources finish quickly)."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def stop(self) -> None:
        """Cancel acquisition. Subscribers stay registered but receive nothing until restarted."""
        self._stopped = True
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self) -> "LocationTracker":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
