import asyncio
from unittest.mock import patch

import httpx

from venue_discovery.location.config import LocationConfig
from venue_discovery.location.sources import (
    IpPositionSource,
    LocationUnavailable,
    StaticPositionSource,
    build_position_source,
)
from venue_discovery.location.tracker import LocationStatus, LocationTracker
from venue_discovery.venues.models import Coordinate

REYKJAVIK = Coordinate(latitude=64.1466, longitude=-21.9426)
AKUREYRI = Coordinate(latitude=65.6885, longitude=-18.1262)


class ScriptedSource:
    """Yields the given coordinates, then optionally raises or hangs."""

    def __init__(self, coordinates, error=None, hang=False):
        self.coordinates = coordinates
        self.error = error
        self.hang = hang

    async def watch(self):
        for c in self.coordinates:
            yield c
            await asyncio.sleep(0)
        if self.error:
            raise self.error
        if self.hang:
            await asyncio.Event().wait()


def test_starts_pending():
    tracker = LocationTracker(StaticPositionSource(REYKJAVIK))
    assert tracker.status == LocationStatus.pending
    assert tracker.coordinate is None


def test_static_source_resolves():
    async def run():
        async with LocationTracker(StaticPositionSource(REYKJAVIK)) as tracker:
            await tracker.wait()
            return tracker.status, tracker.coordinate

    status, coordinate = asyncio.run(run())
    assert status == LocationStatus.resolved
    assert coordinate == REYKJAVIK


def test_no_source_is_unavailable():
    async def run():
        async with LocationTracker(None) as tracker:
            return tracker.status

    assert asyncio.run(run()) == LocationStatus.unavailable


def test_denied_source_is_unavailable():
    async def run():
        tracker = LocationTracker(ScriptedSource([], error=LocationUnavailable("denied")))
        async with tracker:
            await tracker.wait()
            return tracker.status, tracker.coordinate

    assert asyncio.run(run()) == (LocationStatus.unavailable, None)


def test_failure_after_fix_keeps_last_coordinate():
    async def run():
        tracker = LocationTracker(ScriptedSource([REYKJAVIK], error=RuntimeError("gps lost")))
        async with tracker:
            await tracker.wait()
            return tracker.status, tracker.coordinate

    assert asyncio.run(run()) == (LocationStatus.resolved, REYKJAVIK)


def test_continuous_updates_notify_subscribers():
    seen = []

    async def run():
        tracker = LocationTracker(ScriptedSource([REYKJAVIK, AKUREYRI]))
        tracker.subscribe(seen.append)
        async with tracker:
            await tracker.wait()
            return tracker.coordinate

    assert asyncio.run(run()) == AKUREYRI
    assert seen == [REYKJAVIK, AKUREYRI]


def test_unsubscribe_stops_notifications():
    seen = []

    async def run():
        tracker = LocationTracker(ScriptedSource([REYKJAVIK]))
        unsubscribe = tracker.subscribe(seen.append)
        unsubscribe()
        unsubscribe()  # second call is harmless
        async with tracker:
            await tracker.wait()

    asyncio.run(run())
    assert seen == []


def test_stop_cancels_hanging_source():
    seen = []

    async def run():
        tracker = LocationTracker(ScriptedSource([REYKJAVIK], hang=True))
        tracker.subscribe(seen.append)
        async with tracker:
            for _ in range(5):
                await asyncio.sleep(0)
        tracker._publish(AKUREYRI)
        return tracker

    tracker = asyncio.run(run())
    assert seen == [REYKJAVIK]
    assert tracker._task is None


def test_stop_keeps_other_subscribers_and_restart_resets_state():
    first, second = [], []

    async def run():
        tracker = LocationTracker(ScriptedSource([REYKJAVIK]))
        tracker.subscribe(first.append)
        tracker.subscribe(second.append)
        async with tracker:
            await tracker.wait()
        statuses = [tracker.status]

        tracker.source = ScriptedSource([AKUREYRI])
        await tracker.start()
        statuses.append(tracker.status)
        coordinate_after_restart = tracker.coordinate
        await tracker.wait()
        statuses.append(tracker.status)
        await tracker.stop()
        return statuses, coordinate_after_restart

    statuses, coordinate_after_restart = asyncio.run(run())
    assert statuses == [LocationStatus.resolved, LocationStatus.pending, LocationStatus.resolved]
    assert coordinate_after_restart is None
    assert first == [REYKJAVIK, AKUREYRI]
    assert second == [REYKJAVIK, AKUREYRI]


def test_restart_after_denial_reports_unavailable_not_stale_fix():
    async def run():
        tracker = LocationTracker(StaticPositionSource(REYKJAVIK))
        async with tracker:
            await tracker.wait()
        tracker.source = ScriptedSource([], error=LocationUnavailable("denied"))
        async with tracker:
            await tracker.wait()
            return tracker.status, tracker.coordinate

    assert asyncio.run(run()) == (LocationStatus.unavailable, None)


def test_failing_listener_does_not_break_tracking():
    seen = []

    def broken(_):
        raise ValueError("presenter gone")

    async def run():
        tracker = LocationTracker(ScriptedSource([REYKJAVIK, AKUREYRI]))
        tracker.subscribe(broken)
        tracker.subscribe(seen.append)
        async with tracker:
            await tracker.wait()

    asyncio.run(run())
    assert seen == [REYKJAVIK, AKUREYRI]


# ── IP geolocation ───────────────────────────────────────────────────────


def test_ip_source_parses_payload():
    def handler(request):
        return httpx.Response(200, json={"latitude": 64.1466, "longitude": -21.9426})

    async def run():
        real_client = httpx.AsyncClient
        transport = httpx.MockTransport(handler)
        with patch(
            "venue_discovery.location.sources.httpx.AsyncClient",
            lambda **kw: real_client(transport=transport, **kw),
        ):
            async with LocationTracker(IpPositionSource("https://geo.example/json/")) as tracker:
                await tracker.wait()
                return tracker.status, tracker.coordinate

    assert asyncio.run(run()) == (LocationStatus.resolved, REYKJAVIK)


def test_ip_source_http_error_is_unavailable():
    def handler(request):
        return httpx.Response(429, json={"error": True})

    async def run():
        real_client = httpx.AsyncClient
        transport = httpx.MockTransport(handler)
        with patch(
            "venue_discovery.location.sources.httpx.AsyncClient",
            lambda **kw: real_client(transport=transport, **kw),
        ):
            async with LocationTracker(IpPositionSource("https://geo.example/json/")) as tracker:
                await tracker.wait()
                return tracker.status

    assert asyncio.run(run()) == LocationStatus.unavailable


def test_build_position_source():
    assert build_position_source(LocationConfig(mode="off")) is None
    assert build_position_source(LocationConfig(mode="static", latitude=None, longitude=None)) is None

    static = build_position_source(LocationConfig(mode="static", latitude=64.1, longitude=-21.9))
    assert isinstance(static, StaticPositionSource)
    assert static.coordinate == Coordinate(latitude=64.1, longitude=-21.9)

    ip = build_position_source(LocationConfig(mode="ip", poll_interval=30.0))
    assert isinstance(ip, IpPositionSource)
    assert ip.interval == 30.0
