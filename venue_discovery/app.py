from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException

from .location.sources import build_position_source
from .location.tracker import LocationTracker
from .presentation.presenters import build_views, focus_command
from .venues.config import (
    DEFAULT_FILTER_SETTINGS,
    MIN_DISTANCE_KM,
    MOOD_OPTIONS,
    PRICE_OPTIONS,
    RATING_THRESHOLDS,
    REGION_LABELS,
)
from .venues.data_store import get_store
from .venues.engine import filter_venues, with_context
from .venues.models import (
    FocusCommand,
    LocationOut,
    SearchRequest,
    SearchResponse,
)
from .venues.sources import build_venue_source

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

tracker = LocationTracker(build_position_source())


@asynccontextmanager
async def lifespan(app: FastAPI):
    count = await get_store().load(build_venue_source())
    logger.info("Startup: %d venues available", count)
    async with tracker:
        yield


app = FastAPI(title="Venue Discovery API", version="1.0.0", lifespan=lifespan)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    settings = DEFAULT_FILTER_SETTINGS
    return {
        "regions": [{"id": r.value, "label": label} for r, label in REGION_LABELS.items()],
        "categories": [settings.any_value] + get_store().categories(),
        "moods": MOOD_OPTIONS,
        "prices": PRICE_OPTIONS,
        "rating_thresholds": RATING_THRESHOLDS,
        "distance": {
            "min_km": MIN_DISTANCE_KM,
            "max_km": settings.unlimited_distance_km,
            "region": settings.distance_region.value,
        },
    }


@app.post("/venues/search", response_model=SearchResponse)
def search_venues(body: SearchRequest) -> SearchResponse:
    # Fall back to the server-side fix when the client sends none
    criteria = with_context(body, tracker.coordinate, datetime.now().time())

    store = get_store()
    visible = filter_venues(store.venues, criteria)
    views = build_views(visible, criteria.region, criteria.user_position)
    return SearchResponse(
        venues=[view.to_out() for view in views],
        visible=len(visible),
        total_venues=len(store.venues),
        user_position=criteria.user_position,
    )


@app.get("/venues/{venue_id}/focus", response_model=FocusCommand)
def focus_venue(venue_id: str) -> FocusCommand:
    venue = get_store().get_venue(venue_id)
    if venue is None:
        raise HTTPException(status_code=404, detail="Venue not found")
    command = focus_command(venue)
    if command is None:
        raise HTTPException(status_code=422, detail="Venue has no coordinates")
    return command


@app.get("/location", response_model=LocationOut)
def location() -> LocationOut:
    return LocationOut(status=tracker.status.value, coordinate=tracker.coordinate)
