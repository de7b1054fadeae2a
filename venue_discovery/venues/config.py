from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .models import ANY_VALUE, NO_HAPPY_HOUR, UNLIMITED_DISTANCE_KM, Region

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class SourceConfig:
    """
    Where the venue collection is fetched from.

    Supabase wins when both credentials are set; otherwise the CSV export is used.
    """

    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_key: str = os.getenv("SUPABASE_KEY", "")
    table: str = os.getenv("VENUES_TABLE", "restaurants")
    csv_path: Path = Path(os.getenv("VENUES_CSV", "data/venues.csv"))


@dataclass(frozen=True)
class FilterSettings:
    any_value: str = ANY_VALUE
    unlimited_distance_km: float = UNLIMITED_DISTANCE_KM
    # Distance filtering only makes sense where the user actually is.
    distance_region: Region = Region.northern
    no_happy_hour: str = NO_HAPPY_HOUR
    closed_markers: tuple[str, ...] = ("lokað", "closed")


DEFAULT_SOURCE_CONFIG = SourceConfig()
DEFAULT_FILTER_SETTINGS = FilterSettings()

REGION_LABELS: dict[Region, str] = {
    Region.northern: "Ísland",
    Region.southern: "Bali",
}
MOOD_OPTIONS = [ANY_VALUE, "Rómantík", "Viðskipti", "Vini", "Fjölskylda", "Skyndibiti"]
PRICE_OPTIONS = [ANY_VALUE, "Lágt", "Miðlungs", "Dýrt"]
RATING_THRESHOLDS = [0, 4, 4.5]
MIN_DISTANCE_KM = 1
