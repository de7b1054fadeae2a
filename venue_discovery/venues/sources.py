"""Read-only venue sources: a Supabase table or a local CSV export."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Protocol

import pandas as pd
from supabase import Client, create_client

from .config import DEFAULT_SOURCE_CONFIG, SourceConfig

logger = logging.getLogger(__name__)

_client: Client | None = None


class VenueSource(Protocol):
    async def fetch_all(self) -> list[dict[str, Any]]:
        """Return every raw venue record, unordered."""
        ...


def get_supabase(config: SourceConfig = DEFAULT_SOURCE_CONFIG) -> Client:
    """Return a shared Supabase client instance (lazy-init)."""
    global _client
    if _client is None:
        if not config.supabase_url or not config.supabase_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set in .env")
        _client = create_client(config.supabase_url, config.supabase_key)
        logger.info("Supabase client initialized for %s", config.supabase_url)
    return _client


class SupabaseVenueSource:
    def __init__(self, config: SourceConfig = DEFAULT_SOURCE_CONFIG) -> None:
        self.config = config

    def _fetch(self) -> list[dict[str, Any]]:
        response = get_supabase(self.config).table(self.config.table).select("*").execute()
        return list(response.data or [])

    async def fetch_all(self) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._fetch)


class CsvVenueSource:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _fetch(self) -> list[dict[str, Any]]:
        df = pd.read_csv(self.path)
        return df.to_dict("records")

    async def fetch_all(self) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._fetch)


def build_venue_source(config: SourceConfig = DEFAULT_SOURCE_CONFIG) -> VenueSource | None:
    """Pick Supabase when credentials are configured, else the CSV export if it exists."""
    if config.supabase_url and config.supabase_key:
        return SupabaseVenueSource(config)
    if config.csv_path.is_file():
        return CsvVenueSource(config.csv_path)
    logger.warning(
        "No venue source configured (no Supabase credentials, %s missing)", config.csv_path
    )
    return None
