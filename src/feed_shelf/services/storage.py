# ABOUTME: Feed persistence through the Supabase PostgREST API.
# ABOUTME: Batch-inserts user-tagged feed records and lists them per user.

from typing import Any

import httpx
import structlog
from postgrest.exceptions import APIError
from supabase import AsyncClient

from feed_shelf.errors import UpstreamError
from feed_shelf.models import FeedRecord

log = structlog.get_logger()


class FeedStore:
    """Thin wrapper over the Supabase table holding feed records."""

    def __init__(self, client: AsyncClient, table: str = "feeds") -> None:
        self._client = client
        self._table = table

    async def insert_feeds(self, records: list[FeedRecord]) -> list[dict[str, Any]]:
        """Insert all records in a single call and return the stored rows."""
        rows = [record.to_row() for record in records]
        try:
            response = await self._client.table(self._table).insert(rows).execute()
        except (APIError, httpx.HTTPError) as e:
            log.error("feeds_insert_error", table=self._table, count=len(rows), error=str(e))
            raise UpstreamError(f"Failed to store feeds: {e}") from e

        log.info("feeds_stored", table=self._table, count=len(rows))
        return response.data

    async def list_feeds(self, user_id: str) -> list[dict[str, Any]]:
        """Return every stored row owned by user_id."""
        try:
            response = (
                await self._client.table(self._table).select("*").eq("user_id", user_id).execute()
            )
        except (APIError, httpx.HTTPError) as e:
            log.error("feeds_query_error", table=self._table, error=str(e))
            raise UpstreamError(f"Failed to load feeds: {e}") from e

        return response.data

    async def close(self) -> None:
        """Release the PostgREST HTTP session."""
        await self._client.postgrest.aclose()
        log.info("feed_store_closed")
