"""YouTube Data API v3 catalog.

Keyword search is a two-step lookup: ``search`` returns video ids, then
``videos`` returns durations and snippets for those ids. Videos whose length
cannot be determined are dropped before they reach the fitter.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from trip_tunes.catalog.duration import parse_iso8601_duration
from trip_tunes.db.models import VideoItem
from trip_tunes.exceptions import CatalogUnavailableError

logger = logging.getLogger(__name__)

API_BASE_URL = "https://www.googleapis.com/youtube/v3"
MUSIC_CATEGORY_ID = "10"
DEFAULT_MAX_RESULTS = 50


class CatalogProvider(Protocol):
    """Anything that turns keywords into candidate videos."""

    async def search(self, keywords: str) -> list[VideoItem]: ...


class YouTubeCatalog:
    """Searches the music category of YouTube for candidate videos."""

    def __init__(
        self,
        api_key: str,
        *,
        client: httpx.AsyncClient | None = None,
        max_results: int = DEFAULT_MAX_RESULTS,
        timeout: float = 15.0,
    ) -> None:
        self._api_key = api_key
        self._client = client
        self._max_results = max_results
        self._timeout = timeout

    async def search(self, keywords: str) -> list[VideoItem]:
        """Return videos matching ``keywords`` that have a known duration.

        Raises:
            CatalogUnavailableError: On a missing key, HTTP error status or
                transport failure.
        """
        if not self._api_key:
            raise CatalogUnavailableError("YouTube API key is not set.")

        if self._client is not None:
            return await self._search(self._client, keywords)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._search(client, keywords)

    async def _search(
        self, client: httpx.AsyncClient, keywords: str
    ) -> list[VideoItem]:
        search_data = await self._get(
            client,
            "/search",
            {
                "part": "snippet",
                "maxResults": self._max_results,
                "q": keywords,
                "type": "video",
                "videoCategoryId": MUSIC_CATEGORY_ID,
            },
            what="search",
        )
        video_ids = [
            item["id"]["videoId"]
            for item in search_data.get("items", [])
            if item.get("id", {}).get("videoId")
        ]
        if not video_ids:
            logger.info("No videos found for keywords %r", keywords)
            return []

        videos_data = await self._get(
            client,
            "/videos",
            {"part": "contentDetails,snippet", "id": ",".join(video_ids)},
            what="video details",
        )
        items = [self._to_item(raw) for raw in videos_data.get("items", [])]
        usable = [item for item in items if item.duration_seconds > 0]
        logger.info(
            "Catalog returned %d videos for %r (%d with a known duration)",
            len(items), keywords, len(usable),
        )
        return usable

    async def _get(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: dict[str, Any],
        *,
        what: str,
    ) -> dict[str, Any]:
        url = f"{API_BASE_URL}{path}"
        try:
            response = await client.get(url, params={**params, "key": self._api_key})
        except httpx.HTTPError as exc:
            logger.error("YouTube %s request failed: %s", what, exc)
            raise CatalogUnavailableError(
                f"Could not reach YouTube ({what}): {exc}"
            ) from exc

        if response.is_error:
            detail = _error_message(response)
            logger.error(
                "YouTube %s API error %d: %s", what, response.status_code, detail
            )
            raise CatalogUnavailableError(
                f"YouTube {what} API error: {detail}. "
                "Check the API key's quota and permissions."
            )
        return response.json()

    @staticmethod
    def _to_item(raw: dict[str, Any]) -> VideoItem:
        snippet = raw.get("snippet", {})
        thumbnails = snippet.get("thumbnails", {})
        return VideoItem(
            id=raw["id"],
            title=snippet.get("title", ""),
            duration_seconds=parse_iso8601_duration(
                raw.get("contentDetails", {}).get("duration")
            ),
            thumbnail_url=thumbnails.get("default", {}).get("url", ""),
            channel_title=snippet.get("channelTitle", ""),
        )


def _error_message(response: httpx.Response) -> str:
    """Pull ``error.message`` out of an API error body, falling back to the reason."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict):
        message = body.get("error", {}).get("message")
        if message:
            return message
    return response.reason_phrase
