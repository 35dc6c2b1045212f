"""
YouTube Provider - cooking video lookup

Tertiary, best-effort provider: it decorates a recipe with related videos and
never fails the request. It shares the breaker mechanism with the recipe
providers: a quota error trips the ``youtube`` breaker, and while that flag
is set no search is sent.
"""

import logging
from typing import Any, Optional

import httpx

from recipe_synthesis.clients.http import create_http_client
from recipe_synthesis.models.domain import VideoReference
from recipe_synthesis.resilience.metrics import record_provider_attempt
from recipe_synthesis.resilience.timeouts import OperationTimeoutError, run_with_timeout
from recipe_synthesis.services.quota import QuotaGovernor

logger = logging.getLogger(__name__)

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
WATCH_URL = "https://www.youtube.com/watch?v="
DEFAULT_MAX_RESULTS = 3


class MediaLookupError(Exception):
    """Search failed; ``quota`` marks quota exhaustion."""

    def __init__(self, message: str, quota: bool = False) -> None:
        super().__init__(message)
        self.quota = quota


class YouTubeMediaProvider:
    """
    Video search with breaker protection.

    Attributes:
        provider_id: Breaker identifier ("youtube")
    """

    provider_id = "youtube"

    def __init__(
        self,
        quota: QuotaGovernor,
        api_key: Optional[str] = None,
        api_base: str = YOUTUBE_API_BASE,
        timeout_seconds: float = 10.0,
        breaker_ttl_seconds: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._quota = quota
        self._api_key = api_key or ""
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout_seconds
        self._breaker_ttl = breaker_ttl_seconds
        self._client = client or create_http_client(timeout_seconds=timeout_seconds)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def find_videos(
        self, query: str, max_results: int = DEFAULT_MAX_RESULTS
    ) -> list[VideoReference]:
        """
        Search for embeddable videos matching ``query``.

        Returns:
            Up to ``max_results`` videos; an empty list on any failure, when
            unconfigured, or while the breaker is open
        """
        if not self.is_configured:
            logger.debug("YouTube API key not configured; skipping video lookup")
            return []

        if await self._quota.is_breaker_open(self.provider_id):
            logger.info("YouTube breaker open; skipping video lookup")
            record_provider_attempt(self.provider_id, "skipped")
            return []

        try:
            items = await run_with_timeout(
                self._search(query, max_results), self._timeout, operation="youtube search"
            )
            videos = [video for video in (self.map_item(item) for item in items) if video]
        except MediaLookupError as e:
            record_provider_attempt(self.provider_id, "quota_exceeded" if e.quota else "transient")
            if e.quota:
                await self._quota.trip_breaker(self.provider_id, self._breaker_ttl)
            logger.warning(f"YouTube lookup failed: {e}")
            return []
        except OperationTimeoutError as e:
            record_provider_attempt(self.provider_id, "transient")
            logger.warning(f"YouTube lookup failed: {e}")
            return []
        except Exception:
            record_provider_attempt(self.provider_id, "transient")
            logger.exception("Unexpected error during YouTube lookup")
            return []

        record_provider_attempt(self.provider_id, "success")
        return videos

    async def _search(self, query: str, max_results: int) -> list[dict[str, Any]]:
        try:
            response = await self._client.get(
                f"{self._api_base}/search",
                params={
                    "part": "snippet",
                    "maxResults": max_results,
                    "q": query,
                    "type": "video",
                    "videoEmbeddable": "true",
                    "key": self._api_key,
                },
            )
        except httpx.HTTPError as e:
            raise MediaLookupError(f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            message = self._error_message(response)
            raise MediaLookupError(
                f"YouTube API error ({response.status_code}): {message}",
                quota=response.status_code == 403 and "quota" in message.lower(),
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MediaLookupError(f"Non-JSON body: {e}") from e
        items = data.get("items") if isinstance(data, dict) else None
        return items if isinstance(items, list) else []

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return response.text[:200]

    @staticmethod
    def map_item(item: Any) -> Optional[VideoReference]:
        """Map a search item to a VideoReference; None for unusable items."""
        if not isinstance(item, dict) or not isinstance(item.get("id"), dict):
            return None
        video_id = item["id"].get("videoId")
        if not video_id or not isinstance(video_id, str):
            return None
        snippet = item.get("snippet")
        if not isinstance(snippet, dict):
            snippet = {}
        thumbnails = snippet.get("thumbnails")
        if not isinstance(thumbnails, dict):
            thumbnails = {}
        best = thumbnails.get("high") or thumbnails.get("default")
        thumbnail = best.get("url") if isinstance(best, dict) else None
        return VideoReference(
            video_id=video_id,
            title=str(snippet.get("title") or ""),
            thumbnail=str(thumbnail or ""),
            channel_title=str(snippet.get("channelTitle") or ""),
            url=f"{WATCH_URL}{video_id}",
        )
