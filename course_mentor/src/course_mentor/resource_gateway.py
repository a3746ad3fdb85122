"""
Resource Fetch Gateway

Wraps the external video search provider (YouTube Data API) behind a
failure-contained async call. Provider errors never reach the caller: the
gateway logs them and returns an empty list.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from course_mentor.config import DEFAULT_YOUTUBE_API_BASE_URL

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 10


class ResourceType(str, Enum):
    VIDEO = "video"
    MATERIAL = "material"
    QUIZ = "quiz"


@dataclass(frozen=True)
class ResourceItem:
    """A recommended artifact attached to a response (display hint only)."""
    type: ResourceType
    title: str
    description: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.type.value, "title": self.title}
        if self.description is not None:
            data["description"] = self.description
        if self.url is not None:
            data["url"] = self.url
        return data


class VideoSearchError(Exception):
    """Provider-level failure (non-2xx status or malformed payload)."""


class YouTubeSearchProvider:
    """
    Video search against the YouTube Data API v3.

    Returns plain dicts {title, description, url} in provider order.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_YOUTUBE_API_BASE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

        if not self.api_key:
            logger.warning("⚠️ [YouTubeSearch] YOUTUBE_API_KEY not set - video search disabled")

    def search(self, query: str, max_results: int = 5) -> List[Dict[str, str]]:
        """
        Search for videos.

        Args:
            query: Free-text search query
            max_results: Provider-side result cap

        Returns:
            List of {title, description, url}

        Raises:
            VideoSearchError: On non-2xx responses or unexpected payloads
            requests.RequestException: On transport errors
        """
        if not self.api_key:
            return []

        response = self.http.get(
            f"{self.base_url}/search",
            params={
                "part": "snippet",
                "q": query,
                "type": "video",
                "maxResults": max_results,
                "key": self.api_key,
            },
            timeout=self.timeout,
        )

        if not response.ok:
            raise VideoSearchError(f"YouTube API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise VideoSearchError(f"YouTube API returned invalid JSON: {e}") from e

        items = (data.get("items") or []) if isinstance(data, dict) else []
        return [video for video in (self._parse_item(item) for item in items) if video]

    @staticmethod
    def _parse_item(item: Dict[str, Any]) -> Optional[Dict[str, str]]:
        snippet = item.get("snippet") or {}
        video_id = (item.get("id") or {}).get("videoId")
        title = snippet.get("title")
        if not video_id or not title:
            return None
        return {
            "title": title,
            "url": f"https://www.youtube.com/watch?v={video_id}",
            "description": snippet.get("description") or f"Tutorial by {snippet.get('channelTitle', 'YouTube')}",
        }


class ResourceFetchGateway:
    """
    Failure-contained video lookup used by the response synthesizer.

    The provider only needs a `search(query, max_results)` method; it may be
    blocking (run in a worker thread) or a coroutine function.
    """

    def __init__(self, provider: Any = None):
        self.provider = provider

    async def search_videos(self, query: str, limit: int = 5) -> List[ResourceItem]:
        """
        Search videos for `query`.

        Never raises. Results keep provider order and are truncated to
        `limit` (clamped into 1..10).

        Args:
            query: Free-text search query
            limit: Maximum number of results

        Returns:
            List of video ResourceItems (empty on any failure)
        """
        if self.provider is None or not query or not query.strip():
            return []

        try:
            limit = max(1, min(MAX_SEARCH_RESULTS, int(limit)))
        except (TypeError, ValueError):
            limit = MAX_SEARCH_RESULTS

        try:
            if inspect.iscoroutinefunction(self.provider.search):
                raw = await self.provider.search(query, limit)
            else:
                raw = await asyncio.to_thread(self.provider.search, query, limit)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"⚠️ [ResourceGateway] Video search failed for {query!r}: {e}")
            return []

        resources = []
        for video in raw or []:
            item = self._to_resource(video)
            if item is not None:
                resources.append(item)
            if len(resources) >= limit:
                break

        logger.info(f"🎥 [ResourceGateway] {len(resources)} videos for {query!r}")
        return resources

    @staticmethod
    def _to_resource(video: Any) -> Optional[ResourceItem]:
        if isinstance(video, ResourceItem):
            return video
        if not isinstance(video, dict) or not video.get("title"):
            return None
        return ResourceItem(
            type=ResourceType.VIDEO,
            title=str(video["title"]),
            description=str(video.get("description") or ""),
            url=video.get("url"),
        )
