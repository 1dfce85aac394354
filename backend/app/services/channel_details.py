import logging
from typing import Any

try:
    from backend.app.services import youtube_api
    from backend.app.services.models import CandidateChannel, Channel
except ModuleNotFoundError:
    from app.services import youtube_api
    from app.services.models import CandidateChannel, Channel

logger = logging.getLogger(__name__)

SEARCH_MAX_RESULTS = 10


def safe_int(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def best_thumbnail_url(thumbnails: dict | None, keys=("high", "medium", "default")) -> str | None:
    thumbnails = thumbnails or {}
    for key in keys:
        t = thumbnails.get(key)
        if t and t.get("url"):
            return t["url"]
    return None


def build_channel(item: dict[str, Any]) -> Channel:
    snippet = item.get("snippet") or {}
    statistics = item.get("statistics") or {}
    uploads = ((item.get("contentDetails") or {}).get("relatedPlaylists") or {}).get("uploads")
    return Channel(
        channel_id=item["id"],
        handle=snippet.get("customUrl") or None,
        title=snippet.get("title") or "",
        thumbnail_url=best_thumbnail_url(snippet.get("thumbnails")),
        video_count=safe_int(statistics.get("videoCount")),
        uploads_playlist_id=uploads or None,
    )


def build_candidate(item: dict[str, Any]) -> CandidateChannel | None:
    snippet = item.get("snippet") or {}
    channel_id = (item.get("id") or {}).get("channelId") or snippet.get("channelId")
    if not channel_id:
        return None
    return CandidateChannel(
        channel_id=channel_id,
        title=snippet.get("channelTitle") or snippet.get("title") or "",
        description=snippet.get("description") or "",
        thumbnail_url=best_thumbnail_url(snippet.get("thumbnails"), keys=("default", "medium", "high")),
    )


def fetch_channel_details(channel_id: str) -> Channel | None:
    payload = youtube_api.youtube_api_get(
        youtube_api.YOUTUBE_CHANNELS_LIST,
        {
            "part": "snippet,statistics,contentDetails",
            "id": channel_id,
        },
    )
    items = payload.get("items") or []
    if not items:
        logger.info("No channel found for id %s", channel_id)
        return None
    return build_channel(items[0])


def fetch_channel_id_for_handle(handle: str) -> str | None:
    payload = youtube_api.youtube_api_get(
        youtube_api.YOUTUBE_CHANNELS_LIST,
        {
            "part": "id",
            "forHandle": handle,
            "maxResults": 1,
        },
    )
    items = payload.get("items") or []
    if items and items[0].get("id"):
        return items[0]["id"]
    return None


def search_channels(query: str, max_results: int = SEARCH_MAX_RESULTS) -> list[CandidateChannel]:
    payload = youtube_api.youtube_api_get(
        youtube_api.YOUTUBE_SEARCH_LIST,
        {
            "part": "snippet",
            "type": "channel",
            "q": query,
            "maxResults": max_results,
        },
    )
    candidates = []
    for item in payload.get("items") or []:
        candidate = build_candidate(item)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def fetch_video_channel_id(video_id: str) -> str | None:
    payload = youtube_api.youtube_api_get(
        youtube_api.YOUTUBE_VIDEOS_LIST,
        {
            "part": "snippet",
            "id": video_id,
        },
    )
    items = payload.get("items") or []
    if not items:
        return None
    return (items[0].get("snippet") or {}).get("channelId")
