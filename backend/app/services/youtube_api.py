import logging
from typing import Any, Iterator

import requests

try:
    from backend.app import config
    from backend.app.services.errors import YouTubeApiError
except ModuleNotFoundError:
    from app import config
    from app.services.errors import YouTubeApiError

logger = logging.getLogger(__name__)

YOUTUBE_SEARCH_LIST = "https://www.googleapis.com/youtube/v3/search"
YOUTUBE_CHANNELS_LIST = "https://www.googleapis.com/youtube/v3/channels"
YOUTUBE_VIDEOS_LIST = "https://www.googleapis.com/youtube/v3/videos"
YOUTUBE_PLAYLISTS_LIST = "https://www.googleapis.com/youtube/v3/playlists"
YOUTUBE_PLAYLIST_ITEMS_LIST = "https://www.googleapis.com/youtube/v3/playlistItems"

# Page size for listings and the id batch limit of channels/videos lookups.
MAX_RESULTS_PER_PAGE = 50


def chunked(lst: list[str], n: int) -> Iterator[list[str]]:
    for i in range(0, len(lst), n):
        yield lst[i:i + n]


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return response.text
    reasons = [
        str(e.get("reason"))
        for e in error.get("errors") or []
        if isinstance(e, dict) and e.get("reason")
    ]
    message = str(error.get("message") or response.text)
    if reasons:
        return f"{message} (reason={','.join(reasons)})"
    return message


def youtube_api_get(url: str, params: dict[str, Any], timeout: int | None = None) -> dict[str, Any]:
    if not config.YOUTUBE_API_KEY:
        raise YouTubeApiError("YOUTUBE_API_KEY is not configured")

    merged = {key: value for key, value in params.items() if value is not None}
    merged["key"] = config.YOUTUBE_API_KEY
    try:
        response = requests.get(
            url,
            params=merged,
            timeout=timeout or config.YOUTUBE_API_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        logger.warning("YouTube request to %s failed: %s", url, exc)
        raise YouTubeApiError(f"YouTube is temporarily unavailable: {exc}") from exc

    if response.status_code == 200:
        try:
            return response.json()
        except ValueError as exc:
            raise YouTubeApiError("YouTube returned a non-JSON response", response.status_code) from exc

    message = _error_message(response)
    logger.warning("YouTube API %s returned %s: %s", url, response.status_code, message)
    raise YouTubeApiError(message, response.status_code)
