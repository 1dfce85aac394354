"""Channel catalog and playlist listings with duration enrichment."""
import logging
from typing import Any

try:
    from backend.app.services import youtube_api
    from backend.app.services.channel_details import best_thumbnail_url, fetch_channel_details, safe_int
    from backend.app.services.errors import InvalidInputError, NotFoundError, YouTubeApiError, translate_upstream_errors
    from backend.app.services.models import CatalogPage, PlaylistSummary, PlaylistVideos, VideoItem
    from backend.app.services.youtube_api import MAX_RESULTS_PER_PAGE, chunked
except ModuleNotFoundError:
    from app.services import youtube_api
    from app.services.channel_details import best_thumbnail_url, fetch_channel_details, safe_int
    from app.services.errors import InvalidInputError, NotFoundError, YouTubeApiError, translate_upstream_errors
    from app.services.models import CatalogPage, PlaylistSummary, PlaylistVideos, VideoItem
    from app.services.youtube_api import MAX_RESULTS_PER_PAGE, chunked

logger = logging.getLogger(__name__)

VIDEO_THUMBNAIL_KEYS = ("medium", "default")


def _playlist_item_video_id(item: dict[str, Any]) -> str | None:
    snippet = item.get("snippet") or {}
    video_id = (snippet.get("resourceId") or {}).get("videoId")
    if video_id:
        return video_id
    return (item.get("contentDetails") or {}).get("videoId")


def build_video_item(video_id: str, snippet: dict[str, Any], duration: str | None = None) -> VideoItem:
    return VideoItem(
        id=video_id,
        title=snippet.get("title") or "",
        thumbnail_url=best_thumbnail_url(snippet.get("thumbnails"), keys=VIDEO_THUMBNAIL_KEYS),
        published_at=snippet.get("publishedAt") or None,
        duration=duration,
    )


def fetch_playlist_items_page(playlist_id: str, cursor: str | None = None) -> dict[str, Any]:
    try:
        return youtube_api.youtube_api_get(
            youtube_api.YOUTUBE_PLAYLIST_ITEMS_LIST,
            {
                "part": "snippet,contentDetails",
                "playlistId": playlist_id,
                "maxResults": MAX_RESULTS_PER_PAGE,
                "pageToken": cursor or None,
            },
        )
    except YouTubeApiError as exc:
        # Uploads playlists of channels with no public videos answer playlistNotFound.
        if exc.status_code != 404:
            raise
        logger.info("Playlist %s not found upstream, treating as empty", playlist_id)
        return {"items": []}


def fetch_video_durations(video_ids: list[str]) -> dict[str, str]:
    payload = youtube_api.youtube_api_get(
        youtube_api.YOUTUBE_VIDEOS_LIST,
        {
            "part": "contentDetails",
            "id": ",".join(video_ids),
        },
    )
    durations: dict[str, str] = {}
    for item in payload.get("items") or []:
        duration = (item.get("contentDetails") or {}).get("duration")
        if item.get("id") and duration:
            durations[item["id"]] = duration
    return durations


@translate_upstream_errors
def list_catalog_page(channel_id: str | None, cursor: str | None = None) -> CatalogPage:
    channel_id = (channel_id or "").strip()
    if not channel_id:
        raise InvalidInputError("channelId is required.")

    channel = fetch_channel_details(channel_id)
    if channel is None:
        raise NotFoundError("Channel not found.")
    if channel.uploads_playlist_id is None:
        raise NotFoundError("Channel has no uploads playlist.")

    payload = fetch_playlist_items_page(channel.uploads_playlist_id, cursor)
    videos: list[VideoItem] = []
    for item in payload.get("items") or []:
        video_id = _playlist_item_video_id(item)
        if video_id:
            videos.append(build_video_item(video_id, item.get("snippet") or {}))

    if videos:
        # One lookup for this page only.
        durations = fetch_video_durations([video.id for video in videos])
        videos = [
            video.model_copy(update={"duration": durations[video.id]}) if video.id in durations else video
            for video in videos
        ]

    return CatalogPage(
        videos=videos,
        next_cursor=payload.get("nextPageToken") or None,
        total_count=channel.video_count,
    )


def list_all_video_ids(playlist_id: str) -> list[str]:
    ids: list[str] = []
    page_token = None
    while True:
        payload = fetch_playlist_items_page(playlist_id, page_token)
        for item in payload.get("items") or []:
            video_id = _playlist_item_video_id(item)
            if video_id:
                ids.append(video_id)

        page_token = payload.get("nextPageToken")
        if not page_token:
            break
    return ids


def fetch_videos_in_order(video_ids: list[str]) -> list[VideoItem]:
    """
    Fetch full video details in batches of 50 and return them in the order of
    `video_ids`. The videos endpoint does not preserve request order, and ids
    it does not return (deleted or private uploads) are dropped.
    """
    if not video_ids:
        return []

    by_id: dict[str, VideoItem] = {}
    for batch in chunked(video_ids, MAX_RESULTS_PER_PAGE):
        payload = youtube_api.youtube_api_get(
            youtube_api.YOUTUBE_VIDEOS_LIST,
            {
                "part": "snippet,contentDetails",
                "id": ",".join(batch),
            },
        )
        for item in payload.get("items") or []:
            if not item.get("id"):
                continue
            by_id[item["id"]] = build_video_item(
                item["id"],
                item.get("snippet") or {},
                duration=(item.get("contentDetails") or {}).get("duration"),
            )

    ordered = [by_id[video_id] for video_id in video_ids if video_id in by_id]
    dropped = len(video_ids) - len(ordered)
    if dropped:
        logger.info("Dropped %d playlist entries without video details", dropped)
    return ordered


@translate_upstream_errors
def fetch_playlist_videos(playlist_id: str | None) -> PlaylistVideos:
    playlist_id = (playlist_id or "").strip()
    if not playlist_id:
        raise InvalidInputError("playlistId is required.")

    payload = youtube_api.youtube_api_get(
        youtube_api.YOUTUBE_PLAYLISTS_LIST,
        {
            "part": "snippet",
            "id": playlist_id,
        },
    )
    items = payload.get("items") or []
    if not items:
        raise NotFoundError("Playlist not found.")
    playlist_title = (items[0].get("snippet") or {}).get("title") or ""

    video_ids = list_all_video_ids(playlist_id)
    if not video_ids:
        return PlaylistVideos(playlist_title=playlist_title, total_count=0, videos=[])

    return PlaylistVideos(
        playlist_title=playlist_title,
        total_count=len(video_ids),
        videos=fetch_videos_in_order(video_ids),
    )


@translate_upstream_errors
def list_channel_playlists(channel_id: str | None) -> list[PlaylistSummary]:
    channel_id = (channel_id or "").strip()
    if not channel_id:
        raise InvalidInputError("channelId is required.")

    playlists: list[PlaylistSummary] = []
    page_token = None
    while True:
        payload = youtube_api.youtube_api_get(
            youtube_api.YOUTUBE_PLAYLISTS_LIST,
            {
                "part": "snippet,contentDetails",
                "channelId": channel_id,
                "maxResults": MAX_RESULTS_PER_PAGE,
                "pageToken": page_token,
            },
        )
        for item in payload.get("items") or []:
            if not item.get("id"):
                continue
            snippet = item.get("snippet") or {}
            playlists.append(
                PlaylistSummary(
                    id=item["id"],
                    title=snippet.get("title") or "",
                    thumbnail_url=best_thumbnail_url(snippet.get("thumbnails"), keys=VIDEO_THUMBNAIL_KEYS),
                    item_count=safe_int((item.get("contentDetails") or {}).get("itemCount")),
                )
            )

        page_token = payload.get("nextPageToken")
        if not page_token:
            break
    return playlists
