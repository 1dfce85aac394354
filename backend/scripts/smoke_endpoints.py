from __future__ import annotations

import sys
from pathlib import Path
from typing import Any
from unittest.mock import patch

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import backend.main as main_module
from backend.app.services import youtube_api

CHANNEL_ID = "UCsmokeChannel00000000000"


def make_channel_payload(channel_id: str) -> dict[str, Any]:
    return {
        "items": [
            {
                "id": channel_id,
                "snippet": {
                    "title": "Smoke Channel",
                    "customUrl": "@smoke",
                    "thumbnails": {"high": {"url": "https://img/smoke.jpg"}},
                },
                "statistics": {"videoCount": "2"},
                "contentDetails": {"relatedPlaylists": {"uploads": "UU_SMOKE"}},
            }
        ]
    }


def make_playlist_item(video_id: str) -> dict[str, Any]:
    return {
        "snippet": {
            "title": f"Video {video_id}",
            "publishedAt": "2024-01-01T00:00:00Z",
            "thumbnails": {"medium": {"url": f"https://img/{video_id}.jpg"}},
            "resourceId": {"videoId": video_id},
        }
    }


class CountingTransport:
    def __init__(self) -> None:
        self.calls: dict[str, int] = {}

    def __call__(self, url: str, params: dict, timeout: int | None = None) -> dict:
        _ = timeout
        self.calls[url] = self.calls.get(url, 0) + 1
        if url == youtube_api.YOUTUBE_CHANNELS_LIST:
            if "forHandle" in params:
                return {"items": [{"id": CHANNEL_ID}]}
            return make_channel_payload(params["id"])
        if url == youtube_api.YOUTUBE_PLAYLIST_ITEMS_LIST:
            return {"items": [make_playlist_item("s1"), make_playlist_item("s2")]}
        if url == youtube_api.YOUTUBE_VIDEOS_LIST:
            return {"items": [{"id": "s2", "contentDetails": {"duration": "PT42S"}}]}
        if url == youtube_api.YOUTUBE_SEARCH_LIST:
            raise AssertionError("search should not be reached in smoke checks")
        raise AssertionError(f"unexpected call: {url}")


def assert_true(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


def test_health() -> None:
    payload = main_module.health()
    assert_true(payload.get("ok") is True, "/health should return ok=true")


def test_channel_by_id() -> None:
    transport = CountingTransport()
    with patch.object(youtube_api, "youtube_api_get", side_effect=transport):
        payload = main_module.find_channel(query=CHANNEL_ID)

    assert_true(payload.get("channelId") == CHANNEL_ID, "/api/channel should resolve an explicit id")
    assert_true(transport.calls == {youtube_api.YOUTUBE_CHANNELS_LIST: 1}, "explicit id should cost one lookup")


def test_channel_by_handle() -> None:
    transport = CountingTransport()
    with patch.object(youtube_api, "youtube_api_get", side_effect=transport):
        payload = main_module.find_channel(query="@smoke")

    assert_true(payload.get("handle") == "@smoke", "/api/channel should resolve a handle")
    assert_true(transport.calls.get(youtube_api.YOUTUBE_CHANNELS_LIST) == 2, "handle should cost two lookups")


def test_channel_videos_page() -> None:
    transport = CountingTransport()
    with patch.object(youtube_api, "youtube_api_get", side_effect=transport):
        payload = main_module.channel_videos(CHANNEL_ID)

    durations = [video.get("duration") for video in payload.get("videos", [])]
    assert_true(durations == [None, "PT42S"], "catalog page should join durations by id")
    assert_true(payload.get("nextCursor") is None, "single page catalog should have no cursor")
    assert_true(payload.get("totalCount") == 2, "totalCount should come from the channel")


def run() -> int:
    checks = [
        ("health", test_health),
        ("channel by id", test_channel_by_id),
        ("channel by handle", test_channel_by_handle),
        ("channel videos page", test_channel_videos_page),
    ]
    failures = []

    for check_name, check_fn in checks:
        try:
            check_fn()
            print(f"[PASS] {check_name}")
        except Exception as exc:  # pragma: no cover - smoke script output path
            failures.append((check_name, str(exc)))
            print(f"[FAIL] {check_name}: {exc}")

    if failures:
        print(f"\nSmoke checks failed: {len(failures)}")
        for check_name, message in failures:
            print(f"- {check_name}: {message}")
        return 1

    print("\nAll smoke checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(run())
