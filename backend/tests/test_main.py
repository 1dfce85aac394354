import asyncio
import json
from datetime import datetime

import pytest
from starlette.requests import Request

import backend.main as main_module
from backend.app.services.errors import (
    InvalidInputError,
    NotFoundError,
    UpstreamFailureError,
    UpstreamQuotaExceededError,
)
from backend.app.services.models import CandidateChannel, CatalogPage, Channel, PlaylistSummary, VideoItem
from backend.app.services.sync_store import SyncBlobStore


def make_request(method: str = "GET", body: bytes = b"", ip: str = "127.0.0.1") -> Request:
    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(
        {
            "type": "http",
            "method": method,
            "path": "/",
            "headers": [(b"content-type", b"application/json")],
            "client": (ip, 8000),
            "query_string": b"",
            "server": ("test", 80),
            "scheme": "http",
            "http_version": "1.1",
            "app": main_module.app,
        },
        receive,
    )


def make_channel(channel_id: str = "UC_TEST") -> Channel:
    return Channel(
        channel_id=channel_id,
        handle="@test",
        title="Test",
        thumbnail_url="https://img/c.jpg",
        video_count=3,
        uploads_playlist_id="UU_TEST",
    )


def render_error(exc) -> tuple[int, dict]:
    response = asyncio.run(main_module.channel_service_error_handler(make_request(), exc))
    return response.status_code, json.loads(response.body)


@pytest.fixture
def fresh_sync_store(monkeypatch):
    store = SyncBlobStore()
    monkeypatch.setattr(main_module.app.state, "sync_store", store)
    return store


def test_health():
    assert main_module.health() == {"ok": True}


def test_find_channel_single(monkeypatch):
    seen = []

    def fake_resolve(query):
        seen.append(query)
        return make_channel()

    monkeypatch.setattr(main_module.channel_resolver, "resolve_channel", fake_resolve)

    payload = main_module.find_channel(query="  @test  ")

    assert seen == ["@test"]
    assert payload == {
        "channelId": "UC_TEST",
        "handle": "@test",
        "title": "Test",
        "thumbnailUrl": "https://img/c.jpg",
        "videoCount": 3,
        "uploadsPlaylistId": "UU_TEST",
    }


def test_find_channel_candidates(monkeypatch):
    candidates = [
        CandidateChannel(channel_id="UC_A", title="A", description="first", thumbnail_url=None),
        CandidateChannel(channel_id="UC_B", title="B", description="second", thumbnail_url="https://img/b.jpg"),
    ]
    monkeypatch.setattr(main_module.channel_resolver, "resolve_channel", lambda _query: candidates)

    payload = main_module.find_channel(query="name")

    assert [c["channelId"] for c in payload["candidates"]] == ["UC_A", "UC_B"]
    assert payload["candidates"][1]["thumbnailUrl"] == "https://img/b.jpg"


def test_find_channel_missing_query(fake_youtube):
    with pytest.raises(InvalidInputError):
        main_module.find_channel(query=None)
    assert fake_youtube.calls == []


def test_find_channel_by_video(monkeypatch):
    monkeypatch.setattr(main_module.channel_resolver, "resolve_channel_by_video", lambda _vid: make_channel("UC_V"))

    payload = main_module.find_channel_by_video(videoId="dQw4w9WgXcQ")

    assert payload["channelId"] == "UC_V"


def test_channel_videos(monkeypatch):
    calls = []

    def fake_page(channel_id, cursor):
        calls.append((channel_id, cursor))
        return CatalogPage(
            videos=[
                VideoItem(id="a", title="A", published_at="2024-03-01T12:00:00Z", duration="PT1M"),
                VideoItem(id="b", title="B", published_at="2024-03-02T12:00:00Z"),
            ],
            next_cursor="NEXT",
            total_count=10,
        )

    monkeypatch.setattr(main_module.catalog, "list_catalog_page", fake_page)

    payload = main_module.channel_videos("UC_TEST", cursor="")

    assert calls == [("UC_TEST", None)]
    assert payload["nextCursor"] == "NEXT"
    assert payload["totalCount"] == 10
    assert payload["videos"][0]["duration"] == "PT1M"
    assert payload["videos"][0]["publishedAt"] == "2024-03-01T12:00:00Z"
    assert payload["videos"][1]["duration"] is None


def test_channel_playlists(monkeypatch):
    monkeypatch.setattr(
        main_module.catalog,
        "list_channel_playlists",
        lambda _cid: [PlaylistSummary(id="PL1", title="One", thumbnail_url=None, item_count=2)],
    )

    payload = main_module.channel_playlists("UC_TEST")

    assert payload == {"playlists": [{"id": "PL1", "title": "One", "thumbnailUrl": None, "itemCount": 2}]}


def test_playlist_videos_end_to_end(fake_youtube):
    from backend.app.services.youtube_api import (
        YOUTUBE_PLAYLIST_ITEMS_LIST,
        YOUTUBE_PLAYLISTS_LIST,
        YOUTUBE_VIDEOS_LIST,
    )
    from backend.tests.fakes import make_playlist_item, make_video_item

    fake_youtube.on(YOUTUBE_PLAYLISTS_LIST, {"items": [{"id": "PL1", "snippet": {"title": "Mix"}}]})
    fake_youtube.on(YOUTUBE_PLAYLIST_ITEMS_LIST, {"items": [make_playlist_item("x"), make_playlist_item("y")]})
    fake_youtube.on(YOUTUBE_VIDEOS_LIST, {"items": [make_video_item("y", "PT9S"), make_video_item("x", "PT8S")]})

    payload = main_module.playlist_videos("PL1")

    assert payload["playlistTitle"] == "Mix"
    assert payload["totalCount"] == 2
    assert [(v["id"], v["duration"]) for v in payload["videos"]] == [("x", "PT8S"), ("y", "PT9S")]


def test_sync_round_trip(fresh_sync_store):
    assert main_module.load_sync_data(make_request()) == {"data": None, "updatedAt": None}

    body = json.dumps({"favorites": ["UC_A"], "version": 2}).encode()
    assert asyncio.run(main_module.save_sync_data(make_request("POST", body))) == {"ok": True}

    payload = main_module.load_sync_data(make_request())
    assert payload["data"] == {"favorites": ["UC_A"], "version": 2}
    assert datetime.fromisoformat(payload["updatedAt"]).tzinfo is not None


def test_sync_last_write_wins(fresh_sync_store):
    asyncio.run(main_module.save_sync_data(make_request("POST", b"[1, 2]")))
    asyncio.run(main_module.save_sync_data(make_request("POST", b"\"second\"")))

    assert main_module.load_sync_data(make_request())["data"] == "second"
    assert fresh_sync_store.snapshot()[1] is not None


def test_sync_rejects_invalid_json(fresh_sync_store):
    with pytest.raises(InvalidInputError):
        asyncio.run(main_module.save_sync_data(make_request("POST", b"{not json")))
    assert fresh_sync_store.load() is None


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (InvalidInputError("query is required"), 400, "invalid_input"),
        (NotFoundError("Channel not found."), 404, "not_found"),
        (UpstreamQuotaExceededError(), 500, "youtube_quota_exhausted"),
        (UpstreamFailureError(), 500, "youtube_upstream_failure"),
    ],
)
def test_error_handler_shapes(exc, status, code):
    status_code, body = render_error(exc)
    assert status_code == status
    assert body["errorCode"] == code
    assert body["error"] == exc.message


def test_quota_and_generic_messages_differ():
    _, quota = render_error(UpstreamQuotaExceededError())
    _, generic = render_error(UpstreamFailureError())
    assert quota["error"] != generic["error"]
    assert "quota" in quota["error"].lower()
