import pytest

from backend.app.services import youtube_api
from backend.tests.fakes import FakeYouTube


@pytest.fixture
def fake_youtube(monkeypatch) -> FakeYouTube:
    fake = FakeYouTube()
    monkeypatch.setattr(youtube_api, "youtube_api_get", fake)
    return fake
