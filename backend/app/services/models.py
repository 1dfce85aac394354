from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Channel(ApiModel):
    channel_id: str
    handle: str | None = None
    title: str
    thumbnail_url: str | None = None
    video_count: int = Field(default=0, ge=0)
    uploads_playlist_id: str | None = None


class CandidateChannel(ApiModel):
    channel_id: str
    title: str
    description: str = ""
    thumbnail_url: str | None = None


class VideoItem(ApiModel):
    id: str
    title: str
    thumbnail_url: str | None = None
    published_at: datetime | None = None
    duration: str | None = None


class CatalogPage(ApiModel):
    videos: list[VideoItem] = Field(default_factory=list)
    next_cursor: str | None = None
    total_count: int = Field(default=0, ge=0)


class PlaylistSummary(ApiModel):
    id: str
    title: str
    thumbnail_url: str | None = None
    item_count: int = Field(default=0, ge=0)


class PlaylistVideos(ApiModel):
    playlist_title: str
    total_count: int = 0
    videos: list[VideoItem] = Field(default_factory=list)
