import json
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

try:
    from backend.app import config
    from backend.app.services import catalog, channel_resolver
    from backend.app.services.errors import ChannelServiceError, InvalidInputError
    from backend.app.services.sync_store import SyncBlobStore
except ModuleNotFoundError:
    from app import config
    from app.services import catalog, channel_resolver
    from app.services.errors import ChannelServiceError, InvalidInputError
    from app.services.sync_store import SyncBlobStore


logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------
# App setup
# ---------------------------

app = FastAPI(title="Channel Catalog API")
app.state.sync_store = SyncBlobStore()

cors_origins, cors_credentials = config.parse_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=cors_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ChannelServiceError)
async def channel_service_error_handler(_request: Request, exc: ChannelServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "errorCode": exc.error_code,
        },
    )


@app.on_event("startup")
def on_startup_report_config():
    logger.info("API key loaded: %s", "YES" if config.YOUTUBE_API_KEY else "NO")


def get_sync_store(request: Request) -> SyncBlobStore:
    return request.app.state.sync_store


# ---------------------------
# Routes
# ---------------------------

@app.get("/health")
def health():
    return {"ok": True}


@app.get("/api/channel")
def find_channel(query: str | None = None):
    query = (query or "").strip()
    logger.info("Channel lookup: %r", query)
    result = channel_resolver.resolve_channel(query)
    if isinstance(result, list):
        return {"candidates": [candidate.to_json() for candidate in result]}
    return result.to_json()


@app.get("/api/channel/by-video")
def find_channel_by_video(videoId: str | None = None):
    logger.info("Channel lookup by video: %r", videoId)
    return channel_resolver.resolve_channel_by_video(videoId).to_json()


@app.get("/api/channel/{channel_id}/videos")
def channel_videos(channel_id: str, cursor: str | None = None):
    page = catalog.list_catalog_page(channel_id, cursor or None)
    return page.to_json()


@app.get("/api/channel/{channel_id}/playlists")
def channel_playlists(channel_id: str):
    playlists = catalog.list_channel_playlists(channel_id)
    return {"playlists": [playlist.to_json() for playlist in playlists]}


@app.get("/api/playlist/{playlist_id}")
def playlist_videos(playlist_id: str):
    return catalog.fetch_playlist_videos(playlist_id).to_json()


@app.post("/api/sync")
async def save_sync_data(request: Request):
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidInputError("Request body must be valid JSON.")
    get_sync_store(request).save(payload)
    return {"ok": True}


@app.get("/api/sync")
def load_sync_data(request: Request):
    data, updated_at = get_sync_store(request).snapshot()
    return {
        "data": data,
        "updatedAt": datetime.fromtimestamp(updated_at, timezone.utc).isoformat() if updated_at else None,
    }


if config.STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=config.STATIC_DIR, html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
