import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY")
YOUTUBE_API_TIMEOUT_SECONDS = int(os.getenv("YOUTUBE_API_TIMEOUT_SECONDS") or 15)

PORT = int(os.getenv("PORT") or 3000)
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
STATIC_DIR = Path(os.getenv("STATIC_DIR") or "public")


def parse_cors_origins() -> tuple[list[str], bool]:
    raw = (os.getenv("CORS_ALLOWED_ORIGINS") or "").strip()
    if not raw:
        return ["*"], False
    if raw == "*":
        return ["*"], False
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    if not origins:
        return ["*"], False
    return origins, True
