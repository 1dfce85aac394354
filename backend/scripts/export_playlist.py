from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from backend.app import config
from backend.app.services import catalog
from backend.app.services.errors import ChannelServiceError

DEFAULT_OUTPUT_DIR = Path(__file__).resolve().parents[1] / "data"


def validate_api_key(api_key: str | None) -> None:
    if not api_key:
        raise RuntimeError("YOUTUBE_API_KEY is required")
    # Most Google API keys begin with AIza and are 39 characters long.
    if not api_key.startswith("AIza") or len(api_key) < 35:
        raise RuntimeError("YOUTUBE_API_KEY format looks invalid (expected prefix 'AIza').")


def export_playlist(playlist_id: str, output: Path) -> int:
    result = catalog.fetch_playlist_videos(playlist_id)
    document = {
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "playlist_id": playlist_id,
        **result.to_json(),
    }
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    return len(result.videos)


def main() -> int:
    parser = argparse.ArgumentParser(description="Export every video of a playlist to JSON.")
    parser.add_argument("playlist_id")
    parser.add_argument("--output", type=Path, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=config.LOG_LEVEL)
    validate_api_key(config.YOUTUBE_API_KEY)

    output = args.output or DEFAULT_OUTPUT_DIR / f"playlist_{args.playlist_id}.json"
    try:
        count = export_playlist(args.playlist_id, output)
    except ChannelServiceError as exc:
        print(f"Export failed: {exc.message}", file=sys.stderr)
        return 1

    print(f"Wrote {count} videos to {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
