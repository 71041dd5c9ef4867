"""Manual gallery metadata overrides.

_data/galleryMetadata.json maps an image key to a description and credits:

{
  "nature/heron.jpg": {
    "description": "Grey heron on the canal at dawn.",
    "credits": {"name": "Sam Lee", "href": "https://example.com"}
  }
}

The file is optional; anything unreadable counts as an empty mapping.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

METADATA_PATH = Path("_data") / "galleryMetadata.json"


def load_metadata(path: Optional[Path] = None) -> dict[str, dict]:
    if path is None:
        path = Path.cwd() / METADATA_PATH
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def metadata_for(metadata: dict[str, dict], key: str) -> tuple[str, Any]:
    """Return (description, credits) for key, defaulting to ("", None)."""
    entry = metadata.get(key)
    if not isinstance(entry, dict):
        return "", None
    return entry.get("description") or "", entry.get("credits") or None
