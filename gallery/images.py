"""Gallery image inventory.

GalleryLoader holds the single cached image list for a build. The list is
populated once, by the first successful load, and never invalidated; a failed
load returns an empty list and leaves the cache empty so the next call retries.
"""

from __future__ import annotations

import logging
import os
import posixpath
import random
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from .config import GalleryConfig
from .metadata import METADATA_PATH, load_metadata, metadata_for
from .sources import LocalSource, SourceEntry, select_source

log = logging.getLogger("gallery")


@dataclass(frozen=True)
class Image:
    key: str
    url: str
    last_modified: Optional[datetime]
    size: int
    tags: tuple[str, ...] = ()
    description: str = ""
    credits: Any = None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "url": self.url,
            "lastModified": self.last_modified.isoformat() if self.last_modified else None,
            "size": self.size,
            "tags": list(self.tags),
            "description": self.description,
            "credits": self.credits,
        }


def folder_tags(key: str) -> tuple[str, ...]:
    """The containing folder as a single tag; none at the source root."""
    folder = posixpath.dirname(key)
    if folder and folder != ".":
        return (folder,)
    return ()


def build_image(entry: SourceEntry, metadata: dict[str, dict]) -> Image:
    description, credits = metadata_for(metadata, entry.key)
    return Image(
        key=entry.key,
        url=entry.url,
        last_modified=entry.last_modified,
        size=entry.size,
        tags=folder_tags(entry.key),
        description=description,
        credits=credits,
    )


class GalleryLoader:
    def __init__(
        self,
        root: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        metadata_path: Optional[Path] = None,
    ):
        self.root = Path(root) if root is not None else None
        self.environ = environ
        self.metadata_path = metadata_path
        self._images: Optional[list[Image]] = None

    @property
    def cached(self) -> Optional[list[Image]]:
        return self._images

    async def images(self) -> list[Image]:
        if self._images is not None:
            return self._images

        root = self.root or Path(os.getcwd())
        metadata = load_metadata(self.metadata_path or root / METADATA_PATH)
        config = GalleryConfig.from_env(self.environ)

        try:
            source = select_source(config, root)
        except Exception as e:
            log.exception("Error configuring image source: %s", e)
            return []
        if source is None:
            log.warning("R2 environment variables missing. Gallery will be empty.")
            return []
        if isinstance(source, LocalSource):
            log.info("Using local: %s", source.path)

        try:
            entries = await source.list_entries()
        except Exception as e:
            log.exception("Error loading images from %s: %s", source.label, e)
            return []

        images = [build_image(entry, metadata) for entry in entries]
        # randomized display order
        random.shuffle(images)

        self._images = images
        log.info("Loaded %d images from %s", len(images), source.label)
        return images


_default_loader = GalleryLoader()


async def get_gallery_images(loader: Optional[GalleryLoader] = None) -> list[Image]:
    """Return the build's image list, loading it on first use."""
    return await (loader or _default_loader).images()
