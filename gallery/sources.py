"""Image sources: a local directory tree or a Cloudflare R2 bucket.

Both sources produce SourceEntry records through list_entries(); tags and
manual metadata are merged later by the loader.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import boto3

from .config import GalleryConfig

log = logging.getLogger("gallery")

# ---------------- CONFIG ----------------
IMAGE_EXTS = (".jpg", ".jpeg", ".png", ".webp", ".avif", ".gif")
R2_PRIVATE_DOMAIN = "r2.cloudflarestorage.com"
SIGNED_URL_EXPIRY = 3600  # seconds


@dataclass(frozen=True)
class SourceEntry:
    key: str
    url: str
    last_modified: Optional[datetime]
    size: int


def is_image(name: str) -> bool:
    return name.lower().endswith(IMAGE_EXTS)


# ---------------- local directory ----------------
def walk_files(directory: Path) -> list[Path]:
    """Every regular file under directory. Unreadable subtrees are skipped."""
    try:
        children = sorted(directory.iterdir())
    except OSError as e:
        log.error("Error reading directory %s: %s", directory, e)
        return []

    files = []
    for child in children:
        if child.is_dir() and not child.is_symlink():
            files.extend(walk_files(child))
        elif child.is_file():
            files.append(child)
    return files


class LocalSource:
    label = "local source"

    def __init__(self, path: Path):
        self.path = path

    async def list_entries(self) -> list[SourceEntry]:
        # raises if the directory is missing or inaccessible
        await asyncio.to_thread(self.path.stat)

        files = await asyncio.to_thread(walk_files, self.path)
        images = [f for f in files if is_image(f.name)]
        return list(await asyncio.gather(*(self._entry(f) for f in images)))

    async def _entry(self, absolute_path: Path) -> SourceEntry:
        st = await asyncio.to_thread(absolute_path.stat)
        return SourceEntry(
            key=absolute_path.relative_to(self.path).as_posix(),
            url=str(absolute_path),
            last_modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            size=st.st_size,
        )


# ---------------- R2 bucket ----------------
@lru_cache(maxsize=None)
def make_r2_client(account_id: str, access_key_id: str, secret_access_key: str):
    """One boto3 S3 client per credential set, pointed at the account's R2 endpoint."""
    return boto3.client(
        "s3",
        region_name="auto",
        endpoint_url=f"https://{account_id}.{R2_PRIVATE_DOMAIN}",
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
    )


class R2Source:
    label = "R2"

    def __init__(self, client, bucket_name: str, public_domain: str = ""):
        self.client = client
        self.bucket_name = bucket_name
        self.public_domain = public_domain.removesuffix("/")

    async def list_objects(self) -> list[dict]:
        objects: list[dict] = []
        token = None
        while True:
            params = {"Bucket": self.bucket_name}
            if token:
                params["ContinuationToken"] = token
            resp = await asyncio.to_thread(self.client.list_objects_v2, **params)
            objects.extend(resp.get("Contents") or [])
            token = resp.get("NextContinuationToken")
            if not token:
                return objects

    async def list_entries(self) -> list[SourceEntry]:
        objects = await self.list_objects()
        images = [obj for obj in objects if is_image(obj["Key"])]
        return list(await asyncio.gather(*(self._entry(obj) for obj in images)))

    def uses_public_domain(self) -> bool:
        return bool(self.public_domain) and R2_PRIVATE_DOMAIN not in self.public_domain

    async def resolve_url(self, key: str) -> str:
        if self.uses_public_domain():
            return f"{self.public_domain}/{key}"
        return await asyncio.to_thread(
            self.client.generate_presigned_url,
            "get_object",
            Params={"Bucket": self.bucket_name, "Key": key},
            ExpiresIn=SIGNED_URL_EXPIRY,
        )

    async def _entry(self, obj: dict) -> SourceEntry:
        key = obj["Key"]
        return SourceEntry(
            key=key,
            url=await self.resolve_url(key),
            last_modified=obj.get("LastModified"),
            size=obj.get("Size", 0),
        )


Source = Union[LocalSource, R2Source]


def select_source(config: GalleryConfig, root: Path) -> Optional[Source]:
    """Pick the source for this build, or None when R2 configuration is incomplete."""
    if config.local_source:
        return LocalSource((root / config.local_source).resolve())

    if not config.has_r2_credentials or not config.bucket_name:
        return None
    client = make_r2_client(config.account_id, config.access_key_id, config.secret_access_key)
    return R2Source(client, config.bucket_name, config.public_domain)
