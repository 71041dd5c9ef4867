#!/usr/bin/env python3
"""Build the gallery data files from a local folder or an R2 bucket.

Writes three JSON files for the gallery templates:

  _data/gallery.json         every image, in randomized display order
  _data/galleryTags.json     sorted list of distinct tags
  _data/galleryByTag.json    [{"tagName": ..., "images": [...]}, ...]

Source selection comes from the environment:
  LOCAL_SOURCE=photos                 read images from ./photos
  R2_ACCOUNT_ID, R2_ACCESS_KEY_ID,
  R2_SECRET_ACCESS_KEY, R2_BUCKET_NAME  read images from the bucket
  R2_PUBLIC_DOMAIN                    optional public base URL for R2 images

Manual descriptions and credits are read from _data/galleryMetadata.json.

Usage:  python scripts/build-gallery-data.py
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from gallery import GalleryLoader, list_tag_groups, list_tags


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


async def build(root: Path, out_dir: Path) -> int:
    loader = GalleryLoader(root=root)
    images = await loader.images()
    tags = await list_tags(loader)
    groups = await list_tag_groups(loader)

    write_json(out_dir / "gallery.json", [img.to_dict() for img in images])
    write_json(out_dir / "galleryTags.json", tags)
    write_json(out_dir / "galleryByTag.json", [g.to_dict() for g in groups])

    print(f"gallery data: {len(images)} image(s), {len(tags)} tag(s)")
    for group in groups:
        print(f"  • {group.tag_name} ({len(group.images)})")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build gallery data files")
    parser.add_argument("--root", default=".", help="Repository root directory")
    parser.add_argument("--out-dir", default=None, help="Output directory (default: <root>/_data)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")

    root = Path(args.root).resolve()
    out_dir = Path(args.out_dir) if args.out_dir else root / "_data"
    return asyncio.run(build(root, out_dir))


if __name__ == "__main__":
    raise SystemExit(main())
