"""Tag views over the gallery image list.

list_tags() sorts with plain string ordering while list_tag_groups() uses
collation order, where case and accents only break ties and lowercase comes
first. Templates depend on both orders as they are; the collation does not
depend on the process locale.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .images import GalleryLoader, Image, get_gallery_images


@dataclass
class TagGroup:
    tag_name: str
    images: list[Image] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"tagName": self.tag_name, "images": [img.to_dict() for img in self.images]}


def collation_key(name: str) -> tuple[str, str, str]:
    """Base letters first, then accents, then case with lowercase before uppercase."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), decomposed.casefold(), name.swapcase()


def collect_tags(images: Iterable[Image]) -> list[str]:
    tags = set()
    for img in images:
        tags.update(img.tags)
    return sorted(tags)


def group_by_tag(images: Iterable[Image]) -> list[TagGroup]:
    groups: dict[str, TagGroup] = {}
    for img in images:
        for tag in img.tags:
            if tag not in groups:
                groups[tag] = TagGroup(tag_name=tag)
            groups[tag].images.append(img)
    return sorted(groups.values(), key=lambda g: collation_key(g.tag_name))


async def list_tags(loader: Optional[GalleryLoader] = None) -> list[str]:
    return collect_tags(await get_gallery_images(loader))


async def list_tag_groups(loader: Optional[GalleryLoader] = None) -> list[TagGroup]:
    return group_by_tag(await get_gallery_images(loader))
