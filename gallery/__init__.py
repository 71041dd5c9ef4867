"""Gallery data for the static site: image inventory and tag views."""

from .config import GalleryConfig
from .images import GalleryLoader, Image, get_gallery_images
from .tags import TagGroup, list_tag_groups, list_tags

__all__ = [
    "GalleryConfig",
    "GalleryLoader",
    "Image",
    "TagGroup",
    "get_gallery_images",
    "list_tags",
    "list_tag_groups",
]
