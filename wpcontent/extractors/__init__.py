"""Extraction sub-package: deterministic normalization of WordPress markup."""

from .blocks import normalize_block, normalize_blocks
from .caption import derive_caption, trim_caption
from .identifiers import join_names, slug_from_url
from .image import ImageNotFoundError, extract_image, parse_srcset

__all__ = [
    "ImageNotFoundError",
    "derive_caption",
    "extract_image",
    "join_names",
    "normalize_block",
    "normalize_blocks",
    "parse_srcset",
    "slug_from_url",
    "trim_caption",
]
