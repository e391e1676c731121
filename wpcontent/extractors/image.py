"""Flat extraction of a single ``<img>`` element from CMS markup."""

from __future__ import annotations

import re
from typing import Any

from bs4 import BeautifulSoup, Tag

from wpcontent.extractors.caption import derive_caption
from wpcontent.items import Image

_SRCSET_WIDTH_RE = re.compile(r"^(\d+)w$")


class ImageNotFoundError(ValueError):
    """Raised when :func:`extract_image` is given markup without an ``<img>``.

    Callers control the markup they pass in, so this is a programming error
    rather than bad content.
    """


def attr_or_none(tag: Tag, name: str) -> str | None:
    """Return attribute *name* of *tag* as a string, or None when absent.

    BeautifulSoup returns multi-valued attributes (``class``) as lists; those
    are joined back with single spaces, so runs of whitespace between values
    are not preserved.
    """
    value: Any = tag.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)


def parse_srcset(srcset: str | None) -> list[tuple[str, int]]:
    """Return ``(url, width)`` pairs for width-descriptor entries of *srcset*.

    Density descriptors (``2x``) and bare URLs carry no width and are skipped.
    """
    if not srcset:
        return []
    candidates: list[tuple[str, int]] = []
    for entry in srcset.split(","):
        parts = entry.strip().split()
        if len(parts) != 2:
            continue
        match = _SRCSET_WIDTH_RE.match(parts[1])
        if match:
            candidates.append((parts[0], int(match.group(1))))
    return candidates


def first_image(html: str) -> Tag | None:
    """Return the first ``<img>`` in *html*, or None."""
    img = BeautifulSoup(html, "lxml").find("img")
    return img if isinstance(img, Tag) else None


def extract_image(
    html: str,
    *,
    full_caption: bool = False,
    lazy_load: bool = True,
) -> Image:
    """Parse the first ``<img>`` of *html* into an :class:`Image`.

    Args:
        html:         Fragment containing at least one ``<img>`` element.
        full_caption: Return the caption paragraph's markup instead of the
                      cleaned caption text.
        lazy_load:    When False, the ``loading`` attribute is dropped from
                      the serialized ``html`` field.

    Raises:
        ImageNotFoundError: *html* has no ``<img>`` element.
    """
    element = first_image(html)
    if element is None:
        raise ImageNotFoundError("markup contains no <img> element")

    # html.parser: lxml would wrap bare caption text in a <p> of its own.
    caption_html = attr_or_none(element, "data-image-caption") or ""
    paragraph = BeautifulSoup(caption_html, "html.parser").find("p") if caption_html else None

    fields = {
        "caption": derive_caption(
            paragraph if isinstance(paragraph, Tag) else None,
            full_caption=full_caption,
        ),
        "width": attr_or_none(element, "width"),
        "height": attr_or_none(element, "height"),
        "src": attr_or_none(element, "src"),
        "alt": attr_or_none(element, "alt"),
        "sizes": attr_or_none(element, "sizes"),
        "srcset": attr_or_none(element, "srcset"),
        "permalink": attr_or_none(element, "data-permalink"),
    }

    if not lazy_load:
        element.attrs.pop("loading", None)

    return Image(html=str(element), **fields)
