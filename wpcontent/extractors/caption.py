"""Caption cleanup for images published through the visual editor.

Photo credits are typed by hand, usually inside an ``<i>`` element, and carry
attribution boilerplate ("Photo Courtesy of ...", ".../Daily") that renderers
do not want.
"""

from __future__ import annotations

from bs4 import Tag

# Removed in this order, first occurrence only.  Longer phrases come before
# the phrases they contain ("Courtesy of" before "Courtesy").
_ATTRIBUTION_PHRASES: tuple[str, ...] = (
    "Photo Courtesy of",
    "Courtesy of",
    "Courtesy",
    "Design by",
    "/Daily",
    "/MiC",
    "By ",
)


def trim_caption(caption: str) -> str:
    """Strip attribution phrases, surrounding whitespace and one trailing period."""
    for phrase in _ATTRIBUTION_PHRASES:
        caption = caption.replace(phrase, "", 1)
    caption = caption.strip()
    if caption.endswith("."):
        caption = caption[:-1]
    return caption


def derive_caption(caption: Tag | None, *, full_caption: bool = False) -> str:
    """Return the caption text carried by *caption*.

    With *full_caption* the element's inner markup is returned as-is.
    Otherwise the text of the first ``<i>`` descendant is preferred (falling
    back to the whole element's text) and cleaned with :func:`trim_caption`.
    """
    if caption is None:
        return ""

    if full_caption:
        return caption.decode_contents()

    italic = caption.find("i")
    text = italic.get_text() if isinstance(italic, Tag) else ""
    return trim_caption(text or caption.get_text())
