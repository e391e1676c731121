"""Turn parsed Gutenberg block trees into typed :class:`~wpcontent.items.Block` trees.

Input is the output of a block-comment grammar parser: nested nodes carrying
``blockName``, ``attrs``, ``innerBlocks``, ``innerHTML`` and ``innerContent``.
Output has the same shape, with each node's sibling ``index`` and a ``data``
payload typed by block name:

    core/image                         → ImageData
    core/audio                         → AudioData
    core/video                         → VideoData
    jetpack/image-compare              → list[ImageData]
    jetpack/slideshow                  → list[ImageData]
    newspack-blocks/homepage-articles  → list[Article]

Every other block name gets ``data=None``.  A payload that cannot be built
(missing element, odd attributes) also degrades to ``None`` for that block
only; the rest of the document is unaffected.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from wpcontent import settings
from wpcontent.extractors.caption import derive_caption
from wpcontent.extractors.image import attr_or_none, extract_image, parse_srcset
from wpcontent.items import (
    Article,
    AudioData,
    Block,
    ImageData,
    ImageSource,
    ParsedBlock,
    VideoData,
    block_model_for,
)
from wpcontent.plugins import get_block_extractor

logger = logging.getLogger(__name__)

_WP_IMAGE_CLASS_RE = re.compile(r"\bwp-image-(\d+)\b")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def _tag(node: Any) -> Tag | None:
    return node if isinstance(node, Tag) else None


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def _position(attrs: Mapping[str, Any]) -> str:
    align = attrs.get("align")
    return align if isinstance(align, str) else ""


def _figure_caption(root: Tag, *, full_caption: bool) -> str:
    return derive_caption(_tag(root.find("figcaption")), full_caption=full_caption)


def _image_id(img: Tag, attrs: Mapping[str, Any]) -> int | None:
    """Attachment id from block attrs, the ``wp-image-N`` class, or ``data-id``."""
    attachment_id = _to_int(attrs.get("id"))
    if attachment_id is not None:
        return attachment_id
    match = _WP_IMAGE_CLASS_RE.search(attr_or_none(img, "class") or "")
    if match:
        return int(match.group(1))
    return _to_int(attr_or_none(img, "data-id"))


def _image_sources(
    src: str | None,
    srcset: str | None,
    width: int | None,
    height: int | None,
) -> list[ImageSource]:
    """Collect the resolutions of one image, narrowest first.

    Heights of ``srcset`` candidates are scaled from the full-size aspect
    ratio; when that ratio is unknown they are reported as 0.
    """
    by_uri: dict[str, ImageSource] = {}
    for uri, candidate_width in parse_srcset(srcset):
        candidate_height = round(candidate_width * height / width) if width and height else 0
        by_uri.setdefault(
            uri, ImageSource(uri=uri, width=candidate_width, height=candidate_height),
        )
    if src and src not in by_uri:
        by_uri[src] = ImageSource(uri=src, width=width or 0, height=height or 0)
    return sorted(by_uri.values(), key=lambda source: source.width)


def _image_data(
    img: Tag,
    attrs: Mapping[str, Any],
    *,
    caption: str,
    position: str,
) -> ImageData:
    width = _to_int(attr_or_none(img, "width")) or _to_int(attrs.get("width"))
    height = _to_int(attr_or_none(img, "height")) or _to_int(attrs.get("height"))
    return ImageData(
        id=_image_id(img, attrs),
        sources=_image_sources(
            attr_or_none(img, "src"), attr_or_none(img, "srcset"), width, height,
        ),
        caption=caption,
        alt=attr_or_none(img, "alt") or "",
        position=position,
    )


# ---------------------------------------------------------------------------
# Per-block payload extractors
# ---------------------------------------------------------------------------

def _extract_core_image(block: ParsedBlock, *, full_caption: bool = False) -> ImageData | None:
    soup = _soup(block.inner_html)
    img = _tag(soup.find("img"))
    if img is None:
        return None
    image = extract_image(block.inner_html, full_caption=full_caption)
    return _image_data(
        img,
        block.attrs,
        caption=image.caption or _figure_caption(soup, full_caption=full_caption),
        position=_position(block.attrs),
    )


def _extract_core_audio(block: ParsedBlock, *, full_caption: bool = False) -> AudioData | None:
    soup = _soup(block.inner_html)
    audio = _tag(soup.find("audio"))
    url = block.attrs.get("src") or (attr_or_none(audio, "src") if audio else None)
    if not url:
        return None
    return AudioData(url=url, caption=_figure_caption(soup, full_caption=full_caption))


def _extract_core_video(block: ParsedBlock, *, full_caption: bool = False) -> VideoData | None:
    soup = _soup(block.inner_html)
    video = _tag(soup.find("video"))
    url = block.attrs.get("src")
    if not url and video is not None:
        source = _tag(video.find("source"))
        url = attr_or_none(video, "src") or (attr_or_none(source, "src") if source else None)
    if not url:
        return None

    aspect_ratio = settings.DEFAULT_VIDEO_ASPECT_RATIO
    if video is not None:
        width = _to_float(attr_or_none(video, "width"))
        height = _to_float(attr_or_none(video, "height"))
        if width and height and width > 0 and height > 0:
            aspect_ratio = width / height

    return VideoData(
        url=url,
        caption=_figure_caption(soup, full_caption=full_caption),
        aspect_ratio=aspect_ratio,
    )


def _extract_image_compare(
    block: ParsedBlock, *, full_caption: bool = False,
) -> list[ImageData] | None:
    soup = _soup(block.inner_html)
    caption = _figure_caption(soup, full_caption=full_caption)
    position = _position(block.attrs)

    images: list[ImageData] = []
    for key in ("imageBefore", "imageAfter"):
        meta = block.attrs.get(key)
        if not isinstance(meta, dict) or not meta.get("url"):
            continue
        images.append(ImageData(
            id=_to_int(meta.get("id")),
            sources=[ImageSource(
                uri=meta["url"],
                width=_to_int(meta.get("width")) or 0,
                height=_to_int(meta.get("height")) or 0,
            )],
            caption=caption,
            alt=meta.get("alt") or "",
            position=position,
        ))

    if not images:
        images = [
            _image_data(img, {}, caption=caption, position=position)
            for img in soup.find_all("img")
            if isinstance(img, Tag)
        ]
    return images or None


def _extract_slideshow(
    block: ParsedBlock, *, full_caption: bool = False,
) -> list[ImageData] | None:
    soup = _soup(block.inner_html)
    position = _position(block.attrs)

    images: list[ImageData] = []
    for figure in soup.find_all("figure"):
        if not isinstance(figure, Tag):
            continue
        img = _tag(figure.find("img"))
        if img is None:
            continue
        images.append(_image_data(
            img,
            {},
            caption=_figure_caption(figure, full_caption=full_caption),
            position=position,
        ))
    return images or None


def _normalize_article(raw: Mapping[str, Any], *, full_caption: bool) -> dict[str, Any]:
    """Normalize the block trees of an embedded article and its related posts."""
    article = dict(raw)
    content = article.get("content")
    if content is not None:
        article["content"] = normalize_blocks(content, full_caption=full_caption)
    for key in ("relatedPosts", "related_posts"):
        related = article.get(key)
        if isinstance(related, list):
            article[key] = [
                _normalize_article(post, full_caption=full_caption)
                if isinstance(post, Mapping) else post
                for post in related
            ]
    return article


def _extract_homepage_articles(
    block: ParsedBlock, *, full_caption: bool = False,
) -> list[Article] | None:
    raw_articles = block.attrs.get("articles")
    if not isinstance(raw_articles, list):
        return None
    return [
        Article.model_validate(_normalize_article(raw, full_caption=full_caption))
        for raw in raw_articles
    ]


_EXTRACTORS: dict[str, Callable[..., Any]] = {
    "core/image": _extract_core_image,
    "core/audio": _extract_core_audio,
    "core/video": _extract_core_video,
    "jetpack/image-compare": _extract_image_compare,
    "jetpack/slideshow": _extract_slideshow,
    "newspack-blocks/homepage-articles": _extract_homepage_articles,
}


def _extract_payload(block: ParsedBlock, *, full_caption: bool) -> Any:
    name = block.block_name
    if name is None:
        return None
    extractor = _EXTRACTORS.get(name)
    if extractor is None:
        plugin = get_block_extractor(name)
        if plugin is None:
            return None
        extractor = plugin.extract
    try:
        return extractor(block, full_caption=full_caption)
    except Exception as exc:
        logger.debug("Payload extraction failed for %s block: %s", name, exc)
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_block(
    raw: ParsedBlock | Mapping[str, Any],
    index: int = 0,
    *,
    full_caption: bool = False,
) -> Block:
    """Normalize one parsed block and, recursively, its inner blocks.

    Args:
        raw:          A :class:`ParsedBlock` or a dict in the parser's shape.
        index:        Position of *raw* among its siblings.
        full_caption: Keep caption markup instead of the cleaned caption text.

    Returns:
        The :class:`Block` subclass registered for the block name, with
        ``data`` set to the extracted payload or None.

    Raises:
        pydantic.ValidationError: *raw* is not shaped like a parsed block.
    """
    block = raw if isinstance(raw, ParsedBlock) else ParsedBlock.model_validate(raw)
    children = [
        normalize_block(child, position, full_caption=full_caption)
        for position, child in enumerate(block.inner_blocks)
    ]

    model = block_model_for(block.block_name)
    fields: dict[str, Any] = {
        "block_name": block.block_name,
        "attrs": dict(block.attrs),
        "inner_blocks": children,
        "inner_html": block.inner_html,
        "inner_content": list(block.inner_content),
        "index": index,
    }
    data = _extract_payload(block, full_caption=full_caption)
    try:
        return model(**fields, data=data)
    except ValidationError as exc:
        logger.debug("Discarding invalid payload for %s block: %s", block.block_name, exc)
        return model(**fields, data=None)


def normalize_blocks(
    raws: Iterable[ParsedBlock | Mapping[str, Any]],
    *,
    full_caption: bool = False,
) -> list[Block]:
    """Normalize a list of sibling blocks (typically a whole post body)."""
    return [
        normalize_block(raw, position, full_caption=full_caption)
        for position, raw in enumerate(raws)
    ]
