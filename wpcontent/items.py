"""Pydantic models for normalized WordPress content and the REST shapes it comes from.

Python attribute names are snake_case; ``model_dump(by_alias=True)`` produces
the camelCase wire names (``blockName``, ``innerBlocks``, ``innerHTML`` ...)
used by the block parser and by downstream renderers.  Both spellings are
accepted on input.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Literal

from pydantic import BaseModel, Field, SerializeAsAny, field_validator
from pydantic.alias_generators import to_camel

_CAMEL_CONFIG: dict[str, Any] = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
}


# ---------------------------------------------------------------------------
# Flat image extraction result
# ---------------------------------------------------------------------------

class Image(BaseModel):
    """One ``<img>`` element as found in CMS markup.

    Attribute fields are ``None`` when the attribute is absent and keep the
    empty string when it is present but empty.
    """

    model_config = {"frozen": True}

    html: str
    caption: str = ""
    width: str | None = None
    height: str | None = None
    src: str | None = None
    alt: str | None = None
    sizes: str | None = None
    srcset: str | None = None
    permalink: str | None = None


# ---------------------------------------------------------------------------
# Typed block payloads
# ---------------------------------------------------------------------------

class ImageSource(BaseModel):
    model_config = _CAMEL_CONFIG

    uri: str
    width: int = 0
    height: int = 0


class ImageData(BaseModel):
    model_config = _CAMEL_CONFIG

    id: int | None = None
    sources: list[ImageSource] = Field(default_factory=list)
    caption: str = ""
    alt: str = ""
    # Layout hint from the editor (``align`` attribute). Values are not
    # enumerated by the CMS, so this stays a free-form string.
    position: str = ""


class AudioData(BaseModel):
    model_config = _CAMEL_CONFIG

    url: str
    caption: str = ""


class VideoData(BaseModel):
    model_config = _CAMEL_CONFIG

    url: str
    caption: str = ""
    aspect_ratio: float


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------

class Author(BaseModel):
    # WordPress spells these in snake_case on the wire, so no alias generator.
    model_config = {"frozen": True}

    display_name: str
    user_nicename: str = ""


class Category(BaseModel):
    model_config = _CAMEL_CONFIG

    parent: str | None = None
    primary: str | None = None


class Article(BaseModel):
    """A normalized post, as embedded in listings and related-post blocks."""

    model_config = _CAMEL_CONFIG

    id: str
    permalink: str
    category: Category = Field(default_factory=Category)
    title: str
    date: str
    excerpt: str | None = None
    content: list[SerializeAsAny[Block]] | None = None
    authors: list[Author] = Field(default_factory=list)
    image: ImageData | None = None
    estimated_time: int | None = None
    redirection: str | None = None
    related_posts: list[Article] | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("content", mode="before")
    @classmethod
    def dispatch_content(cls, v: Any) -> Any:
        return _coerce_blocks(v)


# ---------------------------------------------------------------------------
# Block trees
# ---------------------------------------------------------------------------

class ParsedBlock(BaseModel):
    """A node produced by the block-comment grammar parser (input side)."""

    model_config = _CAMEL_CONFIG

    block_name: str | None = None
    attrs: dict[str, Any] = Field(default_factory=dict)
    inner_blocks: list[ParsedBlock] = Field(default_factory=list)
    inner_html: str = Field(default="", alias="innerHTML")
    inner_content: list[str | None] = Field(default_factory=list)

    @field_validator("attrs", mode="before")
    @classmethod
    def none_attrs(cls, v: Any) -> Any:
        # The reference JS parser emits ``attrs: {}`` but some PHP paths emit null.
        return {} if v is None else v


class Block(BaseModel):
    """A normalized block.  Unrecognized block names always carry ``data=None``."""

    model_config = _CAMEL_CONFIG

    block_name: str | None = None
    attrs: dict[str, Any] = Field(default_factory=dict)
    inner_blocks: list[SerializeAsAny[Block]] = Field(default_factory=list)
    inner_html: str = Field(default="", alias="innerHTML")
    inner_content: list[str | None] = Field(default_factory=list)
    index: int = 0
    data: None = None

    @field_validator("inner_blocks", mode="before")
    @classmethod
    def dispatch_inner_blocks(cls, v: Any) -> Any:
        return _coerce_blocks(v)


class AudioBlock(Block):
    block_name: Literal["core/audio"] = "core/audio"
    data: AudioData | None = None


class VideoBlock(Block):
    block_name: Literal["core/video"] = "core/video"
    data: VideoData | None = None


class ImageBlock(Block):
    block_name: Literal["core/image"] = "core/image"
    data: ImageData | None = None


class ImageCompareBlock(Block):
    block_name: Literal["jetpack/image-compare"] = "jetpack/image-compare"
    data: list[ImageData] | None = None


class SlideshowBlock(Block):
    block_name: Literal["jetpack/slideshow"] = "jetpack/slideshow"
    data: list[ImageData] | None = None


class HomepageArticlesBlock(Block):
    block_name: Literal["newspack-blocks/homepage-articles"] = (
        "newspack-blocks/homepage-articles"
    )
    data: list[Article] | None = None


BLOCK_MODELS: dict[str, type[Block]] = {
    "core/audio": AudioBlock,
    "core/video": VideoBlock,
    "core/image": ImageBlock,
    "jetpack/image-compare": ImageCompareBlock,
    "jetpack/slideshow": SlideshowBlock,
    "newspack-blocks/homepage-articles": HomepageArticlesBlock,
}


def block_model_for(block_name: str | None) -> type[Block]:
    """Return the :class:`Block` subclass that models *block_name*.

    Built-in names win over plugin registrations; anything unknown maps to
    the payload-less :class:`Block`.
    """
    if block_name is None:
        return Block
    model = BLOCK_MODELS.get(block_name)
    if model is not None:
        return model

    from wpcontent.plugins import get_block_extractor

    plugin = get_block_extractor(block_name)
    if plugin is not None:
        return plugin.model
    return Block


def _coerce_blocks(value: Any) -> Any:
    """Validate serialized block dicts into their variant classes."""
    if value is None or not isinstance(value, Iterable) or isinstance(value, (str, dict)):
        return value
    coerced: list[Any] = []
    for item in value:
        if isinstance(item, dict):
            name = item.get("blockName", item.get("block_name"))
            coerced.append(block_model_for(name).model_validate(item))
        else:
            coerced.append(item)
    return coerced


# ---------------------------------------------------------------------------
# WordPress REST API shapes
# ---------------------------------------------------------------------------

class RenderedText(BaseModel):
    rendered: str = ""


class FeaturedMedia(BaseModel):
    embeddable: bool = False
    href: str


class WordPressLinks(BaseModel):
    model_config = {"populate_by_name": True}

    featured_media: list[FeaturedMedia] = Field(
        default_factory=list, alias="wp:featuredmedia",
    )


class WordPressArticle(BaseModel):
    """``/wp/v2/posts`` item restricted to ``_fields=coauthors,link,title,_links``."""

    model_config = {"populate_by_name": True}

    coauthors: list[Author] = Field(default_factory=list)
    link: str
    title: RenderedText = Field(default_factory=RenderedText)
    links: WordPressLinks = Field(default_factory=WordPressLinks, alias="_links")

    @field_validator("coauthors", mode="before")
    @classmethod
    def none_coauthors(cls, v: Any) -> Any:
        return v or []


class WordPressMedia(BaseModel):
    """``/wp/v2/media`` item restricted to ``_fields=description``."""

    description: RenderedText = Field(default_factory=RenderedText)


class PostSummary(BaseModel):
    """Result of :func:`wpcontent.query.fetch_post_from_slug`."""

    model_config = {"frozen": True}

    url: str
    title: str
    coauthors: str
    image: Image | None = None


for _model in (
    Article,
    ParsedBlock,
    Block,
    AudioBlock,
    VideoBlock,
    ImageBlock,
    ImageCompareBlock,
    SlideshowBlock,
    HomepageArticlesBlock,
):
    _model.model_rebuild()
