"""wpcontent - normalize WordPress content into a typed document model.

Block trees::

    from wpcontent import normalize_blocks

    blocks = normalize_blocks(parsed)   # output of a Gutenberg block parser
    for block in blocks:
        print(block.index, block.block_name, block.data)

Images::

    from wpcontent import extract_image

    image = extract_image('<img src="a.jpg" data-image-caption="<p>Diag</p>">')
    print(image.src, image.caption)

Posts from the REST API::

    from wpcontent import fetch_post_from_url

    post = fetch_post_from_url("https://michigandaily.com/news/some-story/")
"""

from wpcontent.extractors import (
    ImageNotFoundError,
    derive_caption,
    extract_image,
    join_names,
    normalize_block,
    normalize_blocks,
    slug_from_url,
    trim_caption,
)
from wpcontent.items import (
    Article,
    AudioData,
    Author,
    Block,
    Image,
    ImageData,
    ImageSource,
    ParsedBlock,
    PostSummary,
    VideoData,
    block_model_for,
)
from wpcontent.plugins import register_block_extractor
from wpcontent.query import (
    FetchError,
    fetch_image_from_name,
    fetch_image_from_slug,
    fetch_image_from_url,
    fetch_post_from_slug,
    fetch_post_from_url,
)

__version__ = "0.1.0"
__all__ = [
    "Article",
    "AudioData",
    "Author",
    "Block",
    "FetchError",
    "Image",
    "ImageData",
    "ImageNotFoundError",
    "ImageSource",
    "ParsedBlock",
    "PostSummary",
    "VideoData",
    "block_model_for",
    "derive_caption",
    "extract_image",
    "fetch_image_from_name",
    "fetch_image_from_slug",
    "fetch_image_from_url",
    "fetch_post_from_slug",
    "fetch_post_from_url",
    "join_names",
    "normalize_block",
    "normalize_blocks",
    "register_block_extractor",
    "slug_from_url",
    "trim_caption",
]
