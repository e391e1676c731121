"""wpcontent.plugins - Extension point for block payload extractors.

The built-in normalizer understands a fixed set of block names.  Third-party
block types can be given a typed payload without touching the core::

    from pydantic import BaseModel

    from wpcontent import register_block_extractor
    from wpcontent.items import Block

    class PullQuote(BaseModel):
        text: str

    class PullQuoteBlock(Block):
        data: PullQuote | None = None

    class PullQuoteExtractor:
        block_name = "core/pullquote"
        model = PullQuoteBlock

        def extract(self, block, *, full_caption=False):
            return PullQuote(text=block.inner_html)

    register_block_extractor(PullQuoteExtractor())

Plugins follow a ``runtime_checkable`` ``Protocol`` so tests can use
``isinstance()`` checks without inheriting from a base class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from wpcontent.items import Block, ParsedBlock


@runtime_checkable
class BlockExtractorPlugin(Protocol):
    """Builds the ``data`` payload for one block name."""

    block_name: str
    model: type[Block]

    def extract(self, block: ParsedBlock, *, full_caption: bool = False) -> Any:
        """Return the payload for *block*, or None when it cannot be built."""
        ...


_registry: dict[str, BlockExtractorPlugin] = {}


def register_block_extractor(plugin: BlockExtractorPlugin) -> None:
    """Register *plugin* for ``plugin.block_name``, replacing any earlier one.

    Built-in block names cannot be overridden; registering one is a no-op at
    dispatch time because the normalizer consults its own table first.
    """
    _registry[plugin.block_name] = plugin


def get_block_extractor(block_name: str) -> BlockExtractorPlugin | None:
    """Return the plugin registered for *block_name*, if any."""
    return _registry.get(block_name)


def get_block_extractors() -> list[BlockExtractorPlugin]:
    """Return all registered block extractor plugins."""
    return list(_registry.values())


def clear_plugins() -> None:
    """Remove all registered plugins. Primarily for use in tests."""
    _registry.clear()
