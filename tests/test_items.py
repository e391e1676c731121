"""Tests for the pydantic document model."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from wpcontent.extractors.blocks import normalize_blocks
from wpcontent.items import (
    Article,
    Block,
    ImageBlock,
    ImageData,
    VideoData,
    WordPressArticle,
    block_model_for,
)


class TestSerialization:
    def test_wire_names(self, post_blocks):
        dumped = normalize_blocks(post_blocks)[3].model_dump(by_alias=True)
        assert set(dumped) == {
            "blockName", "attrs", "innerBlocks", "innerHTML", "innerContent", "index", "data",
        }
        assert dumped["innerBlocks"][1]["data"]["aspectRatio"] == pytest.approx(0.5625)

    def test_nested_payloads_dumped(self, post_blocks):
        dumped = normalize_blocks(post_blocks)[3].model_dump(by_alias=True)
        assert dumped["innerBlocks"][0]["data"] == {
            "url": "https://example.org/wp-content/uploads/podcast.mp3",
            "caption": "Episode 12: Housing",
        }

    def test_round_trip(self, post_blocks):
        blocks = normalize_blocks(post_blocks)
        dumped = json.loads(json.dumps([b.model_dump(by_alias=True) for b in blocks]))
        restored = [block_model_for(d["blockName"]).model_validate(d) for d in dumped]
        assert restored == blocks

    def test_unknown_block_rejects_payload(self):
        with pytest.raises(ValidationError):
            Block(block_name="core/paragraph", data={"text": "hi"})

    def test_frozen(self):
        block = Block(block_name="core/paragraph")
        with pytest.raises(ValidationError):
            block.index = 3


class TestBlockModelFor:
    def test_known(self):
        assert block_model_for("core/image") is ImageBlock

    def test_unknown(self):
        assert block_model_for("core/paragraph") is Block

    def test_none(self):
        assert block_model_for(None) is Block


class TestArticle:
    def test_article_with_related_posts(self):
        article = Article.model_validate({
            "id": "1",
            "permalink": "https://michigandaily.com/a/",
            "category": {"primary": "News", "parent": None},
            "title": "A",
            "date": "2023-01-01",
            "estimatedTime": 4,
            "image": {"id": 3, "sources": [{"uri": "a.jpg", "width": 10, "height": 5}]},
            "content": [{
                "blockName": "core/video",
                "data": {"url": "v.mp4", "caption": "", "aspectRatio": 1.5},
            }],
            "relatedPosts": [{
                "id": 2,
                "permalink": "https://michigandaily.com/b/",
                "title": "B",
                "date": "2023-01-02",
            }],
        })
        assert article.estimated_time == 4
        assert article.category.primary == "News"
        assert isinstance(article.image, ImageData)
        assert article.content[0].data == VideoData(url="v.mp4", aspect_ratio=1.5)
        assert article.related_posts[0].id == "2"
        assert article.related_posts[0].content is None

    def test_optional_fields_default(self):
        article = Article(id="1", permalink="p", title="t", date="d")
        assert article.excerpt is None
        assert article.content is None
        assert article.authors == []
        assert article.redirection is None


class TestWordPressArticle:
    def test_rest_shape(self):
        story = WordPressArticle.model_validate({
            "coauthors": [{"display_name": "Jane Doe", "user_nicename": "janedoe", "id": 9}],
            "link": "https://michigandaily.com/news/x/",
            "title": {"rendered": "Title &#8217;s"},
            "_links": {
                "self": [{"href": "https://michigandaily.com/wp-json/wp/v2/posts/1"}],
                "wp:featuredmedia": [{"embeddable": True, "href": "https://michigandaily.com/wp-json/wp/v2/media/5"}],
            },
        })
        assert story.coauthors[0].display_name == "Jane Doe"
        assert story.links.featured_media[0].href.endswith("/media/5")

    def test_missing_links(self):
        story = WordPressArticle.model_validate({"link": "x", "title": {"rendered": "t"}})
        assert story.links.featured_media == []
        assert story.coauthors == []
