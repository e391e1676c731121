"""Unit tests for the single-image extractor."""

from __future__ import annotations

import pytest

from wpcontent.extractors.image import (
    ImageNotFoundError,
    attr_or_none,
    extract_image,
    first_image,
    parse_srcset,
)
from wpcontent.items import Image


class TestExtractImage:
    def test_caption_from_data_attribute(self):
        html = '<img src="x.jpg" width="10" data-image-caption="<p><i>Courtesy of Jane.</i></p>">'
        image = extract_image(html)
        assert image.src == "x.jpg"
        assert image.width == "10"
        assert image.caption == "Jane"

    def test_returns_image_model(self, media_description_html):
        assert isinstance(extract_image(media_description_html), Image)

    def test_media_description_fields(self, media_description_html):
        image = extract_image(media_description_html)
        assert image.width == "300"
        assert image.height == "200"
        assert image.src.endswith("diag-300x200.jpg")
        assert image.alt == "Students walk across the Diag"
        assert image.sizes == "(max-width: 300px) 100vw, 300px"
        assert "1024w" in image.srcset
        assert image.permalink == "https://michigandaily.com/news/diag/"

    def test_media_description_caption(self, media_description_html):
        assert extract_image(media_description_html).caption == "Jane Doe"

    def test_full_caption_returns_paragraph_markup(self, media_description_html):
        image = extract_image(media_description_html, full_caption=True)
        assert image.caption == (
            "Students walk across the Diag. <i>Photo Courtesy of Jane Doe/Daily.</i>"
        )

    def test_missing_attributes_are_none(self):
        image = extract_image('<img src="a.jpg">')
        assert image.width is None
        assert image.height is None
        assert image.alt is None
        assert image.sizes is None
        assert image.srcset is None
        assert image.permalink is None

    def test_empty_attribute_is_empty_string(self):
        image = extract_image('<img src="a.jpg" alt="">')
        assert image.alt == ""

    def test_no_caption_attribute_gives_empty_caption(self):
        assert extract_image('<img src="a.jpg">').caption == ""

    def test_caption_attribute_without_paragraph(self):
        image = extract_image('<img src="a.jpg" data-image-caption="Just text">')
        assert image.caption == ""

    def test_first_image_wins(self):
        image = extract_image('<div><img src="first.jpg"><img src="second.jpg"></div>')
        assert image.src == "first.jpg"

    def test_lazy_loading_kept_by_default(self):
        image = extract_image('<img loading="lazy" src="a.jpg">')
        assert 'loading="lazy"' in image.html

    def test_lazy_loading_stripped(self):
        image = extract_image('<img loading="lazy" src="a.jpg" width="5">', lazy_load=False)
        assert "loading" not in image.html
        assert 'src="a.jpg"' in image.html
        assert image.width == "5"

    def test_html_is_img_serialization(self):
        image = extract_image('<p><a href="/x"><img src="a.jpg"></a></p>')
        assert image.html.startswith("<img")
        assert "<a" not in image.html

    def test_no_image_raises(self):
        with pytest.raises(ImageNotFoundError):
            extract_image("<p>No pictures here</p>")

    def test_not_found_is_value_error(self):
        with pytest.raises(ValueError):
            extract_image("")

    def test_deterministic(self, media_description_html):
        assert extract_image(media_description_html) == extract_image(media_description_html)


class TestAttrOrNone:
    def test_single_valued(self):
        img = first_image('<img alt="a  b" src="x.jpg"/>')
        assert attr_or_none(img, "alt") == "a  b"

    def test_multi_valued_joined_with_single_spaces(self):
        img = first_image('<img class="wp-image-7   size-large" src="x.jpg"/>')
        assert attr_or_none(img, "class") == "wp-image-7 size-large"

    def test_missing(self):
        assert attr_or_none(first_image('<img src="x.jpg"/>'), "alt") is None


class TestParseSrcset:
    def test_width_descriptors(self):
        assert parse_srcset("a.jpg 300w, b.jpg 1024w") == [("a.jpg", 300), ("b.jpg", 1024)]

    def test_density_descriptors_skipped(self):
        assert parse_srcset("a.jpg 1x, b.jpg 2x") == []

    def test_bare_url_skipped(self):
        assert parse_srcset("a.jpg, b.jpg 640w") == [("b.jpg", 640)]

    def test_empty(self):
        assert parse_srcset(None) == []
        assert parse_srcset("") == []
