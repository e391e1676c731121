"""Unit tests for the caption heuristic."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from wpcontent.extractors.caption import derive_caption, trim_caption


def _p(html: str):
    return BeautifulSoup(html, "lxml").find("p")


class TestTrimCaption:
    def test_photo_courtesy_of(self):
        assert trim_caption("Photo Courtesy of Jane Doe") == "Jane Doe"

    def test_courtesy_of(self):
        assert trim_caption("Courtesy of the Bentley Library.") == "the Bentley Library"

    def test_bare_courtesy(self):
        assert trim_caption("Courtesy Jane Doe") == "Jane Doe"

    def test_design_by(self):
        assert trim_caption("Design by John Roe") == "John Roe"

    def test_daily_suffix(self):
        assert trim_caption("Jane Doe/Daily") == "Jane Doe"

    def test_mic_suffix(self):
        assert trim_caption("Jane Doe/MiC.") == "Jane Doe"

    def test_by_prefix(self):
        assert trim_caption("By Jane Doe") == "Jane Doe"

    def test_longer_phrase_removed_before_contained_phrase(self):
        # "Courtesy of" must go as a unit, not leave a dangling "of".
        assert trim_caption("Courtesy of Jane") == "Jane"

    def test_only_first_occurrence_removed(self):
        assert trim_caption("By Jane By John") == "Jane By John"

    def test_strips_whitespace(self):
        assert trim_caption("   Jane Doe   ") == "Jane Doe"

    def test_strips_single_trailing_period(self):
        assert trim_caption("Jane Doe..") == "Jane Doe."

    def test_empty(self):
        assert trim_caption("") == ""

    @pytest.mark.parametrize("text", [
        "Jane Doe",
        "Photo Courtesy of Jane Doe/Daily.",
        "  By John Roe. ",
        "Design by the Michigan in Color staff/MiC",
    ])
    def test_idempotent(self, text):
        once = trim_caption(text)
        assert trim_caption(once) == once

    @pytest.mark.parametrize("text", ["Jane Doe", "Snow on the Diag", ""])
    def test_trailing_period_ignored(self, text):
        assert trim_caption(text + ".") == trim_caption(text)


class TestDeriveCaption:
    def test_none_returns_empty(self):
        assert derive_caption(None) == ""

    def test_none_with_full_caption_returns_empty(self):
        assert derive_caption(None, full_caption=True) == ""

    def test_prefers_italic_text(self):
        p = _p("<p>Snow on the Diag. <i>Photo Courtesy of Jane Doe.</i></p>")
        assert derive_caption(p) == "Jane Doe"

    def test_falls_back_to_paragraph_text(self):
        p = _p("<p>Snow on the Diag.</p>")
        assert derive_caption(p) == "Snow on the Diag"

    def test_empty_italic_falls_back_to_paragraph_text(self):
        p = _p("<p>By Jane Doe<i></i></p>")
        assert derive_caption(p) == "Jane Doe"

    def test_full_caption_returns_markup_untrimmed(self):
        p = _p("<p> Snow. <i>Courtesy of Jane.</i> </p>")
        assert derive_caption(p, full_caption=True) == " Snow. <i>Courtesy of Jane.</i> "

    def test_entities_decoded_in_text(self):
        p = _p("<p><i>Courtesy of Jane &amp; John.</i></p>")
        assert derive_caption(p) == "Jane & John"
