"""Tests for record assembly."""

import pytest

from lexlist.common.config import CrawlConfig
from lexlist.extract.assembler import (
    animation_script_url,
    assemble_record,
    extract_record,
    in_lexical_list,
    stroke_order_urls,
)
from lexlist.schema.record import CharacterMetadata, VocabularyLists, WordEntry


@pytest.fixture
def resolve():
    return CrawlConfig().absolute_url


class TestUrls:
    """Tests for stroke-order resource URLs."""

    def test_stroke_order_urls(self, page, resolve):
        """Animation frames come first, then stroke images, all absolute."""
        assert stroke_order_urls(page, resolve) == [
            "https://www.edbchinese.hk/lexlist_ch/stkdemo_js/6c34.html",
            "https://www.edbchinese.hk/images/stroke/6c34.png",
        ]

    def test_animation_script_url(self):
        """The script sits next to the animation page."""
        assert animation_script_url("https://x/stkdemo_js/6c34.html") == "https://x/stkdemo_js/6c34.js"
        assert animation_script_url("https://x/stkdemo_js/6c34.html?v=2") == "https://x/stkdemo_js/6c34.js?v=2"


class TestLexicalMembership:
    """Tests for inLexicalListsHK."""

    def test_primary_list_present(self, page):
        assert in_lexical_list(page) is True

    def test_exclusion_dominates(self, excluded_page):
        """The exclusion sentence wins even when a primary-list table exists."""
        assert in_lexical_list(excluded_page) is False


class TestAssembleRecord:
    """Tests for merging extractor output."""

    def test_defaults_never_none(self):
        """Missing metadata becomes empty strings and zero."""
        record = assemble_record("0001", "水", "", CharacterMetadata(), VocabularyLists())
        data = record.to_dict()
        assert data["radical"] == ""
        assert data["strokeCount"] == 0
        assert data["jyutping"] == ""
        assert data["pinyin"] == ""
        assert data["strokeVectors"] == []
        assert data["stage1Words"] == []
        assert None not in data.values()

    def test_excluded_character_has_no_staged_words(self):
        """Staged words are dropped when the character is not in the list."""
        vocab = VocabularyLists(
            stage1_words=(WordEntry("水果", stage="1"),),
            four_character_phrases=(WordEntry("水落石出"),),
        )
        record = assemble_record("0001", "水", "", CharacterMetadata(), vocab, in_lexical_lists_hk=False)
        assert record.vocabulary.stage1_words == ()
        assert [w.word for w in record.vocabulary.four_character_phrases] == ["水落石出"]

    def test_key_order(self):
        """Serialized records keep the stable key order."""
        record = assemble_record("0001", "水", "u", CharacterMetadata(), VocabularyLists())
        assert list(record.to_dict())[:5] == ["id", "character", "sourceUrl", "radical", "strokeCount"]


class TestExtractRecord:
    """Tests for the full single-page extraction."""

    def test_sample_page(self, page_html, animation_script, resolve):
        """Metadata, vocabulary and stroke vectors are all merged."""
        loaded = []

        def load_script(url):
            loaded.append(url)
            return animation_script

        record = extract_record("0001", "水", page_html, "https://src", resolve, load_script=load_script)
        assert loaded == ["https://www.edbchinese.hk/lexlist_ch/stkdemo_js/6c34.js"]
        assert record.radical == "水"
        assert record.stroke_count == 4
        assert record.in_lexical_lists_hk is True
        assert [v.stroke_number for v in record.stroke_vectors] == [1, 2, 2, 3]
        assert [w.word for w in record.vocabulary.stage2_words] == ["水平"]

    def test_excluded_page(self, excluded_page_html, resolve):
        """The exclusion scenario empties both staged lists."""
        record = extract_record("0002", "沙", excluded_page_html, "", resolve)
        data = record.to_dict()
        assert data["inLexicalListsHK"] is False
        assert data["stage1Words"] == []
        assert data["stage2Words"] == []
        assert data["radical"] == "氵"
        assert data["strokeCount"] == 7

    def test_script_failure_is_not_fatal(self, page_html, resolve):
        """A failing script loader only costs the stroke vectors."""

        def load_script(url):
            raise RuntimeError("script server down")

        record = extract_record("0001", "水", page_html, "", resolve, load_script=load_script)
        assert record.stroke_vectors == ()
        assert record.radical == "水"
