"""
Tests for search-term highlighting.
"""

import pytest

from paper_shelf_server.core.highlight import (
    ELLIPSIS,
    highlight,
    normalize_terms,
    query_terms,
    render_spans,
    truncate,
)
from paper_shelf_server.core.models import HighlightSpan, SpanKind


def _plain(text: str) -> HighlightSpan:
    return HighlightSpan(kind=SpanKind.PLAIN, text=text)


def _match(text: str) -> HighlightSpan:
    return HighlightSpan(kind=SpanKind.MATCH, text=text)


class TestNormalizeTerms:
    """Tests for term normalization."""

    def test_lowercases_trims_and_drops_empty(self):
        assert normalize_terms(["  Deep ", "", "   ", "LEARNING"]) == ["deep", "learning"]

    def test_deduplicates_keeping_order(self):
        assert normalize_terms(["b", "A", "a", "B"]) == ["b", "a"]

    def test_query_terms(self):
        assert query_terms("Deep  learning deep") == ["deep", "learning"]


class TestTruncate:
    """Tests for truncation."""

    def test_short_text_untouched(self):
        assert truncate("short", 10) == "short"

    def test_long_text_cut_with_ellipsis(self):
        assert truncate("hello world", 5) == "hello" + ELLIPSIS

    @pytest.mark.parametrize("max_length", [None, 0, -3])
    def test_missing_or_invalid_length_means_no_truncation(self, max_length):
        assert truncate("hello world", max_length) == "hello world"


class TestHighlight:
    """Tests for highlight()."""

    def test_case_insensitive_match(self):
        spans = highlight("Machine Learning is great", ["machine learning"])
        assert spans == [_match("Machine Learning"), _plain(" is great")]

    def test_empty_text(self):
        assert highlight("", ["anything"]) == []

    def test_empty_terms_passthrough(self):
        assert highlight("Some text", []) == [_plain("Some text")]
        assert highlight("Some text", ["", "  "]) == [_plain("Some text")]

    def test_empty_terms_still_truncates(self):
        assert highlight("hello world", [], max_length=5) == [_plain("hello...")]

    def test_regex_metacharacters_are_literal(self):
        spans = highlight("xa.b*cy axbbc", ["a.b*c"])
        assert spans == [_plain("x"), _match("a.b*c"), _plain("y axbbc")]

    @pytest.mark.parametrize("term", ["(", "[a-", "\\", "*", "+?", "$^"])
    def test_pathological_terms_do_not_raise(self, term: str):
        text = "f(x) = [a-z]\\ * +? $^"
        spans = highlight(text, [term])
        assert "".join(s.text for s in spans) == text
        assert any(s.is_match for s in spans)

    def test_substring_match_inside_word(self):
        spans = highlight("Unsupervised", ["super"])
        assert spans == [_plain("Un"), _match("super"), _plain("vised")]

    def test_longest_term_wins_at_same_position(self):
        spans = highlight("testing tests", ["test", "testing"])
        assert spans == [_match("testing"), _plain(" "), _match("test"), _plain("s")]

    def test_adjacent_matches(self):
        spans = highlight("testtest", ["test"])
        assert spans == [_match("test"), _match("test")]

    def test_truncation_happens_before_matching(self):
        # "world" is cut at the boundary and must not be highlighted
        spans = highlight("hello world", ["world"], max_length=8)
        assert spans == [_plain("hello wo...")]

    def test_match_inside_truncated_text(self):
        spans = highlight("hello world", ["hello"], max_length=8)
        assert spans == [_match("hello"), _plain(" wo...")]

    def test_invalid_max_length_ignored(self):
        spans = highlight("hello world", ["world"], max_length=-1)
        assert spans == [_plain("hello "), _match("world")]

    def test_unicode(self):
        spans = highlight("Ünïcödé tëxt", ["ÜNÏ"])
        assert spans == [_match("Ünï"), _plain("cödé tëxt")]

    @pytest.mark.parametrize(
        "text, terms, max_length",
        [
            ("Graph neural networks for molecules", ["neural", "graph"], None),
            ("Graph neural networks for molecules", ["networks"], 12),
            ("aaaa", ["a", "aa"], None),
            ("nothing matches here", ["zzz"], 7),
            ("Mixed CASE case Case", ["case"], None),
        ],
    )
    def test_lossless_partition(self, text: str, terms: list[str], max_length):
        spans = highlight(text, terms, max_length=max_length)
        assert "".join(span.text for span in spans) == truncate(text, max_length)
        assert all(span.text for span in spans)


class TestRenderSpans:
    """Tests for render_spans()."""

    def test_markdown(self):
        spans = highlight("Machine Learning is great", ["learning"])
        assert render_spans(spans) == "Machine **Learning** is great"

    def test_html_escapes_text(self):
        spans = highlight("<b>x</b> & y", ["x"])
        assert render_spans(spans, style="html") == "&lt;b&gt;<mark>x</mark>&lt;/b&gt; &amp; y"

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            render_spans([_plain("x")], style="latex")
