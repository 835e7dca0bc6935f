"""
Tests for snippet highlighting and HTML rendering.
"""

from __future__ import annotations

from limud_common.models import HighlightSegment, SearchOptions

from search.highlighter import highlight, highlight_match, render_html
from search.match_engine import find_matches


class TestHighlight:
    def test_marks_each_occurrence(self) -> None:
        segments = highlight("the Cat and the cat", "cat")
        assert segments == [
            HighlightSegment(text="the "),
            HighlightSegment(text="Cat", highlighted=True),
            HighlightSegment(text=" and the "),
            HighlightSegment(text="cat", highlighted=True),
        ]

    def test_segments_rebuild_text(self) -> None:
        text = "a.b axb a.b!"
        assert "".join(s.text for s in highlight(text, "a.b")) == text

    def test_case_sensitive_option(self) -> None:
        segments = highlight("Cat cat", "cat", SearchOptions(case_sensitive=True))
        assert [s.text for s in segments if s.highlighted] == ["cat"]

    def test_whole_words_option(self) -> None:
        segments = highlight("cats cat", "cat", SearchOptions(whole_words=True))
        assert [s for s in segments if s.highlighted] == [HighlightSegment(text="cat", highlighted=True)]
        assert segments[0] == HighlightSegment(text="cats ")

    def test_blank_query_is_single_plain_segment(self) -> None:
        assert highlight("plain text", "  ") == [HighlightSegment(text="plain text")]

    def test_empty_text(self) -> None:
        assert highlight("", "cat") == []

    def test_agrees_with_match_engine(self) -> None:
        text = "Shalom SHALOM shalomi shalom"
        options = SearchOptions(whole_words=True)
        matched = [m.matched_text for m in find_matches(text, "shalom", options)]
        highlighted = [s.text for s in highlight(text, "shalom", options) if s.highlighted]
        assert highlighted == matched


class TestRenderHtml:
    def test_wraps_highlighted_runs(self) -> None:
        html_out = render_html(highlight("a cat here", "cat"))
        assert html_out == 'a <span class="highlight">cat</span> here'

    def test_escapes_plain_and_matched_text(self) -> None:
        text = "<script>alert(1)</script> & <b>"
        html_out = render_html(highlight(text, "<b>"))
        assert "<script>" not in html_out
        assert "&lt;script&gt;alert(1)&lt;/script&gt; &amp; " in html_out
        assert html_out.endswith('<span class="highlight">&lt;b&gt;</span>')

    def test_custom_class_is_escaped(self) -> None:
        html_out = render_html([HighlightSegment(text="x", highlighted=True)], css_class='hl" onclick="x')
        assert 'onclick="x' not in html_out


class TestHighlightMatch:
    def test_word_cut_at_window_start_not_highlighted(self) -> None:
        text = "xxcat" + " " * 47 + "cat"
        matches = find_matches(text, "cat", SearchOptions(whole_words=True))
        assert [m.index for m in matches] == [52]

        segments = highlight_match(matches[0], matches)

        assert [s.text for s in segments if s.highlighted] == ["cat"]
        assert "".join(s.text for s in segments) == matches[0].context_text

    def test_word_cut_at_window_end_not_highlighted(self) -> None:
        text = "cat" + " " * 47 + "catx"
        matches = find_matches(text, "cat", SearchOptions(whole_words=True))
        assert matches[0].context_text.endswith("cat")

        segments = highlight_match(matches[0], matches)

        assert segments[0] == HighlightSegment(text="cat", highlighted=True)
        assert [s.text for s in segments if s.highlighted] == ["cat"]

    def test_neighbouring_matches_in_window(self) -> None:
        matches = find_matches("cat dog cat", "cat")
        segments = highlight_match(matches[0], matches)
        assert [s.text for s in segments if s.highlighted] == ["cat", "cat"]

    def test_span_clipped_at_window_edge(self) -> None:
        matches = find_matches("catcat", "cat", context_chars=1)
        segments = highlight_match(matches[0], matches)
        assert segments == [
            HighlightSegment(text="cat", highlighted=True),
            HighlightSegment(text="c", highlighted=True),
        ]
