"""
Tests for the literal query matcher.

Validates literal treatment of regex metacharacters, case and
whole-word semantics, context windows, and blank-query handling.
"""

from __future__ import annotations

import pytest

from limud_common.models import SearchOptions

from search.match_engine import compile_query_pattern, find_matches

_SENSITIVE = SearchOptions(case_sensitive=True)
_WHOLE = SearchOptions(whole_words=True)


class TestLiteralQueries:
    def test_dot_is_literal(self) -> None:
        matches = find_matches("axb a.b", "a.b")
        assert len(matches) == 1
        assert matches[0].index == 4
        assert matches[0].matched_text == "a.b"

    @pytest.mark.parametrize("query", ["(", "[a-z]+", "$5.00?", "a|b", "\\d", "^*"])
    def test_metacharacters_never_fail(self, query: str) -> None:
        text = f"price list: {query} and more {query}"
        matches = find_matches(text, query)
        assert [m.matched_text for m in matches] == [query, query]

    def test_blank_query_returns_nothing(self) -> None:
        assert find_matches("some text", "   ") == []
        assert find_matches("some text", "") == []
        assert compile_query_pattern(" \t", SearchOptions()) is None

    def test_query_is_stripped(self) -> None:
        matches = find_matches("the cat sat", "  cat ")
        assert [m.index for m in matches] == [4]

    def test_empty_text(self) -> None:
        assert find_matches("", "cat") == []
        assert find_matches(None, "cat") == []


class TestCaseSensitivity:
    def test_insensitive_by_default(self) -> None:
        assert len(find_matches("cat CAT Cat", "Cat")) == 3

    def test_sensitive_matches_exact_case(self) -> None:
        matches = find_matches("cat CAT Cat", "Cat", _SENSITIVE)
        assert len(matches) == 1
        assert matches[0].index == 8


class TestWholeWords:
    def test_whole_words_only(self) -> None:
        matches = find_matches("cats cat concatenate", "cat", _WHOLE)
        assert len(matches) == 1
        assert matches[0].index == 5

    def test_substrings_by_default(self) -> None:
        matches = find_matches("cats cat concatenate", "cat")
        assert [m.index for m in matches] == [0, 5, 12]

    def test_hebrew_word_boundaries(self) -> None:
        text = "התא והתאים בתא התא"
        matches = find_matches(text, "התא", _WHOLE)
        assert [m.index for m in matches] == [0, 15]


class TestScanning:
    def test_non_overlapping_left_to_right(self) -> None:
        matches = find_matches("aaaa", "aa")
        assert [m.index for m in matches] == [0, 2]

    def test_matched_text_keeps_source_case(self) -> None:
        matches = find_matches("Hello HELLO", "hello")
        assert [m.matched_text for m in matches] == ["Hello", "HELLO"]


class TestContextWindow:
    def test_window_in_middle_of_text(self) -> None:
        text = "x" * 1000 + "needle" + "y" * 994
        assert len(text) == 2000
        (match,) = find_matches(text, "needle")
        assert match.index == 1000
        assert match.context_start == 950
        assert match.context_end == 1000 + len("needle") + 50
        assert match.context_text == text[950:1056]

    def test_window_clamped_at_boundaries(self) -> None:
        text = "needle in a short text"
        (match,) = find_matches(text, "needle")
        assert match.context_start == 0
        assert match.context_end == len(text)
        assert match.context_text == text

    def test_custom_context_width(self) -> None:
        (match,) = find_matches("0123456789needle0123456789", "needle", context_chars=3)
        assert match.context_text == "789needle012"

    def test_invariants_hold(self) -> None:
        text = "ab " * 200
        for m in find_matches(text, "ab"):
            assert m.context_start <= m.index <= m.context_end <= len(text)
