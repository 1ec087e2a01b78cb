from __future__ import annotations

from spec_lab.search import tokenize


def test_lowercases_and_dedupes_in_first_occurrence_order() -> None:
    assert tokenize("Hello, WORLD! hello world again") == ["hello", "world", "again"]


def test_drops_single_character_tokens() -> None:
    assert tokenize("a b zz c") == ["zz"]
    assert tokenize("") == []
    assert tokenize("  ,.;  ") == []


def test_keeps_internal_apostrophes_and_strips_outer_ones() -> None:
    assert tokenize("it's fine") == ["it's", "fine"]
    assert tokenize("'quoted' words") == ["quoted", "words"]
    assert tokenize("don’t stop") == ["don’t", "stop"]


def test_word_characters_include_digits_and_underscores() -> None:
    assert tokenize("v2 handles 42 snake_case ids") == ["v2", "handles", "42", "snake_case", "ids"]


def test_is_deterministic() -> None:
    text = "Delta gamma, beta; alpha. Gamma?"
    assert tokenize(text) == tokenize(text) == ["delta", "gamma", "beta", "alpha"]
