"""Deterministic free-text tokenizer."""

from __future__ import annotations

import re

TOKEN_PATTERN = re.compile(r"[\w'’]+")
APOSTROPHES = "'’"
MIN_TOKEN_LENGTH = 2


def tokenize(text: str) -> list[str]:
    """Lowercase, split on whitespace/punctuation, drop 1-char tokens, dedupe.

    Internal apostrophes survive (``it's``); leading and trailing ones are
    stripped. Order follows first occurrence.
    """
    seen: set[str] = set()
    tokens: list[str] = []
    for match in TOKEN_PATTERN.finditer(text.lower()):
        token = match.group(0).strip(APOSTROPHES)
        if len(token) < MIN_TOKEN_LENGTH or token in seen:
            continue
        seen.add(token)
        tokens.append(token)
    return tokens
