"""Bounded line-level Levenshtein distance with early exit."""

from __future__ import annotations

from collections.abc import Sequence

from spec_lab.diff.myers import split_text_lines

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
HASH_MASK = 0xFFFFFFFF


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-8 bytes of a line."""
    h = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & HASH_MASK
    return h


def compute_edit_distance_lines(
    previous_text: str,
    next_text: str,
    max_cost: int | None = None,
) -> int:
    """Return the line edit distance, or ``max_cost + 1`` once it provably exceeds max_cost.

    Lines are compared by 32-bit FNV-1a hash, so two distinct lines with
    colliding hashes count as equal. ``max_cost=None`` means unbounded.
    """
    return compute_edit_distance_hashes(
        [fnv1a_32(line) for line in split_text_lines(previous_text)],
        [fnv1a_32(line) for line in split_text_lines(next_text)],
        max_cost,
    )


def compute_edit_distance_hashes(
    a: Sequence[int],
    b: Sequence[int],
    max_cost: int | None = None,
) -> int:
    """Two-row Levenshtein over pre-hashed lines."""
    if max_cost is not None and max_cost < 0:
        raise ValueError("max_cost must be >= 0")
    if max_cost is not None and abs(len(a) - len(b)) > max_cost:
        return max_cost + 1

    # distance is symmetric; keep the row over the shorter sequence
    if len(b) > len(a):
        a, b = b, a
    m = len(b)
    prev = list(range(m + 1))
    curr = [0] * (m + 1)

    for i in range(1, len(a) + 1):
        curr[0] = i
        row_min = i
        ai = a[i - 1]
        for j in range(1, m + 1):
            cost = 0 if ai == b[j - 1] else 1
            value = prev[j] + 1
            insert = curr[j - 1] + 1
            if insert < value:
                value = insert
            substitute = prev[j - 1] + cost
            if substitute < value:
                value = substitute
            curr[j] = value
            if value < row_min:
                row_min = value
        if max_cost is not None and row_min > max_cost:
            return max_cost + 1
        prev, curr = curr, prev

    distance = prev[m]
    if max_cost is not None and distance > max_cost:
        return max_cost + 1
    return distance
