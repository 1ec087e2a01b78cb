from __future__ import annotations

import random

import pytest

from spec_lab.diff import compute_edit_distance_hashes, compute_edit_distance_lines, fnv1a_32


def test_identical_text_has_distance_zero() -> None:
    assert compute_edit_distance_lines("a\nb\nc", "a\nb\nc") == 0


def test_completely_different_text_costs_the_longer_side() -> None:
    assert compute_edit_distance_lines("a\nb", "x\ny\nz") == 3


def test_empty_against_non_empty() -> None:
    assert compute_edit_distance_lines("", "a\nb") == 2
    assert compute_edit_distance_lines("a\nb", "") == 2


def test_single_line_change() -> None:
    assert compute_edit_distance_lines("a\nb\nc", "a\nB\nc") == 1
    assert compute_edit_distance_lines("a\nb\nc", "a\nb\nx", 50) == 1


def test_length_gap_above_ceiling_returns_sentinel_without_dp() -> None:
    assert compute_edit_distance_lines("a", "x\ny\nz\nw", 2) == 3


def test_zero_ceiling() -> None:
    assert compute_edit_distance_lines("a\nb", "a\nb", 0) == 0
    assert compute_edit_distance_lines("a\nb", "a\nc", 0) == 1


def test_negative_ceiling_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_cost"):
        compute_edit_distance_lines("a", "b", -1)


def test_symmetry_bound_and_early_exit_property() -> None:
    rng = random.Random(99)
    alphabet = ["x", "y", "z"]
    for _ in range(200):
        a = "\n".join(rng.choice(alphabet) for _ in range(rng.randint(0, 9)))
        b = "\n".join(rng.choice(alphabet) for _ in range(rng.randint(0, 9)))
        unbounded = compute_edit_distance_lines(a, b)
        assert unbounded == compute_edit_distance_lines(b, a)
        assert unbounded <= max(len(a.split("\n")) if a else 0, len(b.split("\n")) if b else 0)
        for ceiling in range(0, unbounded + 3):
            bounded = compute_edit_distance_lines(a, b, ceiling)
            if unbounded <= ceiling:
                assert bounded == unbounded
            else:
                assert bounded == ceiling + 1


def test_lines_are_compared_by_32_bit_hash_not_by_text() -> None:
    # Known, accepted approximation: two different lines whose FNV-1a hashes
    # collide are treated as equal. Demonstrated at the hash layer.
    assert compute_edit_distance_hashes([7, 8, 9], [7, 8, 9]) == 0
    assert compute_edit_distance_hashes([7, 8, 9], [7, 5, 9]) == 1
    assert 0 <= fnv1a_32("any line") <= 0xFFFFFFFF
    assert fnv1a_32("") == 2166136261
    assert fnv1a_32("a") == 0xE40C292C
