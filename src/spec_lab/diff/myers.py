"""Shortest-edit-script line diff (Myers, O(N*D))."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import assert_never


class DiffKind(StrEnum):
    EQUAL = "equal"
    ADD = "add"
    DEL = "del"


@dataclass(slots=True, frozen=True)
class DiffOp:
    """One line of an edit script, always carrying the literal line text."""

    kind: DiffKind
    text: str


@dataclass(slots=True, frozen=True)
class DiffSummary:
    equal: int
    added: int
    deleted: int


def split_text_lines(text: str) -> list[str]:
    """Split on newline; empty text has zero lines."""
    if not text:
        return []
    return text.split("\n")


def myers_diff_text_lines(source_text: str, target_text: str) -> list[DiffOp]:
    """Diff two texts line by line."""
    return myers_diff_lines(split_text_lines(source_text), split_text_lines(target_text))


def myers_diff_lines(source: Sequence[str], target: Sequence[str]) -> list[DiffOp]:
    """Return a minimal edit script turning source into target.

    Within every change region deletions precede additions, so a substitution
    reads as del followed by add.
    """
    a = list(source)
    b = list(target)

    prefix = 0
    limit = min(len(a), len(b))
    while prefix < limit and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < len(a) - prefix
        and suffix < len(b) - prefix
        and a[len(a) - 1 - suffix] == b[len(b) - 1 - suffix]
    ):
        suffix += 1

    ops = [DiffOp(DiffKind.EQUAL, line) for line in a[:prefix]]
    ops.extend(_shortest_edit_script(a[prefix : len(a) - suffix], b[prefix : len(b) - suffix]))
    ops.extend(DiffOp(DiffKind.EQUAL, line) for line in a[len(a) - suffix :])
    return _order_change_runs(ops)


def summarize_ops(ops: Sequence[DiffOp]) -> DiffSummary:
    equal = added = deleted = 0
    for op in ops:
        match op.kind:
            case DiffKind.EQUAL:
                equal += 1
            case DiffKind.ADD:
                added += 1
            case DiffKind.DEL:
                deleted += 1
            case _:
                assert_never(op.kind)
    return DiffSummary(equal=equal, added=added, deleted=deleted)


def reconstruct_source(ops: Sequence[DiffOp]) -> list[str]:
    """Replay equal and del lines."""
    return [op.text for op in ops if op.kind is not DiffKind.ADD]


def reconstruct_target(ops: Sequence[DiffOp]) -> list[str]:
    """Replay equal and add lines."""
    return [op.text for op in ops if op.kind is not DiffKind.DEL]


def _shortest_edit_script(a: list[str], b: list[str]) -> list[DiffOp]:
    n = len(a)
    m = len(b)
    if n == 0:
        return [DiffOp(DiffKind.ADD, line) for line in b]
    if m == 0:
        return [DiffOp(DiffKind.DEL, line) for line in a]

    max_d = n + m
    offset = max_d
    v = [0] * (2 * max_d + 2)
    trace: list[list[int]] = []
    for d in range(max_d + 1):
        trace.append(v.copy())
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]
            else:
                x = v[offset + k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[offset + k] = x
            if x >= n and y >= m:
                return _backtrack(trace, a, b, offset)
    # unreachable: d == n + m always reaches (n, m)
    raise AssertionError("edit script search did not terminate")


def _backtrack(trace: list[list[int]], a: list[str], b: list[str], offset: int) -> list[DiffOp]:
    x = len(a)
    y = len(b)
    reversed_ops: list[DiffOp] = []
    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[offset + prev_k]
        prev_y = prev_x - prev_k
        while x > prev_x and y > prev_y:
            reversed_ops.append(DiffOp(DiffKind.EQUAL, a[x - 1]))
            x -= 1
            y -= 1
        if d > 0:
            if x == prev_x:
                reversed_ops.append(DiffOp(DiffKind.ADD, b[y - 1]))
            else:
                reversed_ops.append(DiffOp(DiffKind.DEL, a[x - 1]))
        x = prev_x
        y = prev_y
    reversed_ops.reverse()
    return reversed_ops


def _order_change_runs(ops: list[DiffOp]) -> list[DiffOp]:
    output: list[DiffOp] = []
    dels: list[DiffOp] = []
    adds: list[DiffOp] = []
    for op in ops:
        match op.kind:
            case DiffKind.DEL:
                dels.append(op)
            case DiffKind.ADD:
                adds.append(op)
            case DiffKind.EQUAL:
                output.extend(dels)
                output.extend(adds)
                dels.clear()
                adds.clear()
                output.append(op)
            case _:
                assert_never(op.kind)
    output.extend(dels)
    output.extend(adds)
    return output
