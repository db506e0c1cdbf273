"""Myers shortest edit script.

Runs in O((N+M)·D) time, where D is the edit distance, keeping one frontier
entry per diagonal ``k = x - y``.  Each frontier entry carries the edit
history that reached it, so the script is available as soon as the far
corner is reached without a separate backtracking pass.

Reference: E. Myers, "An O(ND) Difference Algorithm and Its Variations"
(Algorithmica, 1986).
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class EditKind(StrEnum):
    """Kind of a single edit-script step."""

    KEEP = "Keep"
    INSERT = "Insert"
    REMOVE = "Remove"


@dataclass(frozen=True)
class EditAction(Generic[T]):
    """One step of an edit script: keep, insert or remove ``value``."""

    kind: EditKind
    value: T


@dataclass(frozen=True)
class _Frontier(Generic[T]):
    x: int
    history: tuple[EditAction[T], ...]


_START: _Frontier = _Frontier(0, ())


def myers_diff(a: Sequence[T], b: Sequence[T]) -> list[EditAction[T]]:
    """Return the shortest edit script transforming *a* into *b*.

    Keeping the actions of kind KEEP and INSERT, in order, reproduces *b*;
    KEEP and REMOVE reproduce *a*.

    Ties are broken deterministically: at diagonal ``k`` the path steps down
    (an insertion, from ``k+1``) when ``k == -d`` or when diagonal ``k+1``
    reaches strictly further than ``k-1``; otherwise it steps right (a
    removal, from ``k-1``).  Runs of equal elements are followed greedily.
    """
    a_max = len(a)
    b_max = len(b)
    frontier: dict[int, _Frontier[T]] = {1: _START}

    for d in range(a_max + b_max + 1):
        for k in range(-d, d + 1, 2):
            go_down = k == -d or (k != d and frontier.get(k - 1, _START).x < frontier.get(k + 1, _START).x)

            if go_down:
                prev = frontier.get(k + 1, _START)
                x = prev.x
            else:
                prev = frontier.get(k - 1, _START)
                x = prev.x + 1
            history = list(prev.history)

            y = x - k

            if go_down and 1 <= y <= b_max:
                history.append(EditAction(EditKind.INSERT, b[y - 1]))
            elif 1 <= x <= a_max:
                history.append(EditAction(EditKind.REMOVE, a[x - 1]))

            while x < a_max and y < b_max and a[x] == b[y]:
                history.append(EditAction(EditKind.KEEP, a[x]))
                x += 1
                y += 1

            if x >= a_max and y >= b_max:
                return history

            frontier[k] = _Frontier(x, tuple(history))

    # Unreachable: d == a_max + b_max always reaches the far corner.
    return []
