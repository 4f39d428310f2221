"""Grouping of measured code snippets into clusters of similar work.

Snippets are grouped by the value of one metric (for instance the
number of retired instructions). Dense regions of the sorted values
form clusters; the values lying before the first cluster and between
clusters form further groups of their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TypeVar

__all__ = ["calc_classify", "calc_classify_fake", "hash_sequence"]

T = TypeVar("T")

_MASK64 = (1 << 64) - 1
_GOLDEN = 0x9E3779B97F4A7C15


@dataclass
class _Center:
    left: int
    right: int

    @property
    def width(self) -> int:
        return self.right - self.left


def calc_classify(
    items: Iterable[T],
    alpha: float,
    key: Callable[[T], float] | None = None,
) -> list[list[T]]:
    """Split ``items`` into clusters of similar ``key`` values.

    ``alpha`` is the relative radius of a cluster: around each value ``v``
    the window holds the values in ``[v * (1 - alpha), v * (1 + alpha))``.
    Where windows overlap, the widest one is kept.

    The result lists the clusters in ascending order, then the items
    before the first cluster, then the items between each pair of
    neighbouring clusters. Items after the last cluster are left out.
    The input is not modified.
    """
    ordered: Sequence[T] = sorted(items, key=key)
    values = [key(item) for item in ordered] if key is not None else list(ordered)
    count = len(values)

    centers: list[_Center] = []
    left = right = 0
    for middle, value in enumerate(values):
        while right < count and values[right] < value * (1 + alpha):
            right += 1
        while left < middle and values[left] < value * (1 - alpha):
            left += 1
        if not centers or centers[-1].right < left:
            centers.append(_Center(left, right))
        elif centers[-1].width < right - left:
            centers[-1] = _Center(left, right)

    groups = [list(ordered[c.left:c.right]) for c in centers]
    if centers:
        groups.append(list(ordered[: centers[0].left]))
    groups.extend(
        list(ordered[before.right:after.left])
        for before, after in zip(centers, centers[1:])
    )
    return groups


def calc_classify_fake(items: Iterable[T], alpha: float) -> list[list[T]]:
    """Put every item into one single group; ``alpha`` is ignored."""
    return [list(items)]


def hash_sequence(values: Iterable[int]) -> int:
    """Combine a sequence of integer identities into one 64-bit hash.

    The result depends on the order of the values.
    """
    result = 0
    for value in values:
        h = int(value) & _MASK64
        mixed = (h + _GOLDEN + ((result << 6) & _MASK64) + (result >> 2)) & _MASK64
        result ^= mixed
    return result