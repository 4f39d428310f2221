"""A histogram of sampled values, reported by frequency."""

from __future__ import annotations

import heapq
from collections import Counter

__all__ = ["Histogram"]


class Histogram:
    """Counts how often each value was added."""

    def __init__(self) -> None:
        self.counts: Counter[int] = Counter()
        self.total = 0

    def add(self, value: int) -> None:
        """Count one more occurrence of ``value``."""
        self.counts[value] += 1
        self.total += 1

    def report(self, min_percent: float) -> tuple[list[tuple[float, int, int]], int]:
        """Return the rows at or above ``min_percent`` and the count below it.

        ``min_percent`` is a fraction of the total. Rows are
        ``(percent, value, count)``, most frequent first; ties put the
        larger value first.
        """
        kept: list[tuple[int, int]] = []
        below = 0
        for value, count in sorted(self.counts.items()):
            if count / self.total >= min_percent:
                kept.append((count, value))
            else:
                below += count
        rows = [
            (count / self.total * 100.0, value, count)
            for count, value in heapq.nlargest(len(kept), kept)
        ]
        return rows, below

    def format(self, min_percent: float) -> str:
        """Return the report as a printable table."""
        rows, below = self.report(min_percent)
        lines = [f"{'PERCENT':>11} {'ADDR':>16} {'SAMPLES':>16}"]
        lines.extend(
            f"{percent:10.2f}% {value:16x} {count:16d}" for percent, value, count in rows
        )
        lines.append(f"{below} below threshold")
        return "\n".join(lines) + "\n"