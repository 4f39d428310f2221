"""An in-memory table of named events, filled from an event list file.

Events are kept in a small hash table keyed by a case-insensitive hash
of their name. Names can be resolved to perf style event strings,
walked in table order, and raw event codes can be mapped back to names.
"""

from __future__ import annotations

import re
import string
from collections import deque
from pathlib import Path
from typing import Iterator

from .events import EventRecord, json_events

__all__ = ["HASHSZ", "EventCache", "event_hash", "real_event"]

HASHSZ = 37

_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

# Fixed counters are encoded differently in the JSON lists and in perf.
_FIXED = (
    ("inst_retired.any", "event=0xc0"),
    ("cpu_clk_unhalted.thread", "event=0x3c"),
    ("cpu_clk_unhalted.thread_any", "event=0x3c,any=1"),
)

_HEX = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")


def _lower(text: str) -> str:
    return text.translate(_LOWER)


def event_hash(name: str) -> int:
    """Return the bucket of ``name``: a case-insensitive identifier hash."""
    h = 0
    for c in name:
        if c == "\0":
            break
        h = (h * 67 + ord(_lower(c)) - 113) & 0xFFFFFFFF
    return h % HASHSZ


def real_event(name: str, event: str) -> str:
    """Return the perf encoding of a fixed counter event, else ``event``.

    ``name`` matches a fixed counter when it is, ignoring case, that
    counter's name or a leading part of it.
    """
    key = _lower(name)
    for fixed_name, code in _FIXED:
        if fixed_name.startswith(key):
            return code
    return event


def _scan_hex(text: str, key: str) -> int:
    index = text.find(key)
    if index < 0:
        return 0
    match = _HEX.match(text, index + len(key))
    if not match:
        return 0
    sign, digits = match.groups()
    value = int(digits, 16)
    if sign == "-":
        value = -value
    return value & 0xFFFFFFFF


class EventCache:
    """Events read from an event list, looked up by name or by code."""

    def __init__(self) -> None:
        self._buckets: list[deque[EventRecord]] = [deque() for _ in range(HASHSZ)]
        self._loaded = False

    def _collect(self, record: EventRecord) -> None:
        self._buckets[event_hash(record.name)].appendleft(record)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.read_events(None)

    def read_events(self, path: str | Path | None = None) -> None:
        """Read the event list at ``path``, replacing any events held.

        With ``path`` None the default lists for the current CPU are read.
        Raises EventFileError if the list cannot be read.
        """
        if self._loaded:
            for bucket in self._buckets:
                bucket.clear()
        self._loaded = True
        json_events(path, self._collect)

    def lookup(self, name: str) -> str:
        """Resolve ``name[:qualifiers]`` to a ``pmu/event/qualifiers`` string.

        The name is matched ignoring case; colons in the result become
        commas. Raises KeyError if no event has that name.
        """
        self._ensure_loaded()
        base, _, quals = name.partition(":")
        key = _lower(base)
        for record in self._buckets[event_hash(base)]:
            if _lower(record.name[: len(base)]) == key:
                event = real_event(base, record.event)
                return f"{record.pmu}/{event}/{quals}".replace(":", ",")
        raise KeyError(name)

    def walk(self) -> Iterator[tuple[str, str, str]]:
        """Yield ``(name, "pmu/event/", description)`` for every event."""
        self._ensure_loaded()
        for bucket in self._buckets:
            for record in list(bucket):
                yield record.name, f"{record.pmu}/{record.event}/", record.desc

    def rmap(self, target: int) -> tuple[str, str]:
        """Return ``(name, description)`` of the event with code ``target``.

        Only the event and umask bits (the low 16 bits) are compared.
        Raises KeyError if no event matches.
        """
        self._ensure_loaded()
        wanted = target & 0xFFFF
        for bucket in self._buckets:
            for record in bucket:
                event = _scan_hex(record.event, "event=")
                umask = _scan_hex(record.event, "umask=")
                if ((event | (umask << 8)) & 0xFFFFFFFF) == wanted:
                    return record.name, record.desc
        raise KeyError(target)