"""Command line tools: map raw event codes to names, and list events."""

from __future__ import annotations

import sys
from fnmatch import fnmatchcase
from typing import Sequence

from .cache import EventCache
from .events import EventFileError, _strtoul

__all__ = ["rmap_main", "listevents_main"]


def rmap_main(argv: Sequence[str] | None = None) -> int:
    """Print the name and description of each raw event code given."""
    args = list(sys.argv[1:] if argv is None else argv)
    cache = EventCache()
    for arg in args:
        event = _strtoul(arg) & 0xFFFFFFFF
        try:
            name, desc = cache.rmap(event)
        except (KeyError, EventFileError):
            print(f"{event:x} not found")
        else:
            print(f"{event:x}: {name} : {desc}")
    return 0


def listevents_main(argv: Sequence[str] | None = None) -> int:
    """List events sorted by name.

    ``-v`` as the first argument also prints descriptions; a following
    argument is a shell pattern the names must match.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    verbose = False
    if args and args[0] == "-v":
        verbose = True
        args = args[1:]
    pattern = args[0] if args else None

    cache = EventCache()
    try:
        cache.read_events(None)
    except EventFileError as exc:
        print(exc, file=sys.stderr)

    entries = [
        entry
        for entry in cache.walk()
        if pattern is None or fnmatchcase(entry[0], pattern)
    ]
    entries.sort(key=lambda entry: entry[0])
    for name, event, desc in entries:
        print(f"{name:<40} {event}")
        if verbose and desc:
            print(f"\t{desc}")
    return 0