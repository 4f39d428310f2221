"""Reading performance event lists from JSON files.

Each event object of the file is turned into a name, an event string in
perf format (``umask=...,event=0x..``), a description and a PMU name.
"""

from __future__ import annotations

import os
import re
import string
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping

from .cpustr import get_cpu_str_type
from .jsmn import Token, TokenType
from .jsonfile import JsonFileError, json_line, json_name, parse_json

__all__ = [
    "EventRecord",
    "EventFileError",
    "parse_event_file",
    "json_events",
    "default_event_file",
]


class EventFileError(JsonFileError):
    """An event list file could not be read or has an unexpected layout."""


@dataclass(frozen=True)
class EventRecord:
    """One event of an event list."""

    name: str
    event: str
    desc: str
    pmu: str


_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_C_SPACE = " \t\n\v\f\r"
_ULONG_MAX = (1 << 64) - 1

_FIELDS = (
    ("UMask", "umask="),
    ("CounterMask", "cmask="),
    ("Invert", "inv="),
    ("AnyThread", "any="),
    ("EdgeDetect", "edge="),
    ("SampleAfterValue", "period="),
)

_MSRS = (
    ("0x3F6", "ldlat="),
    ("0x1A6", "offcore_rsp="),
    ("0x1A7", "offcore_rsp="),
    ("0x3F7", "frontend="),
)

_UNIT_TO_PMU = (
    ("CBO", "cbox"),
    ("QPI LL", "qpi"),
    ("SBO", "sbox"),
    ("IMPH-U", "cbox"),
    ("NCU", "cbox"),
    ("UPI LL", "upi"),
)

_NUMBER = re.compile(
    r"[ \t\n\v\f\r]*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)"
)

_warned: set[str] = set()


def _ieq(a: str, b: str) -> bool:
    return len(a) == len(b) and a.translate(_LOWER) == b.translate(_LOWER)


def _strtoul(text: str) -> int:
    match = _NUMBER.match(text)
    if not match:
        return 0
    sign, digits = match.groups()
    if digits[:2].lower() == "0x":
        value = int(digits, 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    value = min(value, _ULONG_MAX)
    return (-value) & _ULONG_MAX if sign == "-" else value


def _addfield(dst: str | None, sep: str, a: str, b: str = "") -> str:
    if not dst:
        return a + b
    return dst + sep + a + b


def _fixdesc(desc: str) -> str:
    stripped = desc.rstrip(_C_SPACE)
    if stripped.endswith("."):
        return stripped[:-1]
    return desc


def _cut_comma(value: str) -> str:
    return value.split(",", 1)[0]


def _lookup_msr(value: str) -> str | None:
    number = _cut_comma(value)
    for msr, pname in _MSRS:
        if _ieq(number, msr):
            return pname
    if "msr" not in _warned:
        _warned.add("msr")
        print(f"Unknown MSR in event file {value}", file=sys.stderr)
    return None


class _EventBuilder:
    def __init__(self) -> None:
        self.event: str | None = None
        self.desc: str | None = None
        self.name: str | None = None
        self.pmu: str | None = None
        self.eventcode = 0
        self.msr: str | None = None
        self.msrval: str | None = None
        self.precise: str | None = None

    def _match_field(self, field: str, nz: bool, value: str) -> bool:
        for json_field, kernel in _FIELDS:
            if _ieq(field, json_field) and nz:
                if _ieq(value, "0x00") or _ieq(value, "0x0"):
                    return True
                self.event = _addfield(self.event, ",", kernel, _cut_comma(value))
                return True
        return False

    def add(self, field: str, value: str) -> None:
        nz = not _ieq(value, "0") and not _ieq(value, "0x00")
        if self._match_field(field, nz, value):
            return
        if _ieq(field, "EventCode"):
            self.eventcode |= _strtoul(value)
        elif _ieq(field, "ExtSel"):
            self.eventcode = (self.eventcode | (_strtoul(value) << 21)) & _ULONG_MAX
        elif _ieq(field, "EventName"):
            self.name = (self.name or "") + value
        elif _ieq(field, "BriefDescription"):
            self.desc = _fixdesc(_addfield(self.desc, "", "", value))
        elif (
            _ieq(field, "PEBS")
            and nz
            and self.desc is not None
            and "(Precise Event)" not in self.desc
        ):
            self.precise = value
        elif _ieq(field, "MSRIndex") and nz:
            self.msr = _lookup_msr(value)
        elif _ieq(field, "MSRValue"):
            self.msrval = value
        elif _ieq(field, "Errata") and not _ieq(value, "null"):
            self.desc = _addfield(self.desc, ". ", " Spec update: ", value)
        elif _ieq(field, "Data_LA") and nz:
            self.desc = _addfield(self.desc, ". ", " Supports address when precise")
        elif _ieq(field, "Unit"):
            known = next((pmu for unit, pmu in _UNIT_TO_PMU if _ieq(value, unit)), None)
            if known is not None:
                self.pmu = known
            else:
                self.pmu = _addfield(self.pmu, "", "", value).translate(_LOWER)
            self.desc = _addfield(self.desc, ". ", "Unit: ")
            self.desc = _addfield(self.desc, "", self.pmu)

    def finish(self, path: str | Path, line: int) -> EventRecord:
        desc = self.desc
        if self.precise is not None:
            marker = "(Must be precise)" if _ieq(self.precise, "2") else "(Precise event)"
            desc = _addfield(desc, " ", marker)
        code = "event=0" if self.eventcode == 0 else f"event={self.eventcode:#x}"
        event = _addfield(self.event, ",", code)
        if self.msr is not None:
            event = _addfield(event, ",", self.msr, self.msrval or "")
        if self.name is None:
            raise EventFileError(f"{path}:{line}: event without EventName")
        return EventRecord(
            name=self.name.translate(_LOWER),
            event=event,
            desc=desc or "",
            pmu=self.pmu if self.pmu is not None else "cpu",
        )


def _fail(path: str | Path, text: str, tokens: list[Token], index: int, message: str):
    if index >= len(tokens):
        raise EventFileError(f"{path}: {message}, got end of input")
    loc = tokens[index]
    if loc.start == 0 and index > 0:
        loc = tokens[index - 1]
    raise EventFileError(
        f"{path}:{json_line(text, loc)}: {message}, got {json_name(tokens[index])}"
    )


def _iter_events(path: str | Path) -> Iterator[EventRecord]:
    try:
        text, tokens = parse_json(path)
    except EventFileError:
        raise
    except JsonFileError as exc:
        raise EventFileError(str(exc)) from exc

    def expect(index: int, kind: TokenType, message: str) -> Token:
        if index >= len(tokens) or tokens[index].type != kind:
            _fail(path, text, tokens, index, message)
        return tokens[index]

    top = expect(0, TokenType.ARRAY, "expected top level array")
    pos = 1
    for _ in range(top.size):
        obj = expect(pos, TokenType.OBJECT, "expected object")
        pos += 1
        builder = _EventBuilder()
        j = 0
        while j < obj.size:
            field = expect(pos + j, TokenType.STRING, "Expected field name")
            value = expect(pos + j + 1, TokenType.STRING, "Expected string value")
            builder.add(text[field.start:field.end], text[value.start:value.end])
            j += 2
        yield builder.finish(path, json_line(text, obj))
        pos += j
    if pos != len(tokens):
        _fail(path, text, tokens, pos, "unexpected objects at end")


def parse_event_file(path: str | Path) -> list[EventRecord]:
    """Read every event of the JSON event list at ``path``."""
    return list(_iter_events(path))


def _feed(path: str | Path, func: Callable[[EventRecord], Any]) -> Any:
    for record in _iter_events(path):
        result = func(record)
        if result:
            return result
    return None


def json_events(path: str | Path | None, func: Callable[[EventRecord], Any]) -> Any:
    """Call ``func`` with each event of an event list file.

    When ``path`` is None the default core list is read, followed by the
    default uncore list if it can be read. If ``func`` returns a true
    value the walk stops and that value is returned; otherwise None.
    """
    if path is not None:
        return _feed(path, func)
    core = default_event_file("-core")
    if core is None:
        raise EventFileError("no default event list file found")
    result = _feed(core, func)
    if result:
        return result
    uncore = default_event_file("-uncore")
    if uncore is None:
        return None
    try:
        return _feed(uncore, func)
    except EventFileError:
        return None


def default_event_file(
    kind: str = "-core", env: Mapping[str, str] | None = None
) -> str | None:
    """Return the path of the default event list of ``kind``, or None.

    A readable file named by EVENTMAP is used as is. Otherwise the file
    is looked up under ``pmu-events`` in JEVENTS_CACHEDIR, XDG_CACHE_HOME
    or ``$HOME/.cache``, preferring the name that includes the stepping.
    """
    if env is None:
        env = os.environ
    try:
        idstr, idstr_step = get_cpu_str_type(kind)
    except (OSError, ValueError):
        idstr, idstr_step = None, None

    emap = env.get("EVENTMAP")
    if emap is not None:
        if os.access(emap, os.R_OK):
            return emap
        idstr = emap + kind

    cache = env.get("JEVENTS_CACHEDIR")
    if cache is None:
        cache = env.get("XDG_CACHE_HOME")
    if cache is None:
        home = env.get("HOME")
        if home is None:
            return None
        cache = f"{home}/.cache"

    if idstr is None:
        return None
    if idstr_step is not None:
        candidate = f"{cache}/pmu-events/{idstr_step}.json"
        if os.access(candidate, os.R_OK):
            return candidate
    return f"{cache}/pmu-events/{idstr}.json"