"""Strings that identify the running CPU, used to name event list files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "CpuSignature",
    "read_cpu_signature",
    "format_cpu_str",
    "get_cpu_str_type",
    "get_cpu_str",
]

DEFAULT_CPUINFO = "/proc/cpuinfo"

_KEYS = {
    "vendor_id": "vendor",
    "cpu family": "family",
    "model": "model",
    "stepping": "stepping",
}


@dataclass(frozen=True)
class CpuSignature:
    """Vendor and display family, model and stepping of a CPU."""

    vendor: str
    family: int
    model: int
    stepping: int


def read_cpu_signature(cpuinfo_path: str | Path = DEFAULT_CPUINFO) -> CpuSignature:
    """Read the signature of the first CPU listed in a cpuinfo file.

    Family and model are taken as the kernel reports them, with the
    extended family and model bits already folded in.
    Raises OSError if the file cannot be read and ValueError if a field
    is missing or not a number.
    """
    found: dict[str, str] = {}
    with open(cpuinfo_path, encoding="utf-8", errors="replace") as fh:
        for line in fh:
            key, sep, value = line.partition(":")
            if not sep:
                continue
            field = _KEYS.get(key.strip())
            if field is not None and field not in found:
                found[field] = value.strip()
            if len(found) == len(_KEYS):
                break
    missing = [key for key, field in _KEYS.items() if field not in found]
    if missing:
        raise ValueError(f"{cpuinfo_path}: missing {', '.join(missing)}")
    try:
        return CpuSignature(
            vendor=found["vendor"],
            family=int(found["family"]),
            model=int(found["model"]),
            stepping=int(found["stepping"]),
        )
    except ValueError as exc:
        raise ValueError(f"{cpuinfo_path}: {exc}") from exc


def format_cpu_str(signature: CpuSignature, kind: str, with_stepping: bool = False) -> str:
    """Format ``VENDOR-FAMILY-MODEL[-STEPPING]KIND``; model and stepping in hex."""
    text = f"{signature.vendor}-{signature.family}-{signature.model:X}"
    if with_stepping:
        text += f"-{signature.stepping:X}"
    return text + kind


def get_cpu_str_type(
    kind: str = "-core", cpuinfo_path: str | Path = DEFAULT_CPUINFO
) -> tuple[str, str]:
    """Return the CPU string for ``kind`` ("-core" or "-uncore").

    The result is a pair: the string without and the string with the
    stepping.
    """
    signature = read_cpu_signature(cpuinfo_path)
    return (
        format_cpu_str(signature, kind, False),
        format_cpu_str(signature, kind, True),
    )


def get_cpu_str() -> str:
    """Return the string describing the current CPU's core events."""
    return get_cpu_str_type("-core")[0]