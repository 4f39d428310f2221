"""Named CPU performance-monitoring events: event list parsing, lookup and related tools."""

__version__ = "0.1.0"

__all__ = [
    "cache",
    "cli",
    "clustering",
    "cpustr",
    "events",
    "hist",
    "jsmn",
    "jsonfile",
    "pttrace",
]