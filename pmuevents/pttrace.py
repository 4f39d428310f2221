"""Locating the start of a processor trace in a ring buffer.

Only enough of the packet encoding is understood to find the time stamp
counter packet that follows a packet stream boundary (PSB).
"""

from __future__ import annotations

import logging

__all__ = ["PSB", "MAX_PSB_SIZE", "find_tsc", "find_trace_start"]

log = logging.getLogger(__name__)

PSB = bytes([0x02, 0x82] * 8)
MAX_PSB_SIZE = 128

_MASK64 = (1 << 64) - 1


def _before(a: int, b: int) -> bool:
    """Tell whether counter ``a`` precedes ``b``, allowing for wrap-around."""
    return ((a - b) & _MASK64) >= (1 << 63)


def find_tsc(data: bytes, offset: int) -> int:
    """Return the time stamp in the PSB at ``offset`` of ``data``, or 0.

    ``data`` is a ring buffer: a PSB close to its end continues at its
    start. Returns 0 when no time stamp packet is found before the end
    of the PSB.
    """
    data = bytes(data)
    if len(data) - offset < MAX_PSB_SIZE:
        tail = data[offset:]
        buf = tail + data[: MAX_PSB_SIZE - len(tail)]
        p = 0
    else:
        buf = data
        p = offset
    end = len(buf)
    start = p

    def left(n: int) -> bool:
        return end - p >= n

    while p < end:
        c = buf[p]
        if c == 0x02 and left(2):
            nxt = buf[p + 1]
            if nxt == 0b11110011 and left(8):  # OVF
                p += 8
                continue
            if nxt == 0x03 and left(4) and buf[p + 3] == 0:  # CBR
                p += 4
                continue
            if nxt == 0x82 and left(16) and buf[p:p + 16] == PSB:
                p += 16
                continue
            if nxt == 0b100011:  # PSBEND
                break
            if nxt == 0b01110011 and left(7):  # TMA
                p += 7
                continue
            if nxt == 0b11001000 and left(7):  # VMCS
                p += 7
                continue

        if c == 0:  # PAD
            p += 1
            continue

        if c & 1 == 0:
            log.warning("unexpected tnt %x at %d", c, p - start)
            p += 1
            continue

        if c & 0x1F in (0x0D, 0x11, 0x01, 0x1D):  # TIP, TIP.PGE, TIP.PGD, FUP
            p += (c >> 5) * 2 + 2
            continue

        if c == 0x99 and left(2):  # MODE
            p += 2
            continue
        if c == 0x19 and left(8):  # TSC
            return int.from_bytes(buf[p + 1:p + 8], "little")
        if c == 0b01011001 and left(2):  # MTC
            p += 2
            continue

        log.warning("unknown packet %x at %x", c, p - start)
        break
    return 0


def find_trace_start(data: bytes) -> int | None:
    """Return the offset of the PSB with the oldest time stamp, or None."""
    data = bytes(data)
    oldest = 0
    start: int | None = None
    p = 0
    while p < len(data):
        p = data.find(PSB, p)
        if p < 0:
            break
        log.debug("PSB at %d", p)
        tsc = find_tsc(data, p)
        if not tsc:
            log.debug("no TSC found after PSB at offset %d", p)
        elif not oldest or _before(tsc, oldest):
            oldest = tsc
            start = p
        p += 16
    return start