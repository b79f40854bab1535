"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing and the few control keys the session binds.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\x15": "CTRL_U",
    b"\x04": "CTRL_D",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_KEYS: dict[bytes, str] = {
    b"1": "HOME",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
}


def _next_byte(fd: int, timeout_ms: int | None) -> bytes | None:
    """One byte from ``fd``; ``None`` on EOF or when ``timeout_ms`` elapses first."""
    if timeout_ms is not None:
        readable, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not readable:
            return None
    return os.read(fd, 1) or None


def _utf8_continuation_count(lead: int) -> int:
    if lead >= 0xF0:
        return 3
    if lead >= 0xE0:
        return 2
    return 1 if lead >= 0xC0 else 0


def _decode_text(fd: int, lead: bytes) -> str:
    data = lead
    for _ in range(_utf8_continuation_count(lead[0])):
        more = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        data += more
    return data.decode("utf-8", errors="replace")


def _decode_escape(fd: int) -> str:
    """Decode what follows ESC; a lone ESC is the cancel key."""
    opener = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if opener is None:
        return "ESC"
    if opener != b"[":
        # ESC followed by an ordinary key: deliver that key next.
        _PENDING_BYTES.append(opener)
        return "ESC"
    code = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if code in _CSI_FINAL_KEYS:
        return _CSI_FINAL_KEYS[code]
    if code in _CSI_TILDE_KEYS and _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS) == b"~":
        return _CSI_TILDE_KEYS[code]
    return "ESC"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token, or ``""`` on timeout/EOF."""
    first = _PENDING_BYTES.pop(0) if _PENDING_BYTES else _next_byte(fd, timeout_ms)
    if first is None:
        return ""
    if first in _CONTROL_KEYS:
        return _CONTROL_KEYS[first]
    if first == b"\x1b":
        return _decode_escape(fd)
    return _decode_text(fd, first)


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "read_key"]
