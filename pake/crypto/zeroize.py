# MIT License © 2025 Motohiro Suzuki
"""
crypto/zeroize.py

Best-effort wiping of handshake secrets.

Python cannot scrub an immutable 'bytes' object or an int in place, so the
engine keeps derived keys inside SecretBox (a bytearray) and wipes the box
when the handshake fails or the engine is closed. The ephemeral scalar is an
int and is only dropped (reference released), not overwritten.
"""

from __future__ import annotations

from typing import Any


def wipe_bytearray(b: bytearray) -> None:
    """In-place wipe for a mutable buffer."""
    for i in range(len(b)):
        b[i] = 0


def wipe_bytes_like(x: Any) -> None:
    """Wipe bytearray / writable memoryview in place; other types are left alone."""
    if isinstance(x, bytearray):
        wipe_bytearray(x)
    elif isinstance(x, memoryview) and not x.readonly:
        x[:] = b"\x00" * x.nbytes


class SecretBox:
    """Holds key material in a bytearray so it can be wiped in place."""

    __slots__ = ("_buf", "_wiped")

    def __init__(self, data: bytes | bytearray) -> None:
        self._buf = bytearray(data)
        self._wiped = False

    @property
    def wiped(self) -> bool:
        return self._wiped

    def bytes(self) -> bytes:
        if self._wiped:
            raise ValueError("secret already wiped")
        return bytes(self._buf)

    def wipe(self) -> None:
        wipe_bytearray(self._buf)
        self._wiped = True

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return f"SecretBox(len={len(self._buf)}, wiped={self._wiped})"
