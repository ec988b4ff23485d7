# MIT License © 2025 Motohiro Suzuki
"""
protocol/transcript.py

Canonical transcript (TT) hashed into the key schedule.
Field order is FIXED; both parties must build byte-identical TT.

    TT = "PAKE-SPAKE2-v1|transcript|"
         || blob(curve name)
         || blob(context)
         || blob(X)        initiator element
         || blob(Y)        responder element
         || blob(K)        shared element
         || blob(w)        password scalar, scalar_len bytes

blob(v) = u32_be(len(v)) || v
"""

from __future__ import annotations

_PREFIX = b"PAKE-SPAKE2-v1|transcript|"


def _u32(x: int) -> bytes:
    if x < 0 or x > 0xFFFFFFFF:
        raise ValueError("u32 out of range")
    return x.to_bytes(4, "big")


def _blob(b: bytes) -> bytes:
    if not isinstance(b, (bytes, bytearray)):
        raise TypeError("blob must be bytes")
    b = bytes(b)
    return _u32(len(b)) + b


def handshake_transcript(
    curve_name: str,
    context: bytes,
    initiator_element: bytes,
    responder_element: bytes,
    shared_element: bytes,
    password_scalar: bytes,
) -> bytes:
    return (
        _PREFIX
        + _blob(curve_name.encode("ascii"))
        + _blob(context)
        + _blob(initiator_element)
        + _blob(responder_element)
        + _blob(shared_element)
        + _blob(password_scalar)
    )
