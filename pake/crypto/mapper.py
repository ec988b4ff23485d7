# MIT License © 2025 Motohiro Suzuki
"""
crypto/mapper.py

Weak secret -> blinding points.

    w        = 1 + (HKDF(weak_secret) mod (n - 1))          in [1, n-1]
    M, N     = hash_to_curve("M"), hash_to_curve("N")        per curve
    blind(A) = w * M        (initiator)
    blind(B) = w * N        (responder)

M and N are nothing-up-my-sleeve points: nobody knows their discrete log
relative to G or to each other. They are derived by try-and-increment from a
public seed and cached per curve (read-only after first use).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from pake.crypto.curves import Curve, Point
from pake.crypto.kdf import digest, hkdf_expand, hkdf

_H2C_DST = b"PAKE-SPAKE2-v1|hash_to_curve|"
_W_SALT = b"PAKE-SPAKE2-v1|password_scalar"
_SEED_M = b"M"
_SEED_N = b"N"

# each attempt succeeds with probability ~1/2
_H2C_MAX_ATTEMPTS = 256


def _u32(x: int) -> bytes:
    if x < 0 or x > 0xFFFFFFFF:
        raise ValueError("u32 out of range")
    return x.to_bytes(4, "big")


def hash_to_curve(curve: Curve, seed: bytes) -> Point:
    """Deterministic non-identity point of the prime-order group."""
    prk = digest(curve.hash_name, _H2C_DST + curve.name.encode("ascii") + b"|" + bytes(seed))
    width = curve.field_len + 8
    for counter in range(_H2C_MAX_ATTEMPTS):
        okm = hkdf_expand(curve.hash_name, prk, _u32(counter), width + 1)
        x = int.from_bytes(okm[:width], "big") % curve.p
        y = curve.sqrt(x * x * x + curve.a * x + curve.b)
        if y is None:
            continue
        if (y & 1) != (okm[width] & 1):
            y = curve.p - y
        P = curve.mul(curve.h, Point(x, y % curve.p))
        if P is None:
            continue
        return P
    raise RuntimeError(f"{curve.name}: hash_to_curve exhausted {_H2C_MAX_ATTEMPTS} attempts")


@lru_cache(maxsize=None)
def generator_points(curve: Curve) -> Tuple[Point, Point]:
    """(M, N) for this curve."""
    return hash_to_curve(curve, _SEED_M), hash_to_curve(curve, _SEED_N)


def password_scalar(weak_secret: bytes, curve: Curve) -> int:
    okm = hkdf(
        curve.hash_name,
        ikm=bytes(weak_secret),
        salt=_W_SALT,
        info=curve.name.encode("ascii"),
        length=curve.scalar_seed_len,
    )
    return curve.scalar_from_bytes(okm)


def blind(curve: Curve, w: int, role: int) -> Point:
    M, N = generator_points(curve)
    P = curve.mul(w, M if int(role) == 0 else N)
    if P is None:
        # unreachable: w in [1, n-1] and M, N have prime order n
        raise RuntimeError(f"{curve.name}: identity blinding point")
    return P


def blinding_point(weak_secret: bytes, curve: Curve, role: int) -> Point:
    return blind(curve, password_scalar(weak_secret, curve), role)
