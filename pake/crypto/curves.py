# MIT License © 2025 Motohiro Suzuki
"""
crypto/curves.py

Prime-order short-Weierstrass curves y^2 = x^3 + a*x + b (mod p).

Parameter sets (read-only, shared by every engine):
- siec : SIEC255, y^2 = x^3 + 19, G = (5, 12)
- p224 / p256 / p384 / p521 : NIST curves (FIPS 186-4)

Point encoding (SEC1 uncompressed, fixed size):
    0x04 || x (field_len bytes, big-endian) || y (field_len bytes, big-endian)

The identity element is represented as None and has no wire encoding.
Scalar multiplication is a Montgomery ladder over a fixed number of bits
(the bit length of the group order) so the operation sequence does not
depend on the scalar value.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from pake.crypto.kdf import hash_algorithm
from pake.protocol.errors import InvalidPoint, MalformedMessage, UnsupportedCurve

_SEC1_UNCOMPRESSED = 0x04

# extra bytes drawn per scalar so the modular reduction bias is < 2^-64
SCALAR_MARGIN = 8


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class CurveParams:
    name: str
    p: int
    a: int
    b: int
    gx: int
    gy: int
    n: int
    h: int
    hash_name: str


class Curve:
    """Group operations for one parameter set."""

    def __init__(self, params: CurveParams) -> None:
        self.params = params
        self.name = params.name
        self.p = params.p
        self.a = params.a % params.p
        self.b = params.b % params.p
        self.n = params.n
        self.h = params.h
        self.hash_name = params.hash_name

        self.field_len = (self.p.bit_length() + 7) // 8
        self.scalar_len = (self.n.bit_length() + 7) // 8
        self.point_len = 1 + 2 * self.field_len

        digest_size = hash_algorithm(self.hash_name).digest_size
        self.key_len = digest_size
        self.tag_len = digest_size

        self.G = Point(params.gx, params.gy)
        if not self.is_on_curve(self.G):
            raise ValueError(f"{self.name}: generator not on curve")

    def __repr__(self) -> str:
        return f"Curve({self.name})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Curve) and other.params == self.params

    def __hash__(self) -> int:
        return hash(self.params)

    # ---- sizes ----

    @property
    def first_message_len(self) -> int:
        return self.point_len

    @property
    def confirmation_message_len(self) -> int:
        return self.point_len + self.tag_len

    # ---- field ----

    def sqrt(self, v: int) -> Optional[int]:
        """Square root mod p, or None for a non-residue."""
        p = self.p
        v %= p
        if v == 0:
            return 0
        if pow(v, (p - 1) // 2, p) != 1:
            return None
        if p % 4 == 3:
            return pow(v, (p + 1) // 4, p)

        # Tonelli-Shanks (p224, siec)
        q, s = p - 1, 0
        while q % 2 == 0:
            q //= 2
            s += 1
        z = 2
        while pow(z, (p - 1) // 2, p) != p - 1:
            z += 1
        m, c, t, r = s, pow(z, q, p), pow(v, q, p), pow(v, (q + 1) // 2, p)
        while t != 1:
            i, t2 = 0, t
            while t2 != 1:
                t2 = t2 * t2 % p
                i += 1
            b = pow(c, 1 << (m - i - 1), p)
            m, c = i, b * b % p
            t = t * c % p
            r = r * b % p
        return r

    # ---- group ----

    def is_on_curve(self, P: Optional[Point]) -> bool:
        if P is None:
            return True
        p = self.p
        if not (0 <= P.x < p and 0 <= P.y < p):
            return False
        return (P.y * P.y - (P.x * P.x * P.x + self.a * P.x + self.b)) % p == 0

    def neg(self, P: Optional[Point]) -> Optional[Point]:
        if P is None:
            return None
        return Point(P.x, (-P.y) % self.p)

    def double(self, P: Optional[Point]) -> Optional[Point]:
        if P is None or P.y == 0:
            return None
        p = self.p
        lam = (3 * P.x * P.x + self.a) * pow(2 * P.y, -1, p) % p
        x3 = (lam * lam - 2 * P.x) % p
        y3 = (lam * (P.x - x3) - P.y) % p
        return Point(x3, y3)

    def add(self, P: Optional[Point], Q: Optional[Point]) -> Optional[Point]:
        if P is None:
            return Q
        if Q is None:
            return P
        p = self.p
        if P.x == Q.x:
            if (P.y + Q.y) % p == 0:
                return None
            return self.double(P)
        lam = (Q.y - P.y) * pow(Q.x - P.x, -1, p) % p
        x3 = (lam * lam - P.x - Q.x) % p
        y3 = (lam * (P.x - x3) - P.y) % p
        return Point(x3, y3)

    def sub(self, P: Optional[Point], Q: Optional[Point]) -> Optional[Point]:
        return self.add(P, self.neg(Q))

    def mul(self, k: int, P: Optional[Point]) -> Optional[Point]:
        if k < 0:
            k, P = -k, self.neg(P)
        if P is None or k == 0:
            return None
        bits = max(self.n.bit_length(), k.bit_length())
        r0: Optional[Point] = None
        r1: Optional[Point] = P
        for i in range(bits - 1, -1, -1):
            if (k >> i) & 1:
                r0 = self.add(r0, r1)
                r1 = self.double(r1)
            else:
                r1 = self.add(r0, r1)
                r0 = self.double(r0)
        return r0

    def base_mul(self, k: int) -> Optional[Point]:
        return self.mul(k, self.G)

    def in_subgroup(self, P: Optional[Point]) -> bool:
        if self.h == 1:
            return True
        return self.mul(self.n, P) is None

    def validate(self, P: Optional[Point]) -> Point:
        if P is None:
            raise InvalidPoint(f"{self.name}: identity element")
        if not self.is_on_curve(P):
            raise InvalidPoint(f"{self.name}: point not on curve")
        if not self.in_subgroup(P):
            raise InvalidPoint(f"{self.name}: point outside prime-order subgroup")
        return P

    # ---- scalars ----

    @property
    def scalar_seed_len(self) -> int:
        """Random bytes consumed by scalar_from_bytes()."""
        return self.scalar_len + SCALAR_MARGIN

    def scalar_from_bytes(self, raw: bytes) -> int:
        """Map uniform bytes to a scalar in [1, n-1]."""
        return int.from_bytes(bytes(raw), "big") % (self.n - 1) + 1

    # ---- encoding ----

    def encode(self, P: Optional[Point]) -> bytes:
        if P is None:
            raise ValueError("identity element has no encoding")
        L = self.field_len
        return bytes([_SEC1_UNCOMPRESSED]) + P.x.to_bytes(L, "big") + P.y.to_bytes(L, "big")

    def decode(self, data: bytes) -> Point:
        b = bytes(data)
        if len(b) != self.point_len:
            raise MalformedMessage(f"{self.name}: point must be {self.point_len} bytes, got {len(b)}")
        if b[0] != _SEC1_UNCOMPRESSED:
            raise MalformedMessage(f"{self.name}: unsupported point prefix 0x{b[0]:02x}")
        L = self.field_len
        x = int.from_bytes(b[1 : 1 + L], "big")
        y = int.from_bytes(b[1 + L :], "big")
        if x >= self.p or y >= self.p:
            raise MalformedMessage(f"{self.name}: coordinate out of field range")
        return self.validate(Point(x, y))


# =========================
# Parameter tables
# =========================

SIEC255 = CurveParams(
    name="siec",
    p=0x4000000000000000000000000200104080000000000000000004004103082041,
    a=0,
    b=19,
    gx=5,
    gy=12,
    n=0x4000000000000000000000000200103F800000000000000000040040FF07FFC1,
    h=1,
    hash_name="sha256",
)

P224 = CurveParams(
    name="p224",
    p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF000000000000000000000001,
    a=-3,
    b=0xB4050A850C04B3ABF54132565044B0B7D7BFD8BA270B39432355FFB4,
    gx=0xB70E0CBD6BB4BF7F321390B94A03C1D356C21122343280D6115C1D21,
    gy=0xBD376388B5F723FB4C22DFE6CD4375A05A07476444D5819985007E34,
    n=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFF16A2E0B8F03E13DD29455C5C2A3D,
    h=1,
    hash_name="sha224",
)

P256 = CurveParams(
    name="p256",
    p=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF,
    a=-3,
    b=0x5AC635D8AA3A93E7B3EBBD55769886BC651D06B0CC53B0F63BCE3C3E27D2604B,
    gx=0x6B17D1F2E12C4247F8BCE6E563A440F277037D812DEB33A0F4A13945D898C296,
    gy=0x4FE342E2FE1A7F9B8EE7EB4A7C0F9E162BCE33576B315ECECBB6406837BF51F5,
    n=0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
    h=1,
    hash_name="sha256",
)

P384 = CurveParams(
    name="p384",
    p=int(
        "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFE"
        "FFFFFFFF0000000000000000FFFFFFFF",
        16,
    ),
    a=-3,
    b=int(
        "B3312FA7E23EE7E4988E056BE3F82D19181D9C6EFE8141120314088F5013875A"
        "C656398D8A2ED19D2A85C8EDD3EC2AEF",
        16,
    ),
    gx=int(
        "AA87CA22BE8B05378EB1C71EF320AD746E1D3B628BA79B9859F741E082542A38"
        "5502F25DBF55296C3A545E3872760AB7",
        16,
    ),
    gy=int(
        "3617DE4A96262C6F5D9E98BF9292DC29F8F41DBD289A147CE9DA3113B5F0B8C0"
        "0A60B1CE1D7E819D7A431D7C90EA0E5F",
        16,
    ),
    n=int(
        "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFC7634D81F4372DDF"
        "581A0DB248B0A77AECEC196ACCC52973",
        16,
    ),
    h=1,
    hash_name="sha384",
)

P521 = CurveParams(
    name="p521",
    p=(1 << 521) - 1,
    a=-3,
    b=int(
        "0051953EB9618E1C9A1F929A21A0B68540EEA2DA725B99B315F3B8B489918EF1"
        "09E156193951EC7E937B1652C0BD3BB1BF073573DF883D2C34F1EF451FD46B50"
        "3F00",
        16,
    ),
    gx=int(
        "00C6858E06B70404E9CD9E3ECB662395B4429C648139053FB521F828AF606B4D"
        "3DBAA14B5E77EFE75928FE1DC127A2FFA8DE3348B3C1856A429BF97E7E31C2E5"
        "BD66",
        16,
    ),
    gy=int(
        "011839296A789A3BC0045C8A5FB42C7D1BD998F54449579B446817AFBD17273E"
        "662C97EE72995EF42640C550B9013FAD0761353C7086A272C24088BE94769FD1"
        "6650",
        16,
    ),
    n=int(
        "01FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
        "FFFA51868783BF2F966B7FCC0148F709A5D03BB5C9B8899C47AEBB6FB71E9138"
        "6409",
        16,
    ),
    h=1,
    hash_name="sha512",
)

CURVES: Mapping[str, Curve] = MappingProxyType(
    {params.name: Curve(params) for params in (SIEC255, P224, P256, P384, P521)}
)

_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "siec": "siec",
        "siec255": "siec",
        "p224": "p224",
        "p-224": "p224",
        "secp224r1": "p224",
        "p256": "p256",
        "p-256": "p256",
        "secp256r1": "p256",
        "prime256v1": "p256",
        "p384": "p384",
        "p-384": "p384",
        "secp384r1": "p384",
        "p521": "p521",
        "p-521": "p521",
        "secp521r1": "p521",
    }
)

CurveSelection = Union[str, Curve, CurveParams]


def available_curves() -> Tuple[str, ...]:
    return tuple(CURVES)


def get_curve(selection: CurveSelection) -> Curve:
    """Resolve a curve object, a parameter record or a curve name."""
    if isinstance(selection, Curve):
        return selection
    if isinstance(selection, CurveParams):
        try:
            return Curve(selection)
        except ValueError as e:
            raise UnsupportedCurve(str(e)) from e
    if not isinstance(selection, str):
        raise UnsupportedCurve(f"unsupported curve selection: {selection!r}")
    name = _ALIASES.get(selection.strip().lower())
    if name is None:
        raise UnsupportedCurve(f"unsupported curve: {selection!r}")
    return CURVES[name]
