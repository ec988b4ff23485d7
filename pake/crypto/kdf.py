# MIT License © 2025 Motohiro Suzuki
"""
crypto/kdf.py

Hash / HKDF / HMAC helpers and the PAKE key schedule.

Key schedule (SPAKE2 style, RFC 9382 layout):
    PRK       = Hash(TT)
    Ke        = HKDF-Expand(PRK, "SessionKey", key_len)
    KcA||KcB  = HKDF-Expand(PRK, "ConfirmationKeys", 2 * tag_len)
    tag_A     = HMAC(KcA, TT)
    tag_B     = HMAC(KcB, TT)

TT is the length-prefixed transcript built in protocol/transcript.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac
from cryptography.hazmat.primitives.kdf.hkdf import HKDF, HKDFExpand

from pake.crypto.zeroize import SecretBox

if TYPE_CHECKING:
    from pake.crypto.curves import Curve, Point

_HASHES = {
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}

_INFO_SESSION_KEY = b"SessionKey"
_INFO_CONFIRMATION_KEYS = b"ConfirmationKeys"


def hash_algorithm(name: str) -> hashes.HashAlgorithm:
    try:
        return _HASHES[name.strip().lower()]()
    except KeyError:
        raise ValueError(f"unsupported hash: {name}") from None


def digest(hash_name: str, data: bytes) -> bytes:
    h = hashes.Hash(hash_algorithm(hash_name))
    h.update(bytes(data))
    return h.finalize()


def hkdf(hash_name: str, ikm: bytes, salt: bytes, info: bytes, length: int) -> bytes:
    if length <= 0:
        raise ValueError("length must be > 0")
    return HKDF(
        algorithm=hash_algorithm(hash_name),
        length=int(length),
        salt=salt,
        info=info,
    ).derive(bytes(ikm))


def hkdf_expand(hash_name: str, prk: bytes, info: bytes, length: int) -> bytes:
    if length <= 0:
        raise ValueError("length must be > 0")
    return HKDFExpand(
        algorithm=hash_algorithm(hash_name),
        length=int(length),
        info=info,
    ).derive(bytes(prk))


def mac(hash_name: str, key: bytes, data: bytes) -> bytes:
    h = crypto_hmac.HMAC(bytes(key), hash_algorithm(hash_name))
    h.update(bytes(data))
    return h.finalize()


def verify_mac(hash_name: str, key: bytes, data: bytes, tag: bytes) -> bool:
    """Constant-time tag check (HMAC.verify)."""
    h = crypto_hmac.HMAC(bytes(key), hash_algorithm(hash_name))
    h.update(bytes(data))
    try:
        h.verify(bytes(tag))
    except InvalidSignature:
        return False
    return True


@dataclass
class KeySchedule:
    hash_name: str
    transcript: bytes
    session_key: SecretBox
    initiator_confirm_key: SecretBox
    responder_confirm_key: SecretBox

    def confirm_key(self, role: int) -> SecretBox:
        return self.initiator_confirm_key if int(role) == 0 else self.responder_confirm_key

    def tag(self, role: int) -> bytes:
        """Confirmation tag that `role` sends to its peer."""
        return mac(self.hash_name, self.confirm_key(role).bytes(), self.transcript)

    def check_tag(self, role: int, tag: bytes) -> bool:
        """Check a tag claimed to come from `role`."""
        return verify_mac(self.hash_name, self.confirm_key(role).bytes(), self.transcript, tag)

    def wipe(self) -> None:
        self.session_key.wipe()
        self.initiator_confirm_key.wipe()
        self.responder_confirm_key.wipe()


def derive_keys(curve: "Curve", transcript: bytes) -> KeySchedule:
    prk = digest(curve.hash_name, transcript)
    ke = hkdf_expand(curve.hash_name, prk, _INFO_SESSION_KEY, curve.key_len)
    kc = hkdf_expand(curve.hash_name, prk, _INFO_CONFIRMATION_KEYS, 2 * curve.tag_len)
    return KeySchedule(
        hash_name=curve.hash_name,
        transcript=bytes(transcript),
        session_key=SecretBox(ke),
        initiator_confirm_key=SecretBox(kc[: curve.tag_len]),
        responder_confirm_key=SecretBox(kc[curve.tag_len :]),
    )


def shared_element(
    curve: "Curve",
    scalar: int,
    peer_element: "Point",
    peer_blind: "Point",
) -> Optional["Point"]:
    """
    K = scalar * (peer_element - peer_blind).
    Returns None when K is the identity (degenerate peer input).
    """
    unblinded = curve.sub(peer_element, peer_blind)
    if unblinded is None:
        return None
    return curve.mul(scalar, unblinded)
