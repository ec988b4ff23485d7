# MIT License © 2025 Motohiro Suzuki
import pytest

from pake import get_curve
from pake.crypto.kdf import derive_keys, digest, hash_algorithm, hkdf, mac, shared_element, verify_mac
from pake.protocol.transcript import handshake_transcript


def test_hkdf_rfc5869_case_1():
    okm = hkdf(
        "sha256",
        ikm=b"\x0b" * 22,
        salt=bytes(range(0x0D)),
        info=bytes(range(0xF0, 0xFA)),
        length=42,
    )
    assert okm.hex() == (
        "3cb25f25faacd57a90434f64d0362f2a2d2d0a90cf1a5a4c5db02d56ecc4c5bf34007208d5b887185865"
    )


@pytest.mark.parametrize("name,size", [("sha224", 28), ("sha256", 32), ("sha384", 48), ("sha512", 64)])
def test_digest_sizes(name, size):
    assert len(digest(name, b"x")) == size


def test_unknown_hash():
    with pytest.raises(ValueError):
        hash_algorithm("md5")


def test_mac_verify():
    tag = mac("sha256", b"k" * 32, b"data")
    assert verify_mac("sha256", b"k" * 32, b"data", tag)
    assert not verify_mac("sha256", b"k" * 32, b"data", tag[:-1] + bytes([tag[-1] ^ 1]))
    assert not verify_mac("sha256", b"k" * 32, b"data", tag[:16])
    assert not verify_mac("sha256", b"j" * 32, b"data", tag)


def _tt(**over):
    fields = dict(
        curve_name="siec",
        context=b"",
        initiator_element=b"X" * 65,
        responder_element=b"Y" * 65,
        shared_element=b"K" * 65,
        password_scalar=b"w" * 32,
    )
    fields.update(over)
    return handshake_transcript(**fields)


def test_transcript_layout():
    tt = _tt()
    assert tt.startswith(b"PAKE-SPAKE2-v1|transcript|")
    assert b"\x00\x00\x00\x04siec" in tt
    assert b"\x00\x00\x00\x00" + b"\x00\x00\x00\x41" + b"X" * 65 in tt


def test_transcript_binds_every_field():
    base = _tt()
    assert _tt(context=b"ctx") != base
    assert _tt(initiator_element=b"Y" * 65, responder_element=b"X" * 65) != base
    assert _tt(shared_element=b"Z" * 65) != base
    assert _tt(password_scalar=b"v" * 32) != base
    assert _tt(curve_name="p256") != base


def test_key_schedule_sizes_and_tags():
    c = get_curve("p384")
    keys = derive_keys(c, _tt(curve_name="p384"))
    assert len(keys.session_key) == 48
    assert len(keys.initiator_confirm_key) == 48
    assert len(keys.responder_confirm_key) == 48

    tag_a, tag_b = keys.tag(0), keys.tag(1)
    assert tag_a != tag_b
    assert keys.check_tag(0, tag_a)
    assert not keys.check_tag(0, tag_b)
    assert keys.check_tag(1, tag_b)


def test_key_schedule_wipe():
    keys = derive_keys(get_curve("siec"), _tt())
    keys.wipe()
    assert keys.session_key.wiped
    with pytest.raises(ValueError):
        keys.session_key.bytes()


def test_shared_element_detects_cancellation():
    c = get_curve("siec")
    P = c.base_mul(7)
    assert shared_element(c, 3, P, P) is None
    assert shared_element(c, 3, c.add(P, c.G), P) == c.base_mul(3)
