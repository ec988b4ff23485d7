# MIT License © 2025 Motohiro Suzuki
import pytest

from pake.crypto.zeroize import SecretBox, wipe_bytes_like


def test_secret_box_wipe():
    box = SecretBox(b"\x11" * 16)
    assert box.bytes() == b"\x11" * 16
    box.wipe()
    assert box.wiped
    assert len(box) == 16
    with pytest.raises(ValueError):
        box.bytes()


def test_secret_box_repr_hides_content():
    assert "11" not in repr(SecretBox(b"\x11" * 4))


def test_wipe_bytes_like():
    ba = bytearray(b"abc")
    wipe_bytes_like(ba)
    assert ba == bytearray(3)

    buf = bytearray(b"xyz")
    wipe_bytes_like(memoryview(buf))
    assert buf == bytearray(3)

    # immutable input is left alone
    wipe_bytes_like(b"abc")
