# MIT License © 2025 Motohiro Suzuki
import pytest

from pake import Role, available_curves, get_curve
from pake.crypto.mapper import blind, blinding_point, generator_points, hash_to_curve, password_scalar


@pytest.mark.parametrize("name", available_curves())
def test_generator_points_are_valid_and_distinct(name):
    c = get_curve(name)
    M, N = generator_points(c)
    assert c.validate(M) == M
    assert c.validate(N) == N
    assert M != N
    assert c.G not in (M, N)


def test_generator_points_are_cached():
    c = get_curve("siec")
    assert generator_points(c) is generator_points(c)


def test_hash_to_curve_is_deterministic_per_seed():
    c = get_curve("p256")
    assert hash_to_curve(c, b"seed") == hash_to_curve(c, b"seed")
    assert hash_to_curve(c, b"seed") != hash_to_curve(c, b"other")


def test_password_scalar_range_and_determinism():
    c = get_curve("siec")
    w = password_scalar(b"\x01\x02\x03", c)
    assert 1 <= w < c.n
    assert w == password_scalar(b"\x01\x02\x03", c)
    assert w != password_scalar(b"\x04\x05\x06", c)


def test_password_scalar_is_curve_specific():
    assert password_scalar(b"pw", get_curve("siec")) != password_scalar(b"pw", get_curve("p256"))


def test_empty_secret_still_maps_to_nonzero_scalar():
    c = get_curve("siec")
    assert 1 <= password_scalar(b"", c) < c.n


def test_blinding_point_per_role():
    c = get_curve("siec")
    M, N = generator_points(c)
    w = password_scalar(b"pw", c)

    a = blinding_point(b"pw", c, Role.INITIATOR)
    b = blinding_point(b"pw", c, Role.RESPONDER)
    assert a == c.mul(w, M)
    assert b == c.mul(w, N)
    assert a != b
    assert blind(c, w, 0) == a
