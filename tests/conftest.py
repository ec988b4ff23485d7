# MIT License © 2025 Motohiro Suzuki
import hashlib

import pytest

from pake import Pake, Role


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def seeded_rng(seed: bytes):
    """Deterministic byte source: SHA-256 in counter mode over `seed`."""
    counter = 0

    def rng(n: int) -> bytes:
        nonlocal counter
        out = b""
        while len(out) < n:
            out += hashlib.sha256(seed + counter.to_bytes(8, "big")).digest()
            counter += 1
        return out[:n]

    return rng


def run_three_messages(a: Pake, b: Pake) -> None:
    b.current_message()
    b.consume_message(a.current_message())
    a.consume_message(b.current_message())
    b.consume_message(a.current_message())


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_pair(clock):
    """Factory for an initiator/responder pair on the shared fake clock."""

    def _make(secret_a=b"secret", secret_b=None, curve="siec", timeout=5.0, **kw):
        if secret_b is None:
            secret_b = secret_a
        a = Pake(secret_a, Role.INITIATOR, curve, timeout, clock=clock, **kw)
        b = Pake(secret_b, Role.RESPONDER, curve, timeout, clock=clock, **kw)
        return a, b

    return _make
