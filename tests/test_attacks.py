# MIT License © 2025 Motohiro Suzuki
import importlib.util
from pathlib import Path

import pytest

from pake import (
    AuthenticationFailed,
    InvalidPoint,
    InvalidState,
    MalformedMessage,
    NotReady,
    Role,
    State,
    Timeout,
)
from pake.crypto.mapper import blinding_point

from conftest import run_three_messages

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _load(relpath: str):
    path = PROJECT_ROOT / relpath
    spec = importlib.util.spec_from_file_location(path.stem + "_" + path.parent.name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


coverage = _load("tools/check_attack_coverage.py")
ATTACKS = coverage.load_attacks()


def test_a01_wrong_secret_rejected_on_both_sides(make_pair):
    a, b = make_pair(bytes([1, 2, 3]), bytes([4, 5, 6]))
    b.consume_message(a.current_message())
    with pytest.raises(AuthenticationFailed):
        a.consume_message(b.current_message())
    with pytest.raises(AuthenticationFailed):
        b.consume_message(a.current_message())
    for side in (a, b):
        with pytest.raises(NotReady):
            side.session_key()


def test_a02_off_curve_point_rejected(make_pair):
    a, b = make_pair()
    L = b.curve.field_len
    with pytest.raises(InvalidPoint):
        b.consume_message(b"\x04" + (1).to_bytes(L, "big") + (1).to_bytes(L, "big"))
    assert b.state is State.FAILED


def test_a03_blinding_point_as_element_rejected(make_pair):
    a, b = make_pair(b"pw")
    forged = b.curve.encode(blinding_point(b"pw", b.curve, Role.INITIATOR))
    with pytest.raises(InvalidPoint):
        b.consume_message(forged)
    assert b.state is State.FAILED
    # the rejected responder still emits a reply of the normal size
    assert len(b.current_message()) == b.curve.confirmation_message_len


def test_a04_reflected_element_rejected(make_pair):
    a, _ = make_pair()
    x = a.current_message()
    with pytest.raises(InvalidPoint):
        a.consume_message(x + b"\x00" * a.curve.tag_len)
    assert a.state is State.FAILED


def test_a05_replay_into_finished_engine_rejected(make_pair):
    a, b = make_pair()
    run_three_messages(a, b)
    key = b.session_key()
    with pytest.raises(InvalidState):
        b.consume_message(a.current_message())
    assert b.session_key() == key


def test_a06_late_message_times_out(make_pair, clock):
    a, b = make_pair(timeout=0.1)
    clock.advance(0.15)
    with pytest.raises(Timeout):
        b.consume_message(a.current_message())
    assert b.state is State.FAILED


def test_a07_truncated_message_rejected(make_pair):
    a, b = make_pair()
    with pytest.raises(MalformedMessage):
        b.consume_message(a.current_message()[:-1])
    assert b.state is State.FAILED


def test_a08_tampered_tag_rejected(make_pair):
    a, b = make_pair()
    b.consume_message(a.current_message())
    reply = bytearray(b.current_message())
    reply[-1] ^= 0x01
    with pytest.raises(AuthenticationFailed):
        a.consume_message(bytes(reply))
    with pytest.raises(NotReady):
        a.session_key()


def test_attack_table_has_complete_evidence():
    assert len(ATTACKS) == 8
    assert coverage.find_missing(ATTACKS) == []


def test_coverage_check_reports_missing_evidence(tmp_path):
    attacks = [
        {"attack_id": "X-01", "evidence_test": "tests/nope.py::test_x", "evidence_script": "nope.py"},
        {"attack_id": "X-02"},
    ]
    missing = coverage.find_missing(attacks, root=tmp_path)
    assert "X-01: missing test tests/nope.py" in missing
    assert "X-01: missing script nope.py" in missing
    assert "X-02: evidence_test not defined" in missing
    assert "X-02: evidence_script not defined" in missing


@pytest.mark.parametrize("attack", ATTACKS, ids=[a["attack_id"] for a in ATTACKS])
def test_attack_runner_exits_zero(attack, capsys):
    runner = _load(attack["evidence_script"])
    assert runner.main() == 0
    assert "[OK]" in capsys.readouterr().out
