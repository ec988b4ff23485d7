# MIT License © 2025 Motohiro Suzuki
"""
attack_scenarios/attack_02_invalid_point/runner.py

Attack A-02: invalid curve point

Demonstration:
- attacker sends 0x04 || x=1 || y=1 (well-formed, not on siec)
Expected: responder raises InvalidPoint and is FAILED

Exit code:
- 0 if rejected correctly
- 1 otherwise
"""

from pake import InvalidPoint, Pake, Role, State, get_curve


def main() -> int:
    curve = get_curve("siec")
    forged = b"\x04" + (1).to_bytes(curve.field_len, "big") + (1).to_bytes(curve.field_len, "big")

    b = Pake(b"secret", Role.RESPONDER, curve, 5.0)
    try:
        b.consume_message(forged)
    except InvalidPoint as e:
        if b.state is State.FAILED:
            print("[OK] off-curve point rejected:", e)
            return 0
        print("[FAIL] rejected, but engine not FAILED:", b.state.value)
        return 1

    print("[FAIL] off-curve point accepted (should have been rejected)")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
