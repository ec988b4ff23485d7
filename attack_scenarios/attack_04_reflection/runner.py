# MIT License © 2025 Motohiro Suzuki
"""
attack_scenarios/attack_04_reflection/runner.py

Attack A-04: reflection

Demonstration:
- attacker answers the initiator with the initiator's own element X
Expected: initiator raises InvalidPoint ("echoed our own element")

Exit code:
- 0 if rejected correctly
- 1 otherwise
"""

from pake import InvalidPoint, Pake, Role


def main() -> int:
    a = Pake(b"secret", Role.INITIATOR, "siec", 5.0)
    x = a.current_message()
    reflected = x + b"\x00" * a.curve.tag_len

    try:
        a.consume_message(reflected)
    except InvalidPoint as e:
        msg = str(e)
        if "echoed" in msg:
            print("[OK] reflection rejected:", msg)
            return 0
        print("[FAIL] rejected, but unexpected reason:", msg)
        return 1

    print("[FAIL] reflected element accepted (should have been rejected)")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
