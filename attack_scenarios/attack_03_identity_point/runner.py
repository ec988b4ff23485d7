# MIT License © 2025 Motohiro Suzuki
"""
attack_scenarios/attack_03_identity_point/runner.py

Attack A-03: shared element forced to the identity

Demonstration:
- attacker sends X = w*M, so X - w*M is the identity and K would be too
Expected: responder raises InvalidPoint instead of keying on a known value

Exit code:
- 0 if rejected correctly
- 1 otherwise
"""

from pake import InvalidPoint, Pake, Role, get_curve
from pake.crypto.mapper import blinding_point


def main() -> int:
    curve = get_curve("siec")
    forged = curve.encode(blinding_point(b"secret", curve, Role.INITIATOR))

    b = Pake(b"secret", Role.RESPONDER, curve, 5.0)
    try:
        b.consume_message(forged)
    except InvalidPoint as e:
        print("[OK] degenerate element rejected:", e)
        return 0

    print("[FAIL] degenerate element accepted (should have been rejected)")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
