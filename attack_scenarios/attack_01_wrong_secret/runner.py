# MIT License © 2025 Motohiro Suzuki
"""
attack_scenarios/attack_01_wrong_secret/runner.py

Attack A-01: wrong weak secret

Demonstration:
- initiator holds {1,2,3}, responder holds {4,5,6}
- all three messages are exchanged
Expected: both engines FAILED, neither yields a session key

Exit code:
- 0 if rejected correctly
- 1 otherwise
"""

from pake import AuthenticationFailed, NotReady, Pake, Role


def main() -> int:
    a = Pake(b"\x01\x02\x03", Role.INITIATOR, "siec", 5.0)
    b = Pake(b"\x04\x05\x06", Role.RESPONDER, "siec", 5.0)

    b.consume_message(a.current_message())

    rejected = 0
    try:
        a.consume_message(b.current_message())
    except AuthenticationFailed as e:
        print("[OK] initiator rejected:", e)
        rejected += 1

    try:
        b.consume_message(a.current_message())
    except AuthenticationFailed as e:
        print("[OK] responder rejected:", e)
        rejected += 1

    if rejected != 2:
        print("[FAIL] wrong secret accepted by at least one side")
        return 1

    for side in (a, b):
        try:
            side.session_key()
        except NotReady:
            continue
        print("[FAIL] session key released after rejection")
        return 1

    print("[OK] wrong secret rejected on both sides")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
