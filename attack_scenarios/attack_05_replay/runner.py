# MIT License © 2025 Motohiro Suzuki
"""
attack_scenarios/attack_05_replay/runner.py

Attack A-05: replay into a finished engine

Demonstration:
- honest handshake completes
- attacker replays the recorded confirmation X || tag_A to the responder
Expected: InvalidState, session key unchanged

Exit code:
- 0 if rejected correctly
- 1 otherwise
"""

from pake import InvalidState, Pake, Role


def main() -> int:
    a = Pake(b"secret", Role.INITIATOR, "siec", 5.0)
    b = Pake(b"secret", Role.RESPONDER, "siec", 5.0)
    b.consume_message(a.current_message())
    a.consume_message(b.current_message())
    recorded = a.current_message()
    b.consume_message(recorded)
    key = b.session_key()

    try:
        b.consume_message(recorded)
    except InvalidState as e:
        if b.session_key() == key:
            print("[OK] replay rejected:", e)
            return 0
        print("[FAIL] replay rejected, but session key changed")
        return 1

    print("[FAIL] replay accepted (should have been rejected)")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
