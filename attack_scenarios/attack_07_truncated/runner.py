# MIT License © 2025 Motohiro Suzuki
"""
attack_scenarios/attack_07_truncated/runner.py

Attack A-07: truncated message

Demonstration:
- initiator's element is cut by one byte in transit
Expected: MalformedMessage, responder FAILED

Exit code:
- 0 if rejected correctly
- 1 otherwise
"""

from pake import MalformedMessage, Pake, Role, State


def main() -> int:
    a = Pake(b"secret", Role.INITIATOR, "siec", 5.0)
    b = Pake(b"secret", Role.RESPONDER, "siec", 5.0)

    try:
        b.consume_message(a.current_message()[:-1])
    except MalformedMessage as e:
        if b.state is State.FAILED:
            print("[OK] truncated message rejected:", e)
            return 0
        print("[FAIL] rejected, but engine not FAILED:", b.state.value)
        return 1

    print("[FAIL] truncated message accepted (should have been rejected)")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
