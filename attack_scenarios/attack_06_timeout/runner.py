# MIT License © 2025 Motohiro Suzuki
"""
attack_scenarios/attack_06_timeout/runner.py

Attack A-06: stalled handshake

Demonstration:
- responder armed with a 100 ms deadline
- initiator's element is delivered 150 ms later (simulated clock)
Expected: Timeout, responder FAILED

Exit code:
- 0 if rejected correctly
- 1 otherwise
"""

from pake import Pake, Role, State, Timeout


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def main() -> int:
    clock = _Clock()
    a = Pake(b"secret", Role.INITIATOR, "siec", 0.1, clock=clock)
    b = Pake(b"secret", Role.RESPONDER, "siec", 0.1, clock=clock)

    clock.now += 0.15
    try:
        b.consume_message(a.current_message())
    except Timeout as e:
        if b.state is State.FAILED:
            print("[OK] late message rejected:", e)
            return 0
        print("[FAIL] timed out, but engine not FAILED:", b.state.value)
        return 1

    print("[FAIL] late message accepted (should have timed out)")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
