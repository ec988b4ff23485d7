# MIT License © 2025 Motohiro Suzuki
"""
attack_scenarios/attack_08_tag_tamper/runner.py

Attack A-08: confirmation tag tampering

Demonstration:
- responder's reply Y || tag_B has its last bit flipped
Expected: AuthenticationFailed, initiator yields no session key

Exit code:
- 0 if rejected correctly
- 1 otherwise
"""

from pake import AuthenticationFailed, NotReady, Pake, Role


def main() -> int:
    a = Pake(b"secret", Role.INITIATOR, "siec", 5.0)
    b = Pake(b"secret", Role.RESPONDER, "siec", 5.0)
    b.consume_message(a.current_message())

    reply = bytearray(b.current_message())
    reply[-1] ^= 0x01

    try:
        a.consume_message(bytes(reply))
    except AuthenticationFailed as e:
        try:
            a.session_key()
        except NotReady:
            print("[OK] tampered tag rejected:", e)
            return 0
        print("[FAIL] rejected, but session key released")
        return 1

    print("[FAIL] tampered tag accepted (should have been rejected)")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
