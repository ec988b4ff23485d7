# MIT License © 2025 Motohiro Suzuki
"""
tools/bench_handshake.py

Wall-clock cost of one full three-message handshake per curve.

    python tools/bench_handshake.py                 all curves, 5 rounds
    python tools/bench_handshake.py siec p256 -n 20
"""

import argparse
import time

from pake import available_curves, run_local_handshake


def _positive_int(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError("rounds must be >= 1")
    return n


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Time full PAKE handshakes per curve.")
    ap.add_argument("curves", nargs="*", metavar="curve",
                    help="curves to time (default: all of %s)" % ", ".join(available_curves()))
    ap.add_argument("-n", "--rounds", type=_positive_int, default=5, help="handshakes per curve")
    return ap


def bench(curve: str, rounds: int) -> float:
    """Mean seconds per handshake (generator points are warmed up first)."""
    run_local_handshake(b"bench", curve=curve, timeout=60.0).unwrap()
    t0 = time.perf_counter()
    for _ in range(rounds):
        run_local_handshake(b"bench", curve=curve, timeout=60.0).unwrap()
    return (time.perf_counter() - t0) / rounds


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    unknown = [c for c in args.curves if c not in available_curves()]
    if unknown:
        ap.error("unknown curve(s): " + ", ".join(unknown))
    curves = args.curves or list(available_curves())

    for name in curves:
        mean = bench(name, args.rounds)
        print(f"[OK] {name:<5} {mean * 1000.0:9.2f} ms/handshake ({args.rounds} rounds)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
