# MIT License © 2025 Motohiro Suzuki
import importlib.util
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _load_bench():
    path = PROJECT_ROOT / "tools" / "bench_handshake.py"
    spec = importlib.util.spec_from_file_location("bench_handshake", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


bench = _load_bench()


def test_bench_defaults_to_all_curves_and_five_rounds():
    args = bench.build_parser().parse_args([])
    assert args.curves == []
    assert args.rounds == 5


def test_bench_parses_curves_and_rounds():
    args = bench.build_parser().parse_args(["siec", "p256", "-n", "3"])
    assert args.curves == ["siec", "p256"]
    assert args.rounds == 3


@pytest.mark.parametrize("argv", [["-n"], ["-n", "many"], ["-n", "0"], ["curve25519"]])
def test_bench_rejects_bad_arguments(argv, capsys):
    with pytest.raises(SystemExit) as e:
        bench.main(argv)
    assert e.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_bench_runs_one_round(capsys):
    assert bench.main(["siec", "-n", "1"]) == 0
    assert "[OK] siec" in capsys.readouterr().out
