# MIT License © 2025 Motohiro Suzuki
"""
tools/check_attack_coverage.py

Ensures that every attack defined in attacks/attack_table.yml
has corresponding executable evidence (pytest test + runner script).

    python tools/check_attack_coverage.py          existence check
    python tools/check_attack_coverage.py --run    also execute every runner

If any attack is missing evidence, or a runner exits non-zero, CI MUST FAIL.
"""

import subprocess
import sys
from pathlib import Path

import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ATTACK_TABLE = PROJECT_ROOT / "attacks" / "attack_table.yml"


def fail(msg: str):
    print(f"[FAIL] {msg}")
    sys.exit(1)


def load_attacks(path: Path = ATTACK_TABLE) -> list:
    if not path.exists():
        fail(f"attack table not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return data.get("attacks", []) or []


def find_missing(attacks: list, root: Path = PROJECT_ROOT) -> list:
    missing = []
    seen = set()

    for attack in attacks:
        attack_id = attack.get("attack_id")
        test_ref = attack.get("evidence_test")
        script_ref = attack.get("evidence_script")

        if not attack_id:
            missing.append("attack without attack_id")
            continue
        if attack_id in seen:
            missing.append(f"{attack_id}: duplicate attack_id")
        seen.add(attack_id)

        # test file and test function
        if test_ref:
            test_path, _, test_name = test_ref.partition("::")
            test_file = root / test_path
            if not test_file.exists():
                missing.append(f"{attack_id}: missing test {test_path}")
            elif test_name and f"def {test_name}(" not in test_file.read_text(encoding="utf-8"):
                missing.append(f"{attack_id}: missing test function {test_ref}")
        else:
            missing.append(f"{attack_id}: evidence_test not defined")

        # runner script
        if script_ref:
            if not (root / script_ref).exists():
                missing.append(f"{attack_id}: missing script {script_ref}")
        else:
            missing.append(f"{attack_id}: evidence_script not defined")

    return missing


def run_scripts(attacks: list, root: Path = PROJECT_ROOT) -> list:
    failed = []
    for attack in attacks:
        script = root / attack["evidence_script"]
        proc = subprocess.run([sys.executable, str(script)], cwd=str(root))
        if proc.returncode != 0:
            failed.append(f"{attack['attack_id']}: {attack['evidence_script']} exited {proc.returncode}")
    return failed


def main():
    attacks = load_attacks()
    if not attacks:
        fail("no attacks defined in attack_table.yml")

    missing = find_missing(attacks)
    if missing:
        print("[FAIL] attack coverage incomplete:")
        for m in missing:
            print(f"  - {m}")
        sys.exit(1)

    if "--run" in sys.argv[1:]:
        failed = run_scripts(attacks)
        if failed:
            print("[FAIL] attack runners failed:")
            for m in failed:
                print(f"  - {m}")
            sys.exit(1)

    print(f"[OK] attack coverage complete ({len(attacks)} attacks)")


if __name__ == "__main__":
    main()
