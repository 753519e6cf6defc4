from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
SCRIPT = REPO_ROOT / "scripts" / "generate_variants.py"


def test_cli_runs_and_emits_artifacts(tmp_path: Path):
    cmd = [
        sys.executable,
        str(SCRIPT),
        "--layout",
        "LINEAR",
        "--layout",
        "DUAL_ISLAND",
        "--per-layout",
        "2",
        "--runs-dir",
        str(tmp_path),
        "--dxf",
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
    assert "Run ID:" in proc.stdout
    assert "Run dir:" in proc.stdout

    variant_lines = [line for line in proc.stdout.splitlines() if ": target $" in line]
    assert len(variant_lines) == 4
    assert variant_lines[0].startswith("LINEAR-")

    run_dirs = sorted(
        [path for path in tmp_path.iterdir() if path.is_dir() and path.name != "latest"]
    )
    assert len(run_dirs) == 1
    run_dir = run_dirs[0]

    manifest = json.loads((run_dir / "manifest.json").read_text(encoding="utf-8"))
    assert list(manifest["layouts"]) == ["LINEAR", "DUAL_ISLAND"]
    for entries in manifest["layouts"].values():
        for entry in entries:
            root = Path(entry["files"]["root"])
            for name in ("design.json", "plan.svg", "model.obj", "bom.csv", "cutlist.csv", "plan.dxf"):
                assert (root / name).exists()

    assert (run_dir / "artifacts" / "decision_log.jsonl").exists()
    assert (run_dir / "artifacts" / "decision_hash_chain.json").exists()


def test_cli_rejects_unknown_finish(tmp_path: Path):
    cmd = [
        sys.executable,
        str(SCRIPT),
        "--door",
        "GOLD",
        "--runs-dir",
        str(tmp_path),
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 2
    assert "GOLD" in proc.stderr
