"""
Run-folder protocol for variant generation.

    runs/
      <run_id>/
        manifest.json
        summary.md
        artifacts/
          decision_log.jsonl
          decision_hash_chain.json
          <LAYOUT>/<variant_id>/design.json, plan.svg, model.obj, ...
      latest -> <run_id>
"""

from __future__ import annotations

import json
import os
import re
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

LATEST_POINTER = "latest"
LATEST_FALLBACK_FILE = "latest_run.txt"


@dataclass
class RunPaths:
    run_id: str
    run_dir: Path
    artifacts_dir: Path
    manifest_path: Path
    summary_path: Path

    @property
    def decision_log_path(self) -> Path:
        return self.artifacts_dir / "decision_log.jsonl"

    @property
    def hash_chain_path(self) -> Path:
        return self.artifacts_dir / "decision_hash_chain.json"

    def variant_dir(self, layout_id: str, variant_id: str) -> Path:
        return self.artifacts_dir / layout_id / variant_id


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower())
    return slug.strip("-") or "run"


def create_run_id(label: str, now: Optional[datetime] = None) -> str:
    """``YYYYmmdd_HHMMSS_<slug>`` in UTC."""
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d_%H%M%S")
    return f"{stamp}_{slugify(label)}"


def prepare_run_dir(runs_root: str, run_id: str) -> RunPaths:
    run_dir = Path(runs_root) / run_id
    artifacts_dir = run_dir / "artifacts"
    artifacts_dir.mkdir(parents=True, exist_ok=True)
    return RunPaths(
        run_id=run_id,
        run_dir=run_dir,
        artifacts_dir=artifacts_dir,
        manifest_path=run_dir / "manifest.json",
        summary_path=run_dir / "summary.md",
    )


def write_json(path: Path, payload: Any) -> None:
    write_text(path, json.dumps(payload, indent=2) + "\n")


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def read_json(path: Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def list_runs(runs_root: str) -> List[str]:
    """Run ids under ``runs_root``, oldest first (run ids sort by timestamp)."""
    root = Path(runs_root)
    if not root.is_dir():
        return []
    return sorted(
        child.name
        for child in root.iterdir()
        if child.is_dir() and not child.is_symlink() and child.name != LATEST_POINTER
    )


def update_latest_pointer(runs_root: str, run_dir: Path) -> None:
    """Point ``runs_root/latest`` at ``run_dir``.

    Uses a relative symlink, or a directory holding ``latest_run.txt`` on
    filesystems without symlinks.
    """
    runs_path = Path(runs_root)
    latest = runs_path / LATEST_POINTER
    if latest.is_symlink() or latest.is_file():
        latest.unlink()
    elif latest.is_dir():
        shutil.rmtree(latest)

    try:
        latest.symlink_to(os.path.relpath(run_dir, runs_path))
    except OSError:
        latest.mkdir(parents=True, exist_ok=True)
        write_text(latest / LATEST_FALLBACK_FILE, run_dir.name)


def resolve_latest_run(runs_root: str) -> Optional[Path]:
    """Run directory the ``latest`` pointer refers to, or None."""
    runs_path = Path(runs_root)
    latest = runs_path / LATEST_POINTER
    if latest.is_symlink():
        return runs_path / os.readlink(latest)
    fallback = latest / LATEST_FALLBACK_FILE
    if fallback.is_file():
        return runs_path / fallback.read_text(encoding="utf-8").strip()
    return None
