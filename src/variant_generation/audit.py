"""Hash-chained decision log for variant generation runs."""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from design import OptimizationOperation, operation_to_dict

GENESIS_HASH = "0" * 64
DECISION_SCHEMA = "variant_generation.decision.v1"
CHAIN_SCHEMA = "variant_generation.hash_chain.v1"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _canonical_json(payload: Dict[str, object]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class DecisionLog:
    """Append-only log of optimizer operations, one JSON line per operation.

    Every record carries the hash of the previous one, so editing or
    dropping a line breaks the chain (see ``verify_hash_chain``).
    """

    def __init__(self, run_id: str, artifacts_dir: Path):
        self.run_id = run_id
        self.artifacts_dir = artifacts_dir
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)
        self.decision_log_path = artifacts_dir / "decision_log.jsonl"
        self.hash_chain_path = artifacts_dir / "decision_hash_chain.json"
        # A re-used run id starts a fresh chain.
        self.decision_log_path.write_text("", encoding="utf-8")
        self._sequence = 0
        self._prev_hash = GENESIS_HASH
        self._chain: List[Dict[str, object]] = []

    @property
    def decision_count(self) -> int:
        return self._sequence

    def append_operation(
        self,
        *,
        variant_id: str,
        layout: str,
        operation: OptimizationOperation,
        price_before_usd: int,
        price_after_usd: int,
        target_usd: int,
    ) -> Dict[str, object]:
        self._sequence += 1
        payload: Dict[str, object] = {
            "schema_version": DECISION_SCHEMA,
            "run_id": self.run_id,
            "seq": self._sequence,
            "timestamp_utc": _utc_now_iso(),
            "variant_id": variant_id,
            "layout": layout,
            "operation": operation_to_dict(operation),
            "price_before_usd": int(price_before_usd),
            "price_after_usd": int(price_after_usd),
            "target_usd": int(target_usd),
            "previous_hash": self._prev_hash,
        }
        digest = sha256_text(_canonical_json(payload))
        payload["hash"] = digest

        with self.decision_log_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload, sort_keys=True) + "\n")

        self._chain.append({
            "seq": self._sequence,
            "hash": digest,
            "previous_hash": self._prev_hash,
        })
        self._prev_hash = digest
        return payload

    def record_variant(
        self,
        *,
        variant_id: str,
        layout: str,
        operations: Sequence[OptimizationOperation],
        price_trace: Sequence[int],
        target_usd: int,
    ) -> None:
        """Log every operation of one optimizer run.

        ``price_trace`` is the optimizer's trace: the starting price, then
        the price after each operation.
        """
        if len(price_trace) != len(operations) + 1:
            raise ValueError(
                f"Price trace has {len(price_trace)} entries for "
                f"{len(operations)} operation(s)"
            )
        for index, operation in enumerate(operations):
            self.append_operation(
                variant_id=variant_id,
                layout=layout,
                operation=operation,
                price_before_usd=price_trace[index],
                price_after_usd=price_trace[index + 1],
                target_usd=target_usd,
            )

    def finalize(self) -> Path:
        payload = {
            "schema_version": CHAIN_SCHEMA,
            "run_id": self.run_id,
            "final_hash": self._prev_hash,
            "decision_count": self._sequence,
            "entries": self._chain,
        }
        self.hash_chain_path.write_text(
            json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
        )
        return self.hash_chain_path


def verify_hash_chain(decision_log_path: Path, expected_final: Optional[str] = None) -> bool:
    """Recompute every record hash and check the links between them."""
    prev_hash = GENESIS_HASH
    expected_seq = 0
    with decision_log_path.open("r", encoding="utf-8") as handle:
        for line in handle:
            if not line.strip():
                continue
            record = json.loads(line)
            expected_seq += 1
            if record.get("seq") != expected_seq or record.get("previous_hash") != prev_hash:
                return False
            payload = {k: v for k, v in record.items() if k != "hash"}
            if sha256_text(_canonical_json(payload)) != record.get("hash"):
                return False
            prev_hash = record["hash"]
    return expected_final is None or prev_hash == expected_final
