"""
Run ledger — append-only history of full-deployment runs.

The deployment journal says *what* is deployed; the ledger says *when*
a run was attempted, against which chain and deployment, and how it
ended. One NDJSON line per run, under ``.state/runs.ndjson``.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

LEDGER_DIR = ".state"
LEDGER_FILE = "runs.ndjson"


class RunRecord(BaseModel):
    """One run of the full deployment."""

    recorded_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation_id: str = ""

    network: str = ""
    chain_id: int | None = None
    deployment_id: str | None = None    # None = the chain's default deployment
    reset: bool = False

    modules: list[str] = Field(default_factory=list)    # module ids, in run order
    modules_executed: int = 0
    contracts_deployed: int = 0
    verified: bool = False

    status: str = ""                    # ok | failed
    duration_ms: int = 0
    error: str | None = None


class RunLedger:
    """NDJSON ledger of RunRecords. Writing never raises."""

    def __init__(self, path: Path):
        self._path = path

    @classmethod
    def for_project(cls, project_root: Path) -> RunLedger:
        return cls(project_root / LEDGER_DIR / LEDGER_FILE)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: RunRecord) -> None:
        line = record.model_dump_json() + "\n"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            logger.error("Could not record run %s in %s: %s", record.operation_id, self._path, e)
            return
        logger.debug("Recorded run %s (%s)", record.operation_id, record.status)

    def records(self) -> list[RunRecord]:
        """All readable records, oldest first. Damaged lines are skipped."""
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Could not read run ledger %s: %s", self._path, e)
            return []

        records = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                records.append(RunRecord.model_validate(json.loads(line)))
            except (ValueError, ValidationError) as e:
                logger.warning("Skipping damaged ledger line %d: %s", number, e)
        return records

    def recent(self, n: int = 20, deployment_id: str | None = None) -> list[RunRecord]:
        """Last ``n`` records, oldest first, optionally of one deployment id."""
        records = self.records()
        if deployment_id:
            records = [r for r in records if r.deployment_id == deployment_id]
        return records[-n:] if n > 0 else []
