"""Append-only CSV log with one row per simulation run."""

from __future__ import annotations

import csv
import hashlib
import json
import logging
import pathlib
from typing import Dict, List, Mapping, Optional

from twamm_sim.common import metrics

log = logging.getLogger(__name__)

DATA_ID = "dataId"


def content_hash(record: Mapping[str, str]) -> str:
    """md5 over the JSON encoding of the record, in field order."""
    payload = json.dumps(dict(record), separators=(",", ":"), default=str)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


class SummaryLogger:
    def __init__(self, path: str = "simulations/L2-USDT/summary.csv", skip_duplicates: bool = False) -> None:
        self.path = pathlib.Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.skip_duplicates = skip_duplicates

    def append(self, record: Mapping[str, str]) -> Optional[Dict[str, str]]:
        """Write ``record`` plus its ``dataId``; header only for a new file.

        Returns the row written, or None when it was skipped as a duplicate.
        """
        row = {key: value for key, value in record.items() if key != DATA_ID}
        row[DATA_ID] = content_hash(row)
        if self.skip_duplicates and row[DATA_ID] in self.known_ids():
            log.info("Skipping duplicate result %s", row[DATA_ID])
            metrics.RESULTS_WRITTEN.labels(status="duplicate").inc()
            return None
        write_header = not self.path.exists() or self.path.stat().st_size == 0
        with self.path.open("a", encoding="utf-8", newline="") as fh:
            writer = csv.DictWriter(fh, fieldnames=list(row.keys()))
            if write_header:
                writer.writeheader()
            writer.writerow(row)
        metrics.RESULTS_WRITTEN.labels(status="written").inc()
        log.info("Appended result %s to %s", row[DATA_ID], self.path)
        return row

    def load(self) -> List[Dict[str, str]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8", newline="") as fh:
            return [dict(row) for row in csv.DictReader(fh)]

    def known_ids(self) -> set[str]:
        return {row.get(DATA_ID, "") for row in self.load()}


__all__ = ["SummaryLogger", "content_hash", "DATA_ID"]
