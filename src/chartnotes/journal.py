"""
Journal Store - local JSON file holding charted journal records.

Handles:
- Loading and saving trades, backtests and playbook setups
- Record lookup, update and deletion
- Review table of every chart entry across records
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd
from loguru import logger

from chartnotes.codec import ChartCodec, ChartEntry, PhasedChartCodec
from chartnotes.exceptions import JournalFormatError, RecordNotFoundError
from chartnotes.records import RECORD_TYPES, Backtest, PlaybookSetup, Trade

Record = Union[Trade, Backtest, PlaybookSetup]

REVIEW_COLUMNS = ["record_id", "group", "position", "timeframe", "label", "notes", "image_count"]


class JournalStore:
    """
    JSON-file journal of charted records.

    The whole database is loaded on construction and written back after
    every mutation.
    """

    def __init__(self, path: Union[str, Path], codec: Optional[ChartCodec] = None):
        self.path = Path(path)
        self.codec = codec or ChartCodec()
        self.phased_codec = PhasedChartCodec(self.codec)
        self.db = self._load_db()

    def _empty_db(self) -> Dict:
        db = {kind: [] for kind in RECORD_TYPES}
        db["last_updated"] = datetime.now().isoformat()
        return db

    def _load_db(self) -> Dict:
        """Load journal database."""
        if not self.path.exists():
            return self._empty_db()

        try:
            with open(self.path) as f:
                db = json.load(f)
        except json.JSONDecodeError as e:
            raise JournalFormatError(f"Journal file {self.path} is not valid JSON: {e}") from e

        if not isinstance(db, dict):
            raise JournalFormatError(f"Journal file {self.path} must contain a JSON object")

        for kind in RECORD_TYPES:
            if kind not in db:
                logger.warning(f"Journal {self.path} has no '{kind}' list, starting empty")
                db[kind] = []
        return db

    def _save_db(self):
        """Save journal database."""
        self.db["last_updated"] = datetime.now().isoformat()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self.db, f, indent=2)

    def _rows(self, kind: str) -> List[Dict]:
        if kind not in RECORD_TYPES:
            raise ValueError(f"Unknown record kind: {kind}")
        return self.db[kind]

    def add(self, record: Record) -> Record:
        self._rows(record.kind).append(record.to_dict())
        self._save_db()
        logger.info(f"Added {record.kind} record {record.id}")
        return record

    def get(self, kind: str, record_id: str) -> Record:
        for row in self._rows(kind):
            if row.get("id") == record_id:
                return RECORD_TYPES[kind].from_dict(row)
        raise RecordNotFoundError(kind, record_id)

    def list(self, kind: str) -> List[Record]:
        return [RECORD_TYPES[kind].from_dict(row) for row in self._rows(kind)]

    def update(self, record: Record) -> Record:
        rows = self._rows(record.kind)
        for index, row in enumerate(rows):
            if row.get("id") == record.id:
                record.updated_at = datetime.now().isoformat()
                rows[index] = record.to_dict()
                self._save_db()
                logger.info(f"Updated {record.kind} record {record.id}")
                return record
        raise RecordNotFoundError(record.kind, record.id)

    def delete(self, kind: str, record_id: str) -> None:
        rows = self._rows(kind)
        for index, row in enumerate(rows):
            if row.get("id") == record_id:
                del rows[index]
                self._save_db()
                logger.info(f"Deleted {kind} record {record_id}")
                return
        raise RecordNotFoundError(kind, record_id)

    def _chart_groups(self, record: Record) -> Dict[str, List[ChartEntry]]:
        if isinstance(record, Trade):
            analysis = record.chart_analysis(self.phased_codec)
            return {
                "before": analysis.before,
                "after": analysis.after,
                "pre_market": record.pre_market_charts(self.codec),
                "post_market": record.post_market_charts(self.codec),
            }
        return {"charts": record.charts(self.codec)}

    def review_frame(self, kind: str) -> pd.DataFrame:
        """
        One row per chart entry of every record of a kind.

        Placeholder entries (no images, no notes) are left out so that the
        table only shows charts the user actually filled in.
        """
        rows = []
        for record in self.list(kind):
            for group, entries in self._chart_groups(record).items():
                for position, entry in enumerate(entries):
                    if not entry.has_content:
                        continue
                    rows.append({
                        "record_id": record.id,
                        "group": group,
                        "position": position,
                        "timeframe": entry.timeframe or self.codec.table.default,
                        "label": self.codec.table.label(entry.timeframe),
                        "notes": entry.notes,
                        "image_count": len(entry.images),
                    })
        return pd.DataFrame(rows, columns=REVIEW_COLUMNS)
