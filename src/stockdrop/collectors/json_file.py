from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stockdrop.collectors.market_data import CandidateNotFoundError, candidate_from_row
from stockdrop.config import DataSource
from stockdrop.models import Candidate, CandidateInputs


@dataclass(slots=True)
class _JsonRecord:
    candidate: Candidate
    ratios: list[dict[str, Any]] = field(default_factory=list)
    key_metrics: list[dict[str, Any]] = field(default_factory=list)
    financial_score: dict[str, Any] | None = None
    price_target: dict[str, Any] | None = None


class JsonFileMarketDataCollector:
    """Collector that serves candidates and metrics from a local JSON snapshot."""

    def __init__(self, *, data_source: DataSource) -> None:
        self.data_source = data_source
        self._records_cache: dict[str, _JsonRecord] | None = None

    def fetch_candidate(self, symbol: str) -> Candidate:
        clean_symbol = symbol.strip().upper()
        record = self._load_records().get(clean_symbol)
        if record is None:
            raise CandidateNotFoundError(f"Stock not found: {clean_symbol}")
        return record.candidate

    def search(self, query: str, *, limit: int = 10, exclude: set[str] | None = None) -> list[Candidate]:
        needle = query.strip().lower()
        if not needle:
            return []
        excluded = exclude or set()
        matches = [
            record.candidate
            for record in self._load_records().values()
            if record.candidate.symbol not in excluded
            and (needle in record.candidate.symbol.lower() or needle in record.candidate.name.lower())
        ]
        return matches[:limit]

    def fetch_inputs(self, candidate: Candidate) -> CandidateInputs:
        record = self._load_records().get(candidate.symbol)
        if record is None:
            return CandidateInputs(candidate=candidate)
        return CandidateInputs(
            candidate=candidate,
            ratios=list(record.ratios),
            key_metrics=list(record.key_metrics),
            financial_score=record.financial_score,
            price_target=record.price_target,
        )

    def _load_records(self) -> dict[str, _JsonRecord]:
        if self._records_cache is not None:
            return self._records_cache

        json_path = self._resolve_json_path()
        with json_path.open("r", encoding="utf-8") as fh:
            loaded = json.load(fh)
        rows = loaded.get("candidates", []) if isinstance(loaded, dict) else loaded
        if not isinstance(rows, list):
            raise ValueError(f"Invalid candidate snapshot: {json_path}")

        records: dict[str, _JsonRecord] = {}
        for row in rows:
            if not isinstance(row, dict):
                continue
            symbol = str(row.get("symbol", "")).strip().upper()
            if not symbol:
                continue
            records[symbol] = _JsonRecord(
                candidate=candidate_from_row(row, fallback_symbol=symbol),
                ratios=_as_records(row.get("ratios")),
                key_metrics=_as_records(row.get("keyMetrics")),
                financial_score=_as_record(row.get("financialScore")),
                price_target=_as_record(row.get("priceTarget")),
            )

        self._records_cache = records
        return records

    def _resolve_json_path(self) -> Path:
        explicit_path = self.data_source.constraints.get("json_path")
        if isinstance(explicit_path, str) and explicit_path.strip():
            path = Path(explicit_path)
            if path.exists():
                return path
            raise FileNotFoundError(f"Candidate snapshot not found: {path}")

        json_dir = Path(str(self.data_source.constraints.get("json_dir", "data/snapshots")))
        pattern = str(self.data_source.constraints.get("json_glob", "*.json"))
        files = sorted(json_dir.glob(pattern))
        if not files:
            raise FileNotFoundError(f"No candidate snapshot found: {json_dir}/{pattern}")
        return files[-1]


def _as_records(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, dict):
        return [value]
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _as_record(value: Any) -> dict[str, Any] | None:
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else None
