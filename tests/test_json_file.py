"""Tests for the offline JSON snapshot collector."""

import json
from pathlib import Path

import pytest

from stockdrop.collectors.json_file import JsonFileMarketDataCollector
from stockdrop.collectors.market_data import CandidateNotFoundError
from stockdrop.config import DataSource

SAMPLE_SNAPSHOT = Path(__file__).resolve().parents[1] / "data" / "snapshots" / "sample_candidates.json"


def _collector(path):
    return JsonFileMarketDataCollector(
        data_source=DataSource(provider="json_file", constraints={"json_path": str(path)})
    )


def test_reads_sample_snapshot():
    collector = _collector(SAMPLE_SNAPSHOT)

    candidate = collector.fetch_candidate("valu")
    inputs = collector.fetch_inputs(candidate)

    assert candidate.name == "Value Industries"
    assert candidate.price == 100.0
    assert len(inputs.ratios) == 2
    assert inputs.ratios[0]["priceToEarningsRatio"] == 10.0
    assert inputs.financial_score["piotroskiScore"] == 8
    assert inputs.price_target["targetConsensus"] == 120.0


def test_candidate_without_metrics_gets_empty_sources():
    collector = _collector(SAMPLE_SNAPSHOT)

    inputs = collector.fetch_inputs(collector.fetch_candidate("THIN"))

    assert inputs.ratios == []
    assert inputs.key_metrics == []
    assert inputs.financial_score is None
    assert inputs.price_target is None


def test_unknown_symbol():
    with pytest.raises(CandidateNotFoundError):
        _collector(SAMPLE_SNAPSHOT).fetch_candidate("ZZZZ")


def test_search_matches_symbol_or_name():
    collector = _collector(SAMPLE_SNAPSHOT)

    assert [c.symbol for c in collector.search("holdings")] == ["GRTH"]
    assert [c.symbol for c in collector.search("thin", exclude={"GRTH"})] == ["THIN"]
    assert collector.search("") == []


def test_accepts_bare_list_and_single_records(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            [
                {
                    "symbol": "abc",
                    "price": 5,
                    "ratios": {"currentRatio": 1.2},
                    "financialScore": [{"piotroskiScore": 4}],
                },
                {"name": "no symbol"},
            ]
        ),
        encoding="utf-8",
    )
    collector = _collector(path)

    inputs = collector.fetch_inputs(collector.fetch_candidate("ABC"))

    assert inputs.ratios == [{"currentRatio": 1.2}]
    assert inputs.financial_score == {"piotroskiScore": 4}


def test_missing_explicit_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        _collector(tmp_path / "missing.json").fetch_candidate("ABC")


def test_picks_latest_file_from_directory(tmp_path):
    (tmp_path / "20250101.json").write_text(json.dumps([{"symbol": "OLD", "price": 1}]), encoding="utf-8")
    (tmp_path / "20250201.json").write_text(json.dumps([{"symbol": "NEW", "price": 1}]), encoding="utf-8")
    collector = JsonFileMarketDataCollector(
        data_source=DataSource(provider="json_file", constraints={"json_dir": str(tmp_path)})
    )

    assert collector.fetch_candidate("NEW").symbol == "NEW"
    with pytest.raises(CandidateNotFoundError):
        collector.fetch_candidate("OLD")
