"""Tests for gathering candidate data and ranking it end to end."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from stockdrop.collectors.json_file import JsonFileMarketDataCollector
from stockdrop.collectors.market_data import FmpMarketDataCollector
from stockdrop.config import CompareConfig, ComparisonConfig, DataSource, RuntimeConfig
from stockdrop.models import (
    Candidate,
    CandidateInputs,
    DuplicateCandidateError,
    InsufficientCandidatesError,
    TooManyCandidatesError,
)
from stockdrop.pipeline import ComparisonPipeline

SAMPLE_SNAPSHOT = Path(__file__).resolve().parents[1] / "data" / "snapshots" / "sample_candidates.json"


def _config(provider="json_file", max_candidates=4):
    return CompareConfig(
        version=1,
        name="test",
        data_sources={
            "market_data": DataSource(provider=provider, constraints={"json_path": str(SAMPLE_SNAPSHOT)})
        },
        comparison=ComparisonConfig(min_candidates=2, max_candidates=max_candidates),
        runtime=RuntimeConfig(),
        output={},
    )


def test_selects_collector_from_provider():
    assert isinstance(ComparisonPipeline(_config("json_file")).market_data, JsonFileMarketDataCollector)
    assert isinstance(ComparisonPipeline(_config("fmp")).market_data, FmpMarketDataCollector)


def test_compare_sample_snapshot():
    session = ComparisonPipeline(_config()).compare(["GRTH", "VALU", "THIN"])

    assert session.symbols == ["GRTH", "VALU", "THIN"]
    assert session.outcome.winner.symbol == "VALU"
    composites = {r.candidate.symbol: r.composite for r in session.outcome.results}
    assert composites["THIN"] == 0.0
    assert composites["VALU"] > composites["GRTH"] > composites["THIN"]


def test_dry_run_fetches_nothing():
    market_data = MagicMock()

    session = ComparisonPipeline(_config(), market_data=market_data).compare(["A", "B"], dry_run=True)

    assert session.outcome is None
    market_data.fetch_candidate.assert_not_called()


def test_gathers_every_candidate_before_ranking():
    market_data = MagicMock()
    market_data.fetch_candidate.side_effect = lambda s: Candidate(symbol=s, name=s, price=10.0)
    market_data.fetch_inputs.side_effect = lambda c: CandidateInputs(candidate=c)

    session = ComparisonPipeline(_config(), market_data=market_data).compare(["A", "B"])

    assert market_data.fetch_inputs.call_count == 2
    assert session.outcome.winner.symbol == "A"


def test_rejects_single_symbol_before_fetching():
    market_data = MagicMock()

    with pytest.raises(InsufficientCandidatesError):
        ComparisonPipeline(_config(), market_data=market_data).compare(["AAPL"])
    market_data.fetch_candidate.assert_not_called()


def test_respects_configured_maximum():
    with pytest.raises(TooManyCandidatesError):
        ComparisonPipeline(_config(max_candidates=2)).compare(["VALU", "GRTH", "THIN"])


def test_rejects_duplicate_symbols():
    with pytest.raises(DuplicateCandidateError):
        ComparisonPipeline(_config()).compare(["VALU", "valu"])
