from __future__ import annotations

import logging
from typing import Protocol

from stockdrop.collectors.json_file import JsonFileMarketDataCollector
from stockdrop.collectors.market_data import FmpMarketDataCollector
from stockdrop.config import CompareConfig
from stockdrop.models import (
    Candidate,
    CandidateInputs,
    ComparisonSession,
    InsufficientCandidatesError,
    TooManyCandidatesError,
)
from stockdrop.scoring.composite import rank

LOGGER = logging.getLogger(__name__)


class MarketDataCollector(Protocol):
    def fetch_candidate(self, symbol: str) -> Candidate: ...

    def fetch_inputs(self, candidate: Candidate) -> CandidateInputs: ...


class ComparisonPipeline:
    def __init__(self, config: CompareConfig, market_data: MarketDataCollector | None = None) -> None:
        self.config = config
        if market_data is not None:
            self.market_data = market_data
        elif config.market_data.provider == "json_file":
            self.market_data = JsonFileMarketDataCollector(data_source=config.market_data)
        else:
            self.market_data = FmpMarketDataCollector(data_source=config.market_data)

    def build_session(self, symbols: list[str]) -> ComparisonSession:
        limits = self.config.comparison
        if len(symbols) < limits.min_candidates:
            raise InsufficientCandidatesError(
                f"Select at least {limits.min_candidates} stocks to compare (got {len(symbols)})"
            )
        if len(symbols) > limits.max_candidates:
            raise TooManyCandidatesError(f"Maximum {limits.max_candidates} stocks can be compared")

        session = ComparisonSession()
        for symbol in symbols:
            session = session.add(self.market_data.fetch_candidate(symbol))
        return session

    def run(self, session: ComparisonSession) -> ComparisonSession:
        """Gather every candidate's metric sources, then rank the full snapshot."""
        inputs = [self.market_data.fetch_inputs(candidate) for candidate in session.candidates]
        LOGGER.info("Collected metrics for %d candidates: %s", len(inputs), ", ".join(session.symbols))
        return session.with_outcome(rank(inputs))

    def compare(self, symbols: list[str], dry_run: bool = False) -> ComparisonSession:
        if dry_run:
            return ComparisonSession()
        return self.run(self.build_session(symbols))
