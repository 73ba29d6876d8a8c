from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

MAX_COMPARISON_CANDIDATES = 4
MIN_COMPARISON_CANDIDATES = 2


class InsufficientCandidatesError(ValueError):
    """Raised when fewer than two candidates are submitted for ranking."""


class TooManyCandidatesError(ValueError):
    """Raised when a comparison session is already full."""


class DuplicateCandidateError(ValueError):
    """Raised when a symbol is added to a session twice."""


@dataclass(frozen=True, slots=True)
class Candidate:
    symbol: str
    name: str
    price: float = 0.0
    beta: float | None = None
    market_cap: float | None = None


@dataclass(frozen=True, slots=True)
class MetricBundle:
    # valuation
    pe_ratio: float | None = None
    pb_ratio: float | None = None
    ps_ratio: float | None = None
    # profitability
    net_profit_margin: float | None = None
    dividend_yield: float | None = None
    # key metrics, shared by growth and profitability
    roe: float | None = None
    roa: float | None = None
    # financial health
    debt_to_equity: float | None = None
    current_ratio: float | None = None
    solvency_score: float | None = None
    # analyst sentiment
    target_price: float | None = None


@dataclass(slots=True)
class CandidateInputs:
    """Everything the ranker needs for one candidate, gathered up front."""

    candidate: Candidate
    ratios: list[dict[str, Any]] = field(default_factory=list)
    key_metrics: list[dict[str, Any]] = field(default_factory=list)
    financial_score: dict[str, Any] | None = None
    price_target: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class CategoryScores:
    valuation: float = 0.0
    growth: float = 0.0
    profitability: float = 0.0
    financial_health: float = 0.0
    analyst_sentiment: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return {
            "valuation": self.valuation,
            "growth": self.growth,
            "profitability": self.profitability,
            "financial_health": self.financial_health,
            "analyst_sentiment": self.analyst_sentiment,
        }


@dataclass(frozen=True, slots=True)
class CompositeResult:
    candidate: Candidate
    scores: CategoryScores
    composite: float
    metrics: MetricBundle


@dataclass(frozen=True, slots=True)
class RankingOutcome:
    winner: Candidate
    results: tuple[CompositeResult, ...] = ()

    def result_for(self, symbol: str) -> CompositeResult | None:
        for result in self.results:
            if result.candidate.symbol == symbol:
                return result
        return None


@dataclass(frozen=True, slots=True)
class ComparisonSession:
    """Caller-owned comparison state: the selected candidates and the last outcome.

    Every mutation returns a new session. Changing the selection drops the
    previous outcome, since it no longer describes the selected set.
    """

    candidates: tuple[Candidate, ...] = ()
    outcome: RankingOutcome | None = None

    @classmethod
    def start(cls, candidate: Candidate) -> ComparisonSession:
        return cls(candidates=(candidate,))

    @property
    def symbols(self) -> list[str]:
        return [c.symbol for c in self.candidates]

    @property
    def can_rank(self) -> bool:
        return len(self.candidates) >= MIN_COMPARISON_CANDIDATES

    def add(self, candidate: Candidate) -> ComparisonSession:
        if len(self.candidates) >= MAX_COMPARISON_CANDIDATES:
            raise TooManyCandidatesError(
                f"Maximum {MAX_COMPARISON_CANDIDATES} stocks can be compared"
            )
        if candidate.symbol in self.symbols:
            raise DuplicateCandidateError(f"{candidate.symbol} is already selected")
        return ComparisonSession(candidates=self.candidates + (candidate,))

    def remove(self, symbol: str) -> ComparisonSession:
        remaining = tuple(c for c in self.candidates if c.symbol != symbol)
        return ComparisonSession(candidates=remaining)

    def with_outcome(self, outcome: RankingOutcome) -> ComparisonSession:
        return replace(self, outcome=outcome)
