from __future__ import annotations

import logging
from typing import Sequence

from stockdrop.models import (
    MIN_COMPARISON_CANDIDATES,
    CandidateInputs,
    CategoryScores,
    CompositeResult,
    InsufficientCandidatesError,
    RankingOutcome,
)
from stockdrop.scoring.categories import score_categories
from stockdrop.scoring.extraction import extract_bundle

LOGGER = logging.getLogger(__name__)

CATEGORY_WEIGHTS: dict[str, float] = {
    "valuation": 0.25,
    "growth": 0.20,
    "profitability": 0.25,
    "financial_health": 0.20,
    "analyst_sentiment": 0.10,
}


def composite_score(scores: CategoryScores) -> float:
    return (
        scores.valuation * CATEGORY_WEIGHTS["valuation"]
        + scores.growth * CATEGORY_WEIGHTS["growth"]
        + scores.profitability * CATEGORY_WEIGHTS["profitability"]
        + scores.financial_health * CATEGORY_WEIGHTS["financial_health"]
        + scores.analyst_sentiment * CATEGORY_WEIGHTS["analyst_sentiment"]
    )


def score_candidate(inputs: CandidateInputs) -> CompositeResult:
    bundle = extract_bundle(inputs)
    scores = score_categories(bundle, inputs.candidate.price)
    return CompositeResult(
        candidate=inputs.candidate,
        scores=scores,
        composite=composite_score(scores),
        metrics=bundle,
    )


def rank(candidates: Sequence[CandidateInputs]) -> RankingOutcome:
    """Score every candidate and pick the one with the highest composite.

    Candidates are scanned in input order and the best is only replaced on a
    strictly greater composite, so the first of several equal scores wins.
    Results for all candidates are returned in input order.
    """
    if len(candidates) < MIN_COMPARISON_CANDIDATES:
        raise InsufficientCandidatesError(
            f"Select at least {MIN_COMPARISON_CANDIDATES} stocks to compare (got {len(candidates)})"
        )

    results = [score_candidate(inputs) for inputs in candidates]

    best = results[0]
    for result in results[1:]:
        if result.composite > best.composite:
            best = result

    for result in results:
        LOGGER.info(
            "%s composite=%.2f valuation=%.2f growth=%.2f profitability=%.2f health=%.2f sentiment=%.2f",
            result.candidate.symbol,
            result.composite,
            result.scores.valuation,
            result.scores.growth,
            result.scores.profitability,
            result.scores.financial_health,
            result.scores.analyst_sentiment,
        )
    LOGGER.info("Winner: %s (%.2f)", best.candidate.symbol, best.composite)

    return RankingOutcome(winner=best.candidate, results=tuple(results))
