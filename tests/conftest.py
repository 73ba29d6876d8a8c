"""Shared fixtures for the comparison tests."""

import pytest

from stockdrop.models import Candidate, CandidateInputs


def build_inputs(
    symbol,
    price=100.0,
    *,
    ratios=None,
    key_metrics=None,
    financial_score=None,
    price_target=None,
):
    return CandidateInputs(
        candidate=Candidate(symbol=symbol, name=f"{symbol} Inc.", price=price),
        ratios=[ratios] if ratios is not None else [],
        key_metrics=[key_metrics] if key_metrics is not None else [],
        financial_score=financial_score,
        price_target=price_target,
    )


@pytest.fixture
def make_inputs():
    return build_inputs


@pytest.fixture
def full_ratios():
    return {
        "priceToEarningsRatio": 10.0,
        "priceToBookRatio": 1.0,
        "priceToSalesRatio": 1.0,
        "netProfitMargin": 0.25,
        "dividendYield": 0.03,
        "debtToEquityRatio": 0.5,
        "currentRatio": 2.0,
    }


@pytest.fixture
def full_key_metrics():
    return {"returnOnEquity": 0.20, "returnOnAssets": 0.10}


@pytest.fixture
def strong_inputs(full_ratios, full_key_metrics):
    """Candidate X from the reference comparison: every metric present."""
    return build_inputs(
        "XXX",
        100.0,
        ratios=full_ratios,
        key_metrics=full_key_metrics,
        financial_score={"piotroskiScore": 8},
        price_target={"targetConsensus": 120.0},
    )


@pytest.fixture
def empty_inputs():
    """Candidate Y: nothing but a price."""
    return build_inputs("YYY", 50.0)
