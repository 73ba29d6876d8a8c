from __future__ import annotations

import math
from typing import Any, Sequence

from stockdrop.models import CandidateInputs, MetricBundle

# Current FMP field names first, legacy v3 names after.
RATIO_FIELDS: dict[str, list[str]] = {
    "pe_ratio": ["priceToEarningsRatio", "priceEarningsRatio", "peRatio"],
    "pb_ratio": ["priceToBookRatio", "priceBookValueRatio", "pbRatio"],
    "ps_ratio": ["priceToSalesRatio", "priceSalesRatio", "psRatio"],
    "net_profit_margin": ["netProfitMargin"],
    "dividend_yield": ["dividendYield"],
    "debt_to_equity": ["debtToEquityRatio", "debtEquityRatio", "debtToEquity"],
    "current_ratio": ["currentRatio"],
}

KEY_METRIC_FIELDS: dict[str, list[str]] = {
    "roe": ["returnOnEquity", "roe"],
    "roa": ["returnOnAssets", "roa"],
}

SOLVENCY_FIELDS = ["piotroskiScore"]
TARGET_FIELDS = ["targetConsensus"]


def extract_metrics(
    ratios: Sequence[dict[str, Any]] | None,
    key_metrics: Sequence[dict[str, Any]] | None,
    financial_score: dict[str, Any] | None,
    price_target: dict[str, Any] | None,
) -> MetricBundle:
    """Select the fields the category scorer consumes.

    Ratio and key-metric series arrive most-recent-first; only the first
    record is read. Nothing is validated or defaulted here, so a negative
    ratio passes through untouched and a missing source leaves its fields
    as ``None``.
    """
    latest_ratios = _latest(ratios)
    latest_key_metrics = _latest(key_metrics)

    values: dict[str, float | None] = {}
    for name, keys in RATIO_FIELDS.items():
        values[name] = _first_float(latest_ratios, keys)
    for name, keys in KEY_METRIC_FIELDS.items():
        values[name] = _first_float(latest_key_metrics, keys)
    values["solvency_score"] = _first_float(financial_score, SOLVENCY_FIELDS)
    values["target_price"] = _first_float(price_target, TARGET_FIELDS)
    return MetricBundle(**values)


def extract_bundle(inputs: CandidateInputs) -> MetricBundle:
    return extract_metrics(
        inputs.ratios,
        inputs.key_metrics,
        inputs.financial_score,
        inputs.price_target,
    )


def _latest(records: Sequence[dict[str, Any]] | None) -> dict[str, Any] | None:
    if not records:
        return None
    first = records[0]
    return first if isinstance(first, dict) else None


def to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text or text in {"-", "--", "N/A", "n/a"}:
            return None
        value = text.replace(",", "")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _first_float(row: dict[str, Any] | None, keys: list[str]) -> float | None:
    if not row:
        return None
    for key in keys:
        value = to_float(row.get(key))
        if value is not None:
            return value
    return None
