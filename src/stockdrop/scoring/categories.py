from __future__ import annotations

from stockdrop.models import CategoryScores, MetricBundle

# Per-addend ceilings. A category total is the sum of its clamped terms,
# so e.g. profitability can reach 15 + 15 + 15 + 10 = 55.
VALUATION_TERM_CAP = 25.0
GROWTH_TERM_CAP = 10.0
PROFITABILITY_TERM_CAP = 15.0
DIVIDEND_TERM_CAP = 10.0
HEALTH_TERM_CAP = 10.0
SENTIMENT_TERM_CAP = 10.0

SOLVENCY_SCALE_MAX = 9.0


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def score_valuation(bundle: MetricBundle) -> float:
    """Cheaper multiples score higher. Non-positive multiples are ignored."""
    score = 0.0
    if _positive(bundle.pe_ratio):
        score += clamp(100.0 / bundle.pe_ratio, 0.0, VALUATION_TERM_CAP)
    if _positive(bundle.pb_ratio):
        score += clamp(10.0 / bundle.pb_ratio, 0.0, VALUATION_TERM_CAP)
    if _positive(bundle.ps_ratio):
        score += clamp(5.0 / bundle.ps_ratio, 0.0, VALUATION_TERM_CAP)
    return score


def score_growth(bundle: MetricBundle) -> float:
    score = 0.0
    if bundle.roe is not None:
        score += clamp(bundle.roe * 10.0, 0.0, GROWTH_TERM_CAP)
    if bundle.roa is not None:
        score += clamp(bundle.roa * 10.0, 0.0, GROWTH_TERM_CAP)
    return score


def score_profitability(bundle: MetricBundle) -> float:
    score = 0.0
    if bundle.net_profit_margin is not None:
        score += clamp(bundle.net_profit_margin * 100.0, 0.0, PROFITABILITY_TERM_CAP)
    if bundle.roe is not None:
        score += clamp(bundle.roe * 25.0, 0.0, PROFITABILITY_TERM_CAP)
    if bundle.roa is not None:
        score += clamp(bundle.roa * 25.0, 0.0, PROFITABILITY_TERM_CAP)
    if bundle.dividend_yield is not None:
        score += clamp(bundle.dividend_yield * 100.0, 0.0, DIVIDEND_TERM_CAP)
    return score


def score_financial_health(bundle: MetricBundle) -> float:
    """Leverage, liquidity and the 0-9 solvency score, each worth up to 10."""
    score = 0.0
    # Negative D/E means negative equity and is scored as if absent.
    if bundle.debt_to_equity is not None and bundle.debt_to_equity >= 0:
        score += clamp(20.0 / (bundle.debt_to_equity + 1.0), 0.0, HEALTH_TERM_CAP)
    if bundle.current_ratio is not None:
        score += clamp(bundle.current_ratio / 2.0, 0.0, HEALTH_TERM_CAP)
    if bundle.solvency_score is not None:
        score += clamp(bundle.solvency_score / SOLVENCY_SCALE_MAX * 10.0, 0.0, HEALTH_TERM_CAP)
    return score


def score_analyst_sentiment(bundle: MetricBundle, price: float) -> float:
    if bundle.target_price is None or not _positive(price):
        return 0.0
    upside_pct = (bundle.target_price - price) / price * 100.0
    return clamp(upside_pct, 0.0, SENTIMENT_TERM_CAP)


def score_categories(bundle: MetricBundle, price: float) -> CategoryScores:
    return CategoryScores(
        valuation=score_valuation(bundle),
        growth=score_growth(bundle),
        profitability=score_profitability(bundle),
        financial_health=score_financial_health(bundle),
        analyst_sentiment=score_analyst_sentiment(bundle, price),
    )


def _positive(value: float | None) -> bool:
    return value is not None and value > 0
