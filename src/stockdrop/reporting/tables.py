from __future__ import annotations

from stockdrop.models import CompositeResult

CATEGORY_COLUMNS: list[tuple[str, str]] = [
    ("valuation", "Valuation"),
    ("growth", "Growth"),
    ("profitability", "Profitability"),
    ("financial_health", "Health"),
    ("analyst_sentiment", "Sentiment"),
]

RAW_METRIC_COLUMNS: list[tuple[str, str]] = [
    ("pe_ratio", "P/E"),
    ("pb_ratio", "P/B"),
    ("ps_ratio", "P/S"),
    ("roe", "ROE"),
    ("roa", "ROA"),
    ("net_profit_margin", "Net Margin"),
    ("dividend_yield", "Div Yield"),
    ("debt_to_equity", "D/E"),
    ("current_ratio", "Current Ratio"),
    ("solvency_score", "Piotroski"),
    ("target_price", "Target"),
]


def to_markdown_table(results: list[CompositeResult] | tuple[CompositeResult, ...], winner_symbol: str | None = None) -> str:
    category_header = "".join(f"|{title}" for _, title in CATEGORY_COLUMNS)
    raw_header = "".join(f"|{title}" for _, title in RAW_METRIC_COLUMNS)
    header = (
        f"|Symbol|Name|Price{category_header}|Composite|Winner{raw_header}|\n"
        f"|---|---|---:{''.join('|---:' for _ in CATEGORY_COLUMNS)}|---:|---"
        f"{''.join('|---:' for _ in RAW_METRIC_COLUMNS)}|"
    )
    rows = []
    for result in results:
        category_values = result.scores.as_dict()
        category_cells = "".join(f"|{category_values[key]:.2f}" for key, _ in CATEGORY_COLUMNS)
        raw_cells = "".join(
            f"|{_format_metric(getattr(result.metrics, key))}" for key, _ in RAW_METRIC_COLUMNS
        )
        rows.append(
            "|{symbol}|{name}|{price:.2f}{categories}|{composite:.2f}|{winner}{raw}|".format(
                symbol=result.candidate.symbol,
                name=result.candidate.name,
                price=result.candidate.price,
                categories=category_cells,
                composite=result.composite,
                winner="yes" if result.candidate.symbol == winner_symbol else "",
                raw=raw_cells,
            )
        )
    return header + ("\n" + "\n".join(rows) if rows else "")


def _format_metric(value: object) -> str:
    if not isinstance(value, (int, float)):
        return "-"
    return f"{float(value):.2f}"
