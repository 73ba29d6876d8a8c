from __future__ import annotations

from datetime import date
from pathlib import Path

from stockdrop.models import ComparisonSession
from stockdrop.reporting.tables import to_markdown_table
from stockdrop.scoring.composite import CATEGORY_WEIGHTS


def write_report(session: ComparisonSession, output_dir: str | Path, as_of: date) -> Path:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    report_path = out_dir / f"{as_of.strftime('%Y%m%d')}_compare.md"

    weights = ", ".join(f"{name} {weight:.0%}" for name, weight in CATEGORY_WEIGHTS.items())
    lines = [
        f"# StockDrop Comparison ({as_of.isoformat()})",
        "",
        f"Candidates: {', '.join(session.symbols) if session.candidates else 'N/A'}",
        f"Composite weights: {weights}.",
        "",
    ]

    outcome = session.outcome
    if outcome is None:
        lines.append("No ranking computed.")
    else:
        winner = outcome.result_for(outcome.winner.symbol)
        composite_text = f"{winner.composite:.2f}" if winner is not None else "N/A"
        lines.extend(
            [
                f"## Winner: {outcome.winner.symbol} {outcome.winner.name} ({composite_text})",
                "",
                "## Breakdown",
                "",
                to_markdown_table(outcome.results, winner_symbol=outcome.winner.symbol),
            ]
        )

    report_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return report_path
