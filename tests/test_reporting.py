"""Tests for the Markdown breakdown table and report file."""

from datetime import date

from stockdrop.models import ComparisonSession
from stockdrop.reporting.markdown_report import write_report
from stockdrop.reporting.tables import to_markdown_table
from stockdrop.scoring.composite import rank


def test_table_has_row_per_candidate(strong_inputs, empty_inputs):
    outcome = rank([strong_inputs, empty_inputs])

    table = to_markdown_table(outcome.results, winner_symbol=outcome.winner.symbol)
    lines = table.splitlines()

    assert lines[0].startswith("|Symbol|Name|Price|Valuation|Growth|")
    assert len(lines) == 4
    assert lines[2].startswith("|XXX|XXX Inc.|100.00|25.00|3.00|25.50|")
    assert "|yes|" in lines[2]
    assert lines[3].startswith("|YYY|YYY Inc.|50.00|0.00|")
    # absent raw metrics render as dashes
    assert lines[3].endswith("|-|-|-|-|-|-|-|-|-|-|-|")


def test_empty_table_is_header_only():
    assert len(to_markdown_table([]).splitlines()) == 2


def test_write_report_with_outcome(tmp_path, strong_inputs, empty_inputs):
    session = ComparisonSession(candidates=(strong_inputs.candidate, empty_inputs.candidate))
    session = session.with_outcome(rank([strong_inputs, empty_inputs]))

    path = write_report(session, tmp_path / "out", date(2026, 3, 14))

    assert path.name == "20260314_compare.md"
    text = path.read_text(encoding="utf-8")
    assert "# StockDrop Comparison (2026-03-14)" in text
    assert "## Winner: XXX XXX Inc." in text
    assert "Candidates: XXX, YYY" in text
    assert "valuation 25%" in text


def test_write_report_without_outcome(tmp_path):
    path = write_report(ComparisonSession(), tmp_path, date(2026, 1, 2))

    assert "No ranking computed." in path.read_text(encoding="utf-8")
