from __future__ import annotations

import argparse
import logging
import os
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from stockdrop.collectors.market_data import CandidateNotFoundError, FmpApiError
from stockdrop.config import load_config
from stockdrop.pipeline import ComparisonPipeline
from stockdrop.reporting.markdown_report import write_report

LOGGER = logging.getLogger("stockdrop")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare 2-4 stocks and pick a winner")
    parser.add_argument("symbols", nargs="+", help="Ticker symbols to compare")
    parser.add_argument("--config", required=True, help="Path to compare YAML")
    parser.add_argument("--as-of", dest="as_of", default=date.today().isoformat())
    parser.add_argument("--output", default=None)
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("--log-level", dest="log_level", default="INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    dotenv_path = Path.cwd() / ".env"
    if dotenv_path.is_file():
        load_dotenv(dotenv_path=dotenv_path, override=False)
        # If an empty env var is already set, prefer non-empty value from .env.
        if not os.getenv("FMP_API_KEY", "").strip():
            load_dotenv(dotenv_path=dotenv_path, override=True)
    else:
        load_dotenv(override=False)
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    config = load_config(args.config)
    as_of = date.fromisoformat(args.as_of)
    symbols = [s.strip().upper() for s in args.symbols if s.strip()]

    if args.dry_run:
        print(f"[dry-run] Loaded config: {config.name} (provider={config.market_data.provider})")
        print(f"[dry-run] Symbols: {', '.join(symbols)}")
        return 0

    missing_env = [name for name in config.runtime.required_env if not os.getenv(name, "").strip()]
    if missing_env and config.market_data.provider != "json_file":
        LOGGER.error("Missing required environment variables: %s", ", ".join(missing_env))
        return 2

    pipeline = ComparisonPipeline(config)
    try:
        session = pipeline.compare(symbols)
    except (ValueError, FileNotFoundError, CandidateNotFoundError, FmpApiError) as exc:
        LOGGER.error("Comparison failed: %s", exc)
        return 2

    output_dir = args.output or config.output.get("report_dir", "reports")
    report_path = write_report(session, output_dir, as_of)
    if session.outcome is not None:
        print(f"{session.outcome.winner.symbol} is the winner!")
    print(f"Report generated: {report_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
