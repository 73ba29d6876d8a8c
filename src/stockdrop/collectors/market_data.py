from __future__ import annotations

import logging
import os
from typing import Any

import requests

from stockdrop.config import DataSource
from stockdrop.models import Candidate, CandidateInputs
from stockdrop.scoring.extraction import to_float

LOGGER = logging.getLogger(__name__)
DEFAULT_BASE_URL = "https://financialmodelingprep.com/stable"


class FmpApiError(RuntimeError):
    """Raised when the Financial Modeling Prep API call fails."""


class CandidateNotFoundError(LookupError):
    """Raised when a quote lookup returns no rows for a symbol."""


class FmpApiClient:
    """Thin Financial Modeling Prep client with query-string API-key auth.

    Every call is a single attempt. Callers decide what to do with a failure.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: int = 30,
        api_key: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self._api_key = api_key or os.getenv("FMP_API_KEY")

    def get_quote(self, symbol: str) -> list[dict[str, Any]]:
        return self._get_list("/quote", {"symbol": symbol})

    def search_symbols(self, query: str, limit: int = 10) -> list[dict[str, Any]]:
        return self._get_list("/search-symbol", {"query": query, "limit": str(limit)})

    def get_ratios(self, symbol: str, limit: int = 1) -> list[dict[str, Any]]:
        return self._get_list("/ratios", {"symbol": symbol, "limit": str(limit)})

    def get_key_metrics(self, symbol: str, limit: int = 1) -> list[dict[str, Any]]:
        return self._get_list("/key-metrics", {"symbol": symbol, "limit": str(limit)})

    def get_financial_scores(self, symbol: str) -> list[dict[str, Any]]:
        return self._get_list("/financial-scores", {"symbol": symbol})

    def get_price_target_consensus(self, symbol: str) -> list[dict[str, Any]]:
        return self._get_list("/price-target-consensus", {"symbol": symbol})

    def _get_list(self, path: str, params: dict[str, str]) -> list[dict[str, Any]]:
        payload = self._request("GET", path, params=params)
        if isinstance(payload, dict):
            # Single-object responses are normalized to a one-row list.
            return [payload] if payload else []
        if not isinstance(payload, list):
            return []
        return [row for row in payload if isinstance(row, dict)]

    def _request(self, method: str, path: str, *, params: dict[str, str] | None = None) -> Any:
        call_params = dict(params or {})
        call_params["apikey"] = self._ensure_api_key()
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=call_params,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise FmpApiError(f"{method} {path} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            message = payload.get("Error Message") if isinstance(payload, dict) else response.text
            raise FmpApiError(f"{method} {path} failed ({response.status_code}): {message}")
        if isinstance(payload, dict) and "Error Message" in payload:
            raise FmpApiError(f"{method} {path} failed: {payload['Error Message']}")

        return payload

    def _ensure_api_key(self) -> str:
        if not self._api_key:
            raise FmpApiError("FMP API key is missing. Set FMP_API_KEY.")
        return self._api_key


class FmpMarketDataCollector:
    """Candidate and metric collector backed by the FMP API."""

    def __init__(self, *, data_source: DataSource, client: FmpApiClient | None = None) -> None:
        self.data_source = data_source
        constraints = data_source.constraints
        self.client = client or FmpApiClient(
            base_url=str(constraints.get("base_url", DEFAULT_BASE_URL)),
            timeout_seconds=int(constraints.get("timeout_seconds", 30)),
        )

    def fetch_candidate(self, symbol: str) -> Candidate:
        clean_symbol = symbol.strip().upper()
        rows = self.client.get_quote(clean_symbol)
        if not rows:
            raise CandidateNotFoundError(f"Stock not found: {clean_symbol}")
        return candidate_from_row(rows[0], fallback_symbol=clean_symbol)

    def search(self, query: str, *, limit: int = 10, exclude: set[str] | None = None) -> list[Candidate]:
        if not query.strip():
            return []
        excluded = exclude or set()
        rows = self.client.search_symbols(query.strip(), limit=limit)
        candidates = []
        for row in rows:
            symbol = str(row.get("symbol", "")).strip().upper()
            if not symbol or symbol in excluded:
                continue
            candidates.append(candidate_from_row(row, fallback_symbol=symbol))
        LOGGER.info("Search %r: %d results", query, len(candidates))
        return candidates

    def fetch_inputs(self, candidate: Candidate) -> CandidateInputs:
        symbol = candidate.symbol
        ratios = self.client.get_ratios(symbol)
        key_metrics = self.client.get_key_metrics(symbol)
        financial_scores = self.client.get_financial_scores(symbol)
        price_targets = self.client.get_price_target_consensus(symbol)

        missing = [
            name
            for name, rows in (
                ("ratios", ratios),
                ("key-metrics", key_metrics),
                ("financial-scores", financial_scores),
                ("price-target-consensus", price_targets),
            )
            if not rows
        ]
        if missing:
            LOGGER.warning("%s: no data from %s", symbol, ", ".join(missing))

        return CandidateInputs(
            candidate=candidate,
            ratios=ratios,
            key_metrics=key_metrics,
            financial_score=financial_scores[0] if financial_scores else None,
            price_target=price_targets[0] if price_targets else None,
        )


def candidate_from_row(row: dict[str, Any], fallback_symbol: str = "") -> Candidate:
    symbol = str(row.get("symbol", "")).strip().upper() or fallback_symbol
    name = str(row.get("name", "")).strip() or str(row.get("companyName", "")).strip() or symbol
    price = to_float(row.get("price"))
    return Candidate(
        symbol=symbol,
        name=name,
        price=price if price is not None and price > 0 else 0.0,
        beta=to_float(row.get("beta")),
        market_cap=to_float(row.get("marketCap")),
    )
