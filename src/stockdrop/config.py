from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from stockdrop.models import MAX_COMPARISON_CANDIDATES, MIN_COMPARISON_CANDIDATES


@dataclass(slots=True)
class DataSource:
    provider: str
    plan: str = "free"
    constraints: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ComparisonConfig:
    min_candidates: int = MIN_COMPARISON_CANDIDATES
    max_candidates: int = MAX_COMPARISON_CANDIDATES


@dataclass(slots=True)
class RuntimeConfig:
    required_env: list[str] = field(default_factory=list)


@dataclass(slots=True)
class CompareConfig:
    version: int
    name: str
    data_sources: dict[str, DataSource]
    comparison: ComparisonConfig
    runtime: RuntimeConfig
    output: dict[str, Any]

    @property
    def market_data(self) -> DataSource:
        return self.data_sources["market_data"]


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        loaded = yaml.safe_load(fh)
    if not isinstance(loaded, dict):
        raise ValueError(f"Invalid compare config: {path}")
    return loaded


def load_config(path: str | Path) -> CompareConfig:
    cfg_path = Path(path)
    loaded = _load_yaml(cfg_path)

    data_sources = {
        key: DataSource(
            provider=value["provider"],
            plan=value.get("plan", "free"),
            constraints=value.get("constraints", {}),
        )
        for key, value in loaded["data_sources"].items()
    }
    if "market_data" not in data_sources:
        raise ValueError(f"Invalid compare config: {cfg_path} (data_sources.market_data is required)")

    comparison = ComparisonConfig(**loaded.get("comparison", {}))
    if comparison.min_candidates < MIN_COMPARISON_CANDIDATES:
        raise ValueError(
            f"Invalid compare config: {cfg_path} (comparison.min_candidates must be >= {MIN_COMPARISON_CANDIDATES})"
        )
    if comparison.max_candidates > MAX_COMPARISON_CANDIDATES or comparison.max_candidates < comparison.min_candidates:
        raise ValueError(
            f"Invalid compare config: {cfg_path} "
            f"(comparison.max_candidates must be between min_candidates and {MAX_COMPARISON_CANDIDATES})"
        )

    return CompareConfig(
        version=loaded["version"],
        name=loaded["name"],
        data_sources=data_sources,
        comparison=comparison,
        runtime=RuntimeConfig(**loaded.get("runtime", {})),
        output=loaded.get("output", {}),
    )
