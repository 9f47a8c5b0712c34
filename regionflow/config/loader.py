"""
Analysis configuration loader.

Loads the analysis YAML once, validates required fields and resolves dataset
paths relative to the configuration file.

Expected YAML structure:

    version: "1.0"
    grid:
      k: 4
      out_of_range: drop        # drop | clamp | error
    output:
      dir: output
      heatmaps: true
    datasets:
      - name: iris
        path: data/iris.csv
        category: Species
        axis_pairs:
          - {name: sepal, x: Sepal.Length, y: Sepal.Width}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from regionflow.constants import DEFAULT_GRID_K, DEFAULT_OUTPUT_DIR
from regionflow.core.region.models import AxisPair, GridConfig, OutOfRangePolicy
from regionflow.utils.env import env_bool, env_int
from regionflow.utils.error_handling import InvalidInputError

logger = logging.getLogger(__name__)


class AnalysisConfigError(ValueError):
    """Raised when the analysis YAML is missing required fields or invalid."""


@dataclass(frozen=True)
class DatasetSpec:
    name: str
    path: Path
    axis_pairs: Tuple[AxisPair, ...]
    category: Optional[str] = None

    @property
    def numeric_columns(self) -> Tuple[str, ...]:
        """Axis columns used by any pair, in first-seen order."""
        seen: Dict[str, None] = {}
        for pair in self.axis_pairs:
            seen.setdefault(pair.x)
            seen.setdefault(pair.y)
        return tuple(seen)


@dataclass(frozen=True)
class OutputConfig:
    dir: Path = Path(DEFAULT_OUTPUT_DIR)
    heatmaps: bool = True


@dataclass(frozen=True)
class AnalysisConfig:
    version: str
    grid: GridConfig
    output: OutputConfig
    datasets: Tuple[DatasetSpec, ...] = field(default_factory=tuple)


def load_analysis_config(path: Union[str, Path]) -> AnalysisConfig:
    """
    Load and validate an analysis YAML file.
    
    Raises:
        FileNotFoundError: If the file does not exist
        AnalysisConfigError: If the content is invalid
        yaml.YAMLError: If YAML parsing fails
    """
    path = Path(path)
    logger.info(f"Loading analysis config from {path}")
    if not path.exists():
        raise FileNotFoundError(f"Analysis config not found at {path}")
    
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    
    if not isinstance(raw, dict):
        raise AnalysisConfigError(f"{path} must contain a YAML mapping")
    
    config = build_analysis_config(raw, base_dir=path.parent)
    logger.info(
        f"Loaded analysis config v{config.version}: {len(config.datasets)} dataset(s), "
        f"k={config.grid.k}"
    )
    return config


def build_analysis_config(raw: Dict[str, Any], base_dir: Optional[Path] = None) -> AnalysisConfig:
    """
    Validate a parsed config mapping and return an AnalysisConfig.
    
    Environment overrides: REGIONFLOW_GRID_K replaces grid.k and
    ENABLE_HEATMAPS replaces output.heatmaps.
    """
    base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
    
    grid = _build_grid(raw.get("grid") or {})
    output = _build_output(raw.get("output") or {}, base_dir)
    
    datasets_raw = raw.get("datasets")
    if not datasets_raw or not isinstance(datasets_raw, list):
        raise AnalysisConfigError("Analysis config missing required list: datasets")
    
    datasets = tuple(_build_dataset(entry, base_dir) for entry in datasets_raw)
    names = [d.name for d in datasets]
    if len(set(names)) != len(names):
        raise AnalysisConfigError(f"Duplicate dataset names: {names}")
    
    return AnalysisConfig(
        version=str(raw.get("version", "unversioned")),
        grid=grid,
        output=output,
        datasets=datasets,
    )


def _build_grid(grid_raw: Dict[str, Any]) -> GridConfig:
    k = grid_raw.get("k", DEFAULT_GRID_K)
    policy = str(grid_raw.get("out_of_range", OutOfRangePolicy.DROP.value)).lower()
    try:
        k_override = env_int("REGIONFLOW_GRID_K")
        if k_override is not None:
            logger.info(f"Grid size overridden by REGIONFLOW_GRID_K={k_override}")
            k = k_override
        return GridConfig(k=k, out_of_range=OutOfRangePolicy(policy))
    except ValueError as e:
        # InvalidInputError and bad enum values are both ValueErrors
        raise AnalysisConfigError(f"Invalid grid configuration: {e}") from e


def _build_output(output_raw: Dict[str, Any], base_dir: Path) -> OutputConfig:
    out_dir = Path(output_raw.get("dir", DEFAULT_OUTPUT_DIR))
    if not out_dir.is_absolute():
        out_dir = base_dir / out_dir
    heatmaps = env_bool("ENABLE_HEATMAPS", bool(output_raw.get("heatmaps", True)))
    return OutputConfig(dir=out_dir, heatmaps=heatmaps)


def _build_dataset(entry: Any, base_dir: Path) -> DatasetSpec:
    if not isinstance(entry, dict):
        raise AnalysisConfigError(f"Dataset entry must be a mapping, got {type(entry).__name__}")
    
    name = entry.get("name")
    if not name:
        raise AnalysisConfigError("Dataset entry missing required field: name")
    path_value = entry.get("path")
    if not path_value:
        raise AnalysisConfigError(f"Dataset '{name}' missing required field: path")
    
    path = Path(path_value)
    if not path.is_absolute():
        path = base_dir / path
    
    pairs_raw = entry.get("axis_pairs")
    if not pairs_raw or not isinstance(pairs_raw, list):
        raise AnalysisConfigError(f"Dataset '{name}' missing required list: axis_pairs")
    
    pairs = []
    for pair_raw in pairs_raw:
        if not isinstance(pair_raw, dict):
            raise AnalysisConfigError(f"Axis pair in dataset '{name}' must be a mapping")
        try:
            pairs.append(AxisPair(
                name=str(pair_raw.get("name") or ""),
                x=str(pair_raw.get("x", "") or ""),
                y=str(pair_raw.get("y", "") or ""),
            ))
        except InvalidInputError as e:
            raise AnalysisConfigError(f"Dataset '{name}': {e}") from e
    
    pair_names = [p.name for p in pairs]
    if len(set(pair_names)) != len(pair_names):
        raise AnalysisConfigError(f"Dataset '{name}' has duplicate axis pair names: {pair_names}")
    
    return DatasetSpec(
        name=str(name),
        path=path,
        axis_pairs=tuple(pairs),
        category=entry.get("category"),
    )
