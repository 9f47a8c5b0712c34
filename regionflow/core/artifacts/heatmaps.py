"""
Region Heatmap Generation

Renders k x k density and net-flow tables as annotated PNG heatmaps. Region
(i, j) is drawn at column i, row j, with region 1 at the bottom-left.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')  # Headless backend
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors

from regionflow.constants import COUNT_COL, REGION_I_COL, REGION_J_COL
from regionflow.core.region.models import AxisPairResult
from regionflow.utils.error_handling import RegionInvariantError

logger = logging.getLogger(__name__)

DENSITY_CMAP = "YlOrRd"
FLOW_CMAP = "RdBu_r"
FIGURE_DPI = 150


def density_matrix(table: pd.DataFrame, k: int, value_col: str = COUNT_COL) -> np.ndarray:
    """
    Arrange a region table as a k x k array indexed [region_j - 1, region_i - 1].
    
    Raises:
        RegionInvariantError: If the table does not fill every cell exactly once
    """
    matrix = np.full((k, k), np.nan)
    for i, j, value in table[[REGION_I_COL, REGION_J_COL, value_col]].itertuples(index=False, name=None):
        matrix[int(j) - 1, int(i) - 1] = value
    
    if len(table) != k * k or np.isnan(matrix).any():
        raise RegionInvariantError(f"Table does not cover a complete {k}x{k} grid")
    return matrix


def _setup_grid_axes(ax: plt.Axes, k: int, x_label: str, y_label: str) -> None:
    ticks = np.arange(k)
    ax.set_xticks(ticks)
    ax.set_yticks(ticks)
    ax.set_xticklabels([str(i + 1) for i in ticks])
    ax.set_yticklabels([str(j + 1) for j in ticks])
    ax.set_xlabel(f"{x_label} (region i)")
    ax.set_ylabel(f"{y_label} (region j)")


def _annotate(ax: plt.Axes, matrix: np.ndarray, fmt: str) -> None:
    k = matrix.shape[0]
    for row in range(k):
        for col in range(k):
            ax.text(col, row, format(matrix[row, col], fmt),
                    ha="center", va="center", fontsize=9, color="black")


def _save(fig: plt.Figure, path: Path) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fig.savefig(path, dpi=FIGURE_DPI, bbox_inches="tight")
    finally:
        plt.close(fig)
    logger.debug(f"Heatmap saved: {path}")
    return str(path)


def render_density_heatmap(
    table: pd.DataFrame,
    k: int,
    path: Union[str, Path],
    title: str = "",
    x_label: str = "x",
    y_label: str = "y",
    vmax: Optional[float] = None
) -> str:
    """
    Render a density table (region_i, region_j, count) as a heatmap PNG.
    
    Args:
        vmax: Shared colour scale maximum, so absolute and normalized maps of
              the same pair are comparable
    
    Returns:
        Path of the written PNG
    """
    matrix = density_matrix(table, k)
    fig, ax = plt.subplots(figsize=(5, 4.5))
    im = ax.imshow(matrix, origin="lower", cmap=DENSITY_CMAP, vmin=0,
                   vmax=vmax if vmax else max(float(matrix.max()), 1.0))
    _setup_grid_axes(ax, k, x_label, y_label)
    _annotate(ax, matrix, ".0f")
    fig.colorbar(im, ax=ax, label="points")
    ax.set_title(title)
    return _save(fig, Path(path))


def render_flow_heatmap(
    dynamics: pd.DataFrame,
    k: int,
    path: Union[str, Path],
    title: str = "",
    x_label: str = "x",
    y_label: str = "y"
) -> str:
    """
    Render net flow per region on a diverging scale centred at 0.
    
    Returns:
        Path of the written PNG
    """
    matrix = density_matrix(dynamics, k, value_col="net_flow")
    halfrange = max(float(np.abs(matrix).max()), 1.0)
    fig, ax = plt.subplots(figsize=(5, 4.5))
    im = ax.imshow(matrix, origin="lower", cmap=FLOW_CMAP,
                   norm=mcolors.CenteredNorm(vcenter=0.0, halfrange=halfrange))
    _setup_grid_axes(ax, k, x_label, y_label)
    _annotate(ax, matrix, "+.0f")
    fig.colorbar(im, ax=ax, label="net flow (normalized - absolute)")
    ax.set_title(title)
    return _save(fig, Path(path))


def generate_pair_heatmaps(result: AxisPairResult, out_dir: Union[str, Path]) -> List[str]:
    """
    Write absolute density, normalized density and net-flow heatmaps for one axis pair.
    
    Returns:
        Paths of the written PNGs
    """
    out_dir = Path(out_dir)
    pair = result.pair
    shared_max = float(max(result.absolute_density[COUNT_COL].max(),
                           result.normalized_density[COUNT_COL].max(), 1))
    
    paths = [
        render_density_heatmap(
            result.absolute_density, result.k, out_dir / "density_absolute.png",
            title=f"{pair.name}: absolute", x_label=pair.x, y_label=pair.y, vmax=shared_max,
        ),
        render_density_heatmap(
            result.normalized_density, result.k, out_dir / "density_normalized.png",
            title=f"{pair.name}: normalized", x_label=pair.x, y_label=pair.y, vmax=shared_max,
        ),
        render_flow_heatmap(
            result.dynamics, result.k, out_dir / "net_flow.png",
            title=f"{pair.name}: net flow", x_label=pair.x, y_label=pair.y,
        ),
    ]
    logger.info(f"Generated {len(paths)} heatmaps for axis pair '{pair.name}'")
    return paths
