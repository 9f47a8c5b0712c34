"""
Region Partitioner

Maps each point's two coordinates to a 1-based region index pair on a k x k
grid, in either absolute or normalized mode.

Edge policy (both modes): bin b covers [cut_b, cut_{b+1}) for b < k and the
last bin is closed, [cut_{k-1}, cut_k]. A value sitting exactly on an interior
cut therefore belongs to the upper bin, the axis minimum of the grid belongs to
bin 1 and the axis maximum belongs to bin k.
"""

import logging
from typing import Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd

from regionflow.constants import (
    ABSOLUTE_ANCHOR,
    NORMALIZED_MAX,
    NORMALIZED_MIN,
    POINT_INDEX_COL,
    REGION_I_COL,
    REGION_J_COL,
)
from regionflow.core.region.labels import validate_grid_size
from regionflow.core.region.models import GridMode, OutOfRangePolicy
from regionflow.utils.error_handling import (
    InvalidInputError,
    OutOfRangeError,
    RegionInvariantError,
)

logger = logging.getLogger(__name__)

# Bin value for points that fall outside every interval
NO_BIN = 0


def absolute_boundaries(values: np.ndarray, k: int) -> np.ndarray:
    """
    Cut points for absolute mode: k+1 values evenly spaced from 0 to max(values).
    
    The lower bound is always anchored at 0, not at the observed minimum. When
    the maximum is not positive the grid collapses to a single point at 0.
    
    Example:
        >>> absolute_boundaries(np.array([0.0, 5.0, 10.0]), 2)
        array([ 0.,  5., 10.])
    """
    validate_grid_size(k)
    vmax = float(np.max(values))
    return np.linspace(ABSOLUTE_ANCHOR, max(vmax, ABSOLUTE_ANCHOR), k + 1)


def normalized_boundaries(k: int) -> np.ndarray:
    """Cut points for normalized mode: k+1 values evenly spaced over [0, 1]."""
    validate_grid_size(k)
    return np.linspace(NORMALIZED_MIN, NORMALIZED_MAX, k + 1)


def rescale(values: np.ndarray, axis: str = "") -> Tuple[np.ndarray, bool]:
    """
    Min-max rescale values to [0, 1].
    
    Args:
        values: Raw axis values
        axis: Axis name, used only for logging
        
    Returns:
        Tuple of (rescaled values, degenerate flag). A degenerate axis
        (max == min) is returned as all zeros so every point lands in bin 1.
    """
    vmin = float(np.min(values))
    vmax = float(np.max(values))
    if vmax == vmin:
        logger.warning(
            f"Degenerate range on axis '{axis}' (all values = {vmin}); "
            f"routing all points to region 1"
        )
        return np.zeros(len(values), dtype=float), True
    return (values - vmin) / (vmax - vmin), False


def assign_bins(values: np.ndarray, cuts: np.ndarray) -> np.ndarray:
    """
    Locate the 1-based bin of each value among the given cut points.
    
    Values outside [cuts[0], cuts[-1]] get NO_BIN (0). When all cut points are
    equal, values equal to that point go to bin 1.
    
    Example:
        >>> assign_bins(np.array([0.0, 5.0, 10.0, -1.0]), np.array([0.0, 5.0, 10.0]))
        array([1, 2, 2, 0])
    """
    k = len(cuts) - 1
    values = np.asarray(values, dtype=float)
    
    if cuts[-1] <= cuts[0]:
        return np.where(values == cuts[0], 1, NO_BIN).astype(np.int64)
    
    bins = np.searchsorted(cuts, values, side='right')
    # Close the top edge of the last bin
    bins = np.where(values == cuts[-1], k, bins)
    bins = np.where((bins < 1) | (bins > k), NO_BIN, bins)
    return bins.astype(np.int64)


def boundaries_for(values: np.ndarray, k: int, mode: Union[GridMode, str]) -> np.ndarray:
    """Cut points for one axis in the given mode."""
    mode = GridMode(mode)
    if mode is GridMode.ABSOLUTE:
        return absolute_boundaries(values, k)
    return normalized_boundaries(k)


def grid_boundaries(
    points: pd.DataFrame,
    x_axis: str,
    y_axis: str,
    k: int,
    mode: Union[GridMode, str]
) -> Dict[str, np.ndarray]:
    """
    Cut points of both axes, in raw units for absolute mode and in rescaled
    units for normalized mode.
    
    Returns:
        {"x": array of k+1 cuts, "y": array of k+1 cuts}
    """
    _validate_points(points, x_axis, y_axis)
    return {
        "x": boundaries_for(points[x_axis].to_numpy(dtype=float), k, mode),
        "y": boundaries_for(points[y_axis].to_numpy(dtype=float), k, mode),
    }


def _validate_points(points: pd.DataFrame, x_axis: str, y_axis: str) -> None:
    if points is None or len(points) == 0:
        raise InvalidInputError("Cannot partition an empty point set")
    
    missing = [col for col in (x_axis, y_axis) if col not in points.columns]
    if missing:
        raise InvalidInputError(f"Missing axis column(s): {missing}")
    
    for col in (x_axis, y_axis):
        if not pd.api.types.is_numeric_dtype(points[col]):
            raise InvalidInputError(f"Axis column '{col}' must be numeric, got {points[col].dtype}")
        n_missing = int(points[col].isna().sum())
        if n_missing:
            raise InvalidInputError(
                f"Axis column '{col}' has {n_missing} missing value(s); "
                f"drop them before partitioning"
            )
        n_infinite = int(np.isinf(points[col].to_numpy(dtype=float)).sum())
        if n_infinite:
            raise InvalidInputError(f"Axis column '{col}' has {n_infinite} infinite value(s)")


def _axis_bins(
    values: np.ndarray,
    axis: str,
    k: int,
    mode: GridMode
) -> np.ndarray:
    if mode is GridMode.ABSOLUTE:
        return assign_bins(values, absolute_boundaries(values, k))
    
    rescaled, _ = rescale(values, axis)
    return assign_bins(rescaled, normalized_boundaries(k))


def partition(
    points: pd.DataFrame,
    x_axis: str,
    y_axis: str,
    k: int,
    mode: Union[GridMode, str],
    category: Optional[str] = None,
    out_of_range: Union[OutOfRangePolicy, str] = OutOfRangePolicy.DROP
) -> pd.DataFrame:
    """
    Assign every point to a region (region_i, region_j) on a k x k grid.
    
    Args:
        points: Point table; x_axis and y_axis must be numeric and free of NaN and inf
        x_axis: Column binned into region_i
        y_axis: Column binned into region_j
        k: Bins per axis (k >= 1)
        mode: "absolute" or "normalized"
        category: Optional column copied through to the output
        out_of_range: Policy for absolute-mode values below 0
        
    Returns:
        DataFrame with columns point_index, region_i, region_j (and the
        category column when requested), ordered by point_index. point_index
        is the point's position in the input frame.
        
    Raises:
        InvalidInputError: Empty input, missing/non-numeric/NaN/infinite axis column, bad k
        OutOfRangeError: Value below 0 in absolute mode under the error policy
        
    Example:
        >>> pts = pd.DataFrame({"x": [0, 10, 5, 5], "y": [0, 10, 5, 5]})
        >>> partition(pts, "x", "y", 2, "absolute")[["region_i", "region_j"]].values.tolist()
        [[1, 1], [2, 2], [2, 2], [2, 2]]
    """
    validate_grid_size(k)
    _validate_points(points, x_axis, y_axis)
    if category is not None and category not in points.columns:
        raise InvalidInputError(f"Missing category column: '{category}'")
    
    mode = GridMode(mode)
    out_of_range = OutOfRangePolicy(out_of_range)
    
    x = points[x_axis].to_numpy(dtype=float)
    y = points[y_axis].to_numpy(dtype=float)
    bins_i = _axis_bins(x, x_axis, k, mode)
    bins_j = _axis_bins(y, y_axis, k, mode)
    
    keep = np.ones(len(points), dtype=bool)
    unbinned = (bins_i == NO_BIN) | (bins_j == NO_BIN)
    
    if unbinned.any():
        if mode is GridMode.NORMALIZED:
            # Rescaled values are bounded by [0, 1] by construction
            raise RegionInvariantError(
                f"{int(unbinned.sum())} point(s) fell outside the normalized grid"
            )
        
        if out_of_range is OutOfRangePolicy.ERROR:
            axis, values, bins = (x_axis, x, bins_i) if (bins_i == NO_BIN).any() else (y_axis, y, bins_j)
            raise OutOfRangeError(axis, int((bins == NO_BIN).sum()), float(values.min()))
        
        if out_of_range is OutOfRangePolicy.CLAMP:
            logger.warning(
                f"Clamping {int(unbinned.sum())} point(s) below 0 on "
                f"({x_axis}, {y_axis}) into region 1"
            )
            bins_i = np.where(bins_i == NO_BIN, 1, bins_i)
            bins_j = np.where(bins_j == NO_BIN, 1, bins_j)
        else:
            logger.warning(
                f"Dropping {int(unbinned.sum())} point(s) below 0 on "
                f"({x_axis}, {y_axis}) from the absolute partition"
            )
            keep = ~unbinned
    
    result = pd.DataFrame({
        POINT_INDEX_COL: np.arange(len(points), dtype=np.int64)[keep],
        REGION_I_COL: bins_i[keep],
        REGION_J_COL: bins_j[keep],
    })
    if category is not None:
        result[category] = points[category].to_numpy()[keep]
    
    logger.debug(
        f"Partitioned {len(result)}/{len(points)} points on ({x_axis}, {y_axis}) "
        f"k={k} mode={mode}"
    )
    return result
