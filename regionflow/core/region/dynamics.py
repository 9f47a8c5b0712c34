"""
Dynamics Calculator

Joins an absolute-mode density table with a normalized-mode density table on
region and derives how point mass moves between the two partitions:

- net_flow = freq_normalized - freq_absolute
- relative_change_ratio = net_flow / (freq_absolute + 1)
- redistribution_index = |net_flow| / (freq_absolute + freq_normalized + 1)

The +1 in both denominators is a fixed smoothing term that keeps empty regions
defined. The ratio is therefore not a percentage change, and the
redistribution index is bounded in [0, 1).
"""

import logging
import math

import numpy as np
import pandas as pd

from regionflow.constants import (
    COUNT_COL,
    DYNAMICS_COLUMNS,
    RATIO_SMOOTHING,
    REGION_COL,
    REGION_I_COL,
    REGION_J_COL,
)
from regionflow.core.region.labels import label, region_index
from regionflow.utils.error_handling import InvalidInputError, RegionInvariantError

logger = logging.getLogger(__name__)

_KEYS = [REGION_I_COL, REGION_J_COL]


def _check_complete(table: pd.DataFrame, name: str) -> int:
    """Verify a density table covers exactly a k x k grid; return k."""
    missing = [col for col in _KEYS + [COUNT_COL] if col not in table.columns]
    if missing:
        raise RegionInvariantError(f"{name} density table missing column(s): {missing}")
    
    k = math.isqrt(len(table))
    observed = sorted(
        (int(i), int(j)) for i, j in table[_KEYS].itertuples(index=False, name=None)
    )
    if k < 1 or observed != region_index(k):
        raise RegionInvariantError(
            f"{name} density table does not cover a complete k x k grid "
            f"({len(table)} rows)"
        )
    return k


def compute_dynamics(
    absolute_density: pd.DataFrame,
    normalized_density: pd.DataFrame,
    total_points: int
) -> pd.DataFrame:
    """
    Compare absolute and normalized density tables region by region.
    
    Args:
        absolute_density: Completed density table from absolute mode
        normalized_density: Completed density table from normalized mode
        total_points: Number of points in the analysed set (> 0)
        
    Returns:
        DataFrame with columns region_i, region_j, region, freq_absolute,
        freq_normalized, density_absolute, density_normalized, net_flow,
        relative_change_ratio, redistribution_index; one row per region in
        canonical (i, j) order.
        
    Raises:
        InvalidInputError: If total_points is not positive or is below either
            table's count sum
        RegionInvariantError: If the two tables do not cover the same k x k grid
        
    Example:
        A region with freq_absolute=0 and freq_normalized=4 gets net_flow=4,
        relative_change_ratio=4.0 and redistribution_index=0.8.
    """
    if total_points is None or total_points <= 0:
        raise InvalidInputError(f"total_points must be positive, got {total_points}")
    
    k_abs = _check_complete(absolute_density, "absolute")
    k_norm = _check_complete(normalized_density, "normalized")
    if k_abs != k_norm:
        raise RegionInvariantError(
            f"Density tables cover different grids: absolute k={k_abs}, normalized k={k_norm}"
        )
    
    joined = absolute_density[_KEYS + [COUNT_COL]].merge(
        normalized_density[_KEYS + [COUNT_COL]],
        on=_KEYS,
        how='inner',
        suffixes=('_absolute', '_normalized'),
        validate='one_to_one',
    )
    if len(joined) != k_abs * k_abs:
        raise RegionInvariantError(
            f"Region join produced {len(joined)} rows, expected {k_abs * k_abs}"
        )
    
    joined = joined.rename(columns={
        f"{COUNT_COL}_absolute": "freq_absolute",
        f"{COUNT_COL}_normalized": "freq_normalized",
    })
    joined = joined.sort_values(_KEYS, kind='mergesort').reset_index(drop=True)
    
    freq_abs = joined["freq_absolute"].astype('int64')
    freq_norm = joined["freq_normalized"].astype('int64')
    counted = max(int(freq_abs.sum()), int(freq_norm.sum()))
    if counted > total_points:
        raise InvalidInputError(
            f"total_points={total_points} is smaller than the {counted} point(s) counted in a density table"
        )
    
    net_flow = freq_norm - freq_abs
    
    dynamics = pd.DataFrame({
        REGION_I_COL: joined[REGION_I_COL].astype('int64'),
        REGION_J_COL: joined[REGION_J_COL].astype('int64'),
        REGION_COL: [label(i, j) for i, j in joined[_KEYS].itertuples(index=False, name=None)],
        "freq_absolute": freq_abs,
        "freq_normalized": freq_norm,
        "density_absolute": freq_abs / float(total_points),
        "density_normalized": freq_norm / float(total_points),
        "net_flow": net_flow,
        "relative_change_ratio": net_flow / (freq_abs + RATIO_SMOOTHING).astype(float),
        "redistribution_index": np.abs(net_flow) / (freq_abs + freq_norm + RATIO_SMOOTHING).astype(float),
    })
    
    logger.debug(
        f"Computed dynamics for {len(dynamics)} regions: "
        f"{int((net_flow > 0).sum())} gained, {int((net_flow < 0).sum())} lost"
    )
    return dynamics[DYNAMICS_COLUMNS]
