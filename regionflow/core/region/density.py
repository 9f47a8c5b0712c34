"""
Density Aggregator

Counts partitioned points per region and completes the table so every one of
the k*k regions is present, with 0 for regions no point fell into.
"""

import logging
from typing import Dict, Tuple

import pandas as pd

from regionflow.constants import COUNT_COL, DENSITY_COLUMNS, REGION_I_COL, REGION_J_COL
from regionflow.core.region.labels import region_index
from regionflow.utils.error_handling import InvalidInputError, RegionInvariantError

logger = logging.getLogger(__name__)


def region_frame(k: int) -> pd.DataFrame:
    """Full k x k cross product of region indices in canonical order."""
    pairs = region_index(k)
    return pd.DataFrame(pairs, columns=[REGION_I_COL, REGION_J_COL]).astype('int64')


def aggregate(partitioned: pd.DataFrame, k: int) -> pd.DataFrame:
    """
    Count points per region over the complete k x k grid.
    
    Args:
        partitioned: Output of partition() (needs region_i and region_j)
        k: Grid size used for the partition
        
    Returns:
        DataFrame with columns region_i, region_j, count: exactly k*k rows in
        canonical (i, j) order, sum(count) == len(partitioned)
        
    Raises:
        InvalidInputError: If the region columns are missing
        RegionInvariantError: If any region index lies outside [1, k]
        
    Example:
        >>> part = pd.DataFrame({"region_i": [1, 2, 2, 2], "region_j": [1, 2, 2, 2]})
        >>> aggregate(part, 2)["count"].tolist()
        [1, 0, 0, 3]
    """
    missing = [col for col in (REGION_I_COL, REGION_J_COL) if col not in partitioned.columns]
    if missing:
        raise InvalidInputError(f"Partition table missing column(s): {missing}")
    
    grid = region_frame(k)
    
    if not len(partitioned):
        logger.debug(f"No partitioned points; all {len(grid)} regions empty")
        grid[COUNT_COL] = 0
        grid[COUNT_COL] = grid[COUNT_COL].astype('int64')
        return grid[DENSITY_COLUMNS]
    
    bad = ~(
        partitioned[REGION_I_COL].between(1, k) & partitioned[REGION_J_COL].between(1, k)
    )
    if bad.any():
        raise RegionInvariantError(
            f"{int(bad.sum())} partitioned point(s) have region indices outside [1, {k}]"
        )
    
    counts = (
        partitioned.groupby([REGION_I_COL, REGION_J_COL])
        .size()
        .rename(COUNT_COL)
        .reset_index()
    )
    counts[[REGION_I_COL, REGION_J_COL]] = counts[[REGION_I_COL, REGION_J_COL]].astype('int64')
    
    table = grid.merge(counts, on=[REGION_I_COL, REGION_J_COL], how='left')
    table[COUNT_COL] = table[COUNT_COL].fillna(0).astype('int64')
    
    n_empty = int((table[COUNT_COL] == 0).sum())
    logger.debug(
        f"Aggregated {len(partitioned)} points into {len(table)} regions "
        f"({n_empty} empty)"
    )
    return table[DENSITY_COLUMNS]


def density_lookup(table: pd.DataFrame) -> Dict[Tuple[int, int], int]:
    """Map (region_i, region_j) to count for a completed density table."""
    return {
        (int(i), int(j)): int(c)
        for i, j, c in table[DENSITY_COLUMNS].itertuples(index=False, name=None)
    }
