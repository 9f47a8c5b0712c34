"""
Region Analysis Data Models

Defines the grid modes, out-of-range policies, axis pair selection and the
per-axis-pair result container used by the region pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pandas as pd

from regionflow.constants import DEFAULT_GRID_K
from regionflow.core.region.labels import validate_grid_size
from regionflow.utils.error_handling import InvalidInputError


class GridMode(str, Enum):
    """
    Coordinate treatment used when partitioning points.
    
    - absolute: raw units, bins evenly spaced from 0 to the axis maximum
    - normalized: min-max rescaled to [0, 1], bins evenly spaced from 0 to 1
    """
    ABSOLUTE = 'absolute'
    NORMALIZED = 'normalized'
    
    def __str__(self) -> str:
        return self.value


class OutOfRangePolicy(str, Enum):
    """
    Handling of absolute-mode values below the zero anchor.
    
    - drop: omit the point from the partition (logged)
    - clamp: assign the point to bin 1
    - error: raise OutOfRangeError
    """
    DROP = 'drop'
    CLAMP = 'clamp'
    ERROR = 'error'
    
    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AxisPair:
    """
    Two numeric columns binned together as the x and y axes of one grid.
    
    Attributes:
        name: Identifier for the pair (e.g., "sepal", "ozone_wind")
        x: Column name used for the first region index
        y: Column name used for the second region index
    """
    name: str
    x: str
    y: str
    
    def __post_init__(self):
        if not self.name:
            raise InvalidInputError("Axis pair name must be non-empty")
        if not self.x or not self.y:
            raise InvalidInputError(f"Axis pair '{self.name}' must name both x and y columns")


@dataclass(frozen=True)
class GridConfig:
    """Grid resolution and edge policy shared by every axis pair of a run."""
    k: int = DEFAULT_GRID_K
    out_of_range: OutOfRangePolicy = OutOfRangePolicy.DROP
    
    def __post_init__(self):
        validate_grid_size(self.k)
        if not isinstance(self.out_of_range, OutOfRangePolicy):
            object.__setattr__(self, 'out_of_range', OutOfRangePolicy(self.out_of_range))
    
    @property
    def n_regions(self) -> int:
        """Number of regions in the grid (k squared)."""
        return self.k * self.k


@dataclass(frozen=True)
class AxisPairResult:
    """
    Output of the region pipeline for one axis pair.
    
    Attributes:
        pair: Axis pair that was analysed
        k: Grid size
        total_points: Number of input points (density denominator)
        absolute_partition: Region assignment per point, absolute mode
        normalized_partition: Region assignment per point, normalized mode
        absolute_density: Completed k x k density table, absolute mode
        normalized_density: Completed k x k density table, normalized mode
        dynamics: Per-region comparison of the two density tables
        dropped_absolute: Points left out of the absolute partition (below 0)
        category: Pass-through category column, if one was requested
    """
    pair: AxisPair
    k: int
    total_points: int
    absolute_partition: pd.DataFrame
    normalized_partition: pd.DataFrame
    absolute_density: pd.DataFrame
    normalized_density: pd.DataFrame
    dynamics: pd.DataFrame
    dropped_absolute: int = 0
    category: Optional[str] = None
