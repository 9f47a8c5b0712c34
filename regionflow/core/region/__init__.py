"""
Region Analysis Package

Partitions a 2-D point scatter into a k x k grid in absolute and normalized
modes, aggregates per-region densities and compares the two partitions.
"""

from regionflow.core.region.models import (
    AxisPair,
    AxisPairResult,
    GridConfig,
    GridMode,
    OutOfRangePolicy,
)
from regionflow.core.region.labels import label, parse_label, region_index, region_labels
from regionflow.core.region.partition import partition
from regionflow.core.region.density import aggregate
from regionflow.core.region.dynamics import compute_dynamics
from regionflow.core.region.pipeline import analyze_axis_pair, analyze_dataset

__all__ = [
    'AxisPair',
    'AxisPairResult',
    'GridConfig',
    'GridMode',
    'OutOfRangePolicy',
    'label',
    'parse_label',
    'region_index',
    'region_labels',
    'partition',
    'aggregate',
    'compute_dynamics',
    'analyze_axis_pair',
    'analyze_dataset',
]
