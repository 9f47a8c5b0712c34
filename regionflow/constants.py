"""
Application Constants

This module contains all application-wide constants to avoid magic numbers
and improve maintainability.
"""

# Grid defaults
DEFAULT_GRID_K = 4
MIN_GRID_K = 1

# Normalized-mode axis range
NORMALIZED_MIN = 0.0
NORMALIZED_MAX = 1.0

# Absolute-mode lower anchor
ABSOLUTE_ANCHOR = 0.0

# Region display label
REGION_LABEL_FORMAT = "R({i},{j})"

# Table columns
REGION_I_COL = "region_i"
REGION_J_COL = "region_j"
REGION_COL = "region"
COUNT_COL = "count"
POINT_INDEX_COL = "point_index"

DENSITY_COLUMNS = [REGION_I_COL, REGION_J_COL, COUNT_COL]
DYNAMICS_COLUMNS = [
    REGION_I_COL,
    REGION_J_COL,
    REGION_COL,
    "freq_absolute",
    "freq_normalized",
    "density_absolute",
    "density_normalized",
    "net_flow",
    "relative_change_ratio",
    "redistribution_index",
]

# Smoothing term added to ratio denominators
RATIO_SMOOTHING = 1

# Export formatting
DECIMAL_PRECISION = 4

# Output configuration
DEFAULT_CONFIG_PATH = "config/analysis.yml"
DEFAULT_OUTPUT_DIR = "output"
SUMMARY_TOP_N = 3
