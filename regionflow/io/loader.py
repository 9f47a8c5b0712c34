"""
Dataset loading and cleaning.

Reads point tables from CSV and removes rows that cannot be partitioned on a
given axis pair.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

import pandas as pd

from regionflow.utils.error_handling import InvalidInputError

logger = logging.getLogger(__name__)


def load_points(
    path: Union[str, Path],
    columns: Optional[Iterable[str]] = None
) -> pd.DataFrame:
    """
    Load a point table from CSV.
    
    Columns named in `columns` are coerced to numeric; unparseable entries
    become NaN and are removed later by clean_points().
    
    Args:
        path: CSV file path
        columns: Numeric columns to coerce (default: none)
        
    Returns:
        DataFrame as read from disk, with the named columns numeric
        
    Raises:
        FileNotFoundError: If the file does not exist
        InvalidInputError: If a named column is absent
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")
    
    df = pd.read_csv(path)
    logger.info(f"Loaded {len(df)} rows, {len(df.columns)} columns from {path}")
    
    for col in columns or []:
        if col not in df.columns:
            raise InvalidInputError(f"Column '{col}' not found in {path}")
        df[col] = pd.to_numeric(df[col], errors="coerce")
    
    return df


def clean_points(df: pd.DataFrame, x_axis: str, y_axis: str) -> pd.DataFrame:
    """
    Drop rows with a missing value in either axis column.
    
    Only the two axis columns are considered, so a row missing some other
    measurement still takes part in this pair's analysis.
    
    Returns:
        Copy of the remaining rows with a fresh 0..n-1 index
        
    Raises:
        InvalidInputError: If an axis column is missing or no rows remain
    """
    missing = [col for col in (x_axis, y_axis) if col not in df.columns]
    if missing:
        raise InvalidInputError(f"Missing axis column(s): {missing}")
    
    cleaned = df.dropna(subset=[x_axis, y_axis]).reset_index(drop=True)
    n_dropped = len(df) - len(cleaned)
    if n_dropped:
        logger.warning(
            f"Dropped {n_dropped} of {len(df)} rows with missing {x_axis}/{y_axis}"
        )
    
    if cleaned.empty:
        raise InvalidInputError(f"No complete rows for axis pair ({x_axis}, {y_axis})")
    
    return cleaned
