"""
Region Labeler

Canonical ordering and display labels for the cells of a k x k grid.

Regions are keyed internally by the integer pair (i, j); the "R(i,j)" string
is derived only for presentation and can be parsed back.
"""

import numbers
import re
from typing import List, Tuple

from regionflow.constants import MIN_GRID_K, REGION_LABEL_FORMAT
from regionflow.utils.error_handling import InvalidInputError

_LABEL_PATTERN = re.compile(r"^R\((\d+),(\d+)\)$")


def validate_grid_size(k: int) -> None:
    """Raise InvalidInputError unless k is an integer >= 1."""
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k < MIN_GRID_K:
        raise InvalidInputError(f"Grid size k must be an integer >= {MIN_GRID_K}, got {k!r}")


def label(i: int, j: int) -> str:
    """
    Build the display label for region (i, j).
    
    Example:
        >>> label(2, 3)
        'R(2,3)'
    """
    if i < 1 or j < 1:
        raise InvalidInputError(f"Region indices are 1-based, got ({i}, {j})")
    return REGION_LABEL_FORMAT.format(i=int(i), j=int(j))


def parse_label(text: str) -> Tuple[int, int]:
    """
    Parse an "R(i,j)" label back into its index pair.
    
    Whitespace around the label and after the comma is tolerated.
    
    Raises:
        InvalidInputError: If text is not a region label
    
    Example:
        >>> parse_label("R(4,1)")
        (4, 1)
    """
    match = _LABEL_PATTERN.match(str(text).strip().replace(" ", ""))
    if not match:
        raise InvalidInputError(f"Not a region label: '{text}'")
    i, j = int(match.group(1)), int(match.group(2))
    if i < 1 or j < 1:
        raise InvalidInputError(f"Region indices are 1-based, got '{text}'")
    return i, j


def region_index(k: int) -> List[Tuple[int, int]]:
    """
    All k*k region index pairs in canonical (i, j) lexicographic order.
    
    Example:
        >>> region_index(2)
        [(1, 1), (1, 2), (2, 1), (2, 2)]
    """
    validate_grid_size(k)
    return [(i, j) for i in range(1, k + 1) for j in range(1, k + 1)]


def region_labels(k: int) -> List[str]:
    """Display labels for region_index(k), in the same order."""
    return [label(i, j) for i, j in region_index(k)]
