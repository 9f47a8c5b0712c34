"""
Run ID Management

Generates and validates the short identifiers used to name each analysis run's
output directory.
"""

import shortuuid
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

MIN_RUN_ID_LENGTH = 10


def generate_run_id(length: Optional[int] = None) -> str:
    """
    Generate a short, unique run identifier.
    
    Uses shortuuid library with default configuration for truly random,
    collision-resistant IDs. Default length is ~22 characters.
    
    Args:
        length: Optional length for UUID (default: shortuuid default ~22 chars).
                Minimum 10 chars.
    
    Returns:
        Short UUID string (e.g., "p0ZoB1FwH6yT2dKx")
    
    Examples:
        >>> run_id = generate_run_id()
        >>> len(run_id) >= 10
        True
        >>> len(generate_run_id(length=10))
        10
    """
    if length is not None:
        if length < MIN_RUN_ID_LENGTH:
            raise ValueError(f"Run ID length must be at least {MIN_RUN_ID_LENGTH} characters")
        return shortuuid.ShortUUID().random(length=length)
    return shortuuid.uuid()


def validate_run_id(run_id: str) -> bool:
    """
    Validate that a string is a valid run ID format.
    
    Examples:
        >>> validate_run_id("p0ZoB1FwH6")
        True
        >>> validate_run_id("abc")
        False
    """
    if not run_id or not isinstance(run_id, str):
        return False
    if len(run_id) < MIN_RUN_ID_LENGTH:
        return False
    return run_id.isalnum()


def get_run_dir(output_root: Path, run_id: str) -> Path:
    """Return the output directory for a run, creating it if missing."""
    if not validate_run_id(run_id):
        raise ValueError(f"Invalid run ID: '{run_id}'")
    run_dir = Path(output_root) / run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Run directory ready: {run_dir}")
    return run_dir
