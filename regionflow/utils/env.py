"""
Environment variable utilities for reliable configuration handling.

This module provides consistent environment variable parsing across the application.
"""
import os
from typing import Optional

_TRUE = {"1", "true", "t", "yes", "y", "on"}

def env_bool(name: str, default: bool = False) -> bool:
    """Parse environment variable as boolean with sensible defaults."""
    v = os.getenv(name)
    return default if v is None else str(v).strip().lower() in _TRUE

def env_str(name: str, default: str = "") -> str:
    """Get environment variable as string with default."""
    v = os.getenv(name)
    return v if v is not None else default

def env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    """
    Get environment variable as integer.

    Returns default when the variable is unset or blank. A non-integer value
    raises ValueError so a typo in the environment is not silently ignored.

    Examples:
        >>> os.environ["REGIONFLOW_GRID_K"] = "3"
        >>> env_int("REGIONFLOW_GRID_K")
        3
    """
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    try:
        return int(v.strip())
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got '{v}'")
