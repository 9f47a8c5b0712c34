"""
Pytest configuration for regionflow tests.

Shared point sets and environment isolation for all tests.
"""

import pytest
import pandas as pd


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep configuration overrides from the caller's environment out of tests."""
    for name in ("REGIONFLOW_GRID_K", "ENABLE_HEATMAPS", "REGIONFLOW_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def boundary_points():
    """Four points on a 0..10 square: one at the origin, one at the max, two on the midline."""
    return pd.DataFrame({
        "x": [0.0, 10.0, 5.0, 5.0],
        "y": [0.0, 10.0, 5.0, 5.0],
    })


@pytest.fixture
def shifted_points():
    """
    Points clustered far from zero.
    
    Absolute mode (cuts 0, 10, 20) puts all four in R(2,2); normalized mode
    rescales to 0, .1, .2, 1 and splits them 3 / 1 between R(1,1) and R(2,2).
    """
    return pd.DataFrame({
        "x": [10.0, 11.0, 12.0, 20.0],
        "y": [10.0, 11.0, 12.0, 20.0],
        "group": ["a", "a", "b", "b"],
    })


@pytest.fixture
def measurements():
    """Small iris-like table with a category column and gaps in one axis."""
    return pd.DataFrame({
        "length": [5.1, 4.9, 6.3, 5.8, 7.1, 6.5, 5.0, 6.7],
        "width": [3.5, 3.0, 3.3, 2.7, 3.0, 3.0, 3.6, 3.1],
        "ozone": [41.0, None, 12.0, 18.0, None, 28.0, 23.0, 19.0],
        "species": ["setosa", "setosa", "virginica", "virginica",
                    "virginica", "virginica", "setosa", "versicolor"],
    })
