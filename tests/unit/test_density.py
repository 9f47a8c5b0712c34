"""
Unit tests for the density aggregator.
"""

import numpy as np
import pandas as pd
import pytest

from regionflow.core.region.density import aggregate, density_lookup, region_frame
from regionflow.core.region.partition import partition
from regionflow.utils.error_handling import InvalidInputError, RegionInvariantError


class TestAggregate:
    """Test per-region counting and grid completion."""
    
    def test_boundary_scenario_counts(self, boundary_points):
        table = aggregate(partition(boundary_points, "x", "y", 2, "absolute"), 2)
        assert density_lookup(table) == {(1, 1): 1, (1, 2): 0, (2, 1): 0, (2, 2): 3}
    
    def test_columns_and_order(self, boundary_points):
        table = aggregate(partition(boundary_points, "x", "y", 2, "absolute"), 2)
        assert list(table.columns) == ["region_i", "region_j", "count"]
        assert list(zip(table["region_i"], table["region_j"])) == [(1, 1), (1, 2), (2, 1), (2, 2)]
        assert table["count"].dtype == np.int64
    
    def test_empty_regions_completed(self, shifted_points):
        table = aggregate(partition(shifted_points, "x", "y", 4, "absolute"), 4)
        assert len(table) == 16
        assert int((table["count"] == 0).sum()) == 14
        counts = density_lookup(table)
        # cuts 0, 5, 10, 15, 20: 10, 11, 12 share bin 3 and 20 closes bin 4
        assert counts[(3, 3)] == 3
        assert counts[(4, 4)] == 1
    
    def test_empty_partition(self):
        part = pd.DataFrame({"point_index": [], "region_i": [], "region_j": []}, dtype="int64")
        table = aggregate(part, 3)
        assert len(table) == 9
        assert table["count"].sum() == 0
        assert table["count"].dtype == np.int64
    
    @pytest.mark.parametrize("k", [1, 2, 3, 4, 6])
    def test_k_squared_rows_and_total(self, k):
        rng = np.random.default_rng(k)
        points = pd.DataFrame({"x": rng.uniform(0, 50, 120), "y": rng.gamma(2.0, 3.0, 120)})
        for mode in ("absolute", "normalized"):
            table = aggregate(partition(points, "x", "y", k, mode), k)
            assert len(table) == k * k
            assert table["count"].sum() == 120
    
    def test_missing_region_column(self):
        with pytest.raises(InvalidInputError):
            aggregate(pd.DataFrame({"region_i": [1]}), 2)
    
    def test_index_outside_grid(self):
        part = pd.DataFrame({"region_i": [1, 3], "region_j": [1, 1]})
        with pytest.raises(RegionInvariantError):
            aggregate(part, 2)


class TestRegionFrame:
    """Test the completed grid skeleton."""
    
    def test_region_frame(self):
        frame = region_frame(3)
        assert len(frame) == 9
        assert frame.iloc[0].tolist() == [1, 1]
        assert frame.iloc[-1].tolist() == [3, 3]
