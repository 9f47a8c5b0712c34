"""
Unit tests for the region pipeline (both modes, aggregation and dynamics per axis pair).
"""

import numpy as np
import pandas as pd
import pytest

from regionflow.core.region.models import AxisPair, GridConfig, OutOfRangePolicy
from regionflow.core.region.pipeline import analyze_axis_pair, analyze_dataset
from regionflow.utils.error_handling import InvalidInputError, OutOfRangeError


class TestAnalyzeAxisPair:
    """Test a single axis pair end to end."""
    
    def test_shifted_cluster(self, shifted_points):
        result = analyze_axis_pair(shifted_points, AxisPair("xy", "x", "y"), k=2)
        dyn = result.dynamics.set_index("region")
        
        assert result.total_points == 4
        assert dyn.loc["R(1,1)", "net_flow"] == 3
        assert dyn.loc["R(1,1)", "redistribution_index"] == pytest.approx(0.75)
        assert dyn.loc["R(2,2)", "net_flow"] == -3
        assert dyn.loc["R(2,2)", "relative_change_ratio"] == pytest.approx(-0.6)
        assert dyn.loc["R(2,2)", "redistribution_index"] == pytest.approx(0.5)
    
    def test_boundary_scenario_has_no_flow(self, boundary_points):
        result = analyze_axis_pair(boundary_points, AxisPair("xy", "x", "y"), k=2)
        assert (result.dynamics["net_flow"] == 0).all()
        assert result.absolute_density["count"].tolist() == [1, 0, 0, 3]
    
    def test_category_carried_into_partitions(self, shifted_points):
        result = analyze_axis_pair(shifted_points, AxisPair("xy", "x", "y"), k=2, category="group")
        assert "group" in result.absolute_partition.columns
        assert "group" in result.normalized_partition.columns
        assert result.category == "group"
    
    def test_dropped_points_reported(self):
        points = pd.DataFrame({"x": [-2.0, 1.0, 3.0, 4.0], "y": [1.0, 2.0, 3.0, 4.0]})
        result = analyze_axis_pair(points, AxisPair("xy", "x", "y"), k=2)
        assert result.dropped_absolute == 1
        assert result.absolute_density["count"].sum() == 3
        assert result.normalized_density["count"].sum() == 4
        assert result.dynamics["density_absolute"].sum() == pytest.approx(0.75)
    
    def test_error_policy_propagates(self):
        points = pd.DataFrame({"x": [-2.0, 1.0], "y": [1.0, 2.0]})
        with pytest.raises(OutOfRangeError):
            analyze_axis_pair(points, AxisPair("xy", "x", "y"), k=2, out_of_range="error")
    
    def test_empty_points(self):
        with pytest.raises(InvalidInputError):
            analyze_axis_pair(pd.DataFrame({"x": [], "y": []}), AxisPair("xy", "x", "y"), k=2)


class TestAnalyzeDataset:
    """Test processing several axis pairs independently."""
    
    def test_pairs_in_order(self, measurements):
        pairs = [AxisPair("shape", "length", "width"), AxisPair("air", "ozone", "width")]
        results = analyze_dataset(measurements, pairs, GridConfig(k=3))
        
        assert list(results) == ["shape", "air"]
        assert all(len(r.dynamics) == 9 for r in results.values())
    
    def test_missing_values_dropped_per_pair(self, measurements):
        pairs = [AxisPair("shape", "length", "width"), AxisPair("air", "ozone", "width")]
        results = analyze_dataset(measurements, pairs, GridConfig(k=2))
        
        assert results["shape"].total_points == 8
        assert results["air"].total_points == 6
    
    def test_default_grid(self, measurements):
        results = analyze_dataset(measurements, [AxisPair("shape", "length", "width")])
        assert results["shape"].k == 4
        assert len(results["shape"].dynamics) == 16
    
    def test_grid_policy_applied(self):
        points = pd.DataFrame({"x": [-1.0, 2.0, 4.0], "y": [1.0, 2.0, 3.0]})
        grid = GridConfig(k=2, out_of_range=OutOfRangePolicy.CLAMP)
        results = analyze_dataset(points, [AxisPair("xy", "x", "y")], grid)
        assert results["xy"].dropped_absolute == 0
    
    def test_duplicate_pair_names(self, measurements):
        pairs = [AxisPair("p", "length", "width"), AxisPair("p", "width", "length")]
        with pytest.raises(InvalidInputError):
            analyze_dataset(measurements, pairs)


class TestModels:
    """Test grid and axis pair validation."""
    
    @pytest.mark.parametrize("k", [0, -2, 1.5, "4", True])
    def test_invalid_grid_size(self, k):
        with pytest.raises(InvalidInputError):
            GridConfig(k=k)
    
    def test_numpy_integer_grid_size(self):
        assert GridConfig(k=np.int64(3)).n_regions == 9
    
    def test_policy_from_string(self):
        assert GridConfig(k=2, out_of_range="clamp").out_of_range is OutOfRangePolicy.CLAMP
    
    def test_n_regions(self):
        assert GridConfig(k=4).n_regions == 16
    
    def test_axis_pair_requires_columns(self):
        with pytest.raises(InvalidInputError):
            AxisPair("p", "x", "")
