"""
Unit tests for dataset loading and cleaning.
"""

import pandas as pd
import pytest

from regionflow.io.loader import clean_points, load_points
from regionflow.utils.error_handling import InvalidInputError


class TestLoadPoints:
    """Test CSV loading."""
    
    def test_load_and_coerce(self, tmp_path):
        path = tmp_path / "air.csv"
        path.write_text("Ozone,Wind,Note\n41,7.4,a\nNA,8.0,b\nbad,12.6,c\n")
        
        df = load_points(path, columns=["Ozone", "Wind"])
        
        assert len(df) == 3
        assert df["Ozone"].isna().tolist() == [False, True, True]
        assert df["Wind"].tolist() == [7.4, 8.0, 12.6]
        assert df["Note"].tolist() == ["a", "b", "c"]
    
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_points(tmp_path / "missing.csv")
    
    def test_missing_column(self, tmp_path):
        path = tmp_path / "air.csv"
        path.write_text("Ozone,Wind\n41,7.4\n")
        with pytest.raises(InvalidInputError):
            load_points(path, columns=["Temp"])


class TestCleanPoints:
    """Test per-pair removal of incomplete rows."""
    
    def test_drops_only_axis_gaps(self, measurements):
        cleaned = clean_points(measurements, "ozone", "width")
        assert len(cleaned) == 6
        assert cleaned.index.tolist() == list(range(6))
    
    def test_complete_pair_untouched(self, measurements):
        cleaned = clean_points(measurements, "length", "width")
        pd.testing.assert_frame_equal(cleaned, measurements)
    
    def test_does_not_mutate_input(self, measurements):
        before = measurements.copy()
        clean_points(measurements, "ozone", "width")
        pd.testing.assert_frame_equal(measurements, before)
    
    def test_nothing_left(self):
        df = pd.DataFrame({"x": [None, None], "y": [1.0, 2.0]})
        with pytest.raises(InvalidInputError):
            clean_points(df, "x", "y")
    
    def test_missing_column(self, measurements):
        with pytest.raises(InvalidInputError):
            clean_points(measurements, "length", "depth")
