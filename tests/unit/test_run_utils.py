"""
Unit tests for run identifiers, run logging and environment helpers.
"""

import logging

import pytest

from regionflow.utils.env import env_bool, env_int, env_str
from regionflow.utils.run_id import generate_run_id, get_run_dir, validate_run_id
from regionflow.utils.run_logging import RunLogHandler


class TestRunId:
    """Test run identifier generation and validation."""
    
    def test_default_length(self):
        assert len(generate_run_id()) >= 10
    
    def test_explicit_length(self):
        run_id = generate_run_id(length=12)
        assert len(run_id) == 12
        assert validate_run_id(run_id)
    
    def test_too_short(self):
        with pytest.raises(ValueError):
            generate_run_id(length=5)
    
    @pytest.mark.parametrize("run_id", ["abc", "", None, "2025-11-02", "../escape00"])
    def test_invalid(self, run_id):
        assert not validate_run_id(run_id)
    
    def test_get_run_dir(self, tmp_path):
        run_dir = get_run_dir(tmp_path, "p0ZoB1FwH6")
        assert run_dir.is_dir()
        assert run_dir == tmp_path / "p0ZoB1FwH6"
    
    def test_get_run_dir_rejects_bad_id(self, tmp_path):
        with pytest.raises(ValueError):
            get_run_dir(tmp_path, "../oops")


class TestRunLogHandler:
    """Test run-scoped file logging."""
    
    def test_records_written_and_handler_removed(self, tmp_path):
        with RunLogHandler("testrun0001", tmp_path) as handler:
            logging.getLogger("regionflow.test").warning("region check")
        
        log_text = (tmp_path / "logs" / "app.log").read_text()
        assert "region check" in log_text
        assert handler.get_log_path() == tmp_path / "logs" / "app.log"
        assert handler.file_handler is None
        assert all(
            getattr(h, "baseFilename", None) != str(tmp_path / "logs" / "app.log")
            for h in logging.getLogger().handlers
        )
    
    def test_exception_propagates(self, tmp_path):
        with pytest.raises(RuntimeError):
            with RunLogHandler("testrun0002", tmp_path):
                raise RuntimeError("boom")
    
    def test_header_context_and_sections(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)
        context = {"grid.k": 3, "grid.out_of_range": "drop", "datasets": "iris"}
        with RunLogHandler("testrun0003", tmp_path, context) as run_log:
            run_log.section("dataset iris")
        
        log_text = (tmp_path / "logs" / "app.log").read_text()
        assert "Regionflow run testrun0003" in log_text
        assert "grid.k = 3" in log_text
        assert "grid.out_of_range = drop" in log_text
        assert "dataset iris" in log_text
        assert "testrun0003 ok" in log_text
    
    def test_warning_tally(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)
        with RunLogHandler("testrun0004", tmp_path) as run_log:
            logging.getLogger("regionflow.test").warning("2 point(s) below 0 dropped")
            logging.getLogger("regionflow.test").warning("degenerate axis")
        
        assert run_log.warning_count == 2
        assert run_log.error_count == 0
        assert "2 warning(s), 0 error(s)" in (tmp_path / "logs" / "app.log").read_text()
    
    def test_failure_recorded(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)
        with pytest.raises(ValueError):
            with RunLogHandler("testrun0005", tmp_path) as run_log:
                raise ValueError("bad axis")
        
        log_text = (tmp_path / "logs" / "app.log").read_text()
        assert "aborted: ValueError: bad axis" in log_text
        assert "testrun0005 failed" in log_text
        assert run_log.error_count == 1


class TestEnv:
    """Test environment parsing helpers."""
    
    def test_env_int(self, monkeypatch):
        monkeypatch.setenv("REGIONFLOW_GRID_K", " 6 ")
        assert env_int("REGIONFLOW_GRID_K") == 6
    
    def test_env_int_default(self):
        assert env_int("REGIONFLOW_GRID_K", 4) == 4
    
    def test_env_int_invalid(self, monkeypatch):
        monkeypatch.setenv("REGIONFLOW_GRID_K", "four")
        with pytest.raises(ValueError):
            env_int("REGIONFLOW_GRID_K")
    
    @pytest.mark.parametrize("value,expected", [("yes", True), ("1", True), ("off", False), ("0", False)])
    def test_env_bool(self, monkeypatch, value, expected):
        monkeypatch.setenv("ENABLE_HEATMAPS", value)
        assert env_bool("ENABLE_HEATMAPS") is expected
    
    def test_env_str_default(self):
        assert env_str("REGIONFLOW_CONFIG", "config/analysis.yml") == "config/analysis.yml"
