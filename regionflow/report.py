"""
Region Dynamics Reporting

Exports density and dynamics tables to CSV with consistent decimal precision,
builds per-axis-pair summaries and renders them for the console.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from regionflow.constants import DECIMAL_PRECISION, REGION_COL, SUMMARY_TOP_N
from regionflow.core.region.models import AxisPairResult

logger = logging.getLogger(__name__)


def export_table_csv(df: pd.DataFrame, path: Union[str, Path]) -> str:
    """
    Export a region table to CSV with consistent 4 decimal place formatting.
    
    Integer columns (counts, region indices, net flow) are written unchanged.
    
    Returns:
        Path to exported CSV file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, float_format=f'%.{DECIMAL_PRECISION}f')
    logger.debug(f"Wrote {len(df)} rows to {path}")
    return str(path)


def _ranked(dynamics: pd.DataFrame, ascending: bool, top_n: int) -> List[Dict[str, Any]]:
    rows = dynamics[dynamics["net_flow"] < 0] if ascending else dynamics[dynamics["net_flow"] > 0]
    rows = rows.sort_values(["net_flow", "region_i", "region_j"], ascending=[ascending, True, True], kind='mergesort')
    return [
        {"region": r[REGION_COL], "net_flow": int(r["net_flow"])}
        for _, r in rows.head(top_n).iterrows()
    ]


def summarize_dynamics(dynamics: pd.DataFrame, top_n: int = SUMMARY_TOP_N) -> Dict[str, Any]:
    """
    Summarise a dynamics table.
    
    moved_points is half the total absolute net flow: every point that changes
    region leaves one region and enters another, so it is counted twice in
    sum(|net_flow|). When absolute-mode points were dropped the two sides no
    longer balance and the half-sum is rounded down.
    
    Returns:
        Dictionary with:
        {
            "regions": int,
            "points_absolute": int,
            "points_normalized": int,
            "moved_points": int,
            "mean_redistribution_index": float,
            "max_redistribution_index": float,
            "top_gainers": [{"region": str, "net_flow": int}, ...],
            "top_losers": [{"region": str, "net_flow": int}, ...],
            "empty_absolute": int,
            "empty_normalized": int
        }
    """
    return {
        "regions": int(len(dynamics)),
        "points_absolute": int(dynamics["freq_absolute"].sum()),
        "points_normalized": int(dynamics["freq_normalized"].sum()),
        "moved_points": int(dynamics["net_flow"].abs().sum()) // 2,
        "mean_redistribution_index": round(float(dynamics["redistribution_index"].mean()), DECIMAL_PRECISION),
        "max_redistribution_index": round(float(dynamics["redistribution_index"].max()), DECIMAL_PRECISION),
        "top_gainers": _ranked(dynamics, ascending=False, top_n=top_n),
        "top_losers": _ranked(dynamics, ascending=True, top_n=top_n),
        "empty_absolute": int((dynamics["freq_absolute"] == 0).sum()),
        "empty_normalized": int((dynamics["freq_normalized"] == 0).sum()),
    }


def summarize_result(result: AxisPairResult, top_n: int = SUMMARY_TOP_N) -> Dict[str, Any]:
    """Summary of one axis pair, including its grid and input metadata."""
    summary = {
        "axis_pair": result.pair.name,
        "x": result.pair.x,
        "y": result.pair.y,
        "k": result.k,
        "total_points": result.total_points,
        "dropped_absolute": result.dropped_absolute,
    }
    summary.update(summarize_dynamics(result.dynamics, top_n=top_n))
    return summary


def write_result_tables(result: AxisPairResult, out_dir: Union[str, Path]) -> Dict[str, str]:
    """
    Write the density and dynamics tables of one axis pair.
    
    Returns:
        Mapping of table name to written file path
    """
    out_dir = Path(out_dir)
    return {
        "density_absolute": export_table_csv(result.absolute_density, out_dir / "density_absolute.csv"),
        "density_normalized": export_table_csv(result.normalized_density, out_dir / "density_normalized.csv"),
        "dynamics": export_table_csv(result.dynamics, out_dir / "dynamics.csv"),
    }


def write_summary_json(summaries: Dict[str, Any], path: Union[str, Path], run_id: str = "") -> str:
    """Write run summaries as JSON with a generation timestamp."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "run_id": run_id,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "datasets": summaries,
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.info(f"Summary written to {path}")
    return str(path)


def render_text_summary(name: str, summary: Dict[str, Any]) -> str:
    """Render one axis-pair summary as plain text for the console."""
    def _fmt(entries: List[Dict[str, Any]]) -> str:
        return ", ".join(f"{e['region']} ({e['net_flow']:+d})" for e in entries) or "none"
    
    lines = [
        f"{name}: {summary['x']} vs {summary['y']} (k={summary['k']}, n={summary['total_points']})",
        f"  moved points:          {summary['moved_points']}",
        f"  redistribution index:  mean {summary['mean_redistribution_index']:.4f}, "
        f"max {summary['max_redistribution_index']:.4f}",
        f"  gained after scaling:  {_fmt(summary['top_gainers'])}",
        f"  lost after scaling:    {_fmt(summary['top_losers'])}",
        f"  empty regions:         absolute {summary['empty_absolute']}, "
        f"normalized {summary['empty_normalized']}",
    ]
    if summary.get("dropped_absolute"):
        lines.append(f"  dropped below 0:       {summary['dropped_absolute']}")
    return "\n".join(lines)
