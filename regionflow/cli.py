#!/usr/bin/env python3
"""
Region Dynamics CLI

Runs every dataset and axis pair of an analysis config through the region
pipeline and writes density tables, dynamics tables, heatmaps and a summary
into a fresh run directory.

Usage:
    python -m regionflow.cli --config config/analysis.yml
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from regionflow.config.loader import AnalysisConfigError, load_analysis_config
from regionflow.constants import DEFAULT_CONFIG_PATH
from regionflow.core.artifacts.heatmaps import generate_pair_heatmaps
from regionflow.core.region.models import GridConfig
from regionflow.core.region.pipeline import analyze_dataset
from regionflow.io.loader import load_points
from regionflow.report import (
    render_text_summary,
    summarize_result,
    write_result_tables,
    write_summary_json,
)
from regionflow.utils.env import env_str
from regionflow.utils.error_handling import InvalidInputError
from regionflow.utils.run_id import generate_run_id, get_run_dir
from regionflow.utils.run_logging import LOG_FORMAT, RunLogHandler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare absolute and normalized k x k region densities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the configured datasets
  python -m regionflow.cli --config config/analysis.yml

  # Finer grid, no heatmaps
  python -m regionflow.cli --config config/analysis.yml --k 6 --no-heatmaps
        """
    )
    parser.add_argument("--config", default=env_str("REGIONFLOW_CONFIG", DEFAULT_CONFIG_PATH),
                        help=f"Analysis YAML (default: $REGIONFLOW_CONFIG or {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--k", type=int, default=None,
                        help="Bins per axis, overrides grid.k from the config")
    parser.add_argument("--output-dir", default=None,
                        help="Output root, overrides output.dir from the config")
    parser.add_argument("--no-heatmaps", action="store_true",
                        help="Skip heatmap rendering")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging")
    return parser


def run_analysis(
    config_path: str,
    k: Optional[int] = None,
    output_dir: Optional[str] = None,
    heatmaps: Optional[bool] = None,
    run_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Execute a full analysis run.
    
    Args:
        config_path: Analysis YAML path
        k: Grid size override
        output_dir: Output root override
        heatmaps: Force heatmaps on/off (default: config value)
        run_id: Run identifier (default: freshly generated)
        
    Returns:
        Dictionary with run_id, run_dir, summary_path and per-dataset summaries
    """
    config = load_analysis_config(config_path)
    grid = config.grid if k is None else GridConfig(k=k, out_of_range=config.grid.out_of_range)
    make_heatmaps = config.output.heatmaps if heatmaps is None else heatmaps
    output_root = Path(output_dir) if output_dir else config.output.dir
    
    run_id = run_id or generate_run_id()
    run_dir = get_run_dir(output_root, run_id)
    summaries: Dict[str, Dict[str, Any]] = {}
    
    run_context = {
        "config": config_path,
        "config.version": config.version,
        "grid.k": grid.k,
        "grid.out_of_range": grid.out_of_range.value,
        "heatmaps": make_heatmaps,
        "datasets": ", ".join(d.name for d in config.datasets),
    }
    with RunLogHandler(run_id, run_dir, run_context) as run_log:
        for dataset in config.datasets:
            run_log.section(f"dataset {dataset.name}")
            points = load_points(dataset.path, dataset.numeric_columns)
            results = analyze_dataset(points, dataset.axis_pairs, grid, category=dataset.category)
            
            summaries[dataset.name] = {}
            for name, result in results.items():
                pair_dir = run_dir / dataset.name / name
                write_result_tables(result, pair_dir)
                if make_heatmaps:
                    generate_pair_heatmaps(result, pair_dir)
                summaries[dataset.name][name] = summarize_result(result)
        
        summary_path = write_summary_json(summaries, run_dir / "summary.json", run_id=run_id)
    
    return {
        "run_id": run_id,
        "run_dir": str(run_dir),
        "summary_path": summary_path,
        "summaries": summaries,
        "warnings": run_log.warning_count,
        "log_path": run_log.get_log_path(),
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    
    try:
        outcome = run_analysis(
            config_path=args.config,
            k=args.k,
            output_dir=args.output_dir,
            heatmaps=False if args.no_heatmaps else None,
        )
    except (FileNotFoundError, AnalysisConfigError, InvalidInputError, yaml.YAMLError) as e:
        print(f"❌ Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1
    
    for dataset_name, pairs in outcome["summaries"].items():
        for pair_name, summary in pairs.items():
            print(render_text_summary(f"{dataset_name}/{pair_name}", summary))
            print()
    
    print(f"✅ Run {outcome['run_id']} complete")
    if outcome["warnings"]:
        print(f"⚠️  {outcome['warnings']} warning(s) logged, see {outcome['log_path']}")
    print(f"📊 Results saved to: {outcome['run_dir']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
