"""
Core Package

This package contains the core algorithmic logic for the regionflow application.

Structure:
- region/ - Region labelling, partitioning, density aggregation and dynamics
- artifacts/ - Heatmap rendering for density and flow tables

Usage:
Core modules are imported by the CLI and reporting layers. Do not import the CLI from core.
"""
