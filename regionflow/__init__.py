"""
Regionflow

Grid-region density analysis for 2-D point scatters. Compares how points fall
into a k x k grid when coordinates are used in raw units (absolute mode) versus
min-max rescaled to [0, 1] (normalized mode), and measures how density mass
moves between the two partitions.
"""

__version__ = "1.0.0"
