"""
Analysis module for gait cycles.

Provides cycle normalization, scalar gait metrics, and group summary
tables for saved trials.
"""

from .cycles import average_cycles, side_cycles
from .metrics import coefficient_of_variation, compute_gait_metrics, symmetry_index
from .statistics import compute_summary_table

__all__ = [
    "average_cycles", "side_cycles",
    "coefficient_of_variation", "compute_gait_metrics", "symmetry_index",
    "compute_summary_table",
]
