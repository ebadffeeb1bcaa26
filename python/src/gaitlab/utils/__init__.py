"""
Utility modules for signal preprocessing and gait segmentation.
"""

from .preprocessing import (
    condition, lowpass_butterworth, population_std, resample_cycle, rms, sampling_rate,
)
from .segmentation import (
    StrideWindow, active_events, analysis_segment, build_step_intervals,
    select_analysis_window, stride_windows,
)

__all__ = [
    "condition", "lowpass_butterworth", "population_std", "resample_cycle", "rms",
    "sampling_rate",
    "StrideWindow", "active_events", "analysis_segment", "build_step_intervals",
    "select_analysis_window", "stride_windows",
]
