"""
Scalar gait metrics for one analysis window.

Cadence, step-time variability (CV), left/right symmetry of step time and
of vertical RMS, and RMS magnitude of each filtered axis.
"""

import logging
import math
from typing import Sequence

import numpy as np

from .._types import LEFT, RIGHT, ConditionedSignal, GaitMetrics, StepInterval
from ..config import AnalysisConfig
from ..utils.preprocessing import population_std, rms
from ..utils.segmentation import step_durations

logger = logging.getLogger(__name__)


def symmetry_index(left: float, right: float, epsilon: float = 1e-4) -> float:
    """Symmetry score in percent; 100 means perfect parity.

    ``(1 - |left - right| / (left + right + epsilon)) * 100``.
    """
    return (1.0 - abs(left - right) / (left + right + epsilon)) * 100.0


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population CV in percent, 0.0 when the mean is 0."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    mean = float(np.mean(arr))
    if mean == 0:
        return 0.0
    return 100.0 * population_std(arr) / mean


def _side_mean(steps: Sequence[StepInterval], side: str, attr: str, fallback: float) -> float:
    values = [getattr(s, attr) for s in steps if s.physical_side == side]
    if not values:
        return fallback
    return float(np.mean(values))


def compute_gait_metrics(steps: Sequence[StepInterval], segment: ConditionedSignal,
                         config: AnalysisConfig = None) -> GaitMetrics:
    """Aggregate step intervals and the analysis segment into :class:`GaitMetrics`.

    Parameters
    ----------
    steps : sequence of StepInterval
        Step intervals of the analysis window.
    segment : ConditionedSignal
        Samples from the first to the last used event.
    config : AnalysisConfig, optional
        Supplies the symmetry epsilon, RMS fallback and stride count.
    """
    config = config or AnalysisConfig()
    if not steps:
        raise ValueError("at least one step interval is required")

    durations = step_durations(steps)
    mean_step_time = float(np.mean(durations))
    step_time_cv = coefficient_of_variation(durations)
    cadence = 60.0 / mean_step_time if mean_step_time > 0 else 0.0

    # Physical sides only; display labels never drive the grouping.
    avg_left = _side_mean(steps, LEFT, "duration", mean_step_time)
    avg_right = _side_mean(steps, RIGHT, "duration", mean_step_time)
    rms_y_left = _side_mean(steps, LEFT, "rms_y", config.rms_fallback)
    rms_y_right = _side_mean(steps, RIGHT, "rms_y", config.rms_fallback)

    rms_x = rms(segment.ax_filtered)
    rms_y = rms(segment.ay_filtered)
    rms_z = rms(segment.az_filtered)

    metrics = GaitMetrics(
        cadence=cadence,
        mean_step_time=mean_step_time,
        step_time_cv=step_time_cv,
        stride_time=mean_step_time * 2,
        rms_x=rms_x,
        rms_y=rms_y,
        rms_z=rms_z,
        rms_total=math.sqrt(rms_x ** 2 + rms_y ** 2 + rms_z ** 2),
        stride_count=config.stride_count,
        symmetry_index=symmetry_index(avg_left, avg_right, config.symmetry_epsilon),
        rms_symmetry_y=symmetry_index(rms_y_left, rms_y_right, config.symmetry_epsilon),
    )
    logger.debug("Metrics: cadence=%.2f step=%.4f cv=%.2f", cadence, mean_step_time, step_time_cv)
    return metrics
