"""gaitlab: accelerometer gait analysis of steps, strides and symmetry.

Quick start
-----------
>>> import gaitlab
>>> session = gaitlab.GaitSession.synthetic(seed=1)
>>> events = session.detect_events()
>>> result = session.analyze()
>>> print(result.summary())

Pipeline: zero-phase low-pass filter -> adaptive peak detection ->
alternating side assignment -> step/stride segmentation ->
percent-of-cycle normalization -> scalar gait metrics.
"""

__version__ = "1.0.0"

from ._types import (
    AnalysisResult,
    ConditionedSample,
    ConditionedSignal,
    GaitEvent,
    GaitMetrics,
    InsufficientDataError,
    InsufficientEventsError,
    NormalizedCycle,
    RawSample,
    StepInterval,
    display_label,
    side_labels,
)
from .config import AnalysisConfig
from ._core import analyze, condition_samples, detect_events
from ._io import generate_synthetic, load_csv, parse_records
from ._export import (
    analysis_payload, cycle_records, export_analysis, normalize_formats, step_records,
    summary_record,
)
from ._history import SavedTrial, TrialHistory, next_trial_name
from .commentary import commentary_payload
from .detectors import PeakDetector, assign_sides, detect_peaks
from .utils.preprocessing import lowpass_butterworth, resample_cycle
from .session import GaitSession

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "ConditionedSample",
    "ConditionedSignal",
    "GaitEvent",
    "GaitMetrics",
    "NormalizedCycle",
    "RawSample",
    "StepInterval",
    "InsufficientDataError",
    "InsufficientEventsError",
    "display_label",
    "side_labels",
    "analyze",
    "condition_samples",
    "detect_events",
    "generate_synthetic",
    "load_csv",
    "parse_records",
    "analysis_payload",
    "cycle_records",
    "export_analysis",
    "normalize_formats",
    "step_records",
    "summary_record",
    "SavedTrial",
    "TrialHistory",
    "next_trial_name",
    "commentary_payload",
    "PeakDetector",
    "assign_sides",
    "detect_peaks",
    "lowpass_butterworth",
    "resample_cycle",
    "GaitSession",
    "__version__",
]
