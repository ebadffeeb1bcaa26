"""Pipeline entry points: conditioning, event detection and full analysis."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ._types import (
    PHYSICAL,
    RIGHT,
    SIDES,
    AnalysisResult,
    ConditionedSignal,
    GaitEvent,
    RawSample,
    validate_label_mode,
    validate_side,
)
from .analysis.cycles import side_cycles
from .analysis.metrics import compute_gait_metrics
from .config import AnalysisConfig
from .detectors.peak_detector import PeakDetector
from .utils.preprocessing import condition
from .utils.segmentation import (
    analysis_segment,
    build_step_intervals,
    select_analysis_window,
    stride_windows,
)

logger = logging.getLogger(__name__)


def condition_samples(samples: Sequence[RawSample],
                      config: Optional[AnalysisConfig] = None) -> ConditionedSignal:
    """Low-pass filter a raw recording with the configured cutoff.

    Raises
    ------
    InsufficientDataError
        If fewer than ``config.min_samples`` records are supplied.
    """
    config = config or AnalysisConfig()
    return condition(samples, config.cutoff_hz, config.min_samples)


def detect_events(
    signal: ConditionedSignal,
    *,
    start_with_left: bool = True,
    window: Optional[Tuple[float, float]] = None,
    config: Optional[AnalysisConfig] = None,
    first_id: int = 1,
    detector: Optional[PeakDetector] = None,
) -> List[GaitEvent]:
    """Detect and label heel-strikes inside *window* (whole recording by default).

    Parameters
    ----------
    signal : ConditionedSignal
        Conditioned recording.
    start_with_left : bool
        Side of the first detected event.
    window : tuple of float, optional
        ``(start, end)`` in seconds, inclusive.  The adaptive threshold is
        computed over this segment only.
    config : AnalysisConfig, optional
        Pipeline constants.
    first_id : int
        Identifier of the first event.
    detector : PeakDetector, optional
        Detector to run; pass one to inspect its threshold and decisions
        afterwards.

    Returns
    -------
    list of GaitEvent
        Chronological, alternately labelled events.
    """
    config = config or AnalysisConfig()
    if window is None:
        segment, offset = signal, 0
    else:
        start, end = sorted(window)
        segment = signal.between(start, end)
        offset = signal.first_index_at(start)
    # PeakDetector raises InsufficientDataError on short segments.
    detector = detector or PeakDetector(config)
    return detector.detect(segment, start_with_left=start_with_left,
                           first_id=first_id, index_offset=offset)


def analyze(
    events: Sequence[GaitEvent],
    signal: ConditionedSignal,
    *,
    label_mode: str = PHYSICAL,
    dominant_side: str = RIGHT,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """Run segmentation, normalization and metrics on labelled events.

    Parameters
    ----------
    events : sequence of GaitEvent
        Labelled events; excluded events are ignored.
    signal : ConditionedSignal
        Conditioned recording the events were detected on.
    label_mode : str
        ``'physical'`` or ``'functional'``; affects display labels only.
    dominant_side : str
        ``'Left'`` or ``'Right'``, used in functional mode.
    config : AnalysisConfig, optional
        Pipeline constants.

    Raises
    ------
    InsufficientEventsError
        If fewer than ``config.analysis_window_size`` active events exist.
    """
    config = config or AnalysisConfig()
    validate_label_mode(label_mode)
    validate_side(dominant_side)

    used = select_analysis_window(events, config.analysis_window_size)
    segment = analysis_segment(used, signal)
    steps = build_step_intervals(used, signal, label_mode, dominant_side,
                                 config.cadence_duration_floor)
    windows = {
        side: stride_windows(used, segment, side, config.min_stride_samples)
        for side in SIDES
    }
    cycles = side_cycles(windows, config.cycle_points, config.cycle_spread)
    metrics = compute_gait_metrics(steps, segment, config)
    logger.debug(
        "Analysed %d events: %d steps, stride windows %s",
        len(used), len(steps), {s: len(w) for s, w in windows.items()},
    )
    return AnalysisResult(
        metrics=metrics,
        steps=steps,
        cycles=cycles,
        segment=segment,
        used_events=list(used),
        label_mode=label_mode,
        dominant_side=dominant_side,
        stride_windows={side: len(w) for side, w in windows.items()},
    )
