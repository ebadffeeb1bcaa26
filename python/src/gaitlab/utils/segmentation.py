"""
Cycle segmentation of a labelled heel-strike sequence.

Selects the centred analysis window of events, cuts it into step
intervals (consecutive events) and stride windows (event ``i`` to the
next same-side event ``i + 2``).
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .._types import (
    RIGHT,
    PHYSICAL,
    ConditionedSignal,
    GaitEvent,
    InsufficientEventsError,
    StepInterval,
    display_label,
    validate_side,
)
from .preprocessing import rms

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class StrideWindow:
    """Samples from one heel-strike to the next same-side heel-strike."""
    side: str
    start_time: float
    end_time: float
    samples: ConditionedSignal

    def __len__(self) -> int:
        return len(self.samples)


def active_events(events: Sequence[GaitEvent]) -> List[GaitEvent]:
    """Non-excluded events in chronological order."""
    return sorted((e for e in events if not e.excluded), key=lambda e: e.time)


def select_analysis_window(events: Sequence[GaitEvent], window_size: int = 21) -> List[GaitEvent]:
    """Centred run of *window_size* active events.

    ``start = (N - window_size) // 2`` over the ``N`` active events.

    Raises
    ------
    InsufficientEventsError
        If fewer than *window_size* active events are available.
    """
    active = active_events(events)
    if len(active) < window_size:
        raise InsufficientEventsError(
            f"{len(active)} active events available, at least {window_size} are required"
        )
    start = (len(active) - window_size) // 2
    return active[start:start + window_size]


def build_step_intervals(used_events: Sequence[GaitEvent], signal: ConditionedSignal,
                         label_mode: str = PHYSICAL, dominant_side: str = RIGHT,
                         cadence_floor: float = 0.5) -> List[StepInterval]:
    """One :class:`StepInterval` per pair of adjacent events.

    Per-axis RMS runs over filtered samples with ``start <= time < end``.
    Per-step cadence is ``60 / max(duration, cadence_floor)``.
    """
    steps = []
    for i in range(1, len(used_events)):
        start, end = used_events[i - 1], used_events[i]
        duration = end.time - start.time
        window = signal.between(start.time, end.time, include_end=False)
        steps.append(StepInterval(
            step_number=i,
            side_label=display_label(start.side, label_mode, dominant_side),
            duration=duration,
            rms_x=rms(window.ax_filtered),
            rms_y=rms(window.ay_filtered),
            rms_z=rms(window.az_filtered),
            cadence=60.0 / max(duration, cadence_floor),
            physical_side=start.side,
        ))
    return steps


def stride_windows(used_events: Sequence[GaitEvent], segment: ConditionedSignal,
                   side: str, min_samples: int = 6) -> List[StrideWindow]:
    """Stride windows starting on *side*, each spanning ``[t_i, t_{i+2}]``.

    Windows holding fewer than *min_samples* samples are discarded.
    """
    validate_side(side)
    windows = []
    dropped = 0
    for i in range(len(used_events) - 2):
        if used_events[i].side != side:
            continue
        t0, t1 = used_events[i].time, used_events[i + 2].time
        samples = segment.between(t0, t1)
        if len(samples) < min_samples:
            dropped += 1
            continue
        windows.append(StrideWindow(side, t0, t1, samples))
    if dropped:
        logger.warning("Dropped %d %s stride window(s) with fewer than %d samples",
                       dropped, side, min_samples)
    return windows


def analysis_segment(used_events: Sequence[GaitEvent], signal: ConditionedSignal) -> ConditionedSignal:
    """Samples from the first to the last used event, inclusive."""
    if not used_events:
        raise InsufficientEventsError("no events to span")
    return signal.between(used_events[0].time, used_events[-1].time)


def step_durations(steps: Sequence[StepInterval]) -> np.ndarray:
    return np.array([s.duration for s in steps], dtype=float)
