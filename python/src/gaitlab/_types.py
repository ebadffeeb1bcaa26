"""Core data structures shared by the gaitlab pipeline stages."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterator, List, Tuple

import numpy as np

# ── Sides and labelling ──────────────────────────────────────────────

LEFT = "Left"
RIGHT = "Right"
SIDES = (LEFT, RIGHT)

PHYSICAL = "physical"
FUNCTIONAL = "functional"
LABEL_MODES = (PHYSICAL, FUNCTIONAL)

DOMINANT = "Dominant"
NON_DOMINANT = "NonDominant"

AXES = ("x", "y", "z")


class InsufficientDataError(ValueError):
    """Too few samples to condition or analyse."""


class InsufficientEventsError(ValueError):
    """Too few non-excluded gait events for a full analysis run."""


def validate_side(side: str) -> str:
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}, got {side!r}")
    return side


def validate_label_mode(mode: str) -> str:
    if mode not in LABEL_MODES:
        raise ValueError(f"label mode must be one of {LABEL_MODES}, got {mode!r}")
    return mode


def other_side(side: str) -> str:
    return RIGHT if validate_side(side) == LEFT else LEFT


def display_label(physical_side: str, mode: str = PHYSICAL,
                  dominant_side: str = RIGHT) -> str:
    """Project a physical side onto the label shown to the user.

    In ``functional`` mode the side becomes ``Dominant`` or ``NonDominant``
    relative to *dominant_side*.  The physical side stays the grouping key
    for every statistic.
    """
    validate_side(physical_side)
    if validate_label_mode(mode) == PHYSICAL:
        return physical_side
    return DOMINANT if physical_side == validate_side(dominant_side) else NON_DOMINANT


def side_labels(mode: str = PHYSICAL, dominant_side: str = RIGHT) -> Dict[str, str]:
    """Active label pair, ``sideA`` for Left and ``sideB`` for Right."""
    return {
        "sideA": display_label(LEFT, mode, dominant_side),
        "sideB": display_label(RIGHT, mode, dominant_side),
    }


# ── Samples ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RawSample:
    """One tri-axial acceleration record."""
    time: float
    ax: float
    ay: float
    az: float


@dataclass(frozen=True)
class ConditionedSample:
    """A raw record together with its low-pass filtered axes."""
    time: float
    ax: float
    ay: float
    az: float
    ax_filtered: float
    ay_filtered: float
    az_filtered: float


def _frozen(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class ConditionedSignal:
    """Column view of a conditioned recording.

    Every array has the same length and index ``i`` of each column belongs
    to the same raw record.  Arrays are read-only.
    """

    time: np.ndarray
    ax: np.ndarray
    ay: np.ndarray
    az: np.ndarray
    ax_filtered: np.ndarray
    ay_filtered: np.ndarray
    az_filtered: np.ndarray

    _COLUMNS = ("time", "ax", "ay", "az", "ax_filtered", "ay_filtered", "az_filtered")

    def __post_init__(self):
        lengths = set()
        for name in self._COLUMNS:
            arr = _frozen(getattr(self, name))
            object.__setattr__(self, name, arr)
            lengths.add(len(arr))
        if len(lengths) > 1:
            raise ValueError("all conditioned columns must have the same length")

    def __len__(self) -> int:
        return len(self.time)

    @property
    def fs(self) -> float:
        """Sampling rate derived from the first two timestamps."""
        if len(self) < 2:
            raise ValueError("at least two samples are needed to derive a sampling rate")
        dt = float(self.time[1] - self.time[0])
        if dt <= 0:
            raise ValueError("timestamps must be strictly increasing")
        return 1.0 / dt

    def filtered(self, axis: str) -> np.ndarray:
        if axis not in AXES:
            raise ValueError(f"axis must be one of {AXES}, got {axis!r}")
        return getattr(self, f"a{axis}_filtered")

    def _take(self, mask: np.ndarray) -> "ConditionedSignal":
        return ConditionedSignal(**{name: getattr(self, name)[mask] for name in self._COLUMNS})

    def between(self, start: float, end: float, include_end: bool = True) -> "ConditionedSignal":
        """Samples with ``start <= time <= end`` (``< end`` when *include_end* is False)."""
        upper = self.time <= end if include_end else self.time < end
        return self._take((self.time >= start) & upper)

    def first_index_at(self, time: float) -> int:
        """Index of the first sample at or after *time*."""
        return int(np.searchsorted(self.time, time, side="left"))

    def records(self) -> Iterator[ConditionedSample]:
        for i in range(len(self)):
            yield ConditionedSample(*(float(getattr(self, name)[i]) for name in self._COLUMNS))


# ── Events and derived views ─────────────────────────────────────────

@dataclass(frozen=True)
class GaitEvent:
    """A heel-strike candidate in the filtered vertical signal.

    ``source_index`` is the recording index of the detected peak, or -1 for
    events added by hand.
    """
    id: int
    time: float
    value: float
    source_index: int = -1
    side: str = LEFT
    excluded: bool = False


@dataclass(frozen=True)
class StepInterval:
    """Span between two chronologically adjacent active events."""
    step_number: int
    side_label: str
    duration: float
    rms_x: float
    rms_y: float
    rms_z: float
    cadence: float
    physical_side: str


@dataclass(frozen=True)
class NormalizedCycle:
    """One percent-of-cycle point of a side's averaged stride."""
    percent: int
    mean: float
    std: float = 0.0


@dataclass(frozen=True)
class GaitMetrics:
    """Scalar summary of one analysis window."""
    cadence: float
    mean_step_time: float
    step_time_cv: float
    stride_time: float
    rms_x: float
    rms_y: float
    rms_z: float
    rms_total: float
    stride_count: int
    symmetry_index: float
    rms_symmetry_y: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    """Output of a full analysis run.

    Attributes
    ----------
    metrics : GaitMetrics
        Scalar aggregate over the analysis window.
    steps : list of StepInterval
        One entry per step of the window.
    cycles : dict
        ``(side, axis)`` -> 100 :class:`NormalizedCycle` points.
    segment : ConditionedSignal
        Samples from the first to the last used event, inclusive.
    used_events : list of GaitEvent
        The centred window of events the analysis ran on.
    stride_windows : dict
        Side -> number of stride windows that survived the sample-count check.
    """

    metrics: GaitMetrics
    steps: List[StepInterval]
    cycles: Dict[Tuple[str, str], List[NormalizedCycle]]
    segment: ConditionedSignal
    used_events: List[GaitEvent]
    label_mode: str = PHYSICAL
    dominant_side: str = RIGHT
    stride_windows: Dict[str, int] = field(default_factory=dict)

    @property
    def labels(self) -> Dict[str, str]:
        return side_labels(self.label_mode, self.dominant_side)

    def cycle(self, side: str, axis: str = "y") -> List[NormalizedCycle]:
        return self.cycles[(validate_side(side), axis)]

    @property
    def steps_frame(self):
        """Step intervals as a pandas DataFrame, one row per step."""
        import pandas as pd
        return pd.DataFrame([asdict(s) for s in self.steps])

    @property
    def cycles_frame(self):
        """Normalized cycles in long format.

        Columns: side, axis, percent, mean, std.
        """
        import pandas as pd
        rows = []
        for (side, axis), points in sorted(self.cycles.items()):
            for p in points:
                rows.append({
                    "side": side,
                    "axis": axis,
                    "percent": p.percent,
                    "mean": p.mean,
                    "std": p.std,
                })
        return pd.DataFrame(rows)

    def summary(self) -> str:
        """Return a concise text summary of the metrics."""
        m = self.metrics
        labels = self.labels
        lines = [
            f"AnalysisResult  steps={len(self.steps)}  events={len(self.used_events)}",
            f"  Cadence:      {m.cadence:.1f} steps/min",
            f"  Step time:    {m.mean_step_time:.3f} s  (CV {m.step_time_cv:.2f}%)",
            f"  Stride time:  {m.stride_time:.3f} s",
            f"  RMS total:    {m.rms_total:.3f}  (x={m.rms_x:.3f}, y={m.rms_y:.3f}, z={m.rms_z:.3f})",
            f"  Symmetry:     time {m.symmetry_index:.1f}%  vertical RMS {m.rms_symmetry_y:.1f}%"
            f"  ({labels['sideA']} vs {labels['sideB']})",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"AnalysisResult(steps={len(self.steps)}, "
                f"cadence={self.metrics.cadence:.1f}, label_mode={self.label_mode!r})")
