"""Analysis session: one recording, its events and its latest result."""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from ._core import analyze, condition_samples, detect_events
from ._io import generate_synthetic, load_csv, parse_records
from ._types import (
    PHYSICAL,
    RIGHT,
    AnalysisResult,
    ConditionedSignal,
    GaitEvent,
    RawSample,
    side_labels,
    validate_label_mode,
    validate_side,
)
from .commentary import commentary_payload
from .config import AnalysisConfig
from .detectors.peak_detector import PeakDetector
from .detectors.side_assignment import assign_sides

logger = logging.getLogger(__name__)


class GaitSession:
    """Owns the conditioned signal, the event list and the derived result.

    Every edit (selection, events, starting side, labelling) discards the
    cached :class:`AnalysisResult` and its commentary; call :meth:`analyze`
    again to recompute them.
    """

    def __init__(self, signal: ConditionedSignal, config: Optional[AnalysisConfig] = None,
                 *, start_with_left: bool = True, label_mode: str = PHYSICAL,
                 dominant_side: str = RIGHT):
        self.config = config or AnalysisConfig()
        self.signal = signal
        self._start_with_left = bool(start_with_left)
        self._label_mode = validate_label_mode(label_mode)
        self._dominant_side = validate_side(dominant_side)
        self._selection: Tuple[float, float] = (float(signal.time[0]), float(signal.time[-1]))
        self._events: List[GaitEvent] = []
        self._ids = itertools.count(1)
        self.threshold: Optional[float] = None
        self._result: Optional[AnalysisResult] = None
        self._commentary: Optional[str] = None
        self._commentary_requested = False

    # ── constructors ─────────────────────────────────────────────

    @classmethod
    def from_samples(cls, samples: Sequence[RawSample], config: Optional[AnalysisConfig] = None,
                     **kwargs) -> "GaitSession":
        config = config or AnalysisConfig()
        records = parse_records(samples, config.min_samples)
        return cls(condition_samples(records, config), config, **kwargs)

    @classmethod
    def from_csv(cls, path, config: Optional[AnalysisConfig] = None, **kwargs) -> "GaitSession":
        config = config or AnalysisConfig()
        return cls(condition_samples(load_csv(path, config.min_samples), config), config, **kwargs)

    @classmethod
    def synthetic(cls, config: Optional[AnalysisConfig] = None, *, seed: Optional[int] = None,
                  **kwargs) -> "GaitSession":
        return cls.from_samples(generate_synthetic(seed=seed), config, **kwargs)

    # ── state ────────────────────────────────────────────────────

    @property
    def events(self) -> List[GaitEvent]:
        return list(self._events)

    @property
    def selection(self) -> Tuple[float, float]:
        return self._selection

    @property
    def start_with_left(self) -> bool:
        return self._start_with_left

    @property
    def labels(self):
        return side_labels(self._label_mode, self._dominant_side)

    @property
    def result(self) -> Optional[AnalysisResult]:
        """Latest analysis result, or None if stale or never computed."""
        return self._result

    def _invalidate(self) -> None:
        self._result = None
        self._commentary = None
        self._commentary_requested = False

    def _set_events(self, events) -> None:
        self._events = assign_sides(events, self._start_with_left)
        self._invalidate()

    # ── editing ──────────────────────────────────────────────────

    def select(self, start: float, end: float) -> None:
        """Restrict event detection to ``[start, end]`` seconds."""
        start, end = sorted((float(start), float(end)))
        self._selection = (start, end)
        self._invalidate()

    def detect_events(self) -> List[GaitEvent]:
        """Detect heel-strikes in the current selection, replacing all events."""
        detector = PeakDetector(self.config)
        events = detect_events(self.signal, start_with_left=self._start_with_left,
                               window=self._selection, config=self.config,
                               first_id=next(self._ids), detector=detector)
        # Ids stay unique across repeated detections and manual additions.
        if events:
            self._ids = itertools.count(max(e.id for e in events) + 1)
        self.threshold = detector.threshold
        self._set_events(events)
        logger.debug("Session detected %d events in %s", len(events), self._selection)
        return self.events

    def set_start_with_left(self, flag: bool) -> None:
        self._start_with_left = bool(flag)
        self._set_events(self._events)

    def add_event(self, time: float, value: float) -> GaitEvent:
        """Insert a hand-placed event; sides are recomputed for all events."""
        event = GaitEvent(id=next(self._ids), time=float(time), value=float(value))
        self._set_events(self._events + [event])
        return next(e for e in self._events if e.id == event.id)

    def remove_event(self, event_id: int) -> None:
        remaining = [e for e in self._events if e.id != event_id]
        if len(remaining) == len(self._events):
            raise KeyError(f"No event with id {event_id!r}")
        self._set_events(remaining)

    def set_excluded(self, event_id: int, excluded: bool = True) -> None:
        if not any(e.id == event_id for e in self._events):
            raise KeyError(f"No event with id {event_id!r}")
        self._set_events([
            replace(e, excluded=bool(excluded)) if e.id == event_id else e
            for e in self._events
        ])

    def set_labeling(self, mode: str, dominant_side: str = RIGHT) -> None:
        self._label_mode = validate_label_mode(mode)
        self._dominant_side = validate_side(dominant_side)
        self._invalidate()

    # ── analysis ─────────────────────────────────────────────────

    def analyze(self) -> AnalysisResult:
        """Run the full analysis on the active events.

        Raises
        ------
        InsufficientEventsError
            If fewer than ``config.analysis_window_size`` active events exist.
        """
        self._invalidate()
        self._result = analyze(self._events, self.signal, label_mode=self._label_mode,
                               dominant_side=self._dominant_side, config=self.config)
        return self._result

    def commentary(self, generator: Callable[[dict], str],
                   subject_id: Optional[str] = None) -> Optional[str]:
        """Ask *generator* for narrative text about the current result.

        The generator is called at most once per result; later calls return
        the cached text.  If the generator raises, the error propagates and
        the result keeps no commentary.
        """
        if self._result is None:
            raise RuntimeError("No current analysis result; call analyze() first")
        if self._commentary_requested:
            return self._commentary
        payload = commentary_payload(self._result.metrics, self._result.labels, subject_id)
        self._commentary = generator(payload)
        self._commentary_requested = True
        return self._commentary
