"""
Adaptive-threshold heel-strike detector.

Principle
---------
Heel-strikes show up as impact peaks in the low-pass filtered vertical
acceleration.  A sample is a candidate when it is a strict local maximum
above ``mean + k * std`` of the analysed window.  A refractory distance
(``round(0.35 * fs)`` samples by default) prevents two strikes from being
reported for one impact: a candidate that falls inside the refractory
distance of the last accepted peak competes with it, and only the higher
of the two is kept.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .._types import ConditionedSignal, GaitEvent, InsufficientDataError
from ..config import AnalysisConfig
from .side_assignment import assign_sides

logger = logging.getLogger(__name__)

ACCEPT = "accept"
REPLACE = "replace"
KEEP_EXISTING = "keep-existing"


@dataclass(frozen=True)
class PeakDecision:
    """Outcome for one candidate peak.

    ``slot`` is the position in the accepted-peak list the candidate was
    compared against (or appended at).  For ``replace`` and
    ``keep-existing`` decisions ``previous`` holds the index that occupied
    the slot before the comparison.
    """
    index: int
    action: str
    slot: int
    previous: int = -1


def adaptive_threshold(signal: Sequence[float], k: float = 0.7) -> float:
    """``mean + k * std`` (population std) of *signal*."""
    arr = np.asarray(signal, dtype=float)
    if arr.size == 0:
        raise ValueError("cannot compute a threshold on an empty signal")
    return float(np.mean(arr) + k * np.std(arr))


def detect_peaks_with_decisions(signal: Sequence[float], min_height: float,
                                min_distance: int) -> Tuple[List[int], List[PeakDecision]]:
    """Detect peaks and report how every candidate was resolved.

    Parameters
    ----------
    signal : sequence of float
        Conditioned vertical acceleration.
    min_height : float
        Candidates must be strictly greater than this value.
    min_distance : int
        A candidate closer than this many samples to the last accepted
        peak replaces it if higher and is dropped otherwise.

    Returns
    -------
    peaks : list of int
        Accepted indices, ascending.
    decisions : list of PeakDecision
        One entry per candidate, in scan order.
    """
    if min_distance < 0:
        raise ValueError("min_distance must be >= 0")
    x = np.asarray(signal, dtype=float)
    peaks: List[int] = []
    decisions: List[PeakDecision] = []
    # First and last samples have a single neighbour and are never candidates.
    for i in range(1, len(x) - 1):
        if not (x[i] > x[i - 1] and x[i] > x[i + 1] and x[i] > min_height):
            continue
        if not peaks or i - peaks[-1] >= min_distance:
            peaks.append(i)
            decisions.append(PeakDecision(i, ACCEPT, len(peaks) - 1))
            continue
        last = peaks[-1]
        if x[i] > x[last]:
            peaks[-1] = i
            decisions.append(PeakDecision(i, REPLACE, len(peaks) - 1, last))
        else:
            decisions.append(PeakDecision(i, KEEP_EXISTING, len(peaks) - 1, last))
    return peaks, decisions


def detect_peaks(signal: Sequence[float], min_height: float,
                 min_distance: int) -> List[int]:
    """Indices of heel-strike peaks in *signal*.

    See :func:`detect_peaks_with_decisions` for the rules.
    """
    peaks, _ = detect_peaks_with_decisions(signal, min_height, min_distance)
    return peaks


class PeakDetector:
    """Vertical-acceleration peak detector producing labelled gait events.

    Parameters
    ----------
    config : AnalysisConfig, optional
        Supplies ``threshold_k``, ``min_step_time`` and ``min_samples``.
    """

    def __init__(self, config: AnalysisConfig = None):
        self.config = config or AnalysisConfig()
        self.threshold = None
        self.decisions: List[PeakDecision] = []

    def detect(self, signal: ConditionedSignal, start_with_left: bool = True,
               first_id: int = 1, index_offset: int = 0) -> List[GaitEvent]:
        """Detect heel-strikes in *signal* and assign alternating sides.

        Parameters
        ----------
        signal : ConditionedSignal
            The segment to analyse; the threshold is computed over it.
        start_with_left : bool
            Side of the first event.
        first_id : int
            Identifier given to the first event; later events count up.
        index_offset : int
            Added to segment indices so ``source_index`` refers to the
            full recording.

        Raises
        ------
        InsufficientDataError
            If the segment holds fewer than ``config.min_samples`` samples.
        """
        n = len(signal)
        if n < self.config.min_samples:
            raise InsufficientDataError(
                f"segment holds {n} samples, at least {self.config.min_samples} are required"
            )
        vertical = signal.ay_filtered
        self.threshold = adaptive_threshold(vertical, self.config.threshold_k)
        min_distance = self.config.min_peak_distance(signal.fs)
        peaks, self.decisions = detect_peaks_with_decisions(vertical, self.threshold, min_distance)
        logger.debug(
            "Detected %d peaks (threshold %.4f, min distance %d samples, %d candidates)",
            len(peaks), self.threshold, min_distance, len(self.decisions),
        )
        events = [
            GaitEvent(
                id=first_id + k,
                time=float(signal.time[idx]),
                value=float(vertical[idx]),
                source_index=index_offset + idx,
            )
            for k, idx in enumerate(peaks)
        ]
        return assign_sides(events, start_with_left)

    detect_gait_events = detect
