"""
Percent-of-cycle normalization and cross-stride averaging.

Every stride window of a side is resampled onto a fixed grid and the
windows are averaged point by point, giving one representative curve per
side and axis regardless of how many strides contributed.
"""

import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .._types import AXES, SIDES, NormalizedCycle
from ..utils.preprocessing import resample_cycle
from ..utils.segmentation import StrideWindow

logger = logging.getLogger(__name__)


def average_cycles(windows: Sequence[StrideWindow], axis: str, points: int = 100,
                   spread: bool = False) -> List[NormalizedCycle]:
    """Average the *axis* curve of *windows* on a *points*-long grid.

    Parameters
    ----------
    windows : sequence of StrideWindow
        Stride windows of a single side.
    axis : str
        ``'x'``, ``'y'`` or ``'z'`` (filtered columns).
    points : int
        Grid length; percents run ``0 .. points - 1``.
    spread : bool
        When True, ``std`` holds the population standard deviation across
        windows at each point.  When False it is 0.0.

    Returns
    -------
    list of NormalizedCycle
        Exactly *points* entries.  With no windows every mean is 0.0.
    """
    if not windows:
        return [NormalizedCycle(percent=i, mean=0.0, std=0.0) for i in range(points)]
    stack = np.vstack([resample_cycle(w.samples.filtered(axis), points) for w in windows])
    means = stack.mean(axis=0)
    stds = stack.std(axis=0) if spread else np.zeros(points)
    return [
        NormalizedCycle(percent=i, mean=float(means[i]), std=float(stds[i]))
        for i in range(points)
    ]


def side_cycles(windows_by_side: Dict[str, Sequence[StrideWindow]], points: int = 100,
                spread: bool = False) -> Dict[Tuple[str, str], List[NormalizedCycle]]:
    """Averaged curves for every side and axis."""
    cycles = {}
    for side in SIDES:
        windows = windows_by_side.get(side, [])
        if not windows:
            logger.warning("No stride window available for side %s; cycle curves are zero", side)
        for axis in AXES:
            cycles[(side, axis)] = average_cycles(windows, axis, points, spread)
    return cycles
