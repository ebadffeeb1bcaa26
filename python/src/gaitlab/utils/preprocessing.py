"""
Signal preprocessing utilities for accelerometer gait analysis.

Provides the zero-phase low-pass filter, per-recording conditioning,
RMS / dispersion helpers and percent-of-cycle resampling used by the
detection and analysis stages.
"""

import logging
import math
from typing import Sequence

import numpy as np
from scipy.signal import lfilter, lfiltic

from .._types import ConditionedSignal, InsufficientDataError, RawSample

logger = logging.getLogger(__name__)

# Inputs shorter than this are passed through unfiltered.
MIN_FILTER_LENGTH = 4


def butterworth_coefficients(cutoff: float, fs: float):
    """Second-order Butterworth low-pass coefficients (bilinear, pre-warped).

    Parameters
    ----------
    cutoff : float
        Cutoff frequency in Hz.
    fs : float
        Sampling rate in Hz.

    Returns
    -------
    b : ndarray, shape (3,)
        Feed-forward coefficients ``(a0, a1, a2)``.
    a : ndarray, shape (3,)
        Feedback coefficients ``(1, b1, b2)`` in :func:`scipy.signal.lfilter`
        convention.
    """
    if fs <= 0:
        raise ValueError("fs must be strictly positive")
    if cutoff <= 0:
        raise ValueError("cutoff must be strictly positive")
    f = math.tan(math.pi * cutoff / fs)
    f2 = f * f
    norm = 1.0 + math.sqrt(2.0) * f + f2
    a0 = f2 / norm
    b1 = 2.0 * (f2 - 1.0) / norm
    b2 = (1.0 - math.sqrt(2.0) * f + f2) / norm
    return np.array([a0, 2.0 * a0, a0]), np.array([1.0, b1, b2])


def _seeded_pass(x: np.ndarray, b: np.ndarray, a: np.ndarray) -> np.ndarray:
    """Run the recurrence with ``y[0] = x[0]`` and ``y[1] = x[1]``."""
    # lfiltic takes past values most recent first.
    zi = lfiltic(b, a, y=[x[1], x[0]], x=[x[1], x[0]])
    tail, _ = lfilter(b, a, x[2:], zi=zi)
    return np.concatenate([x[:2], tail])


def lowpass_butterworth(signal: Sequence[float], cutoff: float,
                        fs: float) -> np.ndarray:
    """Apply a zero-phase Butterworth low-pass filter.

    A 2nd-order section is run forward and then backward over the forward
    output, which cancels the phase delay and doubles the roll-off
    (4th-order magnitude, -24 dB/octave).  Each pass seeds its first two
    outputs with the first two inputs in its direction of travel.

    Parameters
    ----------
    signal : sequence of float
        Uniformly sampled input.
    cutoff : float
        Cutoff frequency in Hz.
    fs : float
        Sampling rate in Hz.

    Returns
    -------
    ndarray
        Filtered signal of the same length.  Inputs shorter than four
        samples are returned unchanged.
    """
    x = np.asarray(signal, dtype=float)
    if len(x) < MIN_FILTER_LENGTH:
        return x.copy()
    b, a = butterworth_coefficients(cutoff, fs)
    forward = _seeded_pass(x, b, a)
    return _seeded_pass(forward[::-1], b, a)[::-1].copy()


def sampling_rate(samples: Sequence[RawSample]) -> float:
    """Sampling rate in Hz from the first two timestamps."""
    if len(samples) < 2:
        raise InsufficientDataError("at least two samples are needed to derive a sampling rate")
    dt = samples[1].time - samples[0].time
    if dt <= 0:
        raise ValueError("timestamps must be strictly increasing")
    return 1.0 / dt


def condition(samples: Sequence[RawSample], cutoff_hz: float = 10.0,
              min_samples: int = 10) -> ConditionedSignal:
    """Low-pass filter each axis of a raw recording independently.

    Raises
    ------
    InsufficientDataError
        If fewer than *min_samples* records are supplied.
    """
    n = len(samples)
    if n < min_samples:
        raise InsufficientDataError(
            f"{n} samples supplied, at least {min_samples} are required"
        )
    fs = sampling_rate(samples)
    time = np.array([s.time for s in samples], dtype=float)
    columns = {
        axis: np.array([getattr(s, axis) for s in samples], dtype=float)
        for axis in ("ax", "ay", "az")
    }
    filtered = {
        f"{axis}_filtered": lowpass_butterworth(values, cutoff_hz, fs)
        for axis, values in columns.items()
    }
    logger.debug("Conditioned %d samples at %.2f Hz (cutoff %.2f Hz)", n, fs, cutoff_hz)
    return ConditionedSignal(time=time, **columns, **filtered)


def rms(values: Sequence[float]) -> float:
    """Root-mean-square; 0.0 for an empty input."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(arr * arr)))


def population_std(values: Sequence[float]) -> float:
    """Standard deviation with divisor N; 0.0 for an empty input."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.std(arr))


def resample_cycle(values: Sequence[float], points: int = 100) -> np.ndarray:
    """Resample a window onto a fixed-length percent-of-cycle grid.

    Output index ``i`` maps to input position ``i / (points - 1) * (n - 1)``
    and is linearly interpolated between its floor and ceiling neighbours.
    The first and last outputs reproduce the first and last inputs exactly.

    Parameters
    ----------
    values : sequence of float
        Window samples, at least one.
    points : int
        Output length.

    Returns
    -------
    ndarray, shape (points,)
    """
    arr = np.asarray(values, dtype=float)
    if points < 1:
        raise ValueError("points must be >= 1")
    if arr.size == 0:
        raise ValueError("cannot resample an empty window")
    if arr.size == 1 or points == 1:
        return np.full(points, arr[0])
    target = np.arange(points) / (points - 1) * (arr.size - 1)
    x0 = np.floor(target).astype(int)
    x1 = np.minimum(x0 + 1, arr.size - 1)
    frac = target - x0
    out = arr[x0] + (arr[x1] - arr[x0]) * frac
    out[x0 == x1] = arr[x0[x0 == x1]]
    return out
