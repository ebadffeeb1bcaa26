"""I/O utilities: load acceleration CSV files and generate synthetic walks."""

from __future__ import annotations

import csv
import logging
import math
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

import numpy as np

from ._types import InsufficientDataError, RawSample

logger = logging.getLogger(__name__)

MIN_RECORDS = 10
_FIELDS = ("time", "ax", "ay", "az")


# ── CSV loading ──────────────────────────────────────────────────────

def load_csv(path, min_samples: int = MIN_RECORDS) -> List[RawSample]:
    """Load a ``time, ax, ay, az`` CSV recording.

    The first line is a header and is skipped.  Blank lines and lines with
    fewer than four fields are ignored; extra fields are ignored too.

    Parameters
    ----------
    path : str or Path
        CSV file path.
    min_samples : int
        Minimum number of records required.

    Returns
    -------
    list of RawSample
        Records in file order.

    Raises
    ------
    InsufficientDataError
        If fewer than *min_samples* records were read.
    ValueError
        If a field of a data line is not a number.
    """
    if not isinstance(path, (str, Path)) or not str(path).strip():
        raise ValueError("path must be a non-empty string or Path")
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    samples: List[RawSample] = []
    skipped = 0
    with csv_path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        next(reader, None)  # header
        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            if len(row) < 4:
                skipped += 1
                continue
            try:
                samples.append(RawSample(*(float(cell.strip()) for cell in row[:4])))
            except ValueError as exc:
                raise ValueError(
                    f"{csv_path}: line {reader.line_num} is not numeric: {row[:4]}"
                ) from exc
    if skipped:
        logger.debug("Skipped %d short line(s) in %s", skipped, csv_path)
    _require(samples, min_samples)
    return samples


def parse_records(rows: Iterable[Any], min_samples: int = MIN_RECORDS) -> List[RawSample]:
    """Build :class:`RawSample` records from tuples or mappings.

    Each row is either a ``(time, ax, ay, az)`` sequence or a mapping with
    those keys.
    """
    if rows is None or isinstance(rows, (str, bytes)):
        raise ValueError("rows must be a sequence of records")
    samples = []
    for i, row in enumerate(rows):
        if isinstance(row, RawSample):
            samples.append(row)
        elif isinstance(row, Mapping):
            missing = [k for k in _FIELDS if k not in row]
            if missing:
                raise ValueError(f"record {i} is missing field(s) {missing}")
            samples.append(RawSample(*(float(row[k]) for k in _FIELDS)))
        else:
            values = list(row)
            if len(values) < 4:
                raise ValueError(f"record {i} has {len(values)} fields, expected 4")
            samples.append(RawSample(*(float(v) for v in values[:4])))
    _require(samples, min_samples)
    return samples


def _require(samples: List[RawSample], min_samples: int) -> None:
    if len(samples) < min_samples:
        raise InsufficientDataError(
            f"{len(samples)} records read, at least {min_samples} are required"
        )


# ── Synthetic data ───────────────────────────────────────────────────

def generate_synthetic(
    duration: float = 40.0,
    fs: float = 50.0,
    walking_freq: Optional[float] = None,
    noise: float = 1.0,
    seed: Optional[int] = None,
) -> List[RawSample]:
    """Simulate a walking trial with quiet lead-in and lead-out.

    Between 5 s and ``duration - 5`` s the subject walks at full intensity;
    outside it the oscillation is scaled down to 20 %.  The vertical axis
    (``ay``) carries gravity plus one impact oscillation per step.

    Parameters
    ----------
    duration : float
        Trial length in seconds.
    fs : float
        Sampling rate in Hz.
    walking_freq : float, optional
        Step frequency in Hz.  Drawn uniformly in ``[1.6, 2.0)`` if omitted.
    noise : float
        Scale of the uniform noise (0 disables it).
    seed : int, optional
        Seed for :func:`numpy.random.default_rng`.

    Examples
    --------
    >>> samples = generate_synthetic(seed=42)
    >>> len(samples)
    2000
    """
    if fs <= 0:
        raise ValueError("fs must be strictly positive")
    if duration <= 0:
        raise ValueError("duration must be strictly positive")
    rng = np.random.default_rng(seed)
    if walking_freq is None:
        walking_freq = 1.6 + rng.random() * 0.4
    if walking_freq <= 0:
        raise ValueError("walking_freq must be strictly positive")

    n = int(round(duration * fs))
    t = np.arange(n) / fs
    intensity = np.where((t < 5) | (t > duration - 5), 0.2, 1.0)

    def jitter(width):
        return (rng.random(n) - 0.5) * width * noise

    w = 2 * math.pi * walking_freq
    ay = 9.8 + (2.5 * np.sin(w * t) + jitter(0.8)) * intensity
    ax = (0.6 * np.sin(0.5 * w * t) + jitter(0.5)) * intensity
    az = (1.2 * np.sin(w * t - math.pi / 3) + jitter(0.4)) * intensity
    logger.debug("Generated %d synthetic samples at %.2f Hz (step frequency %.3f Hz)",
                 n, fs, walking_freq)
    return [RawSample(float(t[i]), float(ax[i]), float(ay[i]), float(az[i])) for i in range(n)]
