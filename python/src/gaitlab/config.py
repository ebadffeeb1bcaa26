"""Configuration settings for the gait analysis pipeline."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisConfig:
    """Tunable constants of the analysis pipeline."""

    cutoff_hz: float = 10.0  # Low-pass cutoff applied to every axis
    threshold_k: float = 0.7  # Peak threshold = mean + k * std
    min_step_time: float = 0.35  # s, physiological minimum step interval
    min_samples: int = 10  # Minimum samples for ingestion and segments
    analysis_window_size: int = 21  # Events per analysis (20 steps)
    cycle_points: int = 100  # Percent-of-cycle grid size
    min_stride_samples: int = 6  # Stride windows below this are dropped
    cadence_duration_floor: float = 0.5  # s, floor for per-step cadence
    symmetry_epsilon: float = 1e-4  # Guard for zero-sum symmetry ratios
    rms_fallback: float = 0.1  # Per-side RMS when a side has no steps
    stride_count: int = 10  # Reported stride pairs for a 21-event window
    cycle_spread: bool = False  # Compute cross-window std per percent point

    def __post_init__(self):
        for name in ("cutoff_hz", "min_step_time", "cadence_duration_floor"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be strictly positive")
        if self.threshold_k < 0:
            raise ValueError("threshold_k must be >= 0")
        if self.symmetry_epsilon < 0:
            raise ValueError("symmetry_epsilon must be >= 0")
        if self.min_samples < 2:
            raise ValueError("min_samples must be at least 2")
        if self.analysis_window_size < 3:
            raise ValueError("analysis_window_size must be at least 3")
        if self.cycle_points < 2:
            raise ValueError("cycle_points must be at least 2")
        if self.min_stride_samples < 2:
            raise ValueError("min_stride_samples must be at least 2")

    def min_peak_distance(self, fs: float) -> int:
        """Refractory distance in samples for sampling rate *fs*."""
        if fs <= 0:
            raise ValueError("fs must be strictly positive")
        # Half-up rounding, 0.35 s at 50 Hz gives 18 samples.
        return int(math.floor(self.min_step_time * fs + 0.5))

