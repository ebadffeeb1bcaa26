"""
Gait Event Detectors Module.

Heel-strike detection on the conditioned vertical acceleration and the
alternating side assignment applied to its output.
"""

from .peak_detector import (
    ACCEPT,
    KEEP_EXISTING,
    REPLACE,
    PeakDecision,
    PeakDetector,
    adaptive_threshold,
    detect_peaks,
    detect_peaks_with_decisions,
)
from .side_assignment import assign_sides

__all__ = [
    "ACCEPT", "KEEP_EXISTING", "REPLACE",
    "PeakDecision", "PeakDetector",
    "adaptive_threshold", "detect_peaks", "detect_peaks_with_decisions",
    "assign_sides",
]
