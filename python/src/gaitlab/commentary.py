"""Input contract for external narrative-commentary services.

gaitlab does not generate text.  A caller-supplied generator receives the
payload built here and its output is never fed back into the numbers.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ._types import GaitMetrics


def commentary_payload(
    metrics: GaitMetrics,
    labels: Mapping[str, str],
    subject_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Metrics plus the active side-label pair, as plain JSON-ready data."""
    if not isinstance(metrics, GaitMetrics):
        raise TypeError("metrics must be a GaitMetrics instance")
    missing = [k for k in ("sideA", "sideB") if k not in labels]
    if missing:
        raise ValueError(f"labels is missing key(s) {missing}")
    payload = {
        "metrics": metrics.as_dict(),
        "labels": {"sideA": labels["sideA"], "sideB": labels["sideB"]},
    }
    if subject_id is not None:
        payload["subject_id"] = str(subject_id)
    return payload
