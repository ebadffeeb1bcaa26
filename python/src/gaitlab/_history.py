"""In-memory history of finalized trials and their aggregated tables."""

from __future__ import annotations

import itertools
import re
import time as _time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ._export import cycle_records, step_records, summary_record
from ._types import AnalysisResult

_TRIAL_NUMBER = re.compile(r"\d+")


def next_trial_name(trial: str) -> str:
    """Increment the first number in *trial* (``'Trial1'`` -> ``'Trial2'``).

    Names without a number are returned unchanged.
    """
    match = _TRIAL_NUMBER.search(trial)
    if match is None:
        return trial
    return trial[:match.start()] + str(int(match.group()) + 1) + trial[match.end():]


@dataclass(frozen=True, eq=False)
class SavedTrial:
    """A finalized analysis with its session identifiers."""
    id: str
    subject_id: str
    condition: str
    trial: str
    result: AnalysisResult
    timestamp: float = field(default_factory=_time.time)

    @property
    def label_mode(self) -> str:
        return self.result.label_mode

    @property
    def dominant_side(self) -> str:
        return self.result.dominant_side

    def _keys(self) -> Dict[str, Any]:
        return {"subject_id": self.subject_id, "condition": self.condition, "trial": self.trial}


class TrialHistory:
    """Ordered collection of saved trials.

    Saved results are never modified; removing or clearing only drops
    references.
    """

    def __init__(self):
        self._trials: List[SavedTrial] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._trials)

    def __iter__(self):
        return iter(list(self._trials))

    def save(self, result: AnalysisResult, subject_id: str, condition: str,
             trial: str, timestamp: Optional[float] = None) -> SavedTrial:
        if not isinstance(result, AnalysisResult):
            raise ValueError("result must be an AnalysisResult")
        for name, value in (("subject_id", subject_id), ("condition", condition), ("trial", trial)):
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{name} must be a non-empty string")
        saved = SavedTrial(
            id=str(next(self._ids)),
            subject_id=subject_id,
            condition=condition,
            trial=trial,
            result=result,
            timestamp=_time.time() if timestamp is None else timestamp,
        )
        self._trials.append(saved)
        return saved

    def remove(self, trial_id: str) -> None:
        before = len(self._trials)
        self._trials = [t for t in self._trials if t.id != trial_id]
        if len(self._trials) == before:
            raise KeyError(f"No saved trial with id {trial_id!r}")

    def clear(self) -> None:
        self._trials = []

    # ── aggregated tables ────────────────────────────────────────

    def summary_rows(self) -> List[Dict[str, Any]]:
        return [{**t._keys(), "timestamp": t.timestamp, **summary_record(t.result)}
                for t in self._trials]

    def step_rows(self) -> List[Dict[str, Any]]:
        return [{**t._keys(), **row} for t in self._trials for row in step_records(t.result)]

    def cycle_rows(self) -> List[Dict[str, Any]]:
        return [{**t._keys(), **row} for t in self._trials for row in cycle_records(t.result)]

    def summary_frame(self):
        """One row per saved trial as a pandas DataFrame."""
        import pandas as pd
        return pd.DataFrame(self.summary_rows())

    def steps_frame(self):
        import pandas as pd
        return pd.DataFrame(self.step_rows())
