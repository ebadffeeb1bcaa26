"""
Aggregation of saved-trial summaries into group tables.
"""

from typing import List, Optional

import pandas as pd

_METRIC_COLUMNS = [
    "cadence",
    "mean_step_time",
    "stride_time",
    "step_time_cv",
    "symmetry_index",
    "rms_symmetry_y",
    "rms_total",
    "rms_x",
    "rms_y",
    "rms_z",
]


def compute_summary_table(df: pd.DataFrame,
                          group_cols: Optional[List[str]] = None) -> pd.DataFrame:
    """Aggregate per-trial summary rows into a group table.

    Parameters
    ----------
    df : DataFrame
        One row per trial with ``subject_id``, ``condition``, ``trial`` and
        metric columns (see :meth:`gaitlab.TrialHistory.summary_frame`).
    group_cols : list of str or None
        Columns to group by (default: ``['subject_id', 'condition']``).

    Returns
    -------
    DataFrame
        Mean of each metric per group plus ``n_trials``.
    """
    if group_cols is None:
        group_cols = ["subject_id", "condition"]
    missing = [c for c in group_cols if c not in df.columns]
    if missing:
        raise ValueError(f"Unknown group column(s): {missing}")

    agg_dict = {k: "mean" for k in _METRIC_COLUMNS if k in df.columns}
    if "trial" in df.columns:
        agg_dict["trial"] = "count"

    summary = df.groupby(group_cols).agg(agg_dict).round(4)
    if "trial" in summary.columns:
        summary = summary.rename(columns={"trial": "n_trials"})

    return summary.sort_index()
