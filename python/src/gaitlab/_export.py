"""Tabular export of analysis results.

Records are plain dictionaries so downstream writers (CSV, spreadsheets,
databases) can consume them directly.  :func:`export_analysis` writes the
common file formats.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ._types import AXES, SIDES, AnalysisResult, display_label

STEP_COLUMNS = ["step_number", "side", "duration", "rms_x", "rms_y", "rms_z", "cadence"]
CYCLE_COLUMNS = ["side", "percent", "acc_x_mean", "acc_y_mean", "acc_z_mean"]
SUMMARY_COLUMNS = [
    "cadence", "mean_step_time", "stride_time", "step_time_cv", "symmetry_index",
    "rms_symmetry_y", "rms_total", "rms_x", "rms_y", "rms_z", "stride_count",
]


def step_records(result: AnalysisResult) -> List[Dict[str, Any]]:
    """One record per step interval, side shown with the display label."""
    return [
        {
            "step_number": s.step_number,
            "side": s.side_label,
            "duration": s.duration,
            "rms_x": s.rms_x,
            "rms_y": s.rms_y,
            "rms_z": s.rms_z,
            "cadence": s.cadence,
        }
        for s in result.steps
    ]


def cycle_records(result: AnalysisResult) -> List[Dict[str, Any]]:
    """One record per side and percent point with the mean of each axis."""
    rows = []
    for side in SIDES:
        label = display_label(side, result.label_mode, result.dominant_side)
        curves = {axis: result.cycle(side, axis) for axis in AXES}
        for i, point in enumerate(curves["y"]):
            rows.append({
                "side": label,
                "percent": point.percent,
                "acc_x_mean": curves["x"][i].mean,
                "acc_y_mean": curves["y"][i].mean,
                "acc_z_mean": curves["z"][i].mean,
            })
    return rows


def summary_record(result: AnalysisResult) -> Dict[str, Any]:
    metrics = result.metrics.as_dict()
    return {k: metrics[k] for k in SUMMARY_COLUMNS}


def analysis_payload(result: AnalysisResult) -> Dict[str, Any]:
    """JSON-ready representation of a result."""
    return {
        "meta": {
            "label_mode": result.label_mode,
            "dominant_side": result.dominant_side,
            "labels": result.labels,
            "n_used_events": len(result.used_events),
            "stride_windows": dict(result.stride_windows),
        },
        "metrics": result.metrics.as_dict(),
        "steps": step_records(result),
        "cycles": cycle_records(result),
        "events": [
            {
                "id": e.id,
                "time": e.time,
                "value": e.value,
                "source_index": e.source_index,
                "side": e.side,
            }
            for e in result.used_events
        ],
    }


# ── Writers ──────────────────────────────────────────────────────────

EXPORT_FORMATS = ("json", "csv", "xlsx")

_TABLES = (
    ("steps", STEP_COLUMNS),
    ("cycles", CYCLE_COLUMNS),
    ("summary", SUMMARY_COLUMNS),
)


def normalize_formats(formats: str | Iterable[str]) -> List[str]:
    """Lower-cased, de-duplicated export formats in request order.

    A string is split on commas, so ``"csv, JSON"`` and ``["csv", "json"]``
    are equivalent.
    """
    if isinstance(formats, str):
        formats = formats.split(",")
    requested = [str(f).strip().lower() for f in formats]
    requested = [f for f in requested if f]
    if not requested:
        raise ValueError("formats must not be empty")
    bad = sorted(set(requested) - set(EXPORT_FORMATS))
    if bad:
        raise ValueError(f"Unsupported export format(s) {bad}; choose from {list(EXPORT_FORMATS)}")
    return list(dict.fromkeys(requested))


def _tables(result: AnalysisResult) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "steps": step_records(result),
        "cycles": cycle_records(result),
        "summary": [summary_record(result)],
    }


def _write_json(result: AnalysisResult, prefix: Path) -> Dict[str, str]:
    path = prefix.with_suffix(".json")
    path.write_text(json.dumps(analysis_payload(result), ensure_ascii=False, indent=2),
                    encoding="utf-8")
    return {"json": str(path)}


def _write_csv(result: AnalysisResult, prefix: Path) -> Dict[str, str]:
    tables = _tables(result)
    written = {}
    for name, columns in _TABLES:
        path = prefix.with_name(f"{prefix.name}_{name}.csv")
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(tables[name])
        written[f"csv_{name}"] = str(path)
    return written


def _write_xlsx(result: AnalysisResult, prefix: Path) -> Dict[str, str]:
    try:
        from openpyxl import Workbook
    except ImportError as exc:
        raise RuntimeError("openpyxl is required for xlsx export") from exc
    tables = _tables(result)
    workbook = Workbook()
    workbook.remove(workbook.active)
    for name, columns in _TABLES:
        sheet = workbook.create_sheet(name)
        sheet.append(columns)
        for row in tables[name]:
            sheet.append([row.get(c) for c in columns])
    path = prefix.with_suffix(".xlsx")
    workbook.save(path)
    return {"xlsx": str(path)}


_WRITERS = {"json": _write_json, "csv": _write_csv, "xlsx": _write_xlsx}


def export_analysis(
    result: AnalysisResult,
    output_prefix: str | Path,
    formats: str | Iterable[str] = ("json",),
) -> Dict[str, str]:
    """Write an analysis result next to *output_prefix*.

    ``json`` writes ``<prefix>.json`` with :func:`analysis_payload`.
    ``csv`` writes ``<prefix>_steps.csv``, ``<prefix>_cycles.csv`` and
    ``<prefix>_summary.csv``.  ``xlsx`` writes ``<prefix>.xlsx`` with one
    sheet per table and needs openpyxl.

    Returns
    -------
    dict
        Written file paths keyed by output kind (``json``, ``csv_steps``,
        ``csv_cycles``, ``csv_summary``, ``xlsx``).
    """
    if not isinstance(result, AnalysisResult):
        raise ValueError("result must be an AnalysisResult")
    wanted = normalize_formats(formats)
    prefix = Path(output_prefix)
    prefix.parent.mkdir(parents=True, exist_ok=True)
    written: Dict[str, str] = {}
    for fmt in wanted:
        written.update(_WRITERS[fmt](result, prefix))
    return written
