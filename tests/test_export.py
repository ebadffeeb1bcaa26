"""Tests for tabular records and file export."""

from __future__ import annotations

import csv
import importlib.util
import json
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "python" / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from gaitlab import (
    analysis_payload, analyze, commentary_payload, cycle_records, export_analysis,
    normalize_formats, step_records, summary_record,
)
from gaitlab._export import CYCLE_COLUMNS, STEP_COLUMNS, SUMMARY_COLUMNS
from trial_builders import regular_events, regular_signal


def _result(**kwargs):
    return analyze(regular_events(21), regular_signal(), **kwargs)


class TestRecords(unittest.TestCase):
    def test_step_records(self):
        rows = step_records(_result())
        self.assertEqual(len(rows), 20)
        self.assertEqual(list(rows[0]), STEP_COLUMNS)
        self.assertEqual(rows[0]["side"], "Left")
        self.assertAlmostEqual(rows[0]["duration"], 0.5)

    def test_cycle_records(self):
        rows = cycle_records(_result())
        self.assertEqual(len(rows), 200)
        self.assertEqual(list(rows[0]), CYCLE_COLUMNS)
        self.assertEqual([r["percent"] for r in rows[:100]], list(range(100)))
        self.assertEqual({r["side"] for r in rows}, {"Left", "Right"})

    def test_functional_labels_are_projected(self):
        result = _result(label_mode="functional", dominant_side="Right")
        self.assertEqual(step_records(result)[0]["side"], "NonDominant")
        self.assertEqual(cycle_records(result)[0]["side"], "NonDominant")
        self.assertEqual(cycle_records(result)[100]["side"], "Dominant")
        self.assertEqual(analysis_payload(result)["meta"]["labels"],
                         {"sideA": "NonDominant", "sideB": "Dominant"})

    def test_summary_record(self):
        record = summary_record(_result())
        self.assertEqual(list(record), SUMMARY_COLUMNS)
        self.assertEqual(record["stride_count"], 10)

    def test_payload_is_json_serialisable(self):
        payload = analysis_payload(_result())
        decoded = json.loads(json.dumps(payload))
        self.assertEqual(decoded["meta"]["n_used_events"], 21)
        self.assertEqual(len(decoded["events"]), 21)


class TestCommentaryPayload(unittest.TestCase):
    def test_contents(self):
        result = _result()
        payload = commentary_payload(result.metrics, result.labels, subject_id="S01")
        self.assertEqual(payload["labels"], {"sideA": "Left", "sideB": "Right"})
        self.assertEqual(payload["metrics"]["cadence"], result.metrics.cadence)
        self.assertEqual(payload["subject_id"], "S01")
        self.assertNotIn("subject_id", commentary_payload(result.metrics, result.labels))

    def test_validation(self):
        result = _result()
        with self.assertRaises(TypeError):
            commentary_payload({"cadence": 1.0}, result.labels)
        with self.assertRaises(ValueError):
            commentary_payload(result.metrics, {"sideA": "Left"})


class TestExportAnalysis(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.prefix = Path(self.tmp.name) / "out" / "sub01_trial1"
        self.result = _result()

    def tearDown(self):
        self.tmp.cleanup()

    def test_json(self):
        written = export_analysis(self.result, self.prefix, ["json"])
        data = json.loads(Path(written["json"]).read_text(encoding="utf-8"))
        self.assertIn("metrics", data)

    def test_csv(self):
        written = export_analysis(self.result, self.prefix, "csv")
        self.assertEqual(set(written), {"csv_steps", "csv_cycles", "csv_summary"})
        with open(written["csv_steps"], newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        self.assertEqual(rows[0], STEP_COLUMNS)
        self.assertEqual(len(rows), 21)
        with open(written["csv_cycles"], newline="", encoding="utf-8") as f:
            self.assertEqual(len(list(csv.reader(f))), 201)

    @unittest.skipUnless(importlib.util.find_spec("openpyxl"), "openpyxl not installed")
    def test_xlsx(self):
        from openpyxl import load_workbook

        written = export_analysis(self.result, self.prefix, ["xlsx"])
        wb = load_workbook(written["xlsx"])
        self.assertEqual(wb.sheetnames, ["steps", "cycles", "summary"])
        self.assertEqual(wb["steps"].max_row, 21)

    def test_normalize_formats(self):
        self.assertEqual(normalize_formats("csv, JSON,csv"), ["csv", "json"])
        self.assertEqual(normalize_formats(["XLSX"]), ["xlsx"])
        with self.assertRaises(ValueError):
            normalize_formats([])

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            export_analysis(self.result, self.prefix, ["pdf"])

    def test_rejects_non_result(self):
        with self.assertRaises(ValueError):
            export_analysis({}, self.prefix)


if __name__ == "__main__":
    unittest.main()
