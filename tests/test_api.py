"""Tests for gaitlab public API."""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "python" / "src"))

import unittest
import gaitlab


class TestPublicNames(unittest.TestCase):
    def test_all_names_resolve(self):
        for name in gaitlab.__all__:
            self.assertTrue(hasattr(gaitlab, name), name)

    def test_version(self):
        self.assertEqual(gaitlab.__version__, "1.0.0")

    def test_errors_are_value_errors(self):
        self.assertTrue(issubclass(gaitlab.InsufficientDataError, ValueError))
        self.assertTrue(issubclass(gaitlab.InsufficientEventsError, ValueError))


class TestPipeline(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        samples = gaitlab.generate_synthetic(walking_freq=1.8, noise=0.0)
        cls.signal = gaitlab.condition_samples(samples)
        cls.events = gaitlab.detect_events(cls.signal)

    def test_events_alternate(self):
        sides = [e.side for e in self.events]
        self.assertEqual(sides[0], "Left")
        self.assertTrue(all(a != b for a, b in zip(sides, sides[1:])))

    def test_window_restricts_detection(self):
        events = gaitlab.detect_events(self.signal, window=(20.0, 10.0), start_with_left=False)
        self.assertTrue(all(10.0 <= e.time <= 20.0 for e in events))
        self.assertEqual(events[0].side, "Right")

    def test_analyze(self):
        result = gaitlab.analyze(self.events, self.signal)
        self.assertIsInstance(result, gaitlab.AnalysisResult)
        self.assertIsInstance(result.metrics, gaitlab.GaitMetrics)
        self.assertIn("cadence", repr(result))

    def test_analyze_rejects_bad_label_mode(self):
        with self.assertRaises(ValueError):
            gaitlab.analyze(self.events, self.signal, label_mode="clinical")

    def test_display_labels(self):
        self.assertEqual(gaitlab.display_label("Left"), "Left")
        self.assertEqual(gaitlab.display_label("Left", "functional", "Left"), "Dominant")
        self.assertEqual(gaitlab.side_labels("functional", "Right"),
                         {"sideA": "NonDominant", "sideB": "Dominant"})


class TestConfig(unittest.TestCase):
    def test_defaults(self):
        config = gaitlab.AnalysisConfig()
        self.assertEqual(config.cutoff_hz, 10.0)
        self.assertEqual(config.analysis_window_size, 21)
        self.assertEqual(config.cycle_points, 100)
        self.assertEqual(config.stride_count, 10)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            gaitlab.AnalysisConfig(cutoff_hz=0)
        with self.assertRaises(ValueError):
            gaitlab.AnalysisConfig(min_samples=1)
        with self.assertRaises(ValueError):
            gaitlab.AnalysisConfig(threshold_k=-0.1)

    def test_window_size_controls_analysis(self):
        config = gaitlab.AnalysisConfig(analysis_window_size=11)
        signal = gaitlab.condition_samples(gaitlab.generate_synthetic(walking_freq=1.8, noise=0.0))
        events = gaitlab.detect_events(signal, config=config)
        result = gaitlab.analyze(events, signal, config=config)
        self.assertEqual(len(result.steps), 10)
        self.assertEqual(len(result.used_events), 11)


if __name__ == "__main__":
    unittest.main()
