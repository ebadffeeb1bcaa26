"""End-to-end tests of the analysis session."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "python" / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from gaitlab import (
    AnalysisConfig, GaitSession, InsufficientDataError, InsufficientEventsError,
    generate_synthetic,
)
from trial_builders import regular_signal


def _clean_session(**kwargs):
    return GaitSession.from_samples(generate_synthetic(walking_freq=1.8, noise=0.0), **kwargs)


class TestSyntheticWalk(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.session = _clean_session()
        cls.events = cls.session.detect_events()
        cls.result = cls.session.analyze()

    def test_detects_enough_events(self):
        self.assertGreaterEqual(len(self.events), 21)
        self.assertTrue(all(e.source_index >= 0 for e in self.events))
        self.assertIsNotNone(self.session.threshold)

    def test_step_time_matches_walking_frequency(self):
        self.assertAlmostEqual(self.result.metrics.mean_step_time, 1 / 1.8, delta=0.01)
        self.assertAlmostEqual(self.result.metrics.cadence, 108.0, delta=2.0)

    def test_symmetric_walk(self):
        self.assertGreater(self.result.metrics.symmetry_index, 95.0)
        self.assertLess(self.result.metrics.step_time_cv, 5.0)

    def test_shapes(self):
        self.assertEqual(len(self.result.steps), 20)
        self.assertEqual(len(self.result.used_events), 21)
        for key, curve in self.result.cycles.items():
            self.assertEqual(len(curve), 100, key)
        self.assertEqual(len(self.result.cycle("Left")), 100)

    def test_frames(self):
        self.assertEqual(len(self.result.steps_frame), 20)
        self.assertEqual(len(self.result.cycles_frame), 600)
        self.assertIn("Cadence", self.result.summary())


class TestSessionEditing(unittest.TestCase):
    def setUp(self):
        self.session = GaitSession(regular_signal(duration=12.0))
        for i in range(21):
            self.session.add_event(0.5 + i * 0.5, 1.0)

    def test_manual_events_are_labelled(self):
        events = self.session.events
        self.assertEqual(len(events), 21)
        self.assertEqual(events[0].side, "Left")
        self.assertEqual(events[0].source_index, -1)
        self.assertEqual(len({e.id for e in events}), 21)

    def test_analysis_of_manual_events(self):
        result = self.session.analyze()
        self.assertAlmostEqual(result.metrics.mean_step_time, 0.5)
        self.assertIs(self.session.result, result)

    def test_twenty_events_raise(self):
        self.session.remove_event(self.session.events[-1].id)
        with self.assertRaises(InsufficientEventsError):
            self.session.analyze()

    def test_removing_event_relabels_later_events(self):
        first, second = self.session.events[:2]
        self.session.remove_event(first.id)
        self.assertEqual(self.session.events[0].id, second.id)
        self.assertEqual(self.session.events[0].side, "Left")

    def test_inserted_event_relabels(self):
        event = self.session.add_event(0.75, 1.0)
        self.assertEqual(event.side, "Right")
        self.assertEqual(self.session.events[2].side, "Left")

    def test_toggle_start_side(self):
        self.session.set_start_with_left(False)
        self.assertEqual(self.session.events[0].side, "Right")
        self.assertFalse(self.session.start_with_left)

    def test_exclusion(self):
        ev = self.session.events[3]
        self.session.set_excluded(ev.id)
        self.assertTrue(next(e for e in self.session.events if e.id == ev.id).excluded)
        with self.assertRaises(InsufficientEventsError):
            self.session.analyze()
        self.session.set_excluded(ev.id, False)
        self.session.analyze()

    def test_unknown_event_id(self):
        with self.assertRaises(KeyError):
            self.session.remove_event(999)
        with self.assertRaises(KeyError):
            self.session.set_excluded(999)

    def test_every_edit_invalidates_result(self):
        edits = [
            lambda s: s.add_event(11.5, 1.0),
            lambda s: s.remove_event(s.events[-1].id),
            lambda s: s.set_excluded(s.events[0].id, False),
            lambda s: s.set_start_with_left(True),
            lambda s: s.set_labeling("functional", "Left"),
            lambda s: s.select(0.0, 12.0),
        ]
        for edit in edits:
            self.session.analyze()
            edit(self.session)
            self.assertIsNone(self.session.result)

    def test_functional_labels(self):
        self.session.set_labeling("functional", "Left")
        self.assertEqual(self.session.labels, {"sideA": "Dominant", "sideB": "NonDominant"})
        result = self.session.analyze()
        self.assertEqual(result.steps[0].side_label, "Dominant")
        self.assertEqual(result.steps[0].physical_side, "Left")

    def test_invalid_labelling(self):
        with self.assertRaises(ValueError):
            self.session.set_labeling("clinical")
        with self.assertRaises(ValueError):
            self.session.set_labeling("functional", "left")


class TestSelection(unittest.TestCase):
    def test_reversed_selection_is_sorted(self):
        session = _clean_session()
        session.select(30.0, 10.0)
        self.assertEqual(session.selection, (10.0, 30.0))
        events = session.detect_events()
        self.assertTrue(all(10.0 <= e.time <= 30.0 for e in events))

    def test_source_index_refers_to_recording(self):
        session = _clean_session()
        session.select(10.0, 30.0)
        for e in session.detect_events():
            self.assertEqual(session.signal.time[e.source_index], e.time)

    def test_tiny_selection_raises(self):
        session = _clean_session()
        session.select(10.0, 10.1)
        with self.assertRaises(InsufficientDataError):
            session.detect_events()

    def test_redetection_keeps_ids_unique(self):
        session = _clean_session()
        first = session.detect_events()
        second = session.detect_events()
        self.assertFalse({e.id for e in first} & {e.id for e in second})
        added = session.add_event(0.3, 10.0)
        self.assertNotIn(added.id, {e.id for e in second})


class TestCommentary(unittest.TestCase):
    def setUp(self):
        self.session = GaitSession(regular_signal(duration=12.0))
        for i in range(21):
            self.session.add_event(0.5 + i * 0.5, 1.0)
        self.calls = []

    def _generator(self, payload):
        self.calls.append(payload)
        return f"cadence {payload['metrics']['cadence']:.0f}"

    def test_requires_result(self):
        with self.assertRaises(RuntimeError):
            self.session.commentary(self._generator)

    def test_generator_called_once_per_result(self):
        self.session.analyze()
        self.assertEqual(self.session.commentary(self._generator), "cadence 120")
        self.assertEqual(self.session.commentary(self._generator), "cadence 120")
        self.assertEqual(len(self.calls), 1)
        self.assertEqual(self.calls[0]["labels"], {"sideA": "Left", "sideB": "Right"})

        self.session.analyze()
        self.session.commentary(self._generator, subject_id="S01")
        self.assertEqual(len(self.calls), 2)
        self.assertEqual(self.calls[1]["subject_id"], "S01")

    def test_generator_failure_propagates(self):
        self.session.analyze()

        def broken(payload):
            raise ConnectionError("service unavailable")

        with self.assertRaises(ConnectionError):
            self.session.commentary(broken)
        metrics = self.session.result.metrics
        self.assertEqual(self.session.commentary(self._generator), "cadence 120")
        self.assertIs(self.session.result.metrics, metrics)


class TestConstructors(unittest.TestCase):
    def test_synthetic_constructor(self):
        session = GaitSession.synthetic(seed=3)
        self.assertEqual(len(session.signal), 2000)
        self.assertEqual(session.selection, (0.0, session.signal.time[-1]))

    def test_config_cutoff_is_used(self):
        samples = generate_synthetic(seed=3)
        a = GaitSession.from_samples(samples, AnalysisConfig(cutoff_hz=3.0))
        b = GaitSession.from_samples(samples)
        self.assertNotEqual(list(a.signal.ay_filtered), list(b.signal.ay_filtered))

    def test_invalid_dominant_side(self):
        with self.assertRaises(ValueError):
            GaitSession(regular_signal(), dominant_side="Up")


if __name__ == "__main__":
    unittest.main()
