import io
import sys
import types
import unittest
from contextlib import redirect_stdout
from unittest import mock

from pitchscope.cli.main import build_parser, format_snapshot, format_tuning, main, resolve_device
from pitchscope.note_types import EngineSnapshot, PitchClass, TuningReadout


class TestFormatting(unittest.TestCase):
    def test_empty_snapshot(self):
        self.assertEqual(
            format_snapshot(EngineSnapshot()),
            "Notes: none yet | Chord: Unknown Chord | Tuner: no signal",
        )

    def test_populated_snapshot(self):
        snapshot = EngineSnapshot(
            confirmed_notes=(PitchClass.C, PitchClass.E, PitchClass.G),
            chord="C Major",
            tuning=TuningReadout(cents=-12.0, label="G3", is_in_tune=False),
        )
        self.assertEqual(
            format_snapshot(snapshot),
            "Notes: C, E, G | Chord: C Major | Tuner: G3 -12.0 cents (12.0 cents flat)",
        )

    def test_in_tune(self):
        readout = TuningReadout(cents=1.5, label="A2", is_in_tune=True)
        self.assertEqual(format_tuning(readout), "Tuner: A2 +1.5 cents (in tune)")


class TestParser(unittest.TestCase):
    def test_analyze_arguments(self):
        args = build_parser().parse_args(["analyze", "take.wav", "--ukulele", "--points", "50"])
        self.assertEqual(args.command, "analyze")
        self.assertEqual(args.file, "take.wav")
        self.assertTrue(args.ukulele)
        self.assertEqual(args.points, 50)

    def test_tune_defaults(self):
        args = build_parser().parse_args(["tune"])
        self.assertIsNone(args.device)
        self.assertEqual(args.duration, 15.0)
        self.assertFalse(args.ukulele)

    def test_no_command_prints_help(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main([]), 1)
        self.assertIn("usage", out.getvalue())


class TestResolveDevice(unittest.TestCase):
    def test_default_and_numeric(self):
        self.assertIsNone(resolve_device(None))
        self.assertEqual(resolve_device("3"), 3)

    def _fake_devices(self, result):
        module = types.ModuleType("pitchscope.audio.audio_device")
        module.find_input_device = mock.Mock(return_value=result)
        return mock.patch.dict(sys.modules, {"pitchscope.audio.audio_device": module})

    def test_name_fragment(self):
        with self._fake_devices((2, {"name": "Scarlett 2i2"})):
            self.assertEqual(resolve_device("scarlett"), 2)

    def test_unknown_name(self):
        with self._fake_devices((None, None)):
            with self.assertRaises(ValueError):
                resolve_device("theremin")


if __name__ == "__main__":
    unittest.main()
