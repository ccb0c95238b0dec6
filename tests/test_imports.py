"""Import checks for the modules that do not need an audio device."""

import importlib
import unittest

MODULES = [
    "pitchscope",
    "pitchscope.errors",
    "pitchscope.note_types",
    "pitchscope.note_utils",
    "pitchscope.logger",
    "pitchscope.logging_config",
    "pitchscope.detection",
    "pitchscope.detection.tuner",
    "pitchscope.detection.note_accumulator",
    "pitchscope.detection.chords",
    "pitchscope.detection.waveform",
    "pitchscope.core",
    "pitchscope.core.config",
    "pitchscope.core.engine",
    "pitchscope.core.events",
    "pitchscope.core.factory",
    "pitchscope.core.interfaces",
    "pitchscope.audio.file_input",
    "pitchscope.services",
    "pitchscope.cli.main",
]


class TestImports(unittest.TestCase):
    def test_modules_import(self):
        for name in MODULES:
            with self.subTest(module=name):
                self.assertIsNotNone(importlib.import_module(name))

    def test_package_exports(self):
        import pitchscope

        for name in ("PitchEngine", "NoteAccumulator", "TunerMatcher", "ChordIdentifier",
                     "WaveformReducer", "GUITAR_TUNING", "UKULELE_TUNING", "name_of"):
            self.assertTrue(hasattr(pitchscope, name), name)


if __name__ == "__main__":
    unittest.main()
