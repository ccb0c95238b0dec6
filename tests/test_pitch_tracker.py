import unittest

import numpy as np
import pytest

aubio = pytest.importorskip("aubio")

from pitchscope.audio.pitch_tracker import AubioPitchTracker  # noqa: E402

SAMPLE_RATE = 44100


def sine(frequency, seconds, amplitude=0.5):
    t = np.arange(int(seconds * SAMPLE_RATE)) / SAMPLE_RATE
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


class TestAubioPitchTracker(unittest.TestCase):
    def setUp(self):
        self.tracker = AubioPitchTracker(sample_rate=SAMPLE_RATE)

    def test_detects_a440(self):
        estimates = self.tracker.process(sine(440.0, 1.0))
        self.assertEqual(len(estimates), SAMPLE_RATE // 512)
        for frequency, amplitude in estimates[-10:]:
            self.assertAlmostEqual(frequency, 440.0, delta=2.0)
            self.assertAlmostEqual(amplitude, 0.5 / np.sqrt(2), delta=0.02)

    def test_detects_low_e(self):
        estimates = self.tracker.process(sine(82.41, 1.0))
        frequency, _amplitude = estimates[-1]
        self.assertAlmostEqual(frequency, 82.41, delta=1.5)

    def test_silence_has_no_pitch(self):
        estimates = self.tracker.process(np.zeros(4096, dtype=np.float32))
        self.assertEqual(estimates, [(0.0, 0.0)] * 8)

    def test_partial_frames_are_buffered(self):
        self.assertEqual(self.tracker.process(sine(440.0, 300 / SAMPLE_RATE)), [])
        self.assertEqual(len(self.tracker.process(sine(440.0, 300 / SAMPLE_RATE))), 1)

    def test_reset_drops_buffered_audio(self):
        self.tracker.process(np.zeros(300, dtype=np.float32))
        self.tracker.reset()
        self.assertEqual(self.tracker.process(np.zeros(300, dtype=np.float32)), [])

    def test_invalid_sizes(self):
        with self.assertRaises(ValueError):
            AubioPitchTracker(hop_size=0)
        with self.assertRaises(ValueError):
            AubioPitchTracker(win_size=256, hop_size=512)


if __name__ == "__main__":
    unittest.main()
