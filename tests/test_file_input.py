import os
import tempfile
import unittest

import numpy as np
import soundfile as sf

from pitchscope.audio.file_input import WavFileAudioProvider, load_recording, sample_rate_of
from pitchscope.core.engine import PitchEngine
from pitchscope.core.interfaces import IAudioProvider, IPitchTracker
from pitchscope.note_types import PitchClass
from pitchscope.services.session_service import LiveSessionService, analyze_recording

SAMPLE_RATE = 8000


def sine(frequency, seconds, amplitude=0.5, sample_rate=SAMPLE_RATE):
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


class FakeTracker(IPitchTracker):
    """Reports a fixed pitch for every hop that is not silent."""

    def __init__(self, frequency=440.0, hop_size=400, sample_rate=SAMPLE_RATE):
        self.frequency = frequency
        self._hop_size = hop_size
        self.sample_rate = sample_rate
        self._pending = np.zeros(0, dtype=np.float32)
        self.resets = 0

    @property
    def hop_size(self):
        return self._hop_size

    def process(self, audio_data):
        data = np.concatenate([self._pending, np.asarray(audio_data, dtype=np.float32)])
        estimates = []
        usable = data.size - data.size % self._hop_size
        for start in range(0, usable, self._hop_size):
            frame = data[start : start + self._hop_size]
            rms = float(np.sqrt(np.mean(frame**2)))
            estimates.append((self.frequency if rms > 0 else 0.0, rms))
        self._pending = data[usable:]
        return estimates

    def reset(self):
        self._pending = np.zeros(0, dtype=np.float32)
        self.resets += 1


class FakeProvider(IAudioProvider):
    def __init__(self, fail=False):
        self.callback = None
        self.fail = fail
        self.stopped = False

    def start(self, on_data_callback):
        if self.fail:
            raise OSError("no input device")
        self.callback = on_data_callback

    def stop(self):
        self.stopped = True

    @property
    def sample_rate(self):
        return SAMPLE_RATE

    @property
    def is_running(self):
        return self.callback is not None and not self.stopped

    def push(self, chunk, timestamp):
        self.callback(chunk, timestamp)


class SoundFileTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name, data, sample_rate=SAMPLE_RATE):
        path = os.path.join(self._tmp.name, name)
        sf.write(path, data, sample_rate)
        return path


class TestFileInput(SoundFileTestCase):
    def test_load_recording_uses_first_channel(self):
        left = sine(440.0, 0.1)
        stereo = np.stack([left, np.zeros_like(left)], axis=1)
        samples, sample_rate = load_recording(self.write("stereo.wav", stereo))
        self.assertEqual(sample_rate, SAMPLE_RATE)
        self.assertEqual(samples.dtype, np.float32)
        self.assertEqual(samples.shape, (800,))
        np.testing.assert_allclose(samples, left, atol=1e-3)

    def test_sample_rate_of(self):
        path = self.write("rate.wav", sine(440.0, 0.1, sample_rate=22050), 22050)
        self.assertEqual(sample_rate_of(path), 22050)

    def test_chunks_cover_the_file(self):
        provider = WavFileAudioProvider(self.write("chunks.wav", sine(440.0, 0.25)), chunk_size=400)
        chunks = list(provider.chunks())
        self.assertEqual(len(chunks), 5)
        self.assertEqual([position for _chunk, position in chunks], [0.0, 0.05, 0.1, 0.15, 0.2])
        self.assertEqual(sum(chunk.size for chunk, _ in chunks), 2000)

    def test_gain(self):
        data = sine(440.0, 0.05)
        provider = WavFileAudioProvider(self.write("gain.wav", data), chunk_size=400, gain=0.5)
        (chunk, _position), = list(provider.chunks())
        np.testing.assert_allclose(chunk, data * 0.5, atol=1e-3)

    def test_streaming_thread_delivers_every_chunk(self):
        provider = WavFileAudioProvider(
            self.write("stream.wav", sine(440.0, 0.1)), chunk_size=200, realtime=False
        )
        received = []
        provider.start(lambda chunk, timestamp: received.append((chunk.size, timestamp)))
        provider.wait(timeout=5)
        provider.stop()
        self.assertFalse(provider.is_running)
        self.assertEqual([size for size, _ in received], [200, 200, 200, 200])
        self.assertEqual(received[-1][1], 0.075)


class TestAnalyzeRecording(SoundFileTestCase):
    def test_sustained_note(self):
        path = self.write("a440.wav", sine(440.0, 1.0))
        tracker = FakeTracker()
        engine = PitchEngine()

        snapshot = analyze_recording(path, engine, tracker)

        self.assertEqual(tracker.resets, 1)
        self.assertFalse(snapshot.is_listening)
        self.assertEqual(snapshot.confirmed_notes, (PitchClass.A,))
        self.assertEqual(snapshot.chord, "Unknown Chord")
        self.assertEqual(snapshot.tuning.label, "E4")
        self.assertEqual(snapshot.waveform.size, 100)
        self.assertAlmostEqual(float(snapshot.waveform.max()), 1.0, places=5)

    def test_silent_recording(self):
        path = self.write("silence.wav", np.zeros(SAMPLE_RATE, dtype=np.float32))
        snapshot = analyze_recording(path, PitchEngine(), FakeTracker())
        self.assertEqual(snapshot.confirmed_notes, ())
        self.assertIsNone(snapshot.tuning)
        self.assertFalse(snapshot.waveform.any())

    def test_sample_rate_mismatch(self):
        path = self.write("mismatch.wav", sine(440.0, 0.1))
        with self.assertRaises(ValueError):
            analyze_recording(path, PitchEngine(), FakeTracker(sample_rate=44100))


class TestLiveSessionService(unittest.TestCase):
    def setUp(self):
        self.provider = FakeProvider()
        self.engine = PitchEngine()
        self.service = LiveSessionService(self.provider, FakeTracker(), self.engine)

    def test_session(self):
        self.service.start()
        self.assertTrue(self.service.is_running())
        self.assertTrue(self.engine.is_listening)

        # Two hops per chunk: estimates land at t - 0.05 and t
        for t in (1.0, 2.0, 3.0):
            self.provider.push(sine(440.0, 0.1), t)
        self.assertEqual(self.engine.snapshot.confirmed_notes, (PitchClass.A,))

        snapshot = self.service.stop()
        self.assertTrue(self.provider.stopped)
        self.assertFalse(snapshot.is_listening)
        self.assertEqual(snapshot.confirmed_notes, (PitchClass.A,))
        self.assertEqual(snapshot.waveform.size, 100)
        self.assertEqual(self.service.recording().size, 2400)

    def test_chunks_after_stop_are_ignored(self):
        self.service.start()
        self.service.stop()
        self.provider.push(sine(440.0, 0.1), 1.0)
        self.assertEqual(self.service.recording().size, 0)

    def test_stop_without_start(self):
        self.assertIs(self.service.stop(), self.engine.snapshot)

    def test_failed_start_leaves_engine_idle(self):
        service = LiveSessionService(FakeProvider(fail=True), FakeTracker(), self.engine)
        with self.assertRaises(OSError):
            service.start()
        self.assertFalse(service.is_running())
        self.assertFalse(self.engine.is_listening)


if __name__ == "__main__":
    unittest.main()
