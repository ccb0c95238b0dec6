"""Recording sessions: audio provider -> pitch tracker -> pitch engine."""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..audio.file_input import WavFileAudioProvider
from ..core.engine import PitchEngine
from ..core.interfaces import IAudioProvider, IPitchTracker
from ..logger import get_logger
from ..note_types import EngineSnapshot

logger = get_logger(__name__)


class LiveSessionService:
    """Runs one recording session at a time.

    Audio chunks from the provider go through the pitch tracker into
    engine.ingest(); the chunks are also kept so that stop() can hand the
    whole take to engine.finish_recording().
    """

    def __init__(
        self,
        audio_provider: IAudioProvider,
        pitch_tracker: IPitchTracker,
        engine: PitchEngine,
    ) -> None:
        self._audio_provider = audio_provider
        self._pitch_tracker = pitch_tracker
        self._engine = engine
        self._recorded: List[np.ndarray] = []
        self._running = False

    @property
    def engine(self) -> PitchEngine:
        return self._engine

    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start a new session and begin streaming audio."""
        if self._running:
            logger.warning("Session already running")
            return

        self._recorded = []
        self._pitch_tracker.reset()
        self._engine.start_session()
        self._running = True
        try:
            self._audio_provider.start(self._process_audio)
        except Exception as e:
            logger.error(f"Failed to start audio input: {e}")
            self._running = False
            self._engine.stop_session()
            raise
        logger.info("Recording session started")

    def stop(self) -> EngineSnapshot:
        """Stop streaming, end the session and build the waveform.

        Returns:
            The engine snapshot after the waveform was published
        """
        if not self._running:
            return self._engine.snapshot

        self._running = False
        self._audio_provider.stop()
        self._engine.stop_session()
        self._engine.finish_recording(self.recording())
        logger.info("Recording session stopped")
        return self._engine.snapshot

    def recording(self) -> np.ndarray:
        """Everything captured since the last start(), as one mono buffer."""
        if not self._recorded:
            return np.zeros(0, dtype=np.float32)
        return np.concatenate(self._recorded)

    def _process_audio(self, audio_data: np.ndarray, timestamp: float) -> None:
        if not self._running:
            return
        self._recorded.append(audio_data)

        hop_seconds = self._pitch_tracker.hop_size / self._audio_provider.sample_rate
        estimates = self._pitch_tracker.process(audio_data)
        # Frames in one chunk are hop_seconds apart, the last one at timestamp
        first = timestamp - hop_seconds * (len(estimates) - 1)
        for index, (frequency, amplitude) in enumerate(estimates):
            self._engine.ingest(frequency, amplitude, first + index * hop_seconds)


def analyze_recording(
    file_path: str,
    engine: PitchEngine,
    pitch_tracker: IPitchTracker,
    chunk_size: Optional[int] = None,
) -> EngineSnapshot:
    """Run a complete session over a recorded file, as fast as it can be read.

    Sample timestamps come from the position in the file, so debouncing
    behaves as it would have live.

    Returns:
        The final engine snapshot, including the waveform

    Raises:
        ValueError: If the tracker was built for a different sample rate than the file
    """
    provider = WavFileAudioProvider(
        file_path, chunk_size=chunk_size or pitch_tracker.hop_size, realtime=False
    )
    tracker_rate = getattr(pitch_tracker, "sample_rate", provider.sample_rate)
    if tracker_rate != provider.sample_rate:
        raise ValueError(
            f"Pitch tracker runs at {tracker_rate}Hz but {file_path} is {provider.sample_rate}Hz"
        )

    hop_seconds = pitch_tracker.hop_size / provider.sample_rate
    recorded: List[np.ndarray] = []

    pitch_tracker.reset()
    engine.start_session()
    frame = 0
    for chunk, _position in provider.chunks():
        recorded.append(chunk)
        for frequency, amplitude in pitch_tracker.process(chunk):
            frame += 1
            engine.ingest(frequency, amplitude, frame * hop_seconds)
    engine.stop_session()

    samples = np.concatenate(recorded) if recorded else np.zeros(0, dtype=np.float32)
    engine.finish_recording(samples)
    logger.info(f"Analyzed {file_path}: {len(samples)} samples, {frame} pitch frames")
    return engine.snapshot
