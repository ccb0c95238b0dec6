"""The pitch engine: session control and published state for the host UI."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Optional

from ..detection.chords import ChordIdentifier
from ..detection.note_accumulator import NoteAccumulator
from ..detection.tuner import TunerMatcher, tuning_for
from ..detection.waveform import Samples, WaveformReducer
from ..logger import get_logger
from ..note_types import EngineSnapshot, PitchSample
from .events import EngineEventType, EngineEvents

logger = get_logger(__name__)


class PitchEngine:
    """Facade over the note accumulator, tuner, chord identifier and waveform reducer.

    The audio front end calls ingest() once per analysis frame and
    finish_recording() once per recording. The host reads ``snapshot`` or
    subscribes through ``events``; every published snapshot is a new frozen
    object, so readers never see a half-updated state.
    """

    DEFAULT_REFERENCE_TONE_INTERVAL = 5.0

    def __init__(
        self,
        accumulator: Optional[NoteAccumulator] = None,
        tuner: Optional[TunerMatcher] = None,
        chord_identifier: Optional[ChordIdentifier] = None,
        waveform_reducer: Optional[WaveformReducer] = None,
        reference_tone_interval: float = DEFAULT_REFERENCE_TONE_INTERVAL,
        is_ukulele: bool = False,
    ) -> None:
        """Initialize the engine.

        Args:
            accumulator: Note accumulator, or None for the default majority-vote one
            tuner: Tuner matcher, or None to create one
            chord_identifier: Chord identifier, or None for the standard chord table
            waveform_reducer: Waveform reducer, or None for 100 points
            reference_tone_interval: Minimum seconds between reference tone requests
            is_ukulele: Initial instrument mode; the host may flip it at any time
        """
        self._accumulator = accumulator or NoteAccumulator()
        self._tuner = tuner or TunerMatcher()
        self._chords = chord_identifier or ChordIdentifier()
        self._waveform = waveform_reducer or WaveformReducer()
        self._reference_tone_interval = float(reference_tone_interval)

        # Read on every match, never cached
        self.is_ukulele = bool(is_ukulele)

        self.events = EngineEvents()
        self._last_reference_tone_at: Optional[float] = None
        self._snapshot = EngineSnapshot(chord=self._chords.identify(()))

    @property
    def snapshot(self) -> EngineSnapshot:
        """The latest published state."""
        return self._snapshot

    @property
    def accumulator(self) -> NoteAccumulator:
        return self._accumulator

    @property
    def is_listening(self) -> bool:
        return self._accumulator.is_listening

    def start_session(self) -> None:
        """Start listening, clearing the notes, chord and tuning readout of any earlier session."""
        if self._accumulator.is_listening:
            logger.debug("Session already active")
            return

        self._accumulator.start()
        self._last_reference_tone_at = None
        self._publish(
            replace(
                self._snapshot,
                is_listening=True,
                confirmed_notes=(),
                chord=self._chords.identify(()),
                tuning=None,
            )
        )
        logger.info("Session started")

    def stop_session(self) -> None:
        """Stop listening; published notes and chord stay readable."""
        if not self._accumulator.is_listening:
            logger.debug("No active session to stop")
            return

        self._accumulator.stop()
        self._publish(replace(self._snapshot, is_listening=False))
        logger.info(
            f"Session stopped: notes={[n.value for n in self._snapshot.confirmed_notes]}, "
            f"chord={self._snapshot.chord}"
        )

    def ingest(
        self, frequency: float, amplitude: float, observed_at: Optional[float] = None
    ) -> None:
        """Feed one pitch estimate from the front end.

        Dropped samples (debounced, silent, no pitch, or no session) leave
        the published state untouched.

        Args:
            frequency: Detected frequency in Hz, <= 0 for no pitch
            amplitude: Normalized linear RMS amplitude of the frame
            observed_at: Monotonic timestamp in seconds, defaults to now
        """
        if observed_at is None:
            observed_at = time.monotonic()

        sample = PitchSample(float(frequency), float(amplitude), float(observed_at))
        known_notes = len(self._accumulator.confirmed_notes)
        reading = self._accumulator.ingest(sample)
        if reading is None:
            return

        readout = self._tuner.match(sample.frequency, tuning_for(self.is_ukulele))
        confirmed = self._accumulator.confirmed_notes
        changes = {"tuning": readout}
        if len(confirmed) != known_notes:
            changes["confirmed_notes"] = confirmed
            changes["chord"] = self._chords.identify(confirmed)

        self._publish(replace(self._snapshot, **changes))

        self.events.emit(EngineEventType.TUNING, readout)
        for note in confirmed[known_notes:]:
            self.events.emit(EngineEventType.NOTE_CONFIRMED, note)
        if readout.is_in_tune:
            self._request_reference_tone(readout.reference_frequency, sample.observed_at)

    def finish_recording(self, samples: Samples):
        """Rebuild the waveform envelope from a completed recording buffer.

        Returns:
            The new envelope
        """
        envelope = self._waveform.reduce(samples)
        self._publish(replace(self._snapshot, waveform=envelope))
        self.events.emit(EngineEventType.WAVEFORM, envelope)
        logger.info(f"Waveform ready: {envelope.size} points")
        return envelope

    def _request_reference_tone(self, frequency: float, now: float) -> None:
        if (
            self._last_reference_tone_at is not None
            and now - self._last_reference_tone_at < self._reference_tone_interval
        ):
            return
        self._last_reference_tone_at = now
        self.events.emit(EngineEventType.REFERENCE_TONE, frequency)

    def _publish(self, snapshot: EngineSnapshot) -> None:
        self._snapshot = snapshot
        self.events.emit(EngineEventType.SNAPSHOT, snapshot)
