"""Factory for creating pitchscope components from configuration."""

from typing import Optional

from ..detection.chords import ChordIdentifier
from ..detection.note_accumulator import ConfirmationPolicy, NoteAccumulator
from ..detection.tuner import TunerMatcher
from ..detection.waveform import WaveformReducer
from ..logger import get_logger
from .config import ConfigManager
from .engine import PitchEngine

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating pitchscope components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

    def create_note_accumulator(self, **kwargs) -> NoteAccumulator:
        """Create a note accumulator.

        Args:
            **kwargs: Overrides for the 'note_accumulator' configuration

        Raises:
            ValueError: If the configured confirmation policy is unknown
        """
        config = self.config_manager.get_config("note_accumulator")
        config.update(kwargs)
        config["confirmation_policy"] = ConfirmationPolicy(config["confirmation_policy"])
        return NoteAccumulator(**config)

    def create_waveform_reducer(self, **kwargs) -> WaveformReducer:
        config = self.config_manager.get_config("waveform")
        config.update(kwargs)
        return WaveformReducer(**config)

    def create_engine(
        self, is_ukulele: bool = False, target_points: Optional[int] = None, **kwargs
    ) -> PitchEngine:
        """Create a pitch engine wired with configured components.

        Args:
            is_ukulele: Initial instrument mode
            target_points: Waveform size, or None for the configured value
            **kwargs: Overrides for the 'engine' configuration

        Returns:
            Pitch engine instance
        """
        config = self.config_manager.get_config("engine")
        config.update(kwargs)
        waveform_overrides = {} if target_points is None else {"target_points": target_points}

        engine = PitchEngine(
            accumulator=self.create_note_accumulator(),
            tuner=TunerMatcher(),
            chord_identifier=ChordIdentifier(),
            waveform_reducer=self.create_waveform_reducer(**waveform_overrides),
            is_ukulele=is_ukulele,
            **config,
        )
        logger.info(f"Created pitch engine ({'ukulele' if is_ukulele else 'guitar'})")
        return engine

    def create_pitch_tracker(self, sample_rate: Optional[int] = None, **kwargs):
        """Create an aubio pitch tracker.

        Args:
            sample_rate: Sample rate of the audio it will see, or None for the
                'audio_input' default
            **kwargs: Overrides for the 'pitch_tracker' configuration
        """
        from ..audio.pitch_tracker import AubioPitchTracker

        config = self.config_manager.get_config("pitch_tracker")
        config.update(kwargs)
        if sample_rate is None:
            sample_rate = self.config_manager.get_config("audio_input").get("sample_rate", 44100)

        tracker = AubioPitchTracker(sample_rate=sample_rate, **config)
        logger.info(f"Created pitch tracker: {config.get('method')} @ {sample_rate}Hz")
        return tracker
