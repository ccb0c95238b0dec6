"""Core components for the pitchscope application."""

from .engine import PitchEngine
from .events import EngineEvents, EngineEventType, EventEmitter
from .interfaces import IAudioProvider, IPitchTracker

__all__ = [
    "PitchEngine",
    "EngineEvents",
    "EngineEventType",
    "EventEmitter",
    "IAudioProvider",
    "IPitchTracker",
]
