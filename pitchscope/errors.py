"""Exceptions raised by pitchscope."""


class PitchscopeError(Exception):
    """Base class for all pitchscope errors."""


class InvalidFrequency(PitchscopeError, ValueError):
    """Raised when a non-positive or non-finite frequency reaches note naming or matching."""

    def __init__(self, frequency):
        self.frequency = frequency
        super().__init__(f"Frequency must be a positive finite number, got {frequency!r}")


class EmptyTuningTable(PitchscopeError, ValueError):
    """Raised when a reference tuning has no strings to match against."""
