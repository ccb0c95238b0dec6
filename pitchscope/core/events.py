"""Event system for pitchscope components."""

from collections import defaultdict
from enum import Enum, auto
from typing import Any, Callable, DefaultDict, List

from ..logger import get_logger

logger = get_logger(__name__)

Unsubscribe = Callable[[], None]


class EngineEventType(Enum):
    """Event types published by the pitch engine."""

    SNAPSHOT = auto()
    NOTE_CONFIRMED = auto()
    TUNING = auto()
    WAVEFORM = auto()
    REFERENCE_TONE = auto()


class EventEmitter:
    """Synchronous publish/subscribe hub.

    Listeners run on the emitting thread, in registration order. A listener
    that raises is logged and skipped; the rest still run.
    """

    def __init__(self):
        self._listeners: DefaultDict[Any, List[Callable]] = defaultdict(list)

    def on(self, event_type: Any, callback: Callable) -> Unsubscribe:
        """Register a callback for an event type.

        Registering the same callback twice has no effect.

        Returns:
            A function that removes this registration again
        """
        listeners = self._listeners[event_type]
        if callback not in listeners:
            listeners.append(callback)
            logger.debug(f"Added listener for event {event_type}")
        return lambda: self.off(event_type, callback)

    def off(self, event_type: Any, callback: Callable) -> None:
        listeners = self._listeners.get(event_type)
        if listeners and callback in listeners:
            listeners.remove(callback)

    def listener_count(self, event_type: Any) -> int:
        return len(self._listeners.get(event_type, ()))

    def emit(self, event_type: Any, *args, **kwargs) -> int:
        """Call every listener of event_type with the given arguments.

        Returns:
            Number of listeners that completed without raising
        """
        delivered = 0
        # Listeners may unsubscribe while being called
        for callback in tuple(self._listeners.get(event_type, ())):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}", exc_info=True)
            else:
                delivered += 1
        return delivered

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        logger.debug("Cleared all event listeners")


class EngineEvents:
    """Typed registration helpers for engine events.

    Each on_* method returns a function that unsubscribes the callback.
    """

    def __init__(self):
        self._emitter = EventEmitter()

    def on_snapshot(self, callback: Callable) -> Unsubscribe:
        """Called with the new EngineSnapshot whenever published state changes."""
        return self._emitter.on(EngineEventType.SNAPSHOT, callback)

    def on_note_confirmed(self, callback: Callable) -> Unsubscribe:
        """Called with the PitchClass each time a note joins the confirmed set."""
        return self._emitter.on(EngineEventType.NOTE_CONFIRMED, callback)

    def on_tuning(self, callback: Callable) -> Unsubscribe:
        return self._emitter.on(EngineEventType.TUNING, callback)

    def on_waveform(self, callback: Callable) -> Unsubscribe:
        """Called with the envelope built when a recording finishes."""
        return self._emitter.on(EngineEventType.WAVEFORM, callback)

    def on_reference_tone(self, callback: Callable) -> Unsubscribe:
        """Called with the reference frequency when the host should play it."""
        return self._emitter.on(EngineEventType.REFERENCE_TONE, callback)

    def emit(self, event_type: EngineEventType, *args) -> int:
        return self._emitter.emit(event_type, *args)

    def clear(self) -> None:
        self._emitter.clear()
