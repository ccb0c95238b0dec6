"""Services wiring the audio front end to the pitch engine."""

from .session_service import LiveSessionService, analyze_recording

__all__ = ["LiveSessionService", "analyze_recording"]
