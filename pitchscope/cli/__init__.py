"""Command-line interface for pitchscope."""

from .main import main

__all__ = ["main"]
