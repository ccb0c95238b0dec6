"""Main entry point for the pitchscope CLI."""

import argparse
import sys
import time
from typing import List, Optional

from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..detection.tuner import describe
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import EngineSnapshot, TuningReadout

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="pitchscope - tuner, note and chord readout for a single instrument"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config-dir",
        type=str,
        default=None,
        help="Directory holding configuration files (default: ~/.config/pitchscope)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("devices", help="List audio input devices")

    tune_parser = subparsers.add_parser("tune", help="Live tuner and note detection")
    tune_parser.add_argument(
        "--device", type=str, default=None, help="Audio input device ID or part of its name"
    )
    tune_parser.add_argument(
        "--duration", type=float, default=15.0, help="Session length in seconds"
    )
    tune_parser.add_argument(
        "--ukulele", action="store_true", help="Match against ukulele tuning (GCEA)"
    )

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a recorded file")
    analyze_parser.add_argument("file", type=str, help="Path to a WAV/FLAC/OGG recording")
    analyze_parser.add_argument(
        "--ukulele", action="store_true", help="Match against ukulele tuning (GCEA)"
    )
    analyze_parser.add_argument(
        "--points", type=int, default=None, help="Number of waveform points"
    )
    return parser


def format_snapshot(snapshot: EngineSnapshot) -> str:
    """One-line summary of the engine state."""
    notes = ", ".join(note.value for note in snapshot.confirmed_notes) or "none yet"
    return f"Notes: {notes} | Chord: {snapshot.chord} | {format_tuning(snapshot.tuning)}"


def format_tuning(readout: Optional[TuningReadout]) -> str:
    if readout is None:
        return "Tuner: no signal"
    return f"Tuner: {readout.label} {readout.cents:+.1f} cents ({describe(readout)})"


def run_devices() -> int:
    from ..audio.audio_device import list_input_devices

    print("\nAvailable audio input devices:")
    for device_id, device in list_input_devices():
        print(f"[{device_id}] {device['name']} (inputs: {device['max_input_channels']})")
    return 0


def resolve_device(device: Optional[str]) -> Optional[int]:
    """Turn a --device value (ID or name fragment) into a device ID."""
    if device is None or device.isdigit():
        return None if device is None else int(device)

    from ..audio.audio_device import find_input_device

    device_id, _info = find_input_device(device)
    if device_id is None:
        raise ValueError(f"No input device matching '{device}'")
    return device_id


def run_tune(factory: ComponentFactory, args: argparse.Namespace) -> int:
    from ..audio.live_input import LiveAudioProvider
    from ..services.session_service import LiveSessionService

    try:
        device_id = resolve_device(args.device)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    audio_config = factory.config_manager.get_config("audio_input")
    engine = factory.create_engine(is_ukulele=args.ukulele)
    tracker = factory.create_pitch_tracker(sample_rate=audio_config["sample_rate"])
    provider = LiveAudioProvider(
        device_id=device_id,
        sample_rate=audio_config["sample_rate"],
        channels=audio_config.get("channels", 1),
        chunk_size=tracker.hop_size,
    )

    engine.events.on_tuning(lambda readout: print(format_tuning(readout)))
    engine.events.on_note_confirmed(lambda note: print(f"Confirmed note: {note}"))

    service = LiveSessionService(provider, tracker, engine)
    print(f"Listening for {args.duration:.0f} seconds... (Ctrl+C to stop)")
    service.start()
    try:
        time.sleep(args.duration)
    except KeyboardInterrupt:
        print("\nStopped by user")
    finally:
        snapshot = service.stop()

    print("\n=== SESSION COMPLETE ===")
    print(format_snapshot(snapshot))
    print(f"Waveform points: {snapshot.waveform.size}")
    return 0


def run_analyze(factory: ComponentFactory, args: argparse.Namespace) -> int:
    from ..audio.file_input import sample_rate_of
    from ..services.session_service import analyze_recording

    engine = factory.create_engine(is_ukulele=args.ukulele, target_points=args.points)
    tracker = factory.create_pitch_tracker(sample_rate=sample_rate_of(args.file))

    snapshot = analyze_recording(args.file, engine, tracker)
    print(format_snapshot(snapshot))
    if snapshot.waveform.size:
        print(
            f"Waveform: {snapshot.waveform.size} points, "
            f"{int((snapshot.waveform > 0).sum())} above the noise floor"
        )
    else:
        print("Waveform: empty recording")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging(level="DEBUG" if parsed_args.debug else "WARNING")

    if parsed_args.command is None:
        parser.print_help()
        return 1

    if parsed_args.command == "devices":
        return run_devices()

    factory = ComponentFactory(ConfigManager(parsed_args.config_dir))
    if parsed_args.command == "tune":
        return run_tune(factory, parsed_args)
    if parsed_args.command == "analyze":
        return run_analyze(factory, parsed_args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
