"""Audio device utilities for the live tuner."""

from typing import Any, Dict, List, Optional, Tuple

import sounddevice as sd

from ..logger import get_logger

logger = get_logger(__name__)


def list_input_devices() -> List[Tuple[int, Dict[str, Any]]]:
    """Return (device_id, device_info) for every device with input channels."""
    devices = sd.query_devices()
    return [
        (device_id, device)
        for device_id, device in enumerate(devices)
        if device["max_input_channels"] > 0
    ]


def find_input_device(name_hint: str) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
    """Find the first input device whose name contains name_hint (case-insensitive).

    Returns:
        A tuple of (device_id, device_info) if found, (None, None) otherwise
    """
    try:
        for device_id, device in list_input_devices():
            if name_hint.lower() in device["name"].lower():
                logger.info(f"Found input device: {device['name']}")
                return device_id, device
        return None, None
    except sd.PortAudioError as e:
        logger.error(f"Error querying audio devices: {e}")
        raise
