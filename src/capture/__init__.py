"""
Capture layer for pluggable scan sources.

This layer abstracts where scan updates come from (a recorded session, a
live scanner thread) from the replication engine. Each source implements the
CaptureSource interface and returns ScanBatch objects.
"""

from .base import CaptureSource, CaptureConfig
from .parsing import ScanParseError, parse_detected_element, parse_scan_update
from .queue_source import QueuedCaptureSource, QueuedCaptureConfig
from .replay_source import ReplayCaptureSource, ReplayCaptureConfig, load_recording

__all__ = [
    "CaptureSource",
    "CaptureConfig",
    "ScanParseError",
    "parse_detected_element",
    "parse_scan_update",
    "QueuedCaptureSource",
    "QueuedCaptureConfig",
    "ReplayCaptureSource",
    "ReplayCaptureConfig",
    "load_recording",
]
