"""
Replay capture source.

Replays a recorded scan session from a YAML file (JSON files work too,
since YAML is a superset). Recording layout:

    updates:
      - objects:
          - identifier: 2f1c...
            dimensions: [1.0, 0.5, 2.0]
            category: bed
        surfaces:
          - identifier: 9ab3...
            dimensions: [4.0, 2.5, 0.0]
            category: wall
      - objects: []
        surfaces: []
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import yaml

from models.element import DetectedElement
from models.scan import ScanBatch
from .base import CaptureConfig, CaptureSource
from .parsing import ScanParseError, parse_scan_update


@dataclass
class ReplayCaptureConfig(CaptureConfig):
    """
    Configuration for replaying a recorded scan session.

    Attributes:
        path: Path to the YAML/JSON recording.
        loop: Start over after the last update instead of ending.
    """
    path: str = ""
    loop: bool = False

    @classmethod
    def from_capture_config(cls, capture_cfg: Dict[str, Any]) -> "ReplayCaptureConfig":
        """
        Adapter: Create ReplayCaptureConfig from the capture config dict.

        Args:
            capture_cfg: Capture configuration dict (from config.yaml).
        """
        return cls(
            source_id=capture_cfg.get("source_id", "room-scan"),
            path=capture_cfg.get("path", "") or "",
            loop=capture_cfg.get("loop", False),
        )


def load_recording(path: str) -> List[Tuple[List[DetectedElement], List[DetectedElement]]]:
    """
    Load and parse every update of a recording.

    Raises:
        ScanParseError: If the file content is malformed.
        OSError: If the file cannot be read.
    """
    with open(path, "r") as f:
        payload = yaml.safe_load(f) or {}

    if isinstance(payload, list):
        raw_updates = payload
    elif isinstance(payload, dict):
        raw_updates = payload.get("updates", []) or []
    else:
        raise ScanParseError(f"{path}: recording must be a mapping or a list")
    if not isinstance(raw_updates, list):
        raise ScanParseError(f"{path}: 'updates' must be a list")

    return [
        parse_scan_update(raw, label=f"updates[{idx}]")
        for idx, raw in enumerate(raw_updates)
    ]


class ReplayCaptureSource(CaptureSource):
    """
    Capture source that replays a recorded scan session.

    Each read() returns the next recorded update. The whole recording is
    parsed on open(), so malformed files fail before any batch is produced.
    """

    def __init__(self, config: ReplayCaptureConfig):
        super().__init__(config)
        self._replay_config = config
        self._updates: List[Tuple[List[DetectedElement], List[DetectedElement]]] = []
        self._position = 0

    @property
    def update_count(self) -> int:
        return len(self._updates)

    @property
    def is_exhausted(self) -> bool:
        if self._replay_config.loop and self._updates:
            return False
        return self._position >= len(self._updates)

    def open(self) -> None:
        path = self._replay_config.path
        if not path or not os.path.exists(path):
            raise RuntimeError(f"Scan recording not found: {path!r}")
        try:
            self._updates = load_recording(path)
        except (OSError, yaml.YAMLError, ScanParseError) as e:
            raise RuntimeError(f"Failed to load scan recording {path}: {e}") from e

        self._position = 0
        self._batch_index = 0
        self._is_open = True
        logging.info(
            f"Replay source opened: {path} ({len(self._updates)} updates, "
            f"loop={self._replay_config.loop})"
        )

    def read(self) -> Optional[ScanBatch]:
        if not self._is_open or not self._updates:
            return None

        if self._position >= len(self._updates):
            if not self._replay_config.loop:
                return None
            self._position = 0

        objects, surfaces = self._updates[self._position]
        self._position += 1
        self._batch_index += 1
        return ScanBatch.from_lists(
            objects,
            surfaces,
            timestamp=time.time(),
            batch_index=self._batch_index,
            source=self.source_id,
        )

    def close(self) -> None:
        if self._is_open:
            logging.info(f"Replay source closed after {self._batch_index} batches")
        self._is_open = False
