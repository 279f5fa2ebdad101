"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import uuid

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models.category import object_category, surface_category  # noqa: E402
from models.element import DetectedElement  # noqa: E402


def translation(x: float, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """4x4 transform translating by (x, y, z)."""
    matrix = np.eye(4)
    matrix[:3, 3] = (x, y, z)
    return matrix


def obj(identity, dims=(1.0, 1.0, 1.0), cat="bed", transform=None) -> DetectedElement:
    """Detected object element."""
    return DetectedElement.create(
        identity=identity,
        dimensions=dims,
        category=object_category(cat),
        transform=transform,
    )


def surf(identity, dims=(1.0, 1.0, 0.0), cat="wall", is_open=None, transform=None) -> DetectedElement:
    """Detected surface element."""
    return DetectedElement.create(
        identity=identity,
        dimensions=dims,
        category=surface_category(cat, is_open=is_open),
        transform=transform,
    )


@pytest.fixture
def ids():
    """Three stable element identities."""
    return [uuid.uuid4() for _ in range(3)]


SAMPLE_RECORDING = """
updates:
  - objects:
      - identifier: "6f1d2c1e-8a47-4a55-9e0b-0d6a1f3b2c01"
        category: bed
        dimensions: [1.6, 0.5, 2.0]
    surfaces:
      - identifier: "1b7e4d2a-3c5f-4e8a-b6d9-2f0c1a9e7b02"
        category: wall
        dimensions: [4.0, 2.5, 0.0]
  - objects:
      - identifier: "6f1d2c1e-8a47-4a55-9e0b-0d6a1f3b2c01"
        category: bed
        dimensions: [1.6, 0.55, 2.05]
    surfaces:
      - identifier: "e8d3b6a4-2f1c-4b9e-a7d5-3c6e0f2a1b04"
        category: door
        is_open: true
        dimensions: [0.9, 2.1, 0.0]
  - objects: []
    surfaces: []
"""


@pytest.fixture
def recording_path(tmp_path):
    """Write a three-update scan recording and return its path."""
    path = tmp_path / "scan.yaml"
    path.write_text(SAMPLE_RECORDING)
    return str(path)


@pytest.fixture
def temp_config_dir(tmp_path, recording_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text(f"""
capture:
  backend: "replay"
  path: "{recording_path}"
  loop: false

session:
  log_events: true

engine:
  max_consecutive_failures: 3
  retry_delay: 0.0

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config(recording_path):
    """Return a valid configuration dictionary."""
    return {
        "capture": {
            "backend": "replay",
            "source_id": "test-scan",
            "path": recording_path,
            "loop": False,
        },
        "session": {
            "log_events": False,
        },
        "engine": {
            "max_consecutive_failures": 3,
            "retry_delay": 0.0,
            "stats_log_interval": 60.0,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
