"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class CaptureConfigModel:
    """Scan capture source configuration."""
    backend: str = "replay"
    source_id: str = "room-scan"
    path: Optional[str] = None
    loop: bool = False
    poll_timeout: float = 0.5

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CaptureConfigModel":
        """Adapter: Create from config dictionary."""
        return cls(
            backend=d.get("backend", "replay"),
            source_id=d.get("source_id", "room-scan"),
            path=d.get("path"),
            loop=d.get("loop", False),
            poll_timeout=d.get("poll_timeout", 0.5),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "backend": self.backend,
            "source_id": self.source_id,
            "loop": self.loop,
            "poll_timeout": self.poll_timeout,
        }
        if self.path is not None:
            d["path"] = self.path
        return d


@dataclass
class SessionConfig:
    """Tracking session configuration."""
    log_events: bool = True

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SessionConfig":
        return cls(log_events=d.get("log_events", True))

    def to_dict(self) -> Dict[str, Any]:
        return {"log_events": self.log_events}


@dataclass
class EngineSettings:
    """Replication engine loop settings."""
    max_consecutive_failures: int = 10
    retry_delay: float = 0.5
    stats_log_interval: float = 60.0
    max_batches: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EngineSettings":
        return cls(
            max_consecutive_failures=d.get("max_consecutive_failures", 10),
            retry_delay=d.get("retry_delay", 0.5),
            stats_log_interval=d.get("stats_log_interval", 60.0),
            max_batches=d.get("max_batches"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "max_consecutive_failures": self.max_consecutive_failures,
            "retry_delay": self.retry_delay,
            "stats_log_interval": self.stats_log_interval,
        }
        if self.max_batches is not None:
            d["max_batches"] = self.max_batches
        return d


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    capture: CaptureConfigModel = field(default_factory=CaptureConfigModel)
    session: SessionConfig = field(default_factory=SessionConfig)
    engine: EngineSettings = field(default_factory=EngineSettings)
    log_path: str = "logs/room_replicator.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            capture=CaptureConfigModel.from_dict(d.get("capture", {}) or {}),
            session=SessionConfig.from_dict(d.get("session", {}) or {}),
            engine=EngineSettings.from_dict(d.get("engine", {}) or {}),
            log_path=d.get("log_path", "logs/room_replicator.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        return {
            "capture": self.capture.to_dict(),
            "session": self.session.to_dict(),
            "engine": self.engine.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
