"""
Replication engine for the room element replicator.

This module runs the main processing loop: read scan batches from a
CaptureSource, reconcile each one against the tracked collection and forward
the decisions to the tracking session.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from capture import (
    CaptureSource,
    QueuedCaptureConfig,
    QueuedCaptureSource,
    ReplayCaptureConfig,
    ReplayCaptureSource,
)
from models.config import Config
from models.reconciliation import ReconciliationResult
from models.scan import ScanBatch
from scene.proxy import ProxyScene
from session.memory import InMemorySession, LoggingObserver
from session.replicator import RoomReplicator


@dataclass
class EngineConfig:
    """
    Configuration for the replication engine.

    Attributes:
        max_consecutive_failures: Max empty reads from a live source before stopping.
        retry_delay: Seconds to wait after an empty read.
        stats_log_interval: Seconds between status log messages.
        max_batches: Stop after this many batches (None = run until exhausted).
    """
    max_consecutive_failures: int = 10
    retry_delay: float = 0.5
    stats_log_interval: float = 60.0
    max_batches: Optional[int] = None


@dataclass
class EngineStats:
    """Runtime statistics for the engine."""
    batch_count: int = 0
    created_count: int = 0
    updated_count: int = 0
    retracted_count: int = 0
    tracked_count: int = 0
    start_time: float = field(default_factory=time.time)
    last_stats_log_time: float = field(default_factory=time.time)
    consecutive_failures: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batches": self.batch_count,
            "created": self.created_count,
            "updated": self.updated_count,
            "retracted": self.retracted_count,
            "tracked": self.tracked_count,
        }


class ReplicationEngine:
    """
    Main processing engine using a CaptureSource for scan input.

    This engine:
    - Reads scan batches from any CaptureSource
    - Reconciles each batch and updates the tracking session (via RoomReplicator)
    - Notifies registered callbacks with each cycle's result
    - Logs periodic statistics

    Batches are processed one at a time on the calling thread.

    Example:
        source = ReplayCaptureSource(ReplayCaptureConfig(path="data/scan.yaml"))
        replicator = RoomReplicator(InMemorySession())
        engine = ReplicationEngine(source, replicator, EngineConfig())
        engine.run()
    """

    def __init__(
        self,
        source: CaptureSource,
        replicator: RoomReplicator,
        config: EngineConfig,
    ):
        self.source = source
        self.replicator = replicator
        self.config = config
        self.stats = EngineStats()
        self._running = False
        self._callbacks: List[Callable[[ScanBatch, ReconciliationResult], None]] = []

    def add_callback(self, callback: Callable[[ScanBatch, ReconciliationResult], None]) -> None:
        """
        Add a callback to be called after each batch is processed.

        Args:
            callback: Function taking (batch, result) as arguments.
        """
        self._callbacks.append(callback)

    def run(self) -> None:
        """
        Run the main processing loop.

        Opens the capture source, processes batches until stopped or
        exhausted, then closes the source.
        """
        self._running = True
        self.stats = EngineStats()

        try:
            self.source.open()
            logging.info(f"Engine started: source={self.source.source_id}")

            while self._running:
                if (
                    self.config.max_batches is not None
                    and self.stats.batch_count >= self.config.max_batches
                ):
                    logging.info(f"Reached max_batches={self.config.max_batches}, stopping")
                    break

                batch = self.source.read()

                if batch is None:
                    if self.source.is_exhausted:
                        logging.info("Capture source exhausted")
                        break
                    self.stats.consecutive_failures += 1
                    if self.stats.consecutive_failures >= self.config.max_consecutive_failures:
                        logging.error(
                            f"Too many consecutive empty reads ({self.stats.consecutive_failures}), stopping"
                        )
                        break
                    logging.warning(
                        f"No scan batch available ({self.stats.consecutive_failures}/"
                        f"{self.config.max_consecutive_failures})"
                    )
                    time.sleep(self.config.retry_delay)
                    continue

                self.stats.consecutive_failures = 0
                result = self.process_batch(batch)

                for callback in self._callbacks:
                    try:
                        callback(batch, result)
                    except Exception as e:
                        logging.warning(f"Callback error: {e}")

                self._handle_periodic_tasks()

        except KeyboardInterrupt:
            logging.info("Engine interrupted by user")
        finally:
            self._cleanup()

    def stop(self) -> None:
        """Signal the engine to stop after the current batch."""
        self._running = False

    def process_batch(self, batch: ScanBatch) -> ReconciliationResult:
        """
        Reconcile a single batch and apply it to the session.

        Returns the cycle's ReconciliationResult.
        """
        result = self.replicator.replicate(batch.elements)

        self.stats.batch_count += 1
        self.stats.created_count += len(result.created)
        self.stats.updated_count += len(result.updated)
        self.stats.retracted_count += len(result.retracted)
        self.stats.tracked_count = len(self.replicator.reconciler)

        if result.created or result.retracted:
            logging.info(
                f"Batch {batch.batch_index}: +{len(result.created)} "
                f"-{len(result.retracted)} ~{len(result.updated)}, "
                f"tracked={self.stats.tracked_count}"
            )
        return result

    def _handle_periodic_tasks(self) -> None:
        """Log statistics periodically."""
        now = time.time()
        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            logging.info(
                f"Engine stats: batches={self.stats.batch_count}, "
                f"tracked={self.stats.tracked_count}, "
                f"created={self.stats.created_count}, "
                f"retracted={self.stats.retracted_count}"
            )
            self.stats.last_stats_log_time = now

    def _cleanup(self) -> None:
        """Clean up resources."""
        self._running = False

        try:
            self.source.close()
        except Exception as e:
            logging.warning(f"Error closing source: {e}")

        logging.info(
            f"Engine stopped: batches={self.stats.batch_count}, tracked={self.stats.tracked_count}"
        )


def create_source_from_config(capture_cfg: Dict[str, Any]) -> CaptureSource:
    """
    Create a capture source from the capture config dict.

    Raises:
        ValueError: If the backend is unknown.
    """
    backend = capture_cfg.get("backend", "replay")
    if backend == "replay":
        return ReplayCaptureSource(ReplayCaptureConfig.from_capture_config(capture_cfg))
    if backend == "queue":
        return QueuedCaptureSource(
            QueuedCaptureConfig(
                source_id=capture_cfg.get("source_id", "room-scan"),
                poll_timeout=capture_cfg.get("poll_timeout", 0.5),
            )
        )
    raise ValueError(f"Unknown capture backend: {backend}")


def create_engine_from_config(
    config: Dict[str, Any],
    scene: Optional[ProxyScene] = None,
) -> ReplicationEngine:
    """
    Factory function to create a ReplicationEngine from the config dict.

    Args:
        config: Full application config dict.
        scene: Optional scene that mirrors anchored elements.

    Returns:
        Configured ReplicationEngine (not started).
    """
    cfg = Config.from_dict(config)

    session = InMemorySession()
    if cfg.session.log_events:
        session.add_observer(LoggingObserver())
    if scene is not None:
        session.add_observer(scene)

    engine_config = EngineConfig(
        max_consecutive_failures=cfg.engine.max_consecutive_failures,
        retry_delay=cfg.engine.retry_delay,
        stats_log_interval=cfg.engine.stats_log_interval,
        max_batches=cfg.engine.max_batches,
    )

    source = create_source_from_config(cfg.capture.to_dict())
    return ReplicationEngine(source, RoomReplicator(session), engine_config)
