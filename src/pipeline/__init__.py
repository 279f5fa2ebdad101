"""
Pipeline module for the room element replicator.

The pipeline orchestrates the processing flow:
- Scan batch acquisition from capture sources
- Reconciliation against the tracked collection
- Session updates and observer notification
"""

from .engine import (
    EngineConfig,
    EngineStats,
    ReplicationEngine,
    create_engine_from_config,
    create_source_from_config,
)

__all__ = [
    "EngineConfig",
    "EngineStats",
    "ReplicationEngine",
    "create_engine_from_config",
    "create_source_from_config",
]
