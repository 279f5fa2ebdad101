"""
Session boundary for the room element replicator.

The reconciler decides what changed; this layer forwards those decisions to
a tracking session and its observers.
"""

from .base import SessionObserver, TrackingSession
from .adapter import SessionAdapter
from .memory import InMemorySession, LoggingObserver
from .replicator import RoomReplicator

__all__ = [
    "TrackingSession",
    "SessionObserver",
    "SessionAdapter",
    "InMemorySession",
    "LoggingObserver",
    "RoomReplicator",
]
