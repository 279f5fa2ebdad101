"""
TrackingSession interface for the external tracking session.

This defines the contract the session boundary adapter forwards
reconciliation decisions to:
- add_tracked: start tracking a newly created record
- notify_updated: tell update observers a record changed
- remove_tracked: stop tracking a retracted identity

Sessions may notify their own observers on add/remove; the adapter only
issues the calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from models.element import ElementIdentity, ElementRecord


class TrackingSession(ABC):
    """
    Abstract base class for tracking sessions.

    Calls are expected to be synchronous from the caller's perspective, or
    safe to fire and forget.
    """

    @abstractmethod
    def add_tracked(self, record: ElementRecord) -> None:
        """Anchor a newly created record."""
        pass

    @abstractmethod
    def notify_updated(self, record: ElementRecord) -> None:
        """Notify update observers; the record already holds fresh state."""
        pass

    @abstractmethod
    def remove_tracked(self, identity: ElementIdentity) -> None:
        """Remove the anchor for a retracted identity."""
        pass


class SessionObserver:
    """
    Receives lifecycle callbacks from a session.

    Subclasses override only the callbacks they care about.
    """

    def on_added(self, record: ElementRecord) -> None:
        pass

    def on_updated(self, record: ElementRecord) -> None:
        pass

    def on_removed(self, identity: ElementIdentity, record: ElementRecord) -> None:
        pass
