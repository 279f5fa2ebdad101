"""
In-process tracking session.

Keeps an identity-keyed anchor map and forwards lifecycle callbacks to
registered observers, the way an AR session forwards anchor changes to its
delegate.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from models.category import category_to_dict
from models.element import ElementIdentity, ElementRecord
from .base import SessionObserver, TrackingSession

logger = logging.getLogger(__name__)


class InMemorySession(TrackingSession):
    """
    Tracking session that holds anchors in memory.

    Anchors are references to the reconciler's records. The reconciler stays
    the source of truth; this map only mirrors what was added and removed.
    """

    def __init__(self, observers: Optional[List[SessionObserver]] = None):
        self._anchors: Dict[ElementIdentity, ElementRecord] = {}
        self._observers: List[SessionObserver] = list(observers or [])

    def add_observer(self, observer: SessionObserver) -> None:
        """Register an observer; callbacks run in registration order."""
        self._observers.append(observer)

    def remove_observer(self, observer: SessionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def anchor_count(self) -> int:
        return len(self._anchors)

    def anchored_identities(self) -> Tuple[ElementIdentity, ...]:
        """Identities currently anchored, in anchoring order."""
        return tuple(self._anchors)

    def get_anchor(self, identity: ElementIdentity) -> Optional[ElementRecord]:
        return self._anchors.get(identity)

    def add_tracked(self, record: ElementRecord) -> None:
        if record.identity in self._anchors:
            logger.warning(f"Element {record.identity} is already anchored; ignoring add")
            return
        self._anchors[record.identity] = record
        self._dispatch("on_added", record)

    def notify_updated(self, record: ElementRecord) -> None:
        if record.identity not in self._anchors:
            logger.warning(f"Update for unanchored element {record.identity}")
        self._dispatch("on_updated", record)

    def remove_tracked(self, identity: ElementIdentity) -> None:
        record = self._anchors.pop(identity, None)
        if record is None:
            logger.warning(f"Element {identity} is not anchored; ignoring remove")
            return
        self._dispatch("on_removed", identity, record)

    def _dispatch(self, callback: str, *args) -> None:
        for observer in self._observers:
            try:
                getattr(observer, callback)(*args)
            except Exception as e:
                logger.warning(f"Observer {type(observer).__name__}.{callback} failed: {e}")


class LoggingObserver(SessionObserver):
    """Logs every session lifecycle callback."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def on_added(self, record: ElementRecord) -> None:
        self._log.info(
            f"Element added: {record.identity} "
            f"category={category_to_dict(record.category)} "
            f"dimensions={record.dimensions.tolist()}"
        )

    def on_updated(self, record: ElementRecord) -> None:
        self._log.info(
            f"Element updated: {record.identity} revision={record.revision} "
            f"category={category_to_dict(record.category)}"
        )

    def on_removed(self, identity: ElementIdentity, record: ElementRecord) -> None:
        self._log.info(f"Element removed: {identity}")
