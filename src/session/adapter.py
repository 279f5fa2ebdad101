"""
Session boundary adapter.

Forwards the decisions of a ReconciliationResult to a TrackingSession.
All creates and updates of a cycle are issued before any retraction, so a
continuing element is never momentarily untracked and a retraction only
applies to elements confirmed absent.
"""

from __future__ import annotations

import logging

from models.reconciliation import ReconciliationResult
from .base import TrackingSession


class SessionAdapter:
    """
    Applies reconciliation results to a tracking session.

    The adapter owns no records. It only issues add / notify / remove calls.

    Example:
        adapter = SessionAdapter(session)
        adapter.apply(reconciler.reconcile(batch))
    """

    def __init__(self, session: TrackingSession):
        self._session = session

    @property
    def session(self) -> TrackingSession:
        return self._session

    def apply(self, result: ReconciliationResult) -> ReconciliationResult:
        """
        Apply one cycle's decisions to the session.

        Args:
            result: Output of ElementReconciler.reconcile().

        Returns:
            The same result, for chaining.
        """
        for record in result.created:
            self._session.add_tracked(record)

        for record in result.updated:
            self._session.notify_updated(record)

        # Retractions strictly after every create/update of the cycle
        for identity in result.retracted:
            self._session.remove_tracked(identity)

        if not result.is_empty:
            logging.debug(
                f"[SESSION] added={len(result.created)} notified={len(result.updated)} "
                f"removed={len(result.retracted)}"
            )
        return result
