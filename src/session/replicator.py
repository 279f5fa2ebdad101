"""
Room replicator: reconciler plus session adapter.
"""

from __future__ import annotations

from typing import Iterable, Optional

from models.element import DetectedElement
from models.reconciliation import ReconciliationResult
from tracking.reconciler import ElementReconciler
from .adapter import SessionAdapter
from .base import TrackingSession


class RoomReplicator:
    """
    Keeps a tracking session in step with successive scan updates.

    Each call reconciles one batch and forwards the decisions to the session.
    Calls must be serialized by the caller.
    """

    def __init__(
        self,
        session: TrackingSession,
        reconciler: Optional[ElementReconciler] = None,
    ):
        self._reconciler = reconciler if reconciler is not None else ElementReconciler()
        self._adapter = SessionAdapter(session)

    @property
    def reconciler(self) -> ElementReconciler:
        return self._reconciler

    @property
    def session(self) -> TrackingSession:
        return self._adapter.session

    def replicate(self, batch: Iterable[DetectedElement]) -> ReconciliationResult:
        """Reconcile a batch and apply the result to the session."""
        return self._adapter.apply(self._reconciler.reconcile(batch))

    def anchor(
        self,
        objects: Iterable[DetectedElement],
        surfaces: Iterable[DetectedElement],
    ) -> ReconciliationResult:
        """Replicate one scan update given as separate object and surface lists."""
        return self.replicate(list(objects) + list(surfaces))
