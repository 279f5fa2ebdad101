"""
Element reconciliation for room scan updates.

Each scan update delivers the complete set of elements the scanner still
believes in. The reconciler matches them to tracked records by identity:

- Known identities are updated in place.
- New identities get a new record.
- Tracked identities missing from the batch are retracted.

There is no grace period. An element survives a cycle only if the batch
confirms it (confirm-or-retract).

Note: Session side effects are NOT done here. Use `session.adapter.SessionAdapter`
to forward a ReconciliationResult to a tracking session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from models.category import CategoryVariant
from models.element import (
    CategoryVariantError,
    DetectedElement,
    ElementIdentity,
    ElementRecord,
)
from models.reconciliation import ReconciliationResult


@dataclass(frozen=True)
class ReconciliationPlan:
    """
    Identity-level decisions for one cycle, computed without side effects.

    Attributes:
        created: Identities to create, in first-seen batch order.
        updated: Tracked identities re-confirmed, in first-seen batch order.
        retracted: Tracked identities not confirmed, in tracked order.
        confirmed: Every identity in the batch, in first-seen order.
    """
    created: Tuple[ElementIdentity, ...]
    updated: Tuple[ElementIdentity, ...]
    retracted: Tuple[ElementIdentity, ...]
    confirmed: Tuple[ElementIdentity, ...] = ()


def plan_reconciliation(
    tracked: Mapping[ElementIdentity, CategoryVariant],
    batch: Iterable[DetectedElement],
) -> ReconciliationPlan:
    """
    Compute create/update/retract decisions for a batch.

    Args:
        tracked: Variant of every tracked identity, in tracked order.
        batch: Detected elements for this cycle.

    Returns:
        ReconciliationPlan with three disjoint identity tuples.

    Raises:
        CategoryVariantError: If an identity appears with a variant other than
            the one it is tracked (or was first seen in this batch) with.
    """
    created: List[ElementIdentity] = []
    updated: List[ElementIdentity] = []
    variants: Dict[ElementIdentity, CategoryVariant] = dict(tracked)
    confirmed: Dict[ElementIdentity, None] = {}

    for detected in batch:
        identity = detected.identity
        expected = variants.get(identity)
        if expected is not None and expected is not detected.variant:
            raise CategoryVariantError(
                f"Element {identity} is a {expected.value}; "
                f"batch reports it as a {detected.variant.value}"
            )
        if identity in confirmed:
            continue
        confirmed[identity] = None
        if identity in tracked:
            updated.append(identity)
        else:
            created.append(identity)
            variants[identity] = detected.variant

    retracted = tuple(identity for identity in tracked if identity not in confirmed)
    return ReconciliationPlan(
        created=tuple(created),
        updated=tuple(updated),
        retracted=retracted,
        confirmed=tuple(confirmed),
    )


class ElementReconciler:
    """
    Owns the tracked collection of element records.

    This reconciler is responsible for:
    - Matching detected elements to tracked records by identity
    - Creating records for new identities
    - Retracting records that were not re-confirmed

    The collection itself is never handed out; callers get the immutable
    ReconciliationResult of each cycle plus read-only lookups.

    Calls must not overlap. reconcile() is synchronous and not reentrant.
    """

    def __init__(self):
        self._tracked: Dict[ElementIdentity, ElementRecord] = {}
        self._cycle_count = 0

        logging.info("Element reconciler initialized")

    @property
    def cycle_count(self) -> int:
        """Number of reconcile() calls completed."""
        return self._cycle_count

    @property
    def identities(self) -> frozenset:
        """Identities tracked at the end of the last cycle."""
        return frozenset(self._tracked)

    def __len__(self) -> int:
        return len(self._tracked)

    def __contains__(self, identity: object) -> bool:
        return identity in self._tracked

    def get(self, identity: ElementIdentity) -> Optional[ElementRecord]:
        """Get the tracked record for an identity, if any."""
        return self._tracked.get(identity)

    def records(self) -> Tuple[ElementRecord, ...]:
        """Get all tracked records, in tracked order."""
        return tuple(self._tracked.values())

    def reconcile(self, batch: Iterable[DetectedElement]) -> ReconciliationResult:
        """
        Reconcile a scan batch against the tracked collection.

        Args:
            batch: Every element the scanner reports for this update.
                An empty batch retracts everything.

        Returns:
            ReconciliationResult describing exactly what changed.

        Raises:
            CategoryVariantError: If a tracked identity changes variant. Nothing
                is modified in that case.
        """
        batch = list(batch)
        plan = plan_reconciliation(
            {identity: record.variant for identity, record in self._tracked.items()},
            batch,
        )

        # Apply snapshots in input order; repeated identities re-apply (last write wins)
        confirmed: Dict[ElementIdentity, ElementRecord] = {}
        for detected in batch:
            record = confirmed.get(detected.identity)
            if record is None:
                record = self._tracked.get(detected.identity)
                if record is None:
                    record = ElementRecord.from_detected(detected)
                else:
                    record.apply(detected)
                confirmed[detected.identity] = record
            else:
                record.apply(detected)

        # Retracted records are simply not carried over; the collection becomes
        # exactly the confirmed set
        self._tracked = {identity: confirmed[identity] for identity in plan.confirmed}
        self._cycle_count += 1

        result = ReconciliationResult(
            created=tuple(confirmed[identity] for identity in plan.created),
            updated=tuple(confirmed[identity] for identity in plan.updated),
            retracted=plan.retracted,
        )
        logging.debug(
            f"[RECONCILE] cycle={self._cycle_count} created={len(result.created)} "
            f"updated={len(result.updated)} retracted={len(result.retracted)} "
            f"tracked={len(self._tracked)}"
        )
        return result

    def reset(self) -> ReconciliationResult:
        """Retract every tracked record (same as reconciling an empty batch)."""
        return self.reconcile([])
