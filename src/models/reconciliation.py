"""
ReconciliationResult model for one reconciliation cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .element import ElementIdentity, ElementRecord


@dataclass(frozen=True)
class ReconciliationResult:
    """
    What changed in one reconciliation cycle.

    The three collections are disjoint. created and updated follow batch
    order; retracted follows the order the elements were tracked in.

    Attributes:
        created: Records created this cycle.
        updated: Existing records re-confirmed (and refreshed) this cycle.
        retracted: Identities dropped because they were not confirmed.
    """
    created: Tuple[ElementRecord, ...] = ()
    updated: Tuple[ElementRecord, ...] = ()
    retracted: Tuple[ElementIdentity, ...] = ()

    @property
    def created_identities(self) -> Tuple[ElementIdentity, ...]:
        return tuple(record.identity for record in self.created)

    @property
    def updated_identities(self) -> Tuple[ElementIdentity, ...]:
        return tuple(record.identity for record in self.updated)

    @property
    def is_empty(self) -> bool:
        """True when nothing was created, updated or retracted."""
        return not (self.created or self.updated or self.retracted)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "created": [str(identity) for identity in self.created_identities],
            "updated": [str(identity) for identity in self.updated_identities],
            "retracted": [str(identity) for identity in self.retracted],
        }
