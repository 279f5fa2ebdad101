"""
ScanBatch model for one scan update.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .category import CategoryVariant
from .element import DetectedElement


@dataclass(frozen=True)
class ScanBatch:
    """
    All elements reported by a single scan update.

    Attributes:
        elements: Detected elements, objects first then surfaces.
        timestamp: Unix timestamp when the update was captured.
        batch_index: Sequential update number since the source was opened.
        source: Identifier for the capture source.
    """
    elements: Tuple[DetectedElement, ...]
    timestamp: float
    batch_index: int = 0
    source: Optional[str] = None

    @classmethod
    def from_lists(
        cls,
        objects: Sequence[DetectedElement],
        surfaces: Sequence[DetectedElement],
        timestamp: float,
        batch_index: int = 0,
        source: Optional[str] = None,
    ) -> "ScanBatch":
        """Create a batch from separate object and surface lists."""
        return cls(
            elements=tuple(objects) + tuple(surfaces),
            timestamp=timestamp,
            batch_index=batch_index,
            source=source,
        )

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def objects(self) -> Tuple[DetectedElement, ...]:
        return tuple(e for e in self.elements if e.variant is CategoryVariant.OBJECT)

    @property
    def surfaces(self) -> Tuple[DetectedElement, ...]:
        return tuple(e for e in self.elements if e.variant is CategoryVariant.SURFACE)
