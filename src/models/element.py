"""
Element models for detected and tracked room elements.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from .category import Category, CategoryVariant, category_to_dict

# Stable identity assigned by the scanner at first detection.
ElementIdentity = uuid.UUID

ArrayLike = Union[np.ndarray, Sequence[float], Sequence[Sequence[float]]]


class CategoryVariantError(AssertionError):
    """
    Raised when an update tries to move a record between the object and
    surface variants. This is a programming error, not a recoverable case.
    """


def as_identity(value: Union[str, uuid.UUID]) -> ElementIdentity:
    """Coerce a UUID or UUID string to an ElementIdentity."""
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def as_transform(value: Optional[ArrayLike]) -> np.ndarray:
    """
    Return a read-only 4x4 float transform.

    None gives the identity transform.

    Raises:
        ValueError: If the value is not 4x4 or contains non-finite entries.
    """
    if value is None:
        matrix = np.eye(4, dtype=np.float64)
    else:
        matrix = np.array(value, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"transform must be 4x4, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise ValueError("transform must contain only finite values")
    matrix.setflags(write=False)
    return matrix


def as_dimensions(value: ArrayLike) -> np.ndarray:
    """
    Return a read-only 3-vector of extents.

    Raises:
        ValueError: If the value is not a 3-vector of finite, non-negative floats.
    """
    vector = np.array(value, dtype=np.float64).reshape(-1)
    if vector.shape != (3,):
        raise ValueError(f"dimensions must have 3 components, got {vector.shape[0]}")
    if not np.all(np.isfinite(vector)) or np.any(vector < 0):
        raise ValueError("dimensions must be finite and non-negative")
    vector.setflags(write=False)
    return vector


@dataclass(frozen=True, eq=False)
class DetectedElement:
    """
    Snapshot of one element from a single scan update.

    Attributes:
        identity: Stable identity assigned by the scanner.
        transform: 4x4 pose (read-only array).
        dimensions: Extent along x, y, z (read-only array).
        category: Object or surface category.
    """
    identity: ElementIdentity
    transform: np.ndarray
    dimensions: np.ndarray
    category: Category

    @classmethod
    def create(
        cls,
        identity: Union[str, uuid.UUID],
        dimensions: ArrayLike,
        category: Category,
        transform: Optional[ArrayLike] = None,
    ) -> "DetectedElement":
        """Create a snapshot, coercing identity, transform and dimensions."""
        return cls(
            identity=as_identity(identity),
            transform=as_transform(transform),
            dimensions=as_dimensions(dimensions),
            category=category,
        )

    @property
    def variant(self) -> CategoryVariant:
        return self.category.variant


@dataclass(frozen=True, eq=False)
class _ElementState:
    transform: np.ndarray
    dimensions: np.ndarray
    category: Category


class ElementRecord:
    """
    The tracked record for one room element.

    Identity is fixed at construction. Transform, dimensions and category are
    held together in one immutable state object that apply_snapshot replaces
    in a single assignment, so readers never see a partially applied update.
    """

    def __init__(
        self,
        identity: ElementIdentity,
        transform: ArrayLike,
        dimensions: ArrayLike,
        category: Category,
    ):
        self._identity = identity
        self._variant = category.variant
        self._state = _ElementState(
            transform=as_transform(transform),
            dimensions=as_dimensions(dimensions),
            category=category,
        )
        self._revision = 0

    @classmethod
    def from_detected(cls, detected: DetectedElement) -> "ElementRecord":
        """Create a record from a detected element snapshot."""
        return cls(
            identity=detected.identity,
            transform=detected.transform,
            dimensions=detected.dimensions,
            category=detected.category,
        )

    @property
    def identity(self) -> ElementIdentity:
        return self._identity

    @property
    def variant(self) -> CategoryVariant:
        """Object or surface; never changes after creation."""
        return self._variant

    @property
    def transform(self) -> np.ndarray:
        return self._state.transform

    @property
    def dimensions(self) -> np.ndarray:
        return self._state.dimensions

    @property
    def category(self) -> Category:
        return self._state.category

    @property
    def revision(self) -> int:
        """Number of snapshots applied since creation."""
        return self._revision

    def apply_snapshot(
        self,
        transform: ArrayLike,
        dimensions: ArrayLike,
        category: Category,
    ) -> None:
        """
        Replace transform, dimensions and category.

        Raises:
            CategoryVariantError: If the category belongs to the other variant.
                The record is left unchanged.
        """
        if category.variant is not self._variant:
            raise CategoryVariantError(
                f"Element {self._identity} is a {self._variant.value}; "
                f"cannot apply a {category.variant.value} category"
            )
        self._state = _ElementState(
            transform=as_transform(transform),
            dimensions=as_dimensions(dimensions),
            category=category,
        )
        self._revision += 1

    def apply(self, detected: DetectedElement) -> None:
        """Apply a detected element snapshot with the same identity."""
        if detected.identity != self._identity:
            raise ValueError(
                f"Snapshot for {detected.identity} applied to record {self._identity}"
            )
        self.apply_snapshot(detected.transform, detected.dimensions, detected.category)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        state = self._state
        return {
            "identity": str(self._identity),
            "transform": state.transform.tolist(),
            "dimensions": state.dimensions.tolist(),
            "category": category_to_dict(state.category),
            "revision": self._revision,
        }

    def __repr__(self) -> str:
        return (
            f"ElementRecord(identity={self._identity}, "
            f"category={self.category!r}, revision={self._revision})"
        )
