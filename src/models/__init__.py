"""
Typed models for the room element replicator.

These models carry element identity, pose, extent and category from the
capture source through reconciliation to the tracking session.
"""

from .category import (
    Category,
    CategoryVariant,
    ObjectCategory,
    ObjectKind,
    SurfaceCategory,
    SurfaceKind,
    object_category,
    surface_category,
)
from .element import (
    CategoryVariantError,
    DetectedElement,
    ElementIdentity,
    ElementRecord,
)
from .reconciliation import ReconciliationResult
from .scan import ScanBatch
from .config import (
    Config,
    CaptureConfigModel,
    SessionConfig,
    EngineSettings,
)

__all__ = [
    # Category
    "Category",
    "CategoryVariant",
    "ObjectCategory",
    "ObjectKind",
    "SurfaceCategory",
    "SurfaceKind",
    "object_category",
    "surface_category",
    # Elements
    "CategoryVariantError",
    "DetectedElement",
    "ElementIdentity",
    "ElementRecord",
    # Reconciliation
    "ReconciliationResult",
    # Scan
    "ScanBatch",
    # Config
    "Config",
    "CaptureConfigModel",
    "SessionConfig",
    "EngineSettings",
]
