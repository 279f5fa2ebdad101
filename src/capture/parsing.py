"""
Parsers for raw scan payloads.

Scan recordings and live producers hand over plain mappings. These helpers
turn them into DetectedElement snapshots and reject malformed input here, at
the edge, so the reconciler only ever sees well-formed elements.

Element payload:
    identifier: UUID string
    transform: 4x4 nested list (optional, defaults to identity)
    dimensions: [x, y, z]
    category: category name ("bed", "washerDryer", "door", ...)
    is_open: door state, surfaces only (optional)
"""

from __future__ import annotations

import uuid
from typing import Any, List, Mapping, Sequence, Tuple

from models.category import CategoryVariant, object_category, surface_category
from models.element import DetectedElement


class ScanParseError(ValueError):
    """Raised when a scan payload is malformed."""


def parse_detected_element(
    raw: Mapping[str, Any],
    variant: CategoryVariant,
    label: str = "element",
) -> DetectedElement:
    """
    Parse one element payload.

    Args:
        raw: Element mapping.
        variant: Whether the payload came from the object or surface list.
        label: Position label used in error messages.

    Raises:
        ScanParseError: If a field is missing or invalid.
    """
    if not isinstance(raw, Mapping):
        raise ScanParseError(f"{label} must be a mapping")

    identifier = raw.get("identifier", raw.get("identity"))
    if identifier is None:
        raise ScanParseError(f"{label} missing required field 'identifier'")
    try:
        identity = uuid.UUID(str(identifier))
    except ValueError:
        raise ScanParseError(f"{label} has invalid identifier {identifier!r}")

    name = raw.get("category")
    if not isinstance(name, str) or not name:
        raise ScanParseError(f"{label} missing required field 'category'")
    if variant is CategoryVariant.OBJECT:
        category = object_category(name)
    else:
        is_open = raw.get("is_open")
        if is_open is not None and not isinstance(is_open, bool):
            raise ScanParseError(f"{label}.is_open must be a boolean")
        category = surface_category(name, is_open=is_open)

    if "dimensions" not in raw:
        raise ScanParseError(f"{label} missing required field 'dimensions'")

    try:
        return DetectedElement.create(
            identity=identity,
            transform=raw.get("transform"),
            dimensions=raw["dimensions"],
            category=category,
        )
    except (TypeError, ValueError) as e:
        raise ScanParseError(f"{label}: {e}")


def parse_scan_update(
    raw: Mapping[str, Any],
    label: str = "update",
) -> Tuple[List[DetectedElement], List[DetectedElement]]:
    """
    Parse one scan update into (objects, surfaces).

    Both lists are optional in the payload; a missing list is empty.

    Raises:
        ScanParseError: If the update or any element is malformed.
    """
    if not isinstance(raw, Mapping):
        raise ScanParseError(f"{label} must be a mapping")
    objects = [
        parse_detected_element(item, CategoryVariant.OBJECT, f"{label}.objects[{idx}]")
        for idx, item in enumerate(_require_list(raw, "objects", label))
    ]
    surfaces = [
        parse_detected_element(item, CategoryVariant.SURFACE, f"{label}.surfaces[{idx}]")
        for idx, item in enumerate(_require_list(raw, "surfaces", label))
    ]
    return objects, surfaces


def _require_list(raw: Mapping[str, Any], key: str, label: str) -> Sequence[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ScanParseError(f"{label}.{key} must be a list")
    return value
