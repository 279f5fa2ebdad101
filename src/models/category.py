"""
Category models for detected room elements.

A category is a closed tagged union: an element is either an object
(ObjectKind) or a surface (SurfaceKind). The variant is fixed when a record
is created; the kind inside the variant may change between scan updates
(e.g. a door that opens).

Unknown category names never raise. They map to the UNRECOGNIZED member of
the relevant enumeration so consumers can choose a fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class CategoryVariant(str, Enum):
    """Which side of the category union an element belongs to."""
    OBJECT = "object"
    SURFACE = "surface"


class ObjectCategory(str, Enum):
    STORAGE = "storage"
    REFRIGERATOR = "refrigerator"
    STOVE = "stove"
    BED = "bed"
    SINK = "sink"
    WASHER_DRYER = "washer_dryer"
    TOILET = "toilet"
    BATHTUB = "bathtub"
    OVEN = "oven"
    DISHWASHER = "dishwasher"
    TABLE = "table"
    SOFA = "sofa"
    CHAIR = "chair"
    FIREPLACE = "fireplace"
    TELEVISION = "television"
    STAIRS = "stairs"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, name: str) -> "ObjectCategory":
        """Parse a category name; unknown names become UNRECOGNIZED."""
        key = _normalize(name)
        for member in cls:
            if member.value == key and member is not cls.UNRECOGNIZED:
                return member
        logger.warning(f"Unrecognized object category: {name!r}")
        return cls.UNRECOGNIZED


class SurfaceCategory(str, Enum):
    WALL = "wall"
    DOOR_OPEN = "door_open"
    DOOR_CLOSED = "door_closed"
    OPENING = "opening"
    WINDOW = "window"
    FLOOR = "floor"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, name: str, is_open: Optional[bool] = None) -> "SurfaceCategory":
        """
        Parse a surface category name.

        A bare "door" needs the ``is_open`` flag to pick between DOOR_OPEN and
        DOOR_CLOSED; without it the door is treated as closed.
        """
        key = _normalize(name)
        if key == "door":
            return cls.DOOR_OPEN if is_open else cls.DOOR_CLOSED
        for member in cls:
            if member.value == key and member is not cls.UNRECOGNIZED:
                return member
        logger.warning(f"Unrecognized surface category: {name!r}")
        return cls.UNRECOGNIZED


@dataclass(frozen=True)
class ObjectKind:
    """Object variant of the category union."""
    category: ObjectCategory

    @property
    def variant(self) -> CategoryVariant:
        return CategoryVariant.OBJECT

    @property
    def is_recognized(self) -> bool:
        return self.category is not ObjectCategory.UNRECOGNIZED


@dataclass(frozen=True)
class SurfaceKind:
    """Surface variant of the category union."""
    category: SurfaceCategory

    @property
    def variant(self) -> CategoryVariant:
        return CategoryVariant.SURFACE

    @property
    def is_recognized(self) -> bool:
        return self.category is not SurfaceCategory.UNRECOGNIZED


Category = Union[ObjectKind, SurfaceKind]


def object_category(name: str) -> ObjectKind:
    """Build an object category from its name."""
    return ObjectKind(ObjectCategory.parse(name))


def surface_category(name: str, is_open: Optional[bool] = None) -> SurfaceKind:
    """Build a surface category from its name."""
    return SurfaceKind(SurfaceCategory.parse(name, is_open=is_open))


def category_to_dict(category: Category) -> dict:
    """Convert a category to a dictionary for JSON serialization."""
    return {"variant": category.variant.value, "kind": category.category.value}


def _normalize(name: str) -> str:
    # Accept camelCase ("washerDryer"), kebab-case and spaced names.
    chars = []
    prev = ""
    for ch in str(name).strip():
        if ch.isupper() and prev.islower():
            chars.append("_")
        chars.append(ch.lower())
        prev = ch
    return "".join(chars).replace("-", "_").replace(" ", "_")
