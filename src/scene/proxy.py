"""
Scene proxies for tracked room elements.

A proxy is the renderer-facing stand-in for a record: a unit box placed at
the record's transform and scaled to its dimensions, plus a readable label.
ProxyScene keeps one proxy per anchored identity by listening to session
callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from models.category import (
    Category,
    ObjectCategory,
    ObjectKind,
    SurfaceCategory,
    SurfaceKind,
)
from models.element import ElementIdentity, ElementRecord
from session.base import SessionObserver


def describe_category(category: Category) -> str:
    """
    Human-readable label for a category.

    Every variant is matched explicitly, including the unrecognized members.
    """
    if isinstance(category, ObjectKind):
        if category.category is ObjectCategory.UNRECOGNIZED:
            return "unrecognized object"
        return category.category.value.replace("_", " ")
    if isinstance(category, SurfaceKind):
        if category.category is SurfaceCategory.UNRECOGNIZED:
            return "unrecognized surface"
        if category.category is SurfaceCategory.DOOR_OPEN:
            return "door (open)"
        if category.category is SurfaceCategory.DOOR_CLOSED:
            return "door (closed)"
        return category.category.value
    raise TypeError(f"Not a category: {category!r}")


@dataclass
class ElementProxy:
    """
    Renderable stand-in for one tracked element.

    Attributes:
        identity: Identity of the anchored record.
        transform: 4x4 pose.
        scale: Box scale, equal to the record's dimensions.
        label: Readable category label.
    """
    identity: ElementIdentity
    transform: np.ndarray
    scale: np.ndarray
    label: str

    @classmethod
    def from_record(cls, record: ElementRecord) -> "ElementProxy":
        return cls(
            identity=record.identity,
            transform=record.transform,
            scale=record.dimensions,
            label=describe_category(record.category),
        )

    def refresh(self, record: ElementRecord) -> None:
        """Copy fresh pose, extent and label from the record."""
        self.transform = record.transform
        self.scale = record.dimensions
        self.label = describe_category(record.category)

    @property
    def position(self) -> np.ndarray:
        """Translation column of the transform."""
        return self.transform[:3, 3]

    def to_dict(self) -> dict:
        return {
            "identity": str(self.identity),
            "position": self.position.tolist(),
            "scale": self.scale.tolist(),
            "label": self.label,
        }


class ProxyScene(SessionObserver):
    """
    Mirrors anchored records as proxies, keyed by identity.

    Updates for identities without a proxy are skipped.
    """

    def __init__(self):
        self._proxies: Dict[ElementIdentity, ElementProxy] = {}

    def __len__(self) -> int:
        return len(self._proxies)

    def get(self, identity: ElementIdentity) -> Optional[ElementProxy]:
        return self._proxies.get(identity)

    def proxies(self) -> List[ElementProxy]:
        return list(self._proxies.values())

    def on_added(self, record: ElementRecord) -> None:
        self._proxies[record.identity] = ElementProxy.from_record(record)

    def on_updated(self, record: ElementRecord) -> None:
        proxy = self._proxies.get(record.identity)
        if proxy is None:
            return
        proxy.refresh(record)

    def on_removed(self, identity: ElementIdentity, record: ElementRecord) -> None:
        self._proxies.pop(identity, None)

    def to_dict(self) -> dict:
        return {"elements": [proxy.to_dict() for proxy in self._proxies.values()]}
