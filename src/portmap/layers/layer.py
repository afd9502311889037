"""Layer record for the map data layer system.

A layer is a named, styled, independently toggleable list of features.
User-imported layers carry ids starting with CUSTOM_PREFIX; that prefix is
what persistence and reload revalidation key on.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field

from portmap.layers.errors import GeometryError
from portmap.layers.geometry import (
    Coordinate,
    Feature,
    FeatureKind,
    Marker,
    Polygon,
    Polyline,
    feature_from_dict,
    feature_to_dict,
)

CUSTOM_PREFIX = "custom-"


def new_custom_id() -> str:
    """Return a fresh id for a user-imported layer."""
    return f"{CUSTOM_PREFIX}{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def is_custom_id(layer_id) -> bool:
    return isinstance(layer_id, str) and layer_id.startswith(CUSTOM_PREFIX)


@dataclass
class LayerDetails:
    """Popup text for a layer."""

    title: str
    content: str


@dataclass
class Layer:
    """A named collection of geographic features.

    Attributes:
        id: Unique, stable identifier.
        name: Human-readable display name.
        description: One-line description shown in the layer list.
        color: Display color (CSS color string).
        features: Ordered list of Marker/Polyline/Polygon features.
        visible: Whether the layer is currently rendered.
        details: Optional popup title/content.
    """

    id: str
    name: str
    description: str
    color: str
    features: list[Feature] = field(default_factory=list)
    visible: bool = True
    details: LayerDetails | None = None

    @property
    def type(self) -> FeatureKind | None:
        """Kind of the first feature."""
        if not self.features:
            return None
        return self.features[0].kind

    @property
    def is_custom(self) -> bool:
        return is_custom_id(self.id)

    @property
    def popup_title(self) -> str:
        if self.details is not None and self.details.title:
            return self.details.title
        return self.name

    @property
    def popup_content(self) -> str:
        if self.details is not None and self.details.content:
            return self.details.content
        return self.description

    def to_dict(self) -> dict:
        kind = self.type
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": kind.value if kind is not None else None,
            "visible": self.visible,
            "color": self.color,
            "features": [feature_to_dict(f) for f in self.features],
            "details": (
                {"title": self.details.title, "content": self.details.content}
                if self.details is not None
                else None
            ),
        }

    @classmethod
    def from_dict(cls, record: dict) -> Layer:
        """Rebuild a layer from a stored record.

        Records from the older single-geometry format ("type" plus a "data"
        field holding one coordinate or a coordinate list) are migrated into
        a one-feature layer here.

        Raises:
            GeometryError: If the record cannot be turned into a layer.
        """
        if not isinstance(record, dict) or not isinstance(record.get("id"), str):
            raise GeometryError("Layer record without an id")

        raw_features = record.get("features")
        if raw_features is not None and not isinstance(raw_features, list):
            raise GeometryError(
                f"Layer {record['id']} features is not a list: {type(raw_features).__name__}"
            )
        if raw_features:
            features = [feature_from_dict(f) for f in raw_features]
        elif record.get("data") is not None:
            features = [_migrate_legacy(record.get("type"), record["data"])]
        else:
            features = []

        details = record.get("details")
        if isinstance(details, dict):
            details = LayerDetails(
                title=str(details.get("title") or ""),
                content=str(details.get("content") or ""),
            )
        else:
            details = None

        return cls(
            id=record["id"],
            name=str(record.get("name") or ""),
            description=str(record.get("description") or ""),
            color=str(record.get("color") or ""),
            features=features,
            visible=bool(record.get("visible", True)),
            details=details,
        )


def _migrate_legacy(kind, data) -> Feature:
    """Convert a legacy {type, data} geometry into a feature."""
    try:
        if isinstance(data, dict):
            return Marker(Coordinate.from_dict(data))
        path = tuple(Coordinate.from_dict(c) for c in data)
    except (KeyError, TypeError, ValueError) as e:
        raise GeometryError(f"Unrecognized legacy geometry: {e}") from None
    if kind == FeatureKind.POLYLINE.value:
        return Polyline(path)
    if kind == FeatureKind.MARKER.value and len(path) == 1:
        return Marker(path[0])
    return Polygon((path,))
