"""Geometry model: coordinates and the three feature kinds a layer can carry.

Internal coordinates are latitude-first: Coordinate(lat, lng).
Interchange documents (GeoJSON, KML, shapefiles) are longitude-first, so every
position read from them goes through Coordinate.from_lng_lat().
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from portmap.layers.errors import GeometryError


class FeatureKind(str, Enum):
    """Tag shared by a feature and the layer it dominates."""

    MARKER = "MARKER"
    POLYLINE = "POLYLINE"
    POLYGON = "POLYGON"


@dataclass(frozen=True)
class Coordinate:
    """A (latitude, longitude) pair in decimal degrees."""

    lat: float
    lng: float

    @classmethod
    def from_lng_lat(cls, position) -> Coordinate:
        """Build a Coordinate from a longitude-first position.

        Args:
            position: [lng, lat] or [lng, lat, alt, ...]. Extra ordinates
                are dropped.

        Returns:
            The transposed Coordinate.

        Raises:
            GeometryError: If the position is not a pair of finite numbers
                inside the valid latitude/longitude ranges.
        """
        if not isinstance(position, (list, tuple)) or len(position) < 2:
            raise GeometryError(f"Not a position: {position!r}")
        return cls._checked(position[1], position[0], position)

    @classmethod
    def from_dict(cls, data: dict) -> Coordinate:
        """Build a Coordinate from a stored {"lat", "lng"} record.

        Raises:
            GeometryError: On the same conditions as from_lng_lat().
        """
        if not isinstance(data, dict) or "lat" not in data or "lng" not in data:
            raise GeometryError(f"Not a coordinate record: {data!r}")
        return cls._checked(data["lat"], data["lng"], data)

    @classmethod
    def _checked(cls, lat, lng, raw) -> Coordinate:
        if isinstance(lng, bool) or isinstance(lat, bool):
            raise GeometryError(f"Not a position: {raw!r}")
        try:
            lng = float(lng)
            lat = float(lat)
        except (TypeError, ValueError):
            raise GeometryError(f"Non-numeric position: {raw!r}") from None
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise GeometryError(f"Non-finite position: {raw!r}")
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            raise GeometryError(f"Position out of range: {raw!r}")
        return cls(lat=lat, lng=lng)

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}

    def to_lng_lat(self) -> list[float]:
        return [self.lng, self.lat]


@dataclass(frozen=True)
class Marker:
    """A single point."""

    kind: ClassVar[FeatureKind] = FeatureKind.MARKER

    position: Coordinate

    @property
    def anchor(self) -> Coordinate:
        return self.position

    def data(self) -> dict:
        return self.position.to_dict()


@dataclass(frozen=True)
class Polyline:
    """An open path of two or more coordinates."""

    kind: ClassVar[FeatureKind] = FeatureKind.POLYLINE

    path: tuple[Coordinate, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        if len(self.path) < 2:
            raise GeometryError(f"Polyline needs at least 2 points, got {len(self.path)}")

    @property
    def anchor(self) -> Coordinate:
        return self.path[0]

    def data(self) -> list[dict]:
        return [c.to_dict() for c in self.path]


@dataclass(frozen=True)
class Polygon:
    """A polygon: ring 0 is the outer boundary, later rings are holes."""

    kind: ClassVar[FeatureKind] = FeatureKind.POLYGON

    rings: tuple[tuple[Coordinate, ...], ...]

    def __post_init__(self) -> None:
        rings = tuple(tuple(ring) for ring in self.rings)
        object.__setattr__(self, "rings", rings)
        if not rings:
            raise GeometryError("Polygon needs at least one ring")
        for idx, ring in enumerate(rings):
            if len(ring) < 3:
                raise GeometryError(
                    f"Polygon ring {idx} needs at least 3 points, got {len(ring)}"
                )

    @property
    def outer(self) -> tuple[Coordinate, ...]:
        return self.rings[0]

    @property
    def holes(self) -> tuple[tuple[Coordinate, ...], ...]:
        return self.rings[1:]

    @property
    def anchor(self) -> Coordinate:
        return self.rings[0][0]

    def data(self) -> list[list[dict]]:
        return [[c.to_dict() for c in ring] for ring in self.rings]


Feature = Union[Marker, Polyline, Polygon]


def feature_to_dict(feature: Feature) -> dict:
    """Serialize a feature to its JSON record: {"type": KIND, "data": ...}."""
    return {"type": feature.kind.value, "data": feature.data()}


def feature_from_dict(record: dict) -> Feature:
    """Rebuild a feature from the record written by feature_to_dict().

    Raises:
        GeometryError: If the record is not a recognizable feature.
    """
    try:
        kind = FeatureKind(record["type"])
        data = record["data"]
        if kind is FeatureKind.MARKER:
            return Marker(Coordinate.from_dict(data))
        if kind is FeatureKind.POLYLINE:
            return Polyline(tuple(Coordinate.from_dict(c) for c in data))
        return Polygon(
            tuple(tuple(Coordinate.from_dict(c) for c in ring) for ring in data)
        )
    except GeometryError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise GeometryError(f"Unrecognized feature record: {e}") from None
