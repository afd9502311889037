"""Flatten parsed GeoJSON documents into a list of layer features.

Accepts whatever the parsers produce: a FeatureCollection, a single Feature,
a bare geometry, or a list of those (several files parsed together).
Point, LineString, Polygon and MultiPolygon are understood; every other
geometry type is ignored. Malformed geometries are skipped, never fatal.
"""

from __future__ import annotations

from loguru import logger

from portmap.layers.errors import EmptyImportError, GeometryError
from portmap.layers.geometry import Coordinate, Feature, Marker, Polygon, Polyline

_GEOMETRY_TYPES = frozenset({
    "Point", "MultiPoint", "LineString", "MultiLineString",
    "Polygon", "MultiPolygon", "GeometryCollection",
})


def normalize(document) -> list[Feature]:
    """Convert a parsed geographic document into features.

    Args:
        document: GeoJSON tree (dict) or list of trees.

    Returns:
        Features in encounter order; a MultiPolygon contributes one
        Polygon per member.

    Raises:
        EmptyImportError: If no supported geometry was found.
    """
    features: list[Feature] = []
    for geometry in _iter_geometries(document):
        features.extend(_convert(geometry))

    if not features:
        raise EmptyImportError()
    return features


def _iter_geometries(document):
    """Yield raw geometry dicts from a document, depth-first, in order."""
    stack = [document]
    while stack:
        node = stack.pop()
        if isinstance(node, (list, tuple)):
            stack.extend(reversed(node))
            continue
        if not isinstance(node, dict):
            continue

        node_type = node.get("type")
        if node_type == "FeatureCollection":
            stack.append(node.get("features") or [])
        elif node_type == "Feature":
            geometry = node.get("geometry")
            if isinstance(geometry, dict):
                yield geometry
        elif node_type in _GEOMETRY_TYPES:
            yield node


def _convert(geometry: dict) -> list[Feature]:
    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates")
    try:
        if geom_type == "Point":
            return [Marker(Coordinate.from_lng_lat(coordinates))]
        if geom_type == "LineString":
            return [Polyline(_path(coordinates))]
        if geom_type == "Polygon":
            return [_polygon(coordinates)]
        if geom_type == "MultiPolygon":
            return _multipolygon(coordinates)
    except GeometryError as e:
        logger.debug(f"Skipping malformed {geom_type}: {e}")
        return []

    logger.debug(f"Ignoring unsupported geometry type: {geom_type}")
    return []


def _sequence(value) -> list:
    if not isinstance(value, (list, tuple)):
        raise GeometryError(f"Expected a coordinate array, got {type(value).__name__}")
    return list(value)


def _path(positions) -> tuple[Coordinate, ...]:
    return tuple(Coordinate.from_lng_lat(p) for p in _sequence(positions))


def _polygon(rings) -> Polygon:
    return Polygon(tuple(_path(ring) for ring in _sequence(rings)))


def _multipolygon(members) -> list[Feature]:
    polygons: list[Feature] = []
    for idx, member in enumerate(_sequence(members)):
        try:
            polygons.append(_polygon(member))
        except GeometryError as e:
            logger.debug(f"Skipping malformed MultiPolygon member {idx}: {e}")
    return polygons
