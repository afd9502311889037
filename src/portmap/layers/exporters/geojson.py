"""Export Layer to GeoJSON dict (RFC 7946 compliant).

Internal coordinates are latitude-first; GeoJSON positions are written back
as [lng, lat].
"""

from __future__ import annotations

from portmap.layers.geometry import Feature, Marker, Polyline
from portmap.layers.layer import Layer


def export_geojson(layer: Layer) -> dict:
    """Export a Layer to a GeoJSON FeatureCollection dict.

    Args:
        layer: The Layer to export.

    Returns:
        Dict representing a valid GeoJSON FeatureCollection.
    """
    features = []
    for idx, feature in enumerate(layer.features):
        features.append(_feature_to_geojson(layer, feature, idx))

    return {
        "type": "FeatureCollection",
        "name": layer.name,
        "features": features,
    }


def _feature_to_geojson(layer: Layer, feature: Feature, idx: int) -> dict:
    """Convert a layer feature to a GeoJSON Feature dict."""
    return {
        "type": "Feature",
        "id": f"{layer.id}-f-{idx}",
        "geometry": _geometry(feature),
        "properties": {
            "layer_id": layer.id,
            "name": layer.name,
            "description": layer.description,
            "color": layer.color,
        },
    }


def _geometry(feature: Feature) -> dict:
    if isinstance(feature, Marker):
        return {"type": "Point", "coordinates": feature.position.to_lng_lat()}
    if isinstance(feature, Polyline):
        return {
            "type": "LineString",
            "coordinates": [c.to_lng_lat() for c in feature.path],
        }
    return {
        "type": "Polygon",
        "coordinates": [[c.to_lng_lat() for c in ring] for ring in feature.rings],
    }
