"""Parse KML to a GeoJSON FeatureCollection using xml.etree.ElementTree.

Handles Placemark/Point, Placemark/LineString, Placemark/Polygon (outer and
inner boundaries) and Placemark/MultiGeometry, whose children become one
feature each. KML coordinates are "lng,lat[,alt] lng,lat[,alt] ...", already
in GeoJSON order, so positions are passed through as [lng, lat(, alt)].
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from portmap.layers.errors import UnreadableFileError


def parse_kml(kml_string: str | bytes) -> dict:
    """Parse a KML document into a GeoJSON FeatureCollection dict.

    Args:
        kml_string: Raw KML XML content.

    Returns:
        FeatureCollection with one Feature per supported geometry.

    Raises:
        UnreadableFileError: If the content is not well-formed XML.
    """
    try:
        root = ET.fromstring(kml_string)
    except ET.ParseError as e:
        raise UnreadableFileError(f"Invalid KML file: {e}") from None

    ns = _detect_namespace(root)

    features: list[dict] = []
    for pm in root.iter(f"{ns}Placemark"):
        properties = {}
        name = _get_text(pm, "name", ns)
        if name:
            properties["name"] = name
        description = _get_text(pm, "description", ns)
        if description:
            properties["description"] = description

        for geometry in _placemark_geometries(pm, ns):
            features.append({
                "type": "Feature",
                "geometry": geometry,
                "properties": dict(properties),
            })

    return {"type": "FeatureCollection", "features": features}


def _detect_namespace(root: ET.Element) -> str:
    """Return the "{uri}" prefix of the root tag, or "" when unqualified."""
    tag = root.tag
    if "{" in tag:
        return tag.split("}")[0] + "}"
    return ""


def _get_text(parent: ET.Element, tag: str, ns: str) -> str:
    elem = parent.find(f"{ns}{tag}")
    if elem is not None and elem.text:
        return elem.text.strip()
    return ""


def _placemark_geometries(pm: ET.Element, ns: str) -> list[dict]:
    """Collect geometries of a Placemark, flattening MultiGeometry."""
    geometries: list[dict] = []
    stack = list(reversed(list(pm)))
    while stack:
        elem = stack.pop()
        if elem.tag == f"{ns}MultiGeometry":
            stack.extend(reversed(list(elem)))
        else:
            geometries.extend(_element_geometries(elem, ns))
    return geometries


def _element_geometries(elem: ET.Element, ns: str) -> list[dict]:
    if elem.tag == f"{ns}Point":
        coords = _parse_coordinates(elem, ns)
        if coords:
            return [{"type": "Point", "coordinates": coords[0]}]
    elif elem.tag == f"{ns}LineString":
        coords = _parse_coordinates(elem, ns)
        if coords:
            return [{"type": "LineString", "coordinates": coords}]
    elif elem.tag == f"{ns}Polygon":
        rings = _parse_polygon_rings(elem, ns)
        if rings:
            return [{"type": "Polygon", "coordinates": rings}]
    return []


def _parse_coordinate_string(coord_str: str) -> list[list[float]]:
    """Parse 'lng,lat,alt lng,lat,alt ...' into [[lng, lat, alt], ...]."""
    coords = []
    for token in coord_str.strip().split():
        parts = token.strip().split(",")
        if len(parts) < 2:
            continue
        try:
            coords.append([float(p) for p in parts if p != ""])
        except ValueError:
            continue
    return coords


def _parse_coordinates(geom_elem: ET.Element, ns: str) -> list[list[float]]:
    coord_elem = geom_elem.find(f"{ns}coordinates")
    if coord_elem is None or not coord_elem.text:
        return []
    return _parse_coordinate_string(coord_elem.text)


def _parse_polygon_rings(polygon_elem: ET.Element, ns: str) -> list[list[list[float]]]:
    """Outer boundary first, then each inner boundary (hole)."""
    rings = []
    outer = polygon_elem.find(f"{ns}outerBoundaryIs/{ns}LinearRing")
    if outer is None:
        return []
    coords = _parse_coordinates(outer, ns)
    if not coords:
        return []
    rings.append(coords)

    for inner in polygon_elem.findall(f"{ns}innerBoundaryIs/{ns}LinearRing"):
        coords = _parse_coordinates(inner, ns)
        if coords:
            rings.append(coords)
    return rings
