"""File parsers: raw upload bytes to a GeoJSON document.

Dispatch is by file extension (case-insensitive), never by content.
"""

from __future__ import annotations

import os

from portmap.layers.errors import UnsupportedFormatError

SUPPORTED_EXTENSIONS = (".kml", ".zip", ".json", ".geojson")


def parse_file(filename: str, content: bytes) -> dict | list:
    """Parse an uploaded file into a GeoJSON document (or list of documents).

    Args:
        filename: Original file name; only its extension is used.
        content: Raw file bytes.

    Raises:
        UnsupportedFormatError: If the extension is not supported.
        UnreadableFileError: If the content cannot be parsed.
    """
    ext = os.path.splitext(filename)[1].lower()

    if ext == ".kml":
        from portmap.layers.parsers.kml import parse_kml
        return parse_kml(content)
    elif ext == ".zip":
        from portmap.layers.parsers.shapefile_zip import parse_shapefile_zip
        return parse_shapefile_zip(content)
    elif ext in (".json", ".geojson"):
        from portmap.layers.parsers.geojson import parse_geojson
        return parse_geojson(content)
    raise UnsupportedFormatError(
        f"Unsupported file type {ext or '(none)'!s}. "
        f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}. "
        "For shapefiles, upload a .zip containing the .shp and .dbf files."
    )
