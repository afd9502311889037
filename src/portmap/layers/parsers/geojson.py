"""Parse GeoJSON (RFC 7946) text using stdlib json.

Structure is left to the normalizer; this only decodes the text and checks
the top level is an object or an array of objects.
"""

from __future__ import annotations

import json

from portmap.layers.errors import UnreadableFileError


def parse_geojson(geojson_string: str | bytes) -> dict | list:
    """Decode a GeoJSON document.

    Raises:
        UnreadableFileError: If the content is not JSON, or its top level
            is neither an object nor an array.
    """
    try:
        data = json.loads(geojson_string)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise UnreadableFileError(f"Invalid GeoJSON file: {e}") from None
    except RecursionError:
        raise UnreadableFileError("Invalid GeoJSON file: nested too deeply") from None

    if not isinstance(data, (dict, list)):
        raise UnreadableFileError("Invalid GeoJSON file: expected an object or an array")
    return data
