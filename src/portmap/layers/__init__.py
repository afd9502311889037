"""Map data layer system: geometry model, file import, layer store.

Imports KML, GeoJSON and zipped shapefiles into custom layers that sit
after the built-in seed layers and persist to a local key-value store.
"""

from portmap.layers.errors import (
    EmptyImportError,
    GeometryError,
    LayerImportError,
    UnreadableFileError,
    UnsupportedFormatError,
)
from portmap.layers.geometry import Coordinate, Feature, FeatureKind, Marker, Polygon, Polyline
from portmap.layers.layer import CUSTOM_PREFIX, Layer, LayerDetails, new_custom_id
from portmap.layers.normalizer import normalize
from portmap.layers.storage import JsonFileStore, KeyValueStore
from portmap.layers.store import STORAGE_KEY, LayerStore

__all__ = [
    "CUSTOM_PREFIX",
    "Coordinate",
    "EmptyImportError",
    "Feature",
    "FeatureKind",
    "GeometryError",
    "JsonFileStore",
    "KeyValueStore",
    "Layer",
    "LayerDetails",
    "LayerImportError",
    "LayerStore",
    "Marker",
    "Polygon",
    "Polyline",
    "STORAGE_KEY",
    "UnreadableFileError",
    "UnsupportedFormatError",
    "new_custom_id",
    "normalize",
]
