"""Tests for the upload pipeline: file bytes to a new custom layer."""

import asyncio
import json

import pytest

from portmap.layers import (
    Coordinate,
    EmptyImportError,
    FeatureKind,
    LayerStore,
    Marker,
    UnreadableFileError,
    UnsupportedFormatError,
)
from portmap.layers.seed import INITIAL_LAYERS
from portmap.layers.upload import DEFAULT_COLOR, DEFAULT_DESCRIPTION, import_upload, read_features

POINT = json.dumps({"type": "Point", "coordinates": [-44.37, -2.57]}).encode()


@pytest.mark.unit
class TestImportUpload:
    """import_upload builds a custom layer and never touches a store."""

    def test_single_point_geojson(self):
        layer = asyncio.run(import_upload("pier.geojson", POINT, name="Pier"))
        assert layer.features == [Marker(Coordinate(lat=-2.57, lng=-44.37))]
        assert layer.type is FeatureKind.MARKER
        assert layer.is_custom
        assert layer.visible is True

    def test_defaults(self):
        layer = asyncio.run(import_upload("uploads/Expansion Area.json", POINT))
        assert layer.name == "Expansion Area"
        assert layer.description == DEFAULT_DESCRIPTION
        assert layer.color == DEFAULT_COLOR
        assert layer.details.title == "Expansion Area"
        assert layer.details.content == "Imported from Expansion Area.json"

    def test_explicit_metadata(self):
        layer = asyncio.run(import_upload(
            "a.geojson", POINT, name="  Berth 100  ", description="New berth", color="#ff00ff",
        ))
        assert layer.name == "Berth 100"
        assert layer.description == "New berth"
        assert layer.color == "#ff00ff"

    def test_each_upload_gets_a_fresh_id(self):
        a = asyncio.run(import_upload("a.geojson", POINT))
        b = asyncio.run(import_upload("a.geojson", POINT))
        assert a.id != b.id

    def test_empty_collection_adds_nothing(self):
        store = LayerStore(seed=INITIAL_LAYERS)
        content = json.dumps({"type": "FeatureCollection", "features": []}).encode()
        with pytest.raises(EmptyImportError):
            store.add_layer(asyncio.run(import_upload("empty.geojson", content)))
        assert len(store.layers) == len(INITIAL_LAYERS)

    def test_unsupported_extension(self):
        with pytest.raises(UnsupportedFormatError):
            asyncio.run(import_upload("area.shp", b"\x00"))

    def test_unreadable_file(self):
        with pytest.raises(UnreadableFileError):
            read_features("area.geojson", b"{")
