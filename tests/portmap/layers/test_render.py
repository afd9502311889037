"""Tests for renderer input: primitives, keys, popup selection."""

import pytest

from portmap.layers import Coordinate, Layer, LayerDetails, Marker, Polygon, Polyline
from portmap.layers.render import primitive_key, render_primitives, select_layer

RING = (Coordinate(0, 0), Coordinate(0, 1), Coordinate(1, 1))


@pytest.fixture
def layers():
    return [
        Layer(
            id="custom-a",
            name="Mixed",
            description="Mixed upload",
            color="#ff0000",
            features=[
                Polygon((RING,)),
                Polyline((Coordinate(0, 0), Coordinate(2, 2))),
                Marker(Coordinate(5, 5)),
            ],
            details=LayerDetails(title="Mixed title", content="Mixed content"),
        ),
        Layer(
            id="layer-hidden",
            name="Hidden",
            description="",
            color="#00ff00",
            features=[Marker(Coordinate(1, 1))],
            visible=False,
        ),
        Layer(
            id="layer-plain",
            name="Plain",
            description="Plain description",
            color="#0000ff",
            features=[Marker(Coordinate(3, 4))],
        ),
    ]


@pytest.mark.unit
class TestRenderPrimitives:
    """One primitive per feature of each visible layer."""

    def test_keys_and_kinds(self, layers):
        prims = render_primitives(layers)
        assert [p["key"] for p in prims] == [
            "custom-a-f-0", "custom-a-f-1", "custom-a-f-2", "layer-plain-f-0",
        ]
        assert [p["kind"] for p in prims] == ["POLYGON", "POLYLINE", "MARKER", "MARKER"]

    def test_hidden_layers_are_skipped(self, layers):
        assert all(p["layer_id"] != "layer-hidden" for p in render_primitives(layers))

    def test_styles(self, layers):
        polygon, polyline, marker, _ = render_primitives(layers)
        assert polygon["style"]["fillOpacity"] == 0.4
        assert polygon["style"]["strokeWeight"] == 2
        assert polygon["style"]["fillColor"] == "#ff0000"
        assert polyline["style"]["strokeWeight"] == 3
        assert marker["style"] == {}

    def test_positions_are_lat_lng(self, layers):
        prims = render_primitives(layers)
        assert prims[2]["data"] == {"lat": 5, "lng": 5}
        assert prims[0]["data"][0][1] == {"lat": 0, "lng": 1}

    def test_primitive_key(self):
        assert primitive_key("custom-1", 3) == "custom-1-f-3"


@pytest.mark.unit
class TestSelectLayer:
    """Clicking a primitive resolves its owning layer's popup."""

    def test_details_are_used(self, layers):
        popup = select_layer(layers, "custom-a-f-1")
        assert popup["layer_id"] == "custom-a"
        assert popup["title"] == "Mixed title"
        assert popup["content"] == "Mixed content"
        assert popup["anchor"] == {"lat": 0, "lng": 0}

    def test_falls_back_to_name_and_description(self, layers):
        popup = select_layer(layers, "layer-plain-f-0")
        assert popup["title"] == "Plain"
        assert popup["content"] == "Plain description"
        assert popup["anchor"] == {"lat": 3, "lng": 4}

    @pytest.mark.parametrize("key", [
        "layer-hidden-f-0", "custom-a-f-9", "custom-a-f-x", "nope-f-0", "custom-a",
    ])
    def test_unknown_keys(self, layers, key):
        assert select_layer(layers, key) is None
