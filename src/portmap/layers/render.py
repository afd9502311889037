"""Map renderer input: what a front end draws for the current layer set.

Each feature of each visible layer becomes one primitive keyed
"{layer_id}-f-{index}". Clicking a primitive selects its owning layer; the
popup shows details title/content, falling back to name/description.
"""

from __future__ import annotations

from portmap.layers.geometry import FeatureKind
from portmap.layers.layer import Layer

POLYGON_STYLE = {"fillOpacity": 0.4, "strokeWeight": 2}
POLYLINE_STYLE = {"strokeWeight": 3}


def primitive_key(layer_id: str, index: int) -> str:
    return f"{layer_id}-f-{index}"


def render_primitives(layers: list[Layer]) -> list[dict]:
    """Build drawable primitives for every feature of every visible layer."""
    primitives = []
    for layer in layers:
        if not layer.visible:
            continue
        for index, feature in enumerate(layer.features):
            primitive = {
                "key": primitive_key(layer.id, index),
                "layer_id": layer.id,
                "kind": feature.kind.value,
                "color": layer.color,
                "data": feature.data(),
            }
            if feature.kind is FeatureKind.POLYGON:
                primitive["style"] = {
                    "fillColor": layer.color,
                    "strokeColor": layer.color,
                    **POLYGON_STYLE,
                }
            elif feature.kind is FeatureKind.POLYLINE:
                primitive["style"] = {"strokeColor": layer.color, **POLYLINE_STYLE}
            else:
                primitive["style"] = {}
            primitives.append(primitive)
    return primitives


def select_layer(layers: list[Layer], key: str) -> dict | None:
    """Resolve a clicked primitive key to its layer's popup.

    Returns:
        {"layer_id", "title", "content", "anchor"} or None when the key
        does not match a feature of a visible layer.
    """
    for layer in layers:
        if not layer.visible or not key.startswith(f"{layer.id}-f-"):
            continue
        suffix = key[len(layer.id) + 3:]
        if not suffix.isdigit() or int(suffix) >= len(layer.features):
            continue
        return {
            "layer_id": layer.id,
            "title": layer.popup_title,
            "content": layer.popup_content,
            "anchor": layer.features[0].anchor.to_dict(),
        }
    return None
