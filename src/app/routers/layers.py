"""Layer API: list, toggle, remove, upload and export map layers.

The LayerStore lives on app.state.layer_store; the application lifespan
creates it and awaits its load from local storage.
"""

from __future__ import annotations

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from loguru import logger
from pydantic import BaseModel

from app.config import settings
from portmap.layers import LayerImportError, LayerStore
from portmap.layers.exporters.geojson import export_geojson
from portmap.layers.parsers import SUPPORTED_EXTENSIONS
from portmap.layers.render import render_primitives, select_layer
from portmap.layers.upload import DEFAULT_COLOR, import_upload

router = APIRouter(prefix="/api", tags=["layers"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class LayerDetailsOut(BaseModel):
    title: str
    content: str


class LayerOut(BaseModel):
    """A layer as the map UI sees it."""
    id: str
    name: str
    description: str
    type: str | None
    visible: bool
    color: str
    custom: bool
    features: list[dict]
    details: LayerDetailsOut | None = None


class ToggleResponse(BaseModel):
    id: str
    visible: bool


class PopupResponse(BaseModel):
    layer_id: str
    title: str
    content: str
    anchor: dict


def get_layer_store(request: Request) -> LayerStore:
    return request.app.state.layer_store


def _layer_out(layer) -> LayerOut:
    data = layer.to_dict()
    return LayerOut(custom=layer.is_custom, **data)


def _require(store: LayerStore, layer_id: str):
    layer = store.get(layer_id)
    if layer is None:
        raise HTTPException(status_code=404, detail=f"Layer not found: {layer_id}")
    return layer


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/map/config")
async def map_config():
    """Initial map view and accepted upload formats."""
    return {
        "center": {"lat": settings.map_center_lat, "lng": settings.map_center_lng},
        "zoom": settings.map_zoom,
        "upload_extensions": list(SUPPORTED_EXTENSIONS),
    }


@router.get("/layers", response_model=list[LayerOut])
async def list_layers(request: Request):
    """All layers, seed first, in display order."""
    return [_layer_out(layer) for layer in get_layer_store(request).layers]


@router.get("/layers/render")
async def render_layers(request: Request):
    """Drawable primitives for the visible layers."""
    return render_primitives(get_layer_store(request).layers)


@router.get("/layers/popup/{key}", response_model=PopupResponse)
async def layer_popup(key: str, request: Request):
    """Popup content for a clicked primitive."""
    popup = select_layer(get_layer_store(request).layers, key)
    if popup is None:
        raise HTTPException(status_code=404, detail=f"No visible feature: {key}")
    return popup


@router.post("/layers/upload", response_model=LayerOut, status_code=201)
async def upload_layer(
    request: Request,
    file: UploadFile = File(...),
    name: str = Form(""),
    description: str = Form(""),
    color: str = Form(DEFAULT_COLOR),
):
    """Import a KML, GeoJSON or zipped shapefile as a new custom layer."""
    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    filename = file.filename or ""
    try:
        layer = await import_upload(
            filename, content, name=name, description=description, color=color,
        )
    except LayerImportError as e:
        logger.warning(f"Import of {filename!r} failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    get_layer_store(request).add_layer(layer)
    return _layer_out(layer)


@router.get("/layers/{layer_id}", response_model=LayerOut)
async def get_layer(layer_id: str, request: Request):
    return _layer_out(_require(get_layer_store(request), layer_id))


@router.get("/layers/{layer_id}/geojson")
async def get_layer_geojson(layer_id: str, request: Request):
    """Layer as a GeoJSON FeatureCollection ([lng, lat] positions)."""
    return export_geojson(_require(get_layer_store(request), layer_id))


@router.post("/layers/{layer_id}/toggle", response_model=ToggleResponse)
async def toggle_layer(layer_id: str, request: Request):
    visible = get_layer_store(request).toggle_visibility(layer_id)
    if visible is None:
        raise HTTPException(status_code=404, detail=f"Layer not found: {layer_id}")
    return ToggleResponse(id=layer_id, visible=visible)


@router.delete("/layers/{layer_id}", status_code=204)
async def delete_layer(layer_id: str, request: Request):
    """Remove a custom layer. Seed layers cannot be removed."""
    store = get_layer_store(request)
    layer = _require(store, layer_id)
    if not layer.is_custom:
        raise HTTPException(status_code=403, detail="Built-in layers cannot be removed")
    store.remove_layer(layer_id)
