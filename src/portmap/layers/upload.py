"""Upload pipeline: file bytes to a new custom Layer.

Parsing and normalization run in a worker thread; the caller awaits the
result. Nothing is added to a store here: on any LayerImportError the caller
simply has no layer to add.
"""

from __future__ import annotations

import asyncio
import os

from loguru import logger

from portmap.layers.geometry import Feature
from portmap.layers.layer import Layer, LayerDetails, new_custom_id
from portmap.layers.normalizer import normalize
from portmap.layers.parsers import parse_file

DEFAULT_COLOR = "#3b82f6"
DEFAULT_DESCRIPTION = "Layer imported by the user"


def read_features(filename: str, content: bytes) -> list[Feature]:
    """Parse and normalize an uploaded file."""
    document = parse_file(filename, content)
    return normalize(document)


async def import_upload(
    filename: str,
    content: bytes,
    name: str | None = None,
    description: str = "",
    color: str = DEFAULT_COLOR,
) -> Layer:
    """Build a custom layer from an uploaded file.

    Args:
        filename: Original file name (drives format dispatch).
        content: Raw file bytes.
        name: Layer name; defaults to the file name without extension.
        description: Layer description; a generic one is used when blank.
        color: Display color.

    Returns:
        The new, visible custom Layer. It is not registered anywhere.

    Raises:
        LayerImportError: Unsupported extension, unreadable file, or no
            geometry found.
    """
    features = await asyncio.to_thread(read_features, filename, content)

    basename = os.path.basename(filename)
    name = (name or "").strip() or os.path.splitext(basename)[0]
    layer = Layer(
        id=new_custom_id(),
        name=name,
        description=description.strip() or DEFAULT_DESCRIPTION,
        color=color or DEFAULT_COLOR,
        features=features,
        visible=True,
        details=LayerDetails(title=name, content=f"Imported from {basename}"),
    )
    logger.info(f"Imported {len(features)} feature(s) from {basename} as {layer.id}")
    return layer
