"""LayerStore: ordered registry of seed and custom map layers.

Three mutations: toggle_visibility, add_layer, remove_layer. Each one
writes the current custom subset to the key-value store, wholesale, as a
fire-and-forget task. Persistence failures are logged and never undo the
in-memory change.
"""

from __future__ import annotations

import asyncio
import copy

from loguru import logger

from portmap.layers.errors import GeometryError
from portmap.layers.layer import Layer, is_custom_id
from portmap.layers.storage import KeyValueStore

STORAGE_KEY = "custom-map-layers"


class LayerStore:
    """In-memory list of layers, mirrored to local storage for custom ones."""

    def __init__(
        self,
        seed: list[Layer] | None = None,
        storage: KeyValueStore | None = None,
        key: str = STORAGE_KEY,
    ) -> None:
        self._layers: list[Layer] = [copy.deepcopy(layer) for layer in seed or []]
        self._storage = storage
        self._key = key
        self._pending: set[asyncio.Task] = set()

    # -- queries ---------------------------------------------------------

    @property
    def layers(self) -> list[Layer]:
        """Snapshot of all layers, in display order."""
        return list(self._layers)

    def visible_layers(self) -> list[Layer]:
        return [layer for layer in self._layers if layer.visible]

    def custom_layers(self) -> list[Layer]:
        return [layer for layer in self._layers if layer.is_custom]

    def get(self, layer_id: str) -> Layer | None:
        for layer in self._layers:
            if layer.id == layer_id:
                return layer
        return None

    # -- mutations -------------------------------------------------------

    def toggle_visibility(self, layer_id: str) -> bool | None:
        """Flip a layer's visibility.

        Returns:
            The new visibility, or None if no layer has that id.
        """
        layer = self.get(layer_id)
        if layer is None:
            return None
        layer.visible = not layer.visible
        self._persist()
        return layer.visible

    def add_layer(self, layer: Layer) -> str:
        """Append a layer. The caller is responsible for id uniqueness.

        Returns:
            The id of the added layer.
        """
        self._layers.append(layer)
        self._persist()
        return layer.id

    def remove_layer(self, layer_id: str) -> bool:
        """Remove the first layer with the given id.

        Seed layers are never removed.

        Returns:
            True if a layer was removed, False otherwise.
        """
        for idx, layer in enumerate(self._layers):
            if layer.id != layer_id:
                continue
            if not layer.is_custom:
                logger.warning(f"Refusing to remove seed layer: {layer_id}")
                return False
            del self._layers[idx]
            self._persist()
            return True
        return False

    # -- persistence -----------------------------------------------------

    async def load(self) -> int:
        """Merge persisted custom layers after the seed layers.

        Only records whose id carries the custom prefix and that rebuild
        into a layer with at least one feature are kept.

        Returns:
            Number of custom layers restored.
        """
        if self._storage is None:
            return 0
        try:
            saved = await self._storage.get(self._key)
        except Exception as e:
            logger.warning(f"Failed to read custom layers: {e}")
            return 0

        if not isinstance(saved, list) or not saved:
            return 0

        restored = 0
        for record in saved:
            if not isinstance(record, dict) or not is_custom_id(record.get("id")):
                continue
            try:
                layer = Layer.from_dict(record)
            except GeometryError as e:
                logger.warning(f"Dropping unreadable stored layer {record.get('id')}: {e}")
                continue
            if not layer.features:
                continue
            self._layers.append(layer)
            restored += 1

        logger.info(f"Restored {restored} custom layer(s) from storage")
        return restored

    async def flush(self) -> None:
        """Wait for persistence writes already scheduled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _persist(self) -> None:
        if self._storage is None:
            return
        snapshot = [layer.to_dict() for layer in self.custom_layers()]
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._write(snapshot))
            return
        task = loop.create_task(self._write(snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, snapshot: list[dict]) -> None:
        try:
            await self._storage.set(self._key, snapshot)
        except Exception as e:
            logger.warning(f"Failed to save custom layers: {e}")
