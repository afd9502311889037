"""Error taxonomy for the layer system.

Import errors are user-facing: their message is shown as the upload status.
"""

from __future__ import annotations


class GeometryError(ValueError):
    """A coordinate or shape does not satisfy the geometry model."""


class LayerImportError(Exception):
    """Base class for everything that can go wrong while importing a file."""


class UnsupportedFormatError(LayerImportError):
    """The file extension is not one of the supported import formats."""


class UnreadableFileError(LayerImportError):
    """The file could not be parsed into a geographic document."""


class EmptyImportError(LayerImportError):
    """The document parsed, but no supported geometry was found in it."""

    def __init__(self, message: str = "No geometry found in the file.") -> None:
        super().__init__(message)
