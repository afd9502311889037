"""Parse a zipped ESRI Shapefile set into GeoJSON FeatureCollections.

Every .shp member of the archive is read with pyshp together with its
sibling .shx/.dbf/.prj (same base name). Each shapefile becomes one
FeatureCollection, so the result is a list. When a .prj declares a CRS other
than WGS 84 the coordinates are reprojected to EPSG:4326 with pyproj.
"""

from __future__ import annotations

import io
import posixpath
import struct
import zipfile

import shapefile
from loguru import logger
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from portmap.layers.errors import UnreadableFileError

_WGS84 = CRS.from_epsg(4326)


def parse_shapefile_zip(content: bytes) -> list[dict]:
    """Read every shapefile in a zip archive.

    Args:
        content: Raw bytes of the .zip upload.

    Returns:
        One GeoJSON FeatureCollection per .shp member, in archive order.

    Raises:
        UnreadableFileError: If the archive is corrupt, holds no .shp file,
            or a shapefile cannot be read.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except zipfile.BadZipFile as e:
        raise UnreadableFileError(f"Invalid zip file: {e}") from None

    with archive:
        members = {name.lower(): name for name in archive.namelist()}
        bases = [
            name[:-4]
            for name in archive.namelist()
            if name.lower().endswith(".shp") and not posixpath.basename(name).startswith(".")
        ]
        if not bases:
            raise UnreadableFileError(
                "The zip file contains no .shp file. Zip the .shp and .dbf files together."
            )

        collections = []
        for base in bases:
            parts = {}
            for ext in ("shp", "shx", "dbf", "prj"):
                member = members.get(f"{base}.{ext}".lower())
                if member is not None:
                    parts[ext] = archive.read(member)
            collections.append(_read_shapefile(base, parts))
    return collections


def _read_shapefile(base: str, parts: dict[str, bytes]) -> dict:
    kwargs = {
        ext: io.BytesIO(parts[ext]) for ext in ("shp", "shx", "dbf") if ext in parts
    }
    transformer = _transformer_for(base, parts.get("prj"))

    features = []
    try:
        with shapefile.Reader(**kwargs) as reader:
            for shape in reader.iterShapes():
                if shape.shapeType == shapefile.NULL:
                    continue
                geometry = shape.__geo_interface__
                if transformer is not None:
                    geometry = {
                        "type": geometry["type"],
                        "coordinates": _reproject(geometry["coordinates"], transformer),
                    }
                features.append({"type": "Feature", "geometry": geometry, "properties": {}})
    except (shapefile.ShapefileException, struct.error) as e:
        raise UnreadableFileError(f"Could not read shapefile {base}.shp: {e}") from None

    logger.debug(f"Shapefile {base}.shp: {len(features)} shape(s)")
    return {"type": "FeatureCollection", "name": posixpath.basename(base), "features": features}


def _transformer_for(base: str, prj: bytes | None) -> Transformer | None:
    """Return a transformer to WGS 84, or None when no reprojection is needed."""
    if not prj:
        return None
    try:
        crs = CRS.from_wkt(prj.decode("utf-8", errors="replace"))
    except CRSError as e:
        logger.warning(f"Ignoring unreadable projection for {base}.shp: {e}")
        return None
    if crs.equals(_WGS84, ignore_axis_order=True):
        return None
    return Transformer.from_crs(crs, _WGS84, always_xy=True)


def _reproject(coordinates, transformer: Transformer):
    """Reproject nested GeoJSON coordinate arrays, keeping their structure."""
    if coordinates and isinstance(coordinates[0], (int, float)):
        x, y = transformer.transform(coordinates[0], coordinates[1])
        return [x, y, *coordinates[2:]]
    return [_reproject(c, transformer) for c in coordinates]
