"""Tests for the zipped shapefile parser (pyshp + pyproj)."""

import io
import zipfile

import pytest
import shapefile
from pyproj import CRS, Transformer

from portmap.layers import Marker, Polygon, UnreadableFileError, normalize
from portmap.layers.parsers import parse_file
from portmap.layers.parsers.shapefile_zip import parse_shapefile_zip

# Clockwise (shapefile exterior orientation) ring in lng/lat.
RING = [(-44.38, -2.55), (-44.36, -2.555), (-44.355, -2.58), (-44.39, -2.58), (-44.38, -2.55)]


def _shapefile_parts(shape_type, shapes):
    shp, shx, dbf = io.BytesIO(), io.BytesIO(), io.BytesIO()
    w = shapefile.Writer(shp=shp, shx=shx, dbf=dbf, shapeType=shape_type)
    w.field("name", "C")
    for idx, shape in enumerate(shapes):
        if shape_type == shapefile.POINT:
            w.point(*shape)
        else:
            w.poly(shape)
        w.record(f"shape-{idx}")
    w.close()
    return {"shp": shp.getvalue(), "shx": shx.getvalue(), "dbf": dbf.getvalue()}


def _zip(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buf.getvalue()


def _zip_shapefile(base, shape_type, shapes, prj=None):
    parts = _shapefile_parts(shape_type, shapes)
    files = {f"{base}.{ext}": data for ext, data in parts.items()}
    if prj is not None:
        files[f"{base}.prj"] = prj.encode()
    return _zip(files)


@pytest.mark.unit
class TestShapefileZip:
    """Zip archives holding one or more shapefiles."""

    def test_polygon_shapefile(self):
        content = _zip_shapefile("area", shapefile.POLYGON, [[RING]])
        collections = parse_shapefile_zip(content)
        assert len(collections) == 1
        assert collections[0]["type"] == "FeatureCollection"
        assert collections[0]["name"] == "area"

        (polygon,) = normalize(collections)
        assert isinstance(polygon, Polygon)
        got = {(round(c.lng, 6), round(c.lat, 6)) for c in polygon.outer}
        assert got == set(RING)

    def test_point_shapefile(self):
        content = _zip_shapefile("pins", shapefile.POINT, [(-44.37, -2.57), (-44.36, -2.56)])
        features = normalize(parse_shapefile_zip(content))
        assert [type(f) for f in features] == [Marker, Marker]
        assert features[0].position.lat == pytest.approx(-2.57)
        assert features[0].position.lng == pytest.approx(-44.37)

    def test_several_shapefiles_in_subfolder(self):
        points = _shapefile_parts(shapefile.POINT, [(-44.37, -2.57)])
        polys = _shapefile_parts(shapefile.POLYGON, [[RING]])
        files = {f"data/pins.{ext}": data for ext, data in points.items()}
        files.update({f"data/AREA.{ext.upper()}": data for ext, data in polys.items()})
        collections = parse_shapefile_zip(_zip(files))
        assert len(collections) == 2
        kinds = sorted(type(f).__name__ for f in normalize(collections))
        assert kinds == ["Marker", "Polygon"]

    def test_projected_shapefile_is_reprojected(self):
        utm = CRS.from_epsg(31983)  # SIRGAS 2000 / UTM zone 23S
        to_utm = Transformer.from_crs(CRS.from_epsg(4326), utm, always_xy=True)
        x, y = to_utm.transform(-44.37, -2.57)
        content = _zip_shapefile(
            "utm", shapefile.POINT, [(x, y)], prj=utm.to_wkt(version="WKT1_ESRI"),
        )
        (marker,) = normalize(parse_shapefile_zip(content))
        assert marker.position.lat == pytest.approx(-2.57, abs=1e-5)
        assert marker.position.lng == pytest.approx(-44.37, abs=1e-5)

    def test_wgs84_prj_is_not_reprojected(self):
        prj = CRS.from_epsg(4326).to_wkt(version="WKT1_ESRI")
        content = _zip_shapefile("geo", shapefile.POINT, [(-44.37, -2.57)], prj=prj)
        (marker,) = normalize(parse_shapefile_zip(content))
        assert marker.position.lng == pytest.approx(-44.37)

    def test_unreadable_prj_is_ignored(self):
        content = _zip_shapefile("geo", shapefile.POINT, [(-44.37, -2.57)], prj="garbage")
        (marker,) = normalize(parse_shapefile_zip(content))
        assert marker.position.lat == pytest.approx(-2.57)

    def test_dispatch_through_parse_file(self):
        content = _zip_shapefile("area", shapefile.POLYGON, [[RING]])
        assert len(parse_file("Area.ZIP", content)) == 1

    def test_zip_without_shp(self):
        with pytest.raises(UnreadableFileError):
            parse_shapefile_zip(_zip({"readme.txt": b"hello"}))

    def test_not_a_zip(self):
        with pytest.raises(UnreadableFileError):
            parse_shapefile_zip(b"definitely not a zip")
