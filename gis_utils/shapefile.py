"""
Shapefile reading, clipping and writing

Geometries are read with geopandas, reprojected to WGS84 when the file
declares another CRS, and converted into the shape variants the clipper
works on. Multi-part geometries become one shape per part.
"""

from pathlib import Path
from typing import Iterator, List, Optional, Union

import geopandas as gpd
from loguru import logger
from shapely.geometry import LineString, MultiLineString, Polygon
from shapely.geometry.base import BaseGeometry

from .config import get_config
from .errors import ShapefileNotLoadedError, UnsupportedShapeError
from .geometry.clipper import clip_shapes
from .geometry.primitives import BBox, Point
from .geometry.shapes import LineShape, PointShape, PolygonShape, Shape


def _ring(coords) -> tuple:
    return tuple(Point(lat=c[1], lon=c[0]) for c in coords)


def geometry_to_shapes(geom: Optional[BaseGeometry], index: int = 0) -> List[Shape]:
    """
    Convert a shapely geometry into shape variants

    Args:
        geom: Shapely geometry, possibly None or empty
        index: Record index carried onto every produced shape

    Returns:
        One shape, or one per polygon of a MultiPolygon; empty for missing geometry

    Raises:
        UnsupportedShapeError: for geometry types with no shape variant
    """
    if geom is None or geom.is_empty:
        return []

    if geom.geom_type == "Polygon":
        rings = (_ring(geom.exterior.coords),) + tuple(_ring(i.coords) for i in geom.interiors)
        return [PolygonShape(rings=rings, index=index)]
    if geom.geom_type == "MultiPolygon":
        return [s for part in geom.geoms for s in geometry_to_shapes(part, index)]
    if geom.geom_type in ("LineString", "LinearRing"):
        return [LineShape(parts=(_ring(geom.coords),), index=index)]
    if geom.geom_type == "MultiLineString":
        return [LineShape(parts=tuple(_ring(part.coords) for part in geom.geoms), index=index)]
    if geom.geom_type == "Point":
        return [PointShape(point=Point(lat=geom.y, lon=geom.x), index=index)]

    raise UnsupportedShapeError(f"unsupported geometry type '{geom.geom_type}' in record {index}")


def shape_to_geometry(shape: Shape) -> BaseGeometry:
    """Inverse of geometry_to_shapes for polygon and line shapes"""
    if isinstance(shape, PolygonShape):
        coords = [[(p.lon, p.lat) for p in ring] for ring in shape.rings]
        return Polygon(coords[0], coords[1:])
    if isinstance(shape, LineShape):
        parts = [[(p.lon, p.lat) for p in part] for part in shape.parts]
        return LineString(parts[0]) if len(parts) == 1 else MultiLineString(parts)

    raise UnsupportedShapeError(f"cannot write shape of kind '{shape.kind}'")


class Shapefile:
    """
    A shapefile on disk

    Usage:
        shapefile = Shapefile("land_polygons.shp")
        shapefile.load()
        polygons = shapefile.clip(bbox)
        shapefile.save_clipped("land_clipped.shp")
    """

    def __init__(self, filename: Union[str, Path]):
        self.filename = str(filename)
        self.config = get_config()
        self._gdf: Optional[gpd.GeoDataFrame] = None
        self._clipped: List[Shape] = []

    def load(self) -> None:
        logger.info(f"Loading shapefile: {self.filename}")
        gdf = gpd.read_file(self.filename)

        if gdf.crs is None:
            logger.warning(f"No CRS found in {self.filename}, assuming {self.config.source_crs}")
        elif not gdf.crs.equals(self.config.source_crs):
            logger.info(f"Reprojecting {gdf.crs} to {self.config.source_crs}")
            gdf = gdf.to_crs(self.config.source_crs)

        logger.info(f"Loaded {len(gdf)} features")
        self._gdf = gdf

    def shapes(self) -> Iterator[Shape]:
        """Every record converted into shape variants, in file order"""
        if self._gdf is None:
            raise ShapefileNotLoadedError()

        for index, geom in enumerate(self._gdf.geometry):
            try:
                yield from geometry_to_shapes(geom, index)
            except UnsupportedShapeError as e:
                logger.warning(f"Skipping record: {e}")

    def clip(self, bbox: BBox) -> List[Shape]:
        """Clamp all shapes into the box and keep the ones touching it"""
        self._clipped = clip_shapes(self.shapes(), bbox)
        logger.info(f"{len(self._clipped)} features found within the bounding box")
        return self._clipped

    @property
    def polygons(self) -> List[PolygonShape]:
        """Polygons kept by the last clip()"""
        return [s for s in self._clipped if isinstance(s, PolygonShape)]

    def save_clipped(self, filename: Union[str, Path]) -> None:
        """Write the shapes kept by the last clip() to a new shapefile"""
        if not self._clipped:
            logger.warning(f"Nothing to save to {filename}, no features intersect the bounding box")
            return

        geometries = [shape_to_geometry(s) for s in self._clipped]
        gdf = gpd.GeoDataFrame({"source_id": [s.index for s in self._clipped]},
                               geometry=geometries, crs=self.config.source_crs)
        gdf.to_file(str(filename))
        logger.info(f"The clipped shapefile was saved as {filename}")
