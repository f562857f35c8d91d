"""
Map image renderer

Draws land polygons and styled OSM features onto a Pillow image in Web
Mercator space. Features are painted in z_index order; translucent colors
and polygons with holes go through an RGBA overlay that is composited onto
the map.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from loguru import logger
from PIL import Image, ImageDraw

from ..config import GisConfig, get_config
from ..errors import ImageNotInitializedError
from ..geometry.primitives import BBox, Point
from ..geometry.projection import to_projected
from ..geometry.shapes import PolygonShape
from ..osm.models import RichGeometry
from ..styles.colors import RGBA, parse_color
from ..styles.models import FeatureStyle
from ..styles.resolver import StyleResolver

TRANSPARENT = RGBA(0, 0, 0, 0)
Pixel = Tuple[float, float]


def dash_segments(pixels: Sequence[Pixel], dash: float, gap: float) -> List[List[Pixel]]:
    """Split a polyline into dash pieces of `dash` length separated by `gap`"""
    segments: List[List[Pixel]] = []
    current: List[Pixel] = []
    drawing = True
    remaining = dash

    for (x0, y0), (x1, y1) in zip(pixels, pixels[1:]):
        length = ((x1 - x0) ** 2 + (y1 - y0) ** 2) ** 0.5
        travelled = 0.0

        if drawing and not current:
            current = [(x0, y0)]

        while length - travelled > remaining:
            travelled += remaining
            t = travelled / length
            point = (x0 + (x1 - x0) * t, y0 + (y1 - y0) * t)

            if drawing:
                current.append(point)
                segments.append(current)
                current = []
            else:
                current = [point]

            drawing = not drawing
            remaining = dash if drawing else gap

        remaining -= length - travelled
        if drawing:
            current.append((x1, y1))

    if len(current) > 1:
        segments.append(current)

    return segments


class MapImage:
    """
    A canvas covering a bounding box

    Usage:
        image = MapImage(bbox, width=320, resolver=resolver)
        image.init()
        image.draw_shape_polygons(land_polygons)
        image.draw_features(loader.features)
        image.save_png("out.png")
    """

    def __init__(
        self,
        bbox: Optional[BBox],
        width: Optional[int] = None,
        resolver: Optional[StyleResolver] = None,
        config: Optional[GisConfig] = None,
    ):
        self.config = config or get_config()
        self.bbox = bbox
        self.width = width or self.config.render.width
        self.resolver = resolver if resolver is not None and resolver.loaded else None
        self._image: Optional[Image.Image] = None

    def init(self) -> None:
        """Size the canvas to the box's Web Mercator aspect ratio and paint the background"""
        if self.bbox is None:
            raise ImageNotInitializedError("no bounding box found")

        self._xmin, self._ymin = to_projected(self.bbox.sw.lon, self.bbox.sw.lat)
        self._xmax, self._ymax = to_projected(self.bbox.ne.lon, self.bbox.ne.lat)

        span_x = self._xmax - self._xmin
        span_y = self._ymax - self._ymin
        if span_x <= 0 or span_y <= 0:
            raise ImageNotInitializedError(f"bounding box {self.bbox.bounds} has no area")

        self.height = max(1, round(self.width * span_y / span_x))
        self._xscale = self.width / span_x
        self._yscale = self.height / span_y

        background = self.resolver.fill_color() if self.resolver else self.config.render.background_color
        self._image = Image.new("RGBA", (self.width, self.height), tuple(background))
        logger.debug(f"Canvas {self.width}x{self.height} for {self.bbox.bounds}")

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            raise ImageNotInitializedError("image was not initialized, call init() first")
        return self._image

    def to_pixel(self, point: Point) -> Pixel:
        point = point.with_projection()
        return ((point.x - self._xmin) * self._xscale, (self._ymax - point.y) * self._yscale)

    def _pixels(self, ring: Sequence[Point]) -> List[Pixel]:
        return [self.to_pixel(p) for p in ring]

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw_shape_polygons(self, polygons: Iterable[PolygonShape]) -> None:
        """Draw land polygons from a shapefile"""
        if self.resolver:
            fill = self.resolver.land_fill_color()
            stroke = self.resolver.land_stroke_color()
            stroke_width = self.resolver.land_stroke_width()
        else:
            fill = RGBA(*self.config.render.land_fill_color)
            stroke = RGBA(*self.config.render.land_stroke_color)
            stroke_width = self.config.render.land_stroke_width

        count = 0
        for polygon in polygons:
            self._draw_rings(polygon.rings[:1], polygon.rings[1:], fill, stroke, stroke_width)
            count += 1

        logger.debug(f"Drew {count} land polygons")

    def draw_features(self, features: Iterable[RichGeometry]) -> int:
        """
        Draw every feature that has a style, lowest z_index first

        Unstyled features are skipped, or drawn as thin lines in the fallback
        color when the style document sets show_all.

        Args:
            features: Ways and assembled relations

        Returns:
            Number of features drawn

        Raises:
            ImageNotInitializedError: if init() hasn't been called
        """
        if self.resolver is None:
            logger.warning("No styles loaded, nothing to draw")
            return 0

        show_all = self.resolver.show_all
        styled: List[Tuple[RichGeometry, Optional[FeatureStyle]]] = []

        for feature in features:
            style = self.resolver.resolve(feature.tags, feature.id)
            if style is not None or show_all:
                styled.append((feature, style))

        # sorted() is stable, so file order breaks ties
        styled.sort(key=lambda item: item[1].z_index if item[1] else 0)

        for feature, style in styled:
            self._draw_feature(feature, style)

        logger.info(f"Drew {len(styled)} features")
        return len(styled)

    def _draw_feature(self, feature: RichGeometry, style: Optional[FeatureStyle]) -> None:
        if style is None:
            fallback = RGBA(*self.config.render.fallback_color)
            self._draw_rings(feature.rings, (), TRANSPARENT, fallback, 1.0)
            return

        stroke = parse_color(style.stroke_color) if style.stroke_color else TRANSPARENT
        fill = parse_color(style.fill_color) if style.fill_color else TRANSPARENT
        stroke_width = style.stroke_width if style.stroke_width > 0 else 0.0

        self._draw_rings(
            feature.outer_rings,
            feature.inner_rings,
            fill,
            stroke,
            stroke_width,
            dashed=style.dashed,
            open_rings=feature.unmatched_rings,
        )

    def _draw_rings(
        self,
        outer: Sequence[Sequence[Point]],
        inner: Sequence[Sequence[Point]],
        fill: RGBA,
        stroke: RGBA,
        stroke_width: float,
        dashed: bool = False,
        open_rings: Sequence[Sequence[Point]] = (),
    ) -> None:
        """
        Fill `outer` minus `inner` and stroke every ring

        `open_rings` (pieces of a relation that never closed) are only
        stroked, so they neither add fill nor punch holes.
        """
        image = self.image
        has_fill = fill.a > 0
        has_stroke = stroke.a > 0 and stroke_width > 0

        if not has_fill and not has_stroke:
            return

        # Holes and translucency need a separate layer
        needs_overlay = (has_fill and (inner or fill.a < 255)) or (has_stroke and stroke.a < 255)
        target = Image.new("RGBA", image.size, TRANSPARENT) if needs_overlay else image
        draw = ImageDraw.Draw(target)

        if has_fill:
            for ring in outer:
                if len(ring) >= 3:
                    draw.polygon(self._pixels(ring), fill=tuple(fill))
            for ring in inner:
                if len(ring) >= 3:
                    draw.polygon(self._pixels(ring), fill=tuple(TRANSPARENT))

        if has_stroke:
            width = max(1, round(stroke_width))
            for ring in list(outer) + list(inner) + list(open_rings):
                pixels = self._pixels(ring)
                if len(pixels) < 2:
                    continue
                lines = dash_segments(pixels, width, width) if dashed else [pixels]
                for line in lines:
                    draw.line(line, fill=tuple(stroke), width=width, joint="curve")

        if needs_overlay:
            self._image = Image.alpha_composite(image, target)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def save_png(self, filename: Union[str, Path], dpi: Optional[int] = None) -> None:
        dpi = dpi or self.config.render.dpi
        self.image.save(str(filename), format="PNG", dpi=(dpi, dpi))
        logger.info(f"Saved map image to {filename}")
