"""
Configuration settings for gis-utils
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class RenderConfig:
    """Defaults used by the map renderer when no style document overrides them"""
    # Output size
    width: int = 320  # pixels
    dpi: int = 600

    # Colors (RGBA)
    background_color: Tuple[int, int, int, int] = (222, 236, 240, 255)
    land_fill_color: Tuple[int, int, int, int] = (255, 255, 255, 255)
    land_stroke_color: Tuple[int, int, int, int] = (205, 205, 205, 255)
    land_stroke_width: float = 2.0

    # Flat color for unstyled features when the style document sets show_all
    fallback_color: Tuple[int, int, int, int] = (128, 128, 128, 255)


@dataclass
class GisConfig:
    """Top level configuration"""
    # Coordinate systems
    source_crs: str = "EPSG:4326"  # WGS84 lon/lat
    projected_crs: str = "EPSG:3857"  # Web Mercator

    # Tag keys that never select a style
    style_ignored_keys: Tuple[str, ...] = ("name", "website")

    # Relation "type" tags treated as polygons
    polygon_relation_types: Tuple[str, ...] = ("multipolygon", "boundary")

    # Reject relations whose outer ways can't all be stitched into closed rings
    strict_multipolygons: bool = False

    # Dump every way/relation at DEBUG level while loading
    verbose: bool = False

    render: RenderConfig = field(default_factory=RenderConfig)


# Global config instance
config = GisConfig()


def get_config() -> GisConfig:
    """Get global configuration"""
    return config


def validate_config(config: GisConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if not config.source_crs:
        errors.append("source_crs is required in config but not set")
    if not config.projected_crs:
        errors.append("projected_crs is required in config but not set")

    if not config.polygon_relation_types:
        errors.append("polygon_relation_types must name at least one relation type")

    if config.render is None:
        errors.append("render configuration is required but not set")
    else:
        if config.render.width <= 0:
            errors.append(f"render.width must be positive, got {config.render.width}")
        if config.render.dpi <= 0:
            errors.append(f"render.dpi must be positive, got {config.render.dpi}")
        if config.render.land_stroke_width < 0:
            errors.append(f"render.land_stroke_width must not be negative, got {config.render.land_stroke_width}")
        for name in ("background_color", "land_fill_color", "land_stroke_color", "fallback_color"):
            value = getattr(config.render, name)
            if len(value) != 4 or any(not 0 <= c <= 255 for c in value):
                errors.append(f"render.{name} must be four channels in 0-255, got {value}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
