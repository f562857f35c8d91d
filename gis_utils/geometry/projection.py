"""
WGS84 to Web Mercator conversion
"""

from functools import lru_cache
from typing import Tuple

from pyproj import Transformer

from ..config import get_config


@lru_cache(maxsize=None)
def _transformer(source_crs: str, target_crs: str) -> Transformer:
    return Transformer.from_crs(source_crs, target_crs, always_xy=True)


def to_projected(lon: float, lat: float) -> Tuple[float, float]:
    """Project a lon/lat pair into the configured projected CRS (Web Mercator by default)"""
    cfg = get_config()
    x, y = _transformer(cfg.source_crs, cfg.projected_crs).transform(lon, lat)
    return x, y
