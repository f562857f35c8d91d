"""
Map rendering
"""

from .image import MapImage, dash_segments

__all__ = [
    "MapImage",
    "dash_segments",
]
