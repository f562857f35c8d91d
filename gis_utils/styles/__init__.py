"""
Feature styling: color parsing, the style document models and the resolver
"""

from .colors import RGBA, parse_color, parse_hex_color, parse_rgba_color
from .models import FeatureQuery, FeatureStyle, LandStyle, StyleConfig
from .resolver import StyleIndex, StyleResolver

__all__ = [
    "RGBA",
    "parse_color",
    "parse_hex_color",
    "parse_rgba_color",
    "FeatureQuery",
    "FeatureStyle",
    "LandStyle",
    "StyleConfig",
    "StyleIndex",
    "StyleResolver",
]
