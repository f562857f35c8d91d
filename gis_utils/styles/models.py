"""
Pydantic models for the style configuration document

Example:

    fill_color: "#1a6499"
    show_all: false
    land:
      fill_color: "#fff"
      stroke_color: "rgba(205, 205, 205, 255)"
      stroke_width: 1.5
    styles:
      - queries:
          - attribute: highway
            value: primary
        exclude:
          - attribute: tunnel
            value: "yes"
        way_id_excludes: [4242]
        stroke_width: 2
        stroke_color: "#f90"
        z_index: 5
        dashed: false
"""

from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from .colors import parse_color


def _color_or_empty(value: str) -> str:
    if value:
        # Raises ColorParseError (a ValueError), reported by pydantic as a validation error
        parse_color(value)
    return value


class FeatureQuery(BaseModel):
    """An attribute/value pair, both compared as exact tag strings"""
    model_config = ConfigDict(frozen=True)

    attribute: str
    value: str


class FeatureStyle(BaseModel):
    """A single style rule"""
    model_config = ConfigDict(frozen=True)

    queries: Tuple[FeatureQuery, ...] = ()
    way_id_queries: Tuple[int, ...] = ()
    way_id_excludes: Tuple[int, ...] = ()
    exclude: Tuple[FeatureQuery, ...] = ()
    stroke_width: float = 0.0
    stroke_color: str = ""
    fill_color: str = ""
    z_index: int = 0
    dashed: bool = False

    @field_validator("stroke_color", "fill_color")
    @classmethod
    def check_colors(cls, v: str) -> str:
        return _color_or_empty(v)

    def should_exclude(self, tags: Mapping[str, str], feature_id: Optional[int] = None) -> bool:
        """
        Whether this rule must not be applied to a feature

        True if one of the feature's tags equals an `exclude` pair, or the
        feature id is listed in `way_id_excludes`.
        """
        for exclusion in self.exclude:
            if tags.get(exclusion.attribute) == exclusion.value:
                return True

        return feature_id is not None and feature_id in self.way_id_excludes


class LandStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    fill_color: str = ""
    stroke_width: float = 0.0
    stroke_color: str = ""

    @field_validator("stroke_color", "fill_color")
    @classmethod
    def check_colors(cls, v: str) -> str:
        return _color_or_empty(v)


class StyleConfig(BaseModel):
    """The whole style document"""
    model_config = ConfigDict(frozen=True)

    fill_color: str = ""
    land: LandStyle = LandStyle()
    show_all: bool = False
    styles: Tuple[FeatureStyle, ...] = ()

    @field_validator("fill_color")
    @classmethod
    def check_colors(cls, v: str) -> str:
        return _color_or_empty(v)
