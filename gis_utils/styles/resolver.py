"""
Style resolver

Picks at most one style rule for a feature:

  1. A rule listing the feature id in way_id_queries, unless that rule
     excludes the feature
  2. Otherwise the first tag (in the feature's own tag order, skipping
     name/website) that maps to a rule which doesn't exclude the feature
  3. Otherwise no style (None)

The (attribute, value) and id lookups come from an index rebuilt in one go
every time a document is loaded.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from loguru import logger
from pydantic import ValidationError

from ..config import GisConfig, get_config
from ..errors import StyleConfigError, StylesNotLoadedError
from .colors import RGBA, parse_color
from .models import FeatureStyle, StyleConfig

DEFAULT_FILL_COLOR = RGBA(26, 100, 153, 255)
DEFAULT_LAND_FILL_COLOR = RGBA(255, 255, 255, 255)
DEFAULT_LAND_STROKE_COLOR = RGBA(255, 255, 255, 255)


def _with_raw_tag_pairs(document: Any, raw: Any) -> Any:
    """Swap each rule's queries/exclude for the untyped copy read by yaml.BaseLoader"""
    if not isinstance(document, dict) or not isinstance(raw, dict):
        return document

    styles = document.get("styles")
    raw_styles = raw.get("styles")
    if not isinstance(styles, list) or not isinstance(raw_styles, list):
        return document

    for style, raw_style in zip(styles, raw_styles):
        if not isinstance(style, dict) or not isinstance(raw_style, dict):
            continue
        for key in ("queries", "exclude"):
            if isinstance(style.get(key), list) and key in raw_style:
                style[key] = raw_style[key]

    return document


@dataclass(frozen=True)
class StyleIndex:
    """Lookup tables derived from a StyleConfig; the first rule to claim a key owns it"""
    by_tag: Dict[Tuple[str, str], FeatureStyle] = field(default_factory=dict)
    by_id: Dict[int, FeatureStyle] = field(default_factory=dict)

    @classmethod
    def build(cls, style_config: StyleConfig) -> "StyleIndex":
        by_tag: Dict[Tuple[str, str], FeatureStyle] = {}
        by_id: Dict[int, FeatureStyle] = {}

        for style in style_config.styles:
            for query in style.queries:
                by_tag.setdefault((query.attribute, query.value), style)
            for way_id in style.way_id_queries:
                by_id.setdefault(way_id, style)

        return cls(by_tag=by_tag, by_id=by_id)


class StyleResolver:
    """
    Holds a loaded style document and answers style queries against it

    With use_index=False queries scan the rule list instead of the index;
    both give the same answers.
    """

    def __init__(self, use_index: bool = True, config: Optional[GisConfig] = None):
        self.use_index = use_index
        self.config = config or get_config()
        self._state: Optional[Tuple[StyleConfig, StyleIndex]] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def parse_file(self, filename: Union[str, Path]) -> None:
        if not filename:
            raise StyleConfigError("no configuration file or bytes found")

        try:
            source = Path(filename).read_text(encoding="utf-8")
        except OSError as e:
            raise StyleConfigError(f"could not read style file {filename}: {e}") from e

        self.parse(source)
        logger.info(f"Loaded {len(self.styles.styles)} style rules from {filename}")

    def parse(self, source: Union[str, bytes]) -> None:
        """
        Parse a YAML style document

        Query and exclude pairs are OSM tag strings, so they are taken as
        written (`value: true` stays "true", `value: 07` stays "07") instead
        of as the booleans and numbers YAML would resolve them to.
        """
        try:
            document = yaml.safe_load(source)
            raw = yaml.load(source, Loader=yaml.BaseLoader)
        except yaml.YAMLError as e:
            raise StyleConfigError(f"invalid style YAML: {e}") from e

        self.load(_with_raw_tag_pairs(document or {}, raw))

    def load(self, document: Mapping[str, Any]) -> None:
        """Validate a decoded document and swap it in together with its index"""
        try:
            style_config = StyleConfig.model_validate(document)
        except ValidationError as e:
            raise StyleConfigError(f"invalid style configuration: {e}") from e

        index = StyleIndex.build(style_config)
        self._state = (style_config, index)

        if self.config.verbose:
            for (attribute, value), style in index.by_tag.items():
                logger.debug(f"{attribute}={value} -> {style}")

    @property
    def loaded(self) -> bool:
        return self._state is not None

    def _loaded_state(self) -> Tuple[StyleConfig, StyleIndex]:
        if self._state is None:
            raise StylesNotLoadedError()
        return self._state

    @property
    def styles(self) -> StyleConfig:
        return self._loaded_state()[0]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(self, attribute: str, value: str) -> Optional[FeatureStyle]:
        """Rule listing attribute=value in its queries, or None"""
        style_config, index = self._loaded_state()

        if self.use_index:
            return index.by_tag.get((attribute, value))

        for style in style_config.styles:
            if any(q.attribute == attribute and q.value == value for q in style.queries):
                return style
        return None

    def query_id(self, feature_id: int) -> Optional[FeatureStyle]:
        """Rule listing the id in its way_id_queries, or None"""
        style_config, index = self._loaded_state()

        if self.use_index:
            return index.by_id.get(feature_id)

        for style in style_config.styles:
            if feature_id in style.way_id_queries:
                return style
        return None

    def resolve(self, tags: Mapping[str, str], feature_id: Optional[int] = None) -> Optional[FeatureStyle]:
        """
        The single style that applies to a feature

        Args:
            tags: Feature tags, checked in their own order
            feature_id: Way or relation id, checked against way_id_queries first

        Returns:
            The matching FeatureStyle, or None when no rule applies

        Raises:
            StylesNotLoadedError: if no document has been loaded
        """
        self._loaded_state()

        if feature_id is not None:
            style = self.query_id(feature_id)
            if style is not None and not style.should_exclude(tags, feature_id):
                return style

        for key, value in tags.items():
            if key in self.config.style_ignored_keys:
                continue

            style = self.query(key, value)
            if style is not None and not style.should_exclude(tags, feature_id):
                return style

        return None

    # ------------------------------------------------------------------
    # Document level settings
    # ------------------------------------------------------------------

    @property
    def show_all(self) -> bool:
        if self._state is None:
            return False
        return self._state[0].show_all

    def fill_color(self) -> RGBA:
        color = self.styles.fill_color
        return parse_color(color) if color else DEFAULT_FILL_COLOR

    def land_fill_color(self) -> RGBA:
        color = self.styles.land.fill_color
        return parse_color(color) if color else DEFAULT_LAND_FILL_COLOR

    def land_stroke_color(self) -> RGBA:
        color = self.styles.land.stroke_color
        return parse_color(color) if color else DEFAULT_LAND_STROKE_COLOR

    def land_stroke_width(self) -> float:
        return self.styles.land.stroke_width
