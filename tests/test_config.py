"""
Tests for configuration defaults and validation
"""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gis_utils.config import GisConfig, RenderConfig, get_config, validate_config


def test_defaults():
    config = GisConfig()

    assert config.source_crs == "EPSG:4326"
    assert config.projected_crs == "EPSG:3857"
    assert config.style_ignored_keys == ("name", "website")
    assert config.polygon_relation_types == ("multipolygon", "boundary")
    assert config.strict_multipolygons is False
    assert config.render.width == 320
    assert config.render.background_color == (222, 236, 240, 255)
    assert config.render.land_stroke_color == (205, 205, 205, 255)


def test_global_config_is_valid():
    validate_config(get_config())


def test_validation_lists_every_problem():
    config = replace(
        GisConfig(),
        projected_crs="",
        polygon_relation_types=(),
        render=RenderConfig(width=0, background_color=(0, 0, 300, 255)),
    )

    with pytest.raises(ValueError) as excinfo:
        validate_config(config)

    message = str(excinfo.value)
    assert "projected_crs" in message
    assert "polygon_relation_types" in message
    assert "render.width" in message
    assert "render.background_color" in message
    assert "source_crs" not in message
