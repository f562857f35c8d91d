"""
Tests for style document loading and style resolution
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gis_utils.errors import StyleConfigError, StylesNotLoadedError
from gis_utils.styles import RGBA, FeatureStyle, StyleResolver

STYLES_YAML = """
fill_color: "#1a6499"
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
        value: yes
    stroke_width: 2
    stroke_color: "#f90"
    z_index: 5
  - queries:
      - attribute: highway
        value: primary
      - attribute: highway
        value: secondary
    stroke_color: "#000"
  - queries:
      - attribute: building
        value: yes
    fill_color: "rgba(10, 20, 30, 128)"
    z_index: 2
  - queries:
      - attribute: name
        value: Main Street
    stroke_color: "#fff"
  - way_id_queries: [42]
    exclude:
      - attribute: tunnel
        value: yes
    fill_color: "#00f"
  - way_id_queries: [7]
    way_id_excludes: [7]
    fill_color: "#0f0"
  - queries:
      - attribute: maxspeed
        value: 50
    dashed: true
    stroke_color: "#333"
"""


@pytest.fixture(params=[True, False], ids=["index", "scan"])
def resolver(request):
    resolver = StyleResolver(use_index=request.param)
    resolver.parse(STYLES_YAML)
    return resolver


def rule(resolver, position):
    return resolver.styles.styles[position]


def test_queries_before_load_fail():
    resolver = StyleResolver()

    assert not resolver.loaded
    with pytest.raises(StylesNotLoadedError, match="no loaded styles were found"):
        resolver.query("highway", "primary")
    with pytest.raises(StylesNotLoadedError):
        resolver.query_id(42)
    with pytest.raises(StylesNotLoadedError):
        resolver.resolve({"highway": "primary"})
    with pytest.raises(StylesNotLoadedError):
        resolver.fill_color()


def test_show_all_is_false_before_load():
    assert StyleResolver().show_all is False


def test_attribute_match(resolver):
    style = resolver.resolve({"highway": "secondary"})

    assert style is rule(resolver, 1)
    assert style.stroke_color == "#000"


def test_first_rule_wins_for_a_shared_query(resolver):
    assert resolver.query("highway", "primary") is rule(resolver, 0)
    assert resolver.resolve({"highway": "primary"}) is rule(resolver, 0)


def test_excluded_rule_is_not_replaced_by_a_later_one(resolver):
    assert resolver.resolve({"highway": "primary", "tunnel": "yes"}) is None


def test_excluded_tag_falls_through_to_the_next_tag(resolver):
    tags = {"highway": "primary", "tunnel": "yes", "building": "yes"}

    assert resolver.resolve(tags) is rule(resolver, 2)


def test_tag_order_decides(resolver):
    assert resolver.resolve({"building": "yes", "highway": "secondary"}) is rule(resolver, 2)
    assert resolver.resolve({"highway": "secondary", "building": "yes"}) is rule(resolver, 1)


def test_name_and_website_never_select_a_style(resolver):
    assert resolver.query("name", "Main Street") is rule(resolver, 3)
    assert resolver.resolve({"name": "Main Street"}) is None
    assert resolver.resolve({"website": "https://example.org", "name": "Main Street"}) is None


def test_id_rule_beats_attribute_rules(resolver):
    assert resolver.resolve({"highway": "secondary"}, feature_id=42) is rule(resolver, 4)


def test_excluded_id_rule_falls_through_to_attributes(resolver):
    tags = {"tunnel": "yes", "building": "yes"}

    assert resolver.resolve(tags, feature_id=42) is rule(resolver, 2)


def test_way_id_excludes(resolver):
    assert resolver.query_id(7) is rule(resolver, 5)
    assert resolver.resolve({"highway": "secondary"}, feature_id=7) is rule(resolver, 1)
    assert resolver.resolve({}, feature_id=7) is None


def test_unknown_feature_has_no_style(resolver):
    assert resolver.resolve({"amenity": "bench"}, feature_id=999) is None
    assert resolver.resolve({}) is None


def test_resolution_is_deterministic(resolver):
    tags = {"highway": "secondary", "building": "yes"}

    first = resolver.resolve(tags, feature_id=1)
    for _ in range(10):
        assert resolver.resolve(tags, feature_id=1) is first


def test_index_and_scan_agree():
    indexed = StyleResolver(use_index=True)
    scanned = StyleResolver(use_index=False)
    indexed.parse(STYLES_YAML)
    scanned.parse(STYLES_YAML)

    cases = [
        ({"highway": "primary"}, None),
        ({"highway": "primary", "tunnel": "yes"}, None),
        ({"building": "yes", "highway": "secondary"}, None),
        ({"tunnel": "yes", "building": "yes"}, 42),
        ({"highway": "secondary"}, 7),
        ({"maxspeed": "50"}, None),
        ({"name": "Main Street"}, None),
    ]
    for tags, feature_id in cases:
        a = indexed.resolve(tags, feature_id)
        b = scanned.resolve(tags, feature_id)
        assert a == b, tags


def test_query_values_keep_their_yaml_text(resolver):
    assert rule(resolver, 0).exclude[0].value == "yes"
    assert rule(resolver, 2).queries[0].value == "yes"
    assert rule(resolver, 6).queries[0].value == "50"
    assert resolver.resolve({"maxspeed": "50"}) is rule(resolver, 6)


@pytest.mark.parametrize("written", ["true", "on", "yes", "no", "1.50", "07", "0x1F", "~", "null"])
def test_unquoted_values_match_the_tag_as_written(written):
    resolver = StyleResolver()
    resolver.parse(
        "styles:\n"
        "  - queries:\n"
        f"      - {{attribute: oneway, value: {written}}}\n"
        "    exclude:\n"
        f"      - {{attribute: access, value: {written}}}\n"
        "    stroke_color: '#000'\n"
    )

    style = resolver.styles.styles[0]
    assert style.queries[0].value == written
    assert style.exclude[0].value == written
    assert resolver.resolve({"oneway": written}) is style
    assert resolver.resolve({"oneway": written, "access": written}) is None


def test_non_string_query_values_are_rejected():
    document = {"styles": [{"queries": [{"attribute": "oneway", "value": True}]}]}

    with pytest.raises(StyleConfigError):
        StyleResolver().load(document)


def test_rule_fields(resolver):
    style = rule(resolver, 0)

    assert isinstance(style, FeatureStyle)
    assert style.stroke_width == 2.0
    assert style.z_index == 5
    assert style.dashed is False
    assert rule(resolver, 6).dashed is True


def test_document_colors(resolver):
    assert resolver.fill_color() == RGBA(26, 100, 153, 255)
    assert resolver.land_fill_color() == RGBA(255, 255, 255, 255)
    assert resolver.land_stroke_color() == RGBA(205, 205, 205, 255)
    assert resolver.land_stroke_width() == 1.5
    assert resolver.show_all is False


def test_default_document_colors():
    resolver = StyleResolver()
    resolver.parse("show_all: true\n")

    assert resolver.show_all is True
    assert resolver.fill_color() == RGBA(26, 100, 153, 255)
    assert resolver.land_fill_color() == RGBA(255, 255, 255, 255)
    assert resolver.land_stroke_color() == RGBA(255, 255, 255, 255)
    assert resolver.land_stroke_width() == 0.0
    assert resolver.resolve({"highway": "primary"}) is None


def test_empty_document_loads():
    resolver = StyleResolver()
    resolver.parse("")

    assert resolver.loaded
    assert resolver.styles.styles == ()


def test_invalid_color_is_rejected():
    resolver = StyleResolver()

    with pytest.raises(StyleConfigError):
        resolver.parse("styles:\n  - stroke_color: '#12'\n")
    assert not resolver.loaded


def test_invalid_yaml_is_rejected():
    with pytest.raises(StyleConfigError):
        StyleResolver().parse("styles: [unclosed\n")


def test_reload_replaces_previous_document(resolver):
    resolver.parse("styles:\n  - queries:\n      - {attribute: highway, value: primary}\n    stroke_color: '#abc'\n")

    assert resolver.resolve({"highway": "primary"}).stroke_color == "#abc"
    assert resolver.resolve({"building": "yes"}) is None


def test_failed_reload_keeps_previous_document(resolver):
    before = resolver.styles

    with pytest.raises(StyleConfigError):
        resolver.parse("fill_color: 'not a color'\n")

    assert resolver.styles is before


def test_parse_file(tmp_path):
    path = tmp_path / "styles.yaml"
    path.write_text(STYLES_YAML, encoding="utf-8")

    resolver = StyleResolver()
    resolver.parse_file(path)

    assert len(resolver.styles.styles) == 7


def test_parse_file_without_name():
    with pytest.raises(StyleConfigError, match="no configuration file or bytes found"):
        StyleResolver().parse_file("")


def test_parse_missing_file(tmp_path):
    with pytest.raises(StyleConfigError):
        StyleResolver().parse_file(tmp_path / "missing.yaml")


def test_example_document_loads():
    resolver = StyleResolver()
    resolver.parse_file(project_root / "styles.example.yaml")

    assert resolver.land_fill_color() == RGBA(242, 239, 233, 255)
    assert resolver.resolve({"highway": "track"}).dashed is True
    assert resolver.resolve({"highway": "primary", "tunnel": "yes"}) is None
    assert resolver.resolve({"boundary": "administrative"}, feature_id=4242) is None
