#!/usr/bin/env python
"""
Command-line interface for gis-utils

Usage:
    python cli.py render --pbf area.osm.pbf --shapefile land.shp --styles styles.yaml --output map.png
    python cli.py clip-shapefile --shapefile land.shp --bbox "10,50,5,45"
    python cli.py features --pbf area.osm.pbf --bbox "10,50,5,45" --output features.json
    python cli.py tile-bbox --x 74774 --y 50967 --z 17
"""

import os
import sys
import json
import argparse
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from gis_utils.config import get_config, validate_config
from gis_utils.errors import GisUtilsError
from gis_utils.geometry import clip_ring, parse_bbox, tile_bbox
from gis_utils.osm import OSMLoader
from gis_utils.render import MapImage
from gis_utils.shapefile import Shapefile
from gis_utils.styles import StyleResolver


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def _fail(args, message: str) -> int:
    logger.error(message)
    if args.verbose:
        import traceback
        traceback.print_exc()
    return 1


def cmd_render(args):
    """Render a PBF extract on top of land polygons into a PNG"""
    setup_logging(args.verbose)
    config = replace(get_config(), verbose=args.verbose, strict_multipolygons=args.strict)

    try:
        validate_config(config)

        resolver = StyleResolver(config=config)
        resolver.parse_file(args.styles)

        loader = OSMLoader(config)
        loader.load(args.pbf)

        bbox = parse_bbox(args.bbox) if args.bbox else loader.bbox
        if bbox is None:
            return _fail(args, "No nodes found in the PBF file, can't determine the map extent")
        logger.info(f"Map extent: {bbox.bounds}")

        shapefile = Shapefile(args.shapefile)
        shapefile.load()
        shapefile.clip(bbox)

        image = MapImage(bbox, width=args.width, resolver=resolver, config=config)
        image.init()
        image.draw_shape_polygons(shapefile.polygons)
        image.draw_features(loader.features)
        image.save_png(args.output, dpi=args.dpi)

        logger.info(f"✓ Generated: {args.output}")
        return 0

    except Exception as e:
        return _fail(args, f"Failed to render map: {e}")


def cmd_clip_shapefile(args):
    """Clip a shapefile to a bounding box and save the result"""
    setup_logging(args.verbose)

    try:
        bbox = parse_bbox(args.bbox)
    except GisUtilsError as e:
        return _fail(args, f"Error: {e}")

    print(bbox.to_geojson_str())

    output_path = args.output
    # Default output name, e.g. land_10,50,5,45.shp
    if not output_path:
        filename = os.path.splitext(os.path.basename(args.shapefile))[0]
        output_path = f"{filename}_{args.bbox}.shp"

    try:
        shapefile = Shapefile(args.shapefile)
        shapefile.load()
        features = shapefile.clip(bbox)
        print(f"{len(features)} features found within the bounding box.")
        shapefile.save_clipped(output_path)
    except Exception as e:
        return _fail(args, f"Error: {e}")

    print(f"The clipped shapefile was saved as {output_path}")
    return 0


def cmd_features(args):
    """Dump assembled ways and relations as JSON, optionally clipped to a box"""
    setup_logging(args.verbose)
    config = replace(get_config(), verbose=args.verbose, strict_multipolygons=args.strict)

    try:
        bbox = parse_bbox(args.bbox) if args.bbox else None

        loader = OSMLoader(config)
        loader.load(args.pbf)

        features = []
        for feature in loader.features:
            record = feature.to_dict()
            if bbox is not None:
                clipped = [clip_ring(ring, bbox) for ring in feature.rings]
                if not any(c.intersects for c in clipped):
                    continue
                record["rings"] = [[[p.lon, p.lat] for p in c.points] for c in clipped]
            features.append(record)

        output = json.dumps(features, indent=2, ensure_ascii=False)
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(output)
            logger.info(f"Saved {len(features)} features to {args.output}")
        else:
            print(output)
        return 0

    except Exception as e:
        return _fail(args, f"Failed to read features: {e}")


def cmd_tile_bbox(args):
    """Print the bounding box of a slippy map tile as GeoJSON"""
    setup_logging(args.verbose)
    print(tile_bbox(args.x, args.y, args.z).to_geojson_str())
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="gis-utils CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Render a map:
    python cli.py render --pbf area.osm.pbf --shapefile land.shp --styles styles.yaml -o map.png

  Clip a shapefile (bbox is NE lon,NE lat,SW lon,SW lat):
    python cli.py clip-shapefile --shapefile land.shp --bbox "10,50,5,45"

  Dump assembled features:
    python cli.py features --pbf area.osm.pbf --bbox "10,50,5,45" -o features.json

  Tile bounding box:
    python cli.py tile-bbox --x 74774 --y 50967 --z 17
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render a PBF extract to PNG")
    render_parser.add_argument("--pbf", required=True, help="The path to the OSM Protobuf file")
    render_parser.add_argument("--shapefile", required=True, help="The path to the land shapefile")
    render_parser.add_argument("--styles", required=True, help="The path to the style configuration file")
    render_parser.add_argument("--output", "-o", default="out.png", help="The output path")
    render_parser.add_argument("--bbox", help="Map extent (NE Lon,NE Lat,SW Lon,SW Lat), defaults to the PBF extent")
    render_parser.add_argument("--width", type=int, default=get_config().render.width, help="Image width in pixels")
    render_parser.add_argument("--dpi", type=int, default=get_config().render.dpi, help="PNG resolution")
    render_parser.add_argument("--strict", action="store_true", help="Skip multipolygons that can't be closed")
    render_parser.set_defaults(func=cmd_render)

    # Clip command
    clip_parser = subparsers.add_parser("clip-shapefile", help="Clip a shapefile to a bounding box")
    clip_parser.add_argument("--shapefile", required=True, help="The path to the shapefile that you need to clip")
    clip_parser.add_argument("--bbox", required=True, help="The bounding box of the area to clip (NE Lon,NE Lat,SW Lon,SW Lat)")
    clip_parser.add_argument("--output", "-o", help="The output path")
    clip_parser.set_defaults(func=cmd_clip_shapefile)

    # Features command
    features_parser = subparsers.add_parser("features", help="Dump assembled ways and relations as JSON")
    features_parser.add_argument("--pbf", required=True, help="The path to the OSM Protobuf file")
    features_parser.add_argument("--bbox", help="Only keep features touching this box (NE Lon,NE Lat,SW Lon,SW Lat)")
    features_parser.add_argument("--output", "-o", help="Output JSON file (stdout if not specified)")
    features_parser.add_argument("--strict", action="store_true", help="Skip multipolygons that can't be closed")
    features_parser.set_defaults(func=cmd_features)

    # Tile command
    tile_parser = subparsers.add_parser("tile-bbox", help="Print a tile's bounding box as GeoJSON")
    tile_parser.add_argument("--x", type=int, required=True, help="Tile column")
    tile_parser.add_argument("--y", type=int, required=True, help="Tile row")
    tile_parser.add_argument("--z", type=int, required=True, help="Zoom level")
    tile_parser.set_defaults(func=cmd_tile_bbox)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
