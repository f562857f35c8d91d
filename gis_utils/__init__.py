"""
gis-utils: OSM and shapefile geometry assembly, bounding box clipping and
feature styling for map rendering
"""

__version__ = "0.1.0"
