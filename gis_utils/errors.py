"""
Exceptions raised by gis-utils

Malformed input fails fast with one of these. Missing node references and
features without a style are not errors and never raise.
"""


class GisUtilsError(Exception):
    """Base class for all gis-utils errors"""


class BBoxError(GisUtilsError, ValueError):
    """Bounding box with too few coordinates, bad numbers or inverted corners"""


class ColorParseError(GisUtilsError, ValueError):
    """Color string that is neither #RGB/#RRGGBB nor rgba(r, g, b, a)"""


class StyleConfigError(GisUtilsError, ValueError):
    """Style document that could not be read or validated"""


class StylesNotLoadedError(GisUtilsError, RuntimeError):
    """Style resolver queried before any configuration was parsed"""

    def __init__(self, message: str = "no loaded styles were found"):
        super().__init__(message)


class UnsupportedShapeError(GisUtilsError, TypeError):
    """Shape kind the clipper does not handle"""


class AssemblyError(GisUtilsError, ValueError):
    """Multipolygon relation that could not be closed (strict mode only)"""


class ShapefileNotLoadedError(GisUtilsError, RuntimeError):
    """Shapefile used before load() was called"""

    def __init__(self, message: str = "no shapefile was loaded"):
        super().__init__(message)


class ImageNotInitializedError(GisUtilsError, RuntimeError):
    """Map image used without a bounding box or before init()"""
