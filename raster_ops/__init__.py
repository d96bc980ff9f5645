"""raster-ops - Crop, paste and alpha-composite RGBA8 pixel buffers."""

from .convert import bounds_of, clone, to_buffer
from .geometry import Placement, Point, Rectangle, place
from .pixel_buffer import PixelBuffer, SubImage, new
from .tools import (Anchor, crop, crop_anchor, crop_center, crop_top, overlay,
                    overlay_center, paste, paste_center)

__all__ = [
    "PixelBuffer",
    "SubImage",
    "new",
    "Point",
    "Rectangle",
    "Placement",
    "place",
    "bounds_of",
    "clone",
    "to_buffer",
    "Anchor",
    "crop",
    "crop_anchor",
    "crop_center",
    "crop_top",
    "paste",
    "paste_center",
    "overlay",
    "overlay_center",
]
