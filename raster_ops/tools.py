"""Crop, paste and overlay tools for RGBA8 pixel buffers.

Every tool leaves its inputs untouched and returns a freshly allocated
zero-origin PixelBuffer.
"""

import logging
import math
from enum import Enum
from typing import Optional

import numpy as np

from .convert import bounds_of, clone, to_buffer
from .geometry import Placement, Point, Rectangle, as_point, as_rectangle, place
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Debug flag - set to True to log the placement arithmetic of every call
DEBUG = False


class Anchor(Enum):
    """Anchor point of a crop window inside the source bounds."""

    CENTER = 'center'
    TOP_LEFT = 'top_left'
    TOP = 'top'
    TOP_RIGHT = 'top_right'
    LEFT = 'left'
    RIGHT = 'right'
    BOTTOM_LEFT = 'bottom_left'
    BOTTOM = 'bottom'
    BOTTOM_RIGHT = 'bottom_right'


def _half(n: int) -> int:
    """n / 2 truncated toward zero."""
    return n // 2 if n >= 0 else -(-n // 2)


def _trace(op: str, placement: Optional[Placement], **details):
    if DEBUG:
        logger.debug(f"{op}: {details} -> {placement}")


def _copy_region(dst: PixelBuffer, src: PixelBuffer, placement: Placement):
    """Overwrite the placed region of dst with src pixels, alpha included."""
    d, s = placement.dst_rect, placement.src_rect
    dst.data[d.y0:d.y1, d.x0:d.x1] = src.data[s.y0:s.y1, s.x0:s.x1]


def _blend_region(dst: PixelBuffer, src: PixelBuffer, placement: Placement, opacity: float):
    """
    Source-over composite src onto the placed region of dst.

    Channels are blended in float64 and truncated to uint8, one pixel at a
    time semantically:

        coef2 = opacity * a2 / 255
        coef1 = (1 - coef2) * a1 / 255
        color = (dst * coef1 + src * coef2) / (coef1 + coef2)
        alpha = min(a1 + a2 * opacity * (255 - a1) / 255, 255)

    Where coef1 + coef2 is zero the color channels are 0.
    """
    d, s = placement.dst_rect, placement.src_rect
    dst_region = dst.data[d.y0:d.y1, d.x0:d.x1]
    bg = dst_region.astype(np.float64)
    fg = src.data[s.y0:s.y1, s.x0:s.x1].astype(np.float64)

    a1 = bg[:, :, 3]
    a2 = fg[:, :, 3]

    coef2 = opacity * a2 / 255.0
    coef1 = (1 - coef2) * a1 / 255.0
    coef_sum = coef1 + coef2
    visible = coef_sum != 0
    coef1 = np.divide(coef1, coef_sum, out=np.zeros_like(coef1), where=visible)
    coef2 = np.divide(coef2, coef_sum, out=np.zeros_like(coef2), where=visible)

    rgb = bg[:, :, :3] * coef1[:, :, None] + fg[:, :, :3] * coef2[:, :, None]
    alpha = np.minimum(a1 + a2 * opacity * (255.0 - a1) / 255.0, 255.0)

    dst_region[:, :, :3] = rgb.astype(np.uint8)
    dst_region[:, :, 3] = alpha.astype(np.uint8)


def crop(image, rect, pad: bool = False) -> PixelBuffer:
    """
    Cut rect out of image.

    Args:
        image: Source image (any representation to_buffer accepts)
        rect: (x0, y0, x1, y1) in the image's own coordinate space
        pad: If False, the result is clipped to the part of rect inside the
            image. If True, the result always has rect's size and pixels
            outside the image are transparent black.

    Returns:
        New zero-origin PixelBuffer. Empty or negative-size rectangles give
        a 0x0 buffer.
    """
    rect = as_rectangle(rect)
    src = to_buffer(image)
    src_rect = rect.sub(bounds_of(image).min)

    if pad:
        dst = PixelBuffer(max(rect.dx, 0), max(rect.dy, 0))
        # Source positioned relative to the crop window
        placement = place(dst.bounds(), (src.width, src.height), Point(0, 0).sub(src_rect.min))
        _trace('crop', placement, rect=rect, pad=pad)
        if placement is not None:
            _copy_region(dst, src, placement)
        return dst

    inter = src.bounds().intersect(src_rect)
    if inter != src_rect and not src_rect.empty():
        logger.debug(f"Crop {tuple(rect)} clipped to {inter.dx}x{inter.dy}")
    dst = PixelBuffer(inter.dx, inter.dy)
    if not inter.empty():
        placement = Placement(Point(0, 0), inter.min, inter.dx, inter.dy)
        _trace('crop', placement, rect=rect, pad=pad)
        _copy_region(dst, src, placement)
    return dst


def crop_anchor(image, width: int, height: int, anchor: Anchor, pad: bool = False) -> PixelBuffer:
    """Cut a width x height window out of image, positioned by anchor."""
    b = bounds_of(image)
    anchor = Anchor(anchor)

    if anchor in (Anchor.TOP_LEFT, Anchor.LEFT, Anchor.BOTTOM_LEFT):
        x0 = b.x0
    elif anchor in (Anchor.TOP_RIGHT, Anchor.RIGHT, Anchor.BOTTOM_RIGHT):
        x0 = b.x1 - width
    else:
        x0 = b.x0 + _half(b.dx) - _half(width)

    if anchor in (Anchor.TOP_LEFT, Anchor.TOP, Anchor.TOP_RIGHT):
        y0 = b.y0
    elif anchor in (Anchor.BOTTOM_LEFT, Anchor.BOTTOM, Anchor.BOTTOM_RIGHT):
        y0 = b.y1 - height
    else:
        y0 = b.y0 + _half(b.dy) - _half(height)

    return crop(image, Rectangle(x0, y0, x0 + width, y0 + height), pad=pad)


def crop_center(image, width: int, height: int, pad: bool = False) -> PixelBuffer:
    """Cut a width x height window out of the center of image."""
    return crop_anchor(image, width, height, Anchor.CENTER, pad=pad)


def crop_top(image, width: int, height: int, pad: bool = False) -> PixelBuffer:
    """
    Cut a width x height window from the top of image, centered horizontally.

    The window starts at the image's own top edge (bounds().min.y), not at
    y = 0, so sub images with a non-zero origin are cropped from their top.
    """
    return crop_anchor(image, width, height, Anchor.TOP, pad=pad)


def _centered(background, img) -> Point:
    b = bounds_of(background)
    size = bounds_of(img).size
    return Point(b.x0 + _half(b.dx) - _half(size.x), b.y0 + _half(b.dy) - _half(size.y))


def paste(background, img, pos) -> PixelBuffer:
    """
    Paste img onto a copy of background with its top-left at pos.

    Pixels are overwritten verbatim, alpha included. pos is in background's
    own coordinate space; parts of img outside background are dropped.
    """
    src = to_buffer(img)
    dst = clone(background)
    start = as_point(pos).sub(bounds_of(background).min)

    placement = place(dst.bounds(), (src.width, src.height), start)
    _trace('paste', placement, pos=pos)
    if placement is None:
        logger.debug(f"Paste at {tuple(start)} does not overlap {dst.width}x{dst.height} background")
        return dst

    _copy_region(dst, src, placement)
    return dst


def paste_center(background, img) -> PixelBuffer:
    """Paste img onto the center of background."""
    return paste(background, img, _centered(background, img))


def overlay(background, img, pos, opacity: float = 1.0) -> PixelBuffer:
    """
    Draw img over a copy of background with its top-left at pos.

    Args:
        background: Background image
        img: Image drawn on top
        pos: Top-left of img in background's own coordinate space
        opacity: Opacity of the img layer, clamped to [0, 1]

    Returns:
        New PixelBuffer the size of background.
    """
    if math.isnan(opacity):
        opacity = 0.0
    opacity = min(max(float(opacity), 0.0), 1.0)

    src = to_buffer(img)
    dst = clone(background)
    start = as_point(pos).sub(bounds_of(background).min)

    placement = place(dst.bounds(), (src.width, src.height), start)
    _trace('overlay', placement, pos=pos, opacity=opacity)
    if placement is None:
        logger.debug(f"Overlay at {tuple(start)} does not overlap {dst.width}x{dst.height} background")
        return dst

    _blend_region(dst, src, placement, opacity)
    return dst


def overlay_center(background, img, opacity: float = 1.0) -> PixelBuffer:
    """Draw img over the center of background."""
    return overlay(background, img, _centered(background, img), opacity)
