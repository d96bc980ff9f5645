"""Conversion of supported image representations to PixelBuffer."""

import logging

import numpy as np
from PIL import Image

from .geometry import Rectangle
from .pixel_buffer import PixelBuffer, SubImage

logger = logging.getLogger(__name__)


def bounds_of(image) -> Rectangle:
    """Bounds of image in its own coordinate space."""
    if isinstance(image, (PixelBuffer, SubImage)):
        return image.bounds()
    if isinstance(image, Image.Image):
        return Rectangle(0, 0, image.width, image.height)
    if isinstance(image, np.ndarray) and image.ndim in (2, 3):
        height, width = image.shape[:2]
        return Rectangle(0, 0, width, height)
    raise TypeError(f"Unsupported image type: {type(image).__name__}")


def _from_array(arr: np.ndarray) -> PixelBuffer:
    if arr.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {arr.dtype}")

    if arr.ndim == 2:
        height, width = arr.shape
        buffer = PixelBuffer(width, height)
        buffer.data[:, :, :3] = arr[:, :, None]
        buffer.data[:, :, 3] = 255
    elif arr.ndim == 3 and arr.shape[2] == 3:
        height, width = arr.shape[:2]
        buffer = PixelBuffer(width, height)
        buffer.data[:, :, :3] = arr
        buffer.data[:, :, 3] = 255
    elif arr.ndim == 3 and arr.shape[2] == 4:
        height, width = arr.shape[:2]
        buffer = PixelBuffer(width, height)
        buffer.data[:] = arr
    else:
        raise ValueError(f"Expected (H, W), (H, W, 3) or (H, W, 4) pixels, got shape {arr.shape}")

    return buffer


def to_buffer(image) -> PixelBuffer:
    """
    Normalize image to a zero-origin RGBA8 PixelBuffer.

    A PixelBuffer is returned as-is; callers must not write to the result
    unless they cloned it. Every other representation yields a fresh buffer.

    Args:
        image: PixelBuffer, SubImage, PIL image (any mode) or uint8 numpy
            array shaped (H, W), (H, W, 3) or (H, W, 4)
    """
    if isinstance(image, PixelBuffer):
        return image
    if isinstance(image, SubImage):
        return clone(image)
    if isinstance(image, Image.Image):
        if image.mode != 'RGBA':
            logger.debug(f"Converting PIL image from mode {image.mode} to RGBA")
            image = image.convert('RGBA')
        return _from_array(np.asarray(image, dtype=np.uint8))
    if isinstance(image, np.ndarray):
        return _from_array(image)
    raise TypeError(f"Unsupported image type: {type(image).__name__}")


def clone(image) -> PixelBuffer:
    """Independent, compact, zero-origin copy of image."""
    if isinstance(image, PixelBuffer):
        return image.copy()
    if isinstance(image, SubImage):
        r = image.bounds()
        buffer = PixelBuffer(r.dx, r.dy)
        buffer.data[:] = image.data
        return buffer
    # Every other representation already converts into a fresh buffer
    return to_buffer(image)
