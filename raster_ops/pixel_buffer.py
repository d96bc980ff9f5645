"""PixelBuffer - Flat row-major RGBA8 pixel buffer."""

from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image

from .geometry import Rectangle, as_rectangle

# Bytes per pixel: R, G, B, A
CHANNELS = 4

Color = Union[Tuple[int, int, int], Tuple[int, int, int, int]]


class PixelBuffer:
    """
    Non-premultiplied RGBA8 pixel buffer with origin (0, 0).

    Pixels live in a flat numpy uint8 array; pixel (x, y) channel c is at
    pix[y * stride + x * 4 + c].
    """

    def __init__(self, width: int, height: int, stride: Optional[int] = None,
                 pix: Optional[Union[np.ndarray, bytes, bytearray]] = None):
        if width < 0 or height < 0:
            raise ValueError(f"Buffer size must be non-negative, got {width}x{height}")
        if stride is None:
            stride = width * CHANNELS
        if stride < width * CHANNELS:
            raise ValueError(f"Stride {stride} is smaller than a row of {width} pixels")

        if pix is None:
            pix = np.zeros(stride * height, dtype=np.uint8)
        elif isinstance(pix, (bytes, bytearray)):
            pix = np.frombuffer(pix, dtype=np.uint8).copy()
        elif not isinstance(pix, np.ndarray) or pix.dtype != np.uint8 or pix.ndim != 1:
            raise ValueError("Pixel storage must be a one-dimensional uint8 array")

        if len(pix) < stride * height:
            raise ValueError(
                f"Pixel storage holds {len(pix)} bytes, need {stride * height} for {width}x{height}"
            )

        self.width = width
        self.height = height
        self.stride = stride
        self.pix = pix

    def bounds(self) -> Rectangle:
        return Rectangle(0, 0, self.width, self.height)

    def pix_offset(self, x: int, y: int) -> int:
        """Index of the first byte of pixel (x, y) in pix."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        return y * self.stride + x * CHANNELS

    @property
    def data(self) -> np.ndarray:
        """(height, width, 4) view over pix. Writes go through to the buffer."""
        rows = self.pix[:self.stride * self.height].reshape(self.height, self.stride)
        return rows[:, :self.width * CHANNELS].reshape(self.height, self.width, CHANNELS)

    def set_pixel(self, x: int, y: int, color: Color):
        """Set pixel at (x, y) to color (r, g, b) or (r, g, b, a)."""
        if 0 <= x < self.width and 0 <= y < self.height:
            i = self.pix_offset(x, y)
            self.pix[i:i + len(color)] = color

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """Get pixel color at (x, y) as (r, g, b, a)."""
        if 0 <= x < self.width and 0 <= y < self.height:
            i = self.pix_offset(x, y)
            return tuple(int(c) for c in self.pix[i:i + CHANNELS])
        return (0, 0, 0, 0)

    def fill(self, color: Color = (0, 0, 0, 0)):
        """Fill buffer with (r, g, b) (opaque) or (r, g, b, a)."""
        if len(color) == 3:
            color = (*color, 255)
        self.data[:, :] = color

    def sub_image(self, rect) -> 'SubImage':
        """View of rect (clipped to the buffer) that keeps rect's coordinates."""
        return SubImage(self, rect)

    def copy(self) -> 'PixelBuffer':
        """Compact copy of this buffer."""
        new_buffer = PixelBuffer(self.width, self.height)
        new_buffer.data[:] = self.data
        return new_buffer

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.data))

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height) and np.array_equal(self.data, other.data)

    __hash__ = None

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height}, stride={self.stride})"


class SubImage:
    """
    Region of a PixelBuffer that keeps its own coordinates.

    bounds().min is the region's origin in the parent's coordinate space.
    Pixel (x, y) of the sub image is pixel (x, y) of the parent. bounds are
    clipped to the parent.
    """

    def __init__(self, parent: PixelBuffer, bounds: Rectangle):
        self.parent = parent
        self._bounds = parent.bounds().intersect(as_rectangle(bounds))

    def bounds(self) -> Rectangle:
        return self._bounds

    @property
    def data(self) -> np.ndarray:
        r = self._bounds
        return self.parent.data[r.y0:r.y1, r.x0:r.x1]

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if self._bounds.contains((x, y)):
            return self.parent.get_pixel(x, y)
        return (0, 0, 0, 0)

    def __repr__(self):
        return f"SubImage({self.parent!r}, bounds={tuple(self._bounds)})"


def new(width: int, height: int, color: Color = (0, 0, 0, 0)) -> PixelBuffer:
    """Allocate a width x height buffer filled with color."""
    buffer = PixelBuffer(max(width, 0), max(height, 0))
    if any(color):
        buffer.fill(color)
    return buffer
