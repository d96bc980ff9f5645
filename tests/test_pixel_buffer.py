#!/usr/bin/env python3
"""Test PixelBuffer storage, stride handling and sub images."""

import sys
import os

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from raster_ops import PixelBuffer, Rectangle, SubImage, clone, crop, new, paste


def test_new_buffer_is_zeroed():
    """Fresh buffers are compact and transparent black."""
    print("\n=== Test: New Buffer ===")

    buf = PixelBuffer(3, 2)
    assert buf.stride == 12
    assert len(buf.pix) == 24
    assert not buf.pix.any()
    assert buf.bounds() == Rectangle(0, 0, 3, 2)
    assert buf.data.shape == (2, 3, 4)

    filled = new(2, 2, (1, 2, 3, 4))
    assert filled.get_pixel(1, 1) == (1, 2, 3, 4)

    print("✓ New buffers correct")


def test_stride_layout():
    """Rows padded beyond width * 4 keep their padding untouched."""
    print("\n=== Test: Stride Layout ===")

    buf = PixelBuffer(2, 2, stride=12)
    buf.set_pixel(1, 1, (1, 2, 3, 4))

    assert buf.pix_offset(1, 1) == 16
    assert list(buf.pix[16:20]) == [1, 2, 3, 4]
    assert tuple(buf.data[1, 1]) == (1, 2, 3, 4)
    assert not buf.pix[8:12].any(), "Row padding should not be written"

    # Writes through the data view land in pix
    buf.data[0, 0] = (9, 9, 9, 9)
    assert list(buf.pix[0:4]) == [9, 9, 9, 9]

    print("✓ Stride honoured")


def test_pixel_access():
    """get_pixel / set_pixel bounds behaviour."""
    print("\n=== Test: Pixel Access ===")

    buf = PixelBuffer(2, 2)
    buf.set_pixel(0, 0, (10, 20, 30, 40))
    buf.set_pixel(0, 0, (1, 2, 3))
    assert buf.get_pixel(0, 0) == (1, 2, 3, 40), "RGB writes keep existing alpha"

    # Out of range is ignored / transparent
    buf.set_pixel(5, 5, (255, 255, 255, 255))
    assert buf.get_pixel(5, 5) == (0, 0, 0, 0)
    assert buf.get_pixel(-1, 0) == (0, 0, 0, 0)

    with pytest.raises(IndexError):
        buf.pix_offset(2, 0)

    print("✓ Pixel access correct")


def test_invalid_buffers():
    """Storage that violates the RGBA8 layout is rejected."""
    print("\n=== Test: Invalid Buffers ===")

    with pytest.raises(ValueError):
        PixelBuffer(-1, 2)
    with pytest.raises(ValueError):
        PixelBuffer(4, 1, stride=8)
    with pytest.raises(ValueError):
        PixelBuffer(2, 2, pix=np.zeros(10, dtype=np.uint8))
    with pytest.raises(ValueError):
        PixelBuffer(1, 1, pix=np.zeros(4, dtype=np.float32))

    # Raw bytes are copied into numpy storage
    buf = PixelBuffer(1, 1, pix=bytes([1, 2, 3, 4]))
    assert buf.get_pixel(0, 0) == (1, 2, 3, 4)

    print("✓ Invalid storage rejected")


def test_copy_is_compact_and_independent():
    """copy() drops stride padding and shares nothing."""
    print("\n=== Test: Copy ===")

    buf = PixelBuffer(2, 2, stride=16)
    buf.fill((5, 6, 7))
    dup = buf.copy()

    assert dup.stride == 8
    assert dup == buf
    dup.set_pixel(0, 0, (0, 0, 0, 0))
    assert buf.get_pixel(0, 0) == (5, 6, 7, 255)

    print("✓ Copy independent")


def test_sub_image():
    """Sub images keep the parent's coordinates and clip to it."""
    print("\n=== Test: Sub Image ===")

    buf = PixelBuffer(4, 4)
    buf.set_pixel(2, 3, (1, 1, 1, 1))

    sub = buf.sub_image((2, 2, 10, 10))
    assert sub.bounds() == Rectangle(2, 2, 4, 4)
    assert sub.data.shape == (2, 2, 4)
    assert sub.get_pixel(2, 3) == (1, 1, 1, 1)
    assert sub.get_pixel(0, 0) == (0, 0, 0, 0), "Outside the sub image bounds"

    print("✓ Sub image correct")


def test_sub_image_clips_to_parent():
    """Regions hanging off the parent are clipped, never wrapped."""
    print("\n=== Test: Sub Image Clipping ===")

    buf = PixelBuffer(10, 10)
    for y in range(10):
        for x in range(10):
            buf.set_pixel(x, y, (x, y, x + y, 255))

    sub = SubImage(buf, Rectangle(8, 8, 12, 12))
    assert sub.bounds() == Rectangle(8, 8, 10, 10)
    out = clone(sub)
    assert (out.width, out.height) == (2, 2)
    assert out.get_pixel(0, 0) == (8, 8, 16, 255)
    out = crop(sub, (8, 8, 12, 12))
    assert (out.width, out.height) == (2, 2)
    assert out.get_pixel(1, 1) == (9, 9, 18, 255)

    # Negative origin must not index from the far edge
    sub = SubImage(buf, Rectangle(-2, -2, 2, 2))
    assert sub.bounds() == Rectangle(0, 0, 2, 2)
    out = clone(sub)
    assert (out.width, out.height) == (2, 2)
    assert out.get_pixel(0, 0) == (0, 0, 0, 255)
    out = crop(sub, (-2, -2, 2, 2))
    assert out.get_pixel(1, 1) == (1, 1, 2, 255)

    # Entirely outside is an empty region
    sub = SubImage(buf, Rectangle(20, 20, 25, 25))
    assert sub.bounds().empty()
    assert (clone(sub).width, clone(sub).height) == (0, 0)

    # Background sub image hanging off the parent still pastes
    out = paste(SubImage(buf, Rectangle(8, 8, 12, 12)), new(1, 1, (1, 2, 3, 4)), (9, 9))
    assert (out.width, out.height) == (2, 2)
    assert out.get_pixel(1, 1) == (1, 2, 3, 4)

    print("✓ Sub image clipped to parent")


def test_to_pil():
    """Buffers hand off to Pillow as RGBA."""
    print("\n=== Test: to_pil ===")

    buf = PixelBuffer(3, 2, stride=20)
    buf.set_pixel(2, 1, (10, 20, 30, 40))
    img = buf.to_pil()

    assert img.mode == 'RGBA'
    assert img.size == (3, 2)
    assert img.getpixel((2, 1)) == (10, 20, 30, 40)

    print("✓ Pillow conversion correct")


if __name__ == '__main__':
    test_new_buffer_is_zeroed()
    test_stride_layout()
    test_pixel_access()
    test_invalid_buffers()
    test_copy_is_compact_and_independent()
    test_sub_image()
    test_sub_image_clips_to_parent()
    test_to_pil()
    print("\nAll pixel buffer tests passed!")
