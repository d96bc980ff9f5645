"""Demo: crop, paste and overlay synthetic buffers and render them to the terminal."""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

import raster_ops.tools
from raster_ops import (PixelBuffer, crop_center, crop_top, new, overlay,
                        overlay_center, paste, paste_center, to_buffer)

logger = logging.getLogger(__name__)


def render_to_terminal(buffer: PixelBuffer, square_pixels: bool = True):
    """Render buffer with ANSI true-color backgrounds. Transparent pixels show as black."""
    chars_per_pixel = 2 if square_pixels else 1
    frame = []
    for y in range(buffer.height):
        for x in range(buffer.width):
            r, g, b, a = buffer.get_pixel(x, y)
            if a == 0:
                r, g, b = 0, 0, 0
            frame.append(f'\x1b[48;2;{r};{g};{b}m')
            frame.append(' ' * chars_per_pixel)
        frame.append('\x1b[0m\n')
    sys.stdout.write(''.join(frame))
    sys.stdout.flush()


def make_gradient(width: int, height: int) -> PixelBuffer:
    """Horizontal red-to-blue gradient, fully opaque."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :, 0] = (255 - xs).astype(np.uint8)
    arr[:, :, 2] = xs.astype(np.uint8)
    arr[:, :, 3] = 255
    return to_buffer(arr)


def make_sprite(size: int) -> PixelBuffer:
    """Yellow disc on a transparent square."""
    yy, xx = np.mgrid[0:size, 0:size]
    r = (size - 1) / 2
    inside = (xx - r) ** 2 + (yy - r) ** 2 <= r * r
    arr = np.zeros((size, size, 4), dtype=np.uint8)
    arr[inside] = (255, 220, 0, 255)
    return to_buffer(arr)


def main():
    parser = argparse.ArgumentParser(description='Compose demo buffers and show the results')
    parser.add_argument('--width', type=int, default=32, help='Background width')
    parser.add_argument('--height', type=int, default=16, help='Background height')
    parser.add_argument('--opacity', type=float, default=0.6, help='Overlay opacity (0.0-1.0)')
    parser.add_argument('--debug', action='store_true', help='Log placement arithmetic')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s.%(msecs)03d - %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    raster_ops.tools.DEBUG = args.debug

    background = make_gradient(args.width, args.height)
    sprite = make_sprite(min(args.width, args.height) // 2)
    banner = new(args.width // 2, 2, (255, 255, 255, 255))

    steps = [
        ("background", background),
        ("paste_center (opaque overwrite)", paste_center(background, sprite)),
        ("paste banner at (0, 0)", paste(background, banner, (0, 0))),
        (f"overlay_center opacity={args.opacity}", overlay_center(background, sprite, args.opacity)),
        ("overlay partly off-canvas", overlay(background, sprite, (-sprite.width // 2, args.height - 3), 1.0)),
        ("crop_center half size", crop_center(background, args.width // 2, args.height // 2)),
        ("crop_top half size", crop_top(background, args.width // 2, args.height // 2)),
    ]

    for title, buffer in steps:
        logger.info(f"{title}: {buffer.width}x{buffer.height}")
        print(f"\n{title}")
        render_to_terminal(buffer)


if __name__ == "__main__":
    main()
