#!/usr/bin/env python3
"""
Shape Rendering Demo

Draws one of every primitive into a 1000x1000 buffer and writes it to disk:
outlines and fills, translucent overlapping circles, HSL swatches, a fan of
radial lines, an alpha ramp, a thick translucent path, a bezier curve through
the same points, and three filled polygons.

Usage:
    python demo_shapes.py                       # _temp.png through ffmpeg
    python demo_shapes.py --codec libwebp -o demo.webp
    python demo_shapes.py --pillow -o demo.png  # no ffmpeg needed
"""

import argparse
import math
import sys
from typing import List

from raster_types import SUPPORTED_CODECS, Point
from color_core import color_to_hex
from pixel_buffer import PixelBuffer
from draw_engine import DrawEngine


BACKGROUND = '#000000'


def seeded_random(seed: int) -> float:
    """Deterministic pseudo-random value in [0, 1] for a given seed"""
    seed = seed ^ 61 ^ (seed >> 16)
    seed += seed << 3
    seed ^= seed >> 4
    return math.sin(seed) / 2 + 0.5


def draw_primitives(drawer: DrawEngine) -> None:
    drawer.draw_circle((50, 50), 50, '#FFFFFF')
    drawer.draw_filled_circle((160, 50), 50, '#FFFFFF')
    drawer.draw_rectangle((220, 0), (320, 100), '#FFFFFF')
    drawer.draw_filled_rectangle((330, 0), (430, 100), '#FFFFFF')
    drawer.draw_line((440, 0), (540, 100), '#FFFFFF')
    drawer.draw_triangle([(550, 0), (550, 100), (650, 100)], '#FFFFFF')


def draw_translucent_circles(drawer: DrawEngine) -> None:
    drawer.draw_filled_circle((50, 170), 50, '#FF000088')
    drawer.draw_filled_circle((100, 200), 50, '#0000FF88')


def draw_hsl_swatches(drawer: DrawEngine) -> None:
    drawer.blending = False
    drawer.draw_filled_rectangle((160, 105), (625, 250), '#00000000')
    r = 20
    for i in range(10):
        x = i * (r * 2 + 2) + 200
        drawer.draw_filled_circle((x, 135), r, f'hsl({i * 36}, 100, 50)')
        drawer.draw_filled_circle((x, 177), r, f'hsl(0, {i * 10}, 50)')
        drawer.draw_filled_circle((x, 219), r, f'hsl(0, 100, {i * 10})')
    drawer.blending = True


def draw_radial_lines(drawer: DrawEngine) -> int:
    cx, cy, r = 900, 100, 100
    count = 20
    for i in range(count):
        angle = i * math.pi / 10
        drawer.draw_line(
            (cx + math.cos(angle) * r, cy + math.sin(angle) * r),
            (cx + math.cos(angle + math.pi) * r, cy + math.sin(angle + math.pi) * r),
            '#FF00FF'
        )
    return count


def draw_alpha_ramp(drawer: DrawEngine) -> None:
    drawer.blending = False
    for i in range(11):
        t = i / 10
        drawer.draw_filled_circle((t * 900 + 50, 300), 40, [255, 255, 255, t * 255])
    drawer.blending = True


def draw_curves(drawer: DrawEngine) -> None:
    points: List[Point] = [
        (x, seeded_random(x) * 200 + 350) for x in range(0, 1001, 100)
    ]

    drawer.line_thickness = 3
    drawer.draw_path(points, '#AAAAAA88')
    drawer.line_thickness = 1

    drawer.draw_bezier(points, '#FFFFFF')


def draw_polygons(drawer: DrawEngine) -> None:
    for j in range(3):
        polygon: List[Point] = []
        for i in range(10):
            r = seeded_random(i * (j + 2)) * 100 + 50
            polygon.append((
                math.cos(i / 10 * math.pi * 2) * r + 150 + j * 300,
                math.sin(i / 10 * math.pi * 2) * r + 750,
            ))
        polygon.append(polygon[0])
        drawer.draw_filled_path(polygon, '#FFFFFF')


def render_demo(size: int = 1000) -> PixelBuffer:
    """Render the full demo scene into a new square buffer"""
    buffer = PixelBuffer(size, size)
    drawer = buffer.drawer

    drawer.fill(BACKGROUND)
    draw_primitives(drawer)
    draw_translucent_circles(drawer)
    draw_hsl_swatches(drawer)
    draw_radial_lines(drawer)
    draw_alpha_ramp(drawer)
    draw_curves(drawer)
    draw_polygons(drawer)

    return buffer


def main():
    parser = argparse.ArgumentParser(description='Render every drawing primitive to an image')
    parser.add_argument('-o', '--output', default='_temp.png',
                        help='Output file (default: _temp.png)')
    parser.add_argument('--size', type=int, default=1000,
                        help='Width and height of the image in pixels (default: 1000)')
    parser.add_argument('--codec', choices=SUPPORTED_CODECS, default='png',
                        help='ffmpeg codec (default: png)')
    parser.add_argument('--pillow', action='store_true',
                        help='Save with Pillow instead of ffmpeg')
    args = parser.parse_args()

    print("=" * 60)
    print("Shape Rendering Demo")
    print("=" * 60)

    buffer = render_demo(args.size)
    print(f"  Rendered {buffer.width}x{buffer.height} scene on {color_to_hex(BACKGROUND)}")

    try:
        if args.pillow:
            buffer.save(args.output)
        else:
            buffer.write_image(args.output, codec=args.codec)
    except RuntimeError as e:
        print(f"✗ {e}")
        print("  • Use --pillow to save without ffmpeg")
        return 1

    print(f"✓ Wrote {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
