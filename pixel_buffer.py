"""
Pixel Buffer - RGBA8 Canvas

Owns the contiguous RGBA byte array every drawing operation ends up in.
Stored as a numpy uint8 array of shape (height, width, 4): row-major,
4 bytes per pixel, so the raw stream is exactly width * height * 4 bytes
and pixel (x, y) starts at byte (y * width + x) * 4.

Writes outside [0, width) x [0, height) are silently dropped. Colors are
normalized through color_core before they touch the array.
"""

import math
from typing import Any, Optional, Tuple

import numpy as np  # type: ignore

from raster_types import (
    BYTES_PER_PIXEL,
    DEFAULT_CODEC,
    DEFAULT_FFMPEG_PATH,
    Color,
    InvalidInput,
    Point,
    round_half_up,
    round_point,
)
from color_core import to_color
from draw_engine import DrawEngine
import image_encoder_shell


def _validate_dimension(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
        raise InvalidInput(f"{name} must be a positive integer, got {value!r}")
    return int(value)


class PixelBuffer:
    """Fixed-size in-memory RGBA8 image

    Attributes:
        width: Width in pixels (immutable)
        height: Height in pixels (immutable)
        ffmpeg_path: Executable used by write_image()
    """

    def __init__(self, width: int, height: int, ffmpeg_path: str = DEFAULT_FFMPEG_PATH):
        self._width = _validate_dimension('width', width)
        self._height = _validate_dimension('height', height)
        self._pixels = np.zeros((self._height, self._width, BYTES_PER_PIXEL), dtype=np.uint8)
        self.ffmpeg_path = ffmpeg_path
        self._drawer: Optional[DrawEngine] = None

    def __repr__(self) -> str:
        return f"PixelBuffer({self._width}x{self._height})"

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def drawer(self) -> DrawEngine:
        """Drawing engine bound to this buffer, created on first access"""
        if self._drawer is None:
            self._drawer = DrawEngine(self)
        return self._drawer

    # ------------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def pixel_index(self, x: int, y: int) -> int:
        """Linear pixel index (y * width + x); multiply by 4 for the byte offset"""
        return y * self._width + x

    def index_to_point(self, index: int) -> Tuple[int, int]:
        return (index % self._width, index // self._width)

    # ------------------------------------------------------------------------
    # Single Pixel Access
    # ------------------------------------------------------------------------

    def get(self, point: Point) -> Color:
        """Read the color at point

        Raises:
            InvalidInput: If point lies outside the buffer
        """
        x, y = round_point(point)
        if not self.in_bounds(x, y):
            raise InvalidInput(f"Point {point!r} outside {self._width}x{self._height} buffer")
        r, g, b, a = self._pixels[y, x]
        return (int(r), int(g), int(b), int(a))

    def _target_pixel(self, point: Point) -> Optional[Tuple[int, int]]:
        """Rounded in-range pixel for a write, or None when it lands outside"""
        try:
            x, y = point
            finite = math.isfinite(x) and math.isfinite(y)
        except (TypeError, ValueError):
            raise InvalidInput(f"Point must be an (x, y) pair of numbers, got {point!r}")
        if not finite:
            return None

        x, y = round_point((x, y))
        return (x, y) if self.in_bounds(x, y) else None

    def set(self, point: Point, color: Any) -> None:
        """Overwrite the pixel at point; no-op outside the buffer"""
        rgba = to_color(color)
        pixel = self._target_pixel(point)
        if pixel is None:
            return
        x, y = pixel
        self._pixels[y, x] = rgba

    def add(self, point: Point, color: Any) -> None:
        """Alpha-blend color onto the pixel at point

        RGB is composited source-over: c3 = c * (1 - alpha) + c2 * alpha.
        Alpha accumulates as a3 = a + a2 * (1 - alpha) and saturates at 255
        when written, so stacking translucent layers drives it towards opaque.
        """
        r2, g2, b2, a2 = to_color(color)
        pixel = self._target_pixel(point)
        if pixel is None:
            return

        r, g, b, a = self.get(pixel)

        alpha = a2 / 255
        alpha_complement = 1 - alpha

        r3 = round_half_up(r * alpha_complement + r2 * alpha)
        g3 = round_half_up(g * alpha_complement + g2 * alpha)
        b3 = round_half_up(b * alpha_complement + b2 * alpha)
        a3 = a + a2 * alpha_complement

        self.set(pixel, [r3, g3, b3, a3])

    # ------------------------------------------------------------------------
    # Batched Access (used by DrawEngine.flush)
    # ------------------------------------------------------------------------

    def set_many(self, indices: np.ndarray, colors: np.ndarray) -> None:
        """Overwrite many pixels at once

        Args:
            indices: Unique in-range linear pixel indices, shape (N,)
            colors: Canonical RGBA colors, uint8 array of shape (N, 4)
        """
        flat = self._pixels.reshape(-1, BYTES_PER_PIXEL)
        flat[indices] = colors

    def add_many(self, indices: np.ndarray, colors: np.ndarray) -> None:
        """Alpha-blend many pixels at once, identical to add() per entry

        Indices must be unique; a repeated index would only be blended once.
        """
        flat = self._pixels.reshape(-1, BYTES_PER_PIXEL)
        current = flat[indices].astype(np.float64)
        incoming = colors.astype(np.float64)

        alpha = incoming[:, 3:4] / 255
        alpha_complement = 1 - alpha

        blended = np.empty_like(current)
        blended[:, :3] = np.floor(
            current[:, :3] * alpha_complement + incoming[:, :3] * alpha + 0.5
        )
        blended[:, 3] = current[:, 3] + incoming[:, 3] * alpha_complement[:, 0]

        flat[indices] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

    # ------------------------------------------------------------------------
    # Whole Buffer
    # ------------------------------------------------------------------------

    def fill(self, color: Any) -> None:
        """Overwrite every pixel, bypassing batching and blending

        Pending writes staged on this buffer's drawer are discarded, not
        applied.
        """
        rgba = to_color(color)
        if self._drawer is not None:
            self._drawer.discard_pending()
        self._pixels[:] = rgba

    @property
    def unsafe_pixels(self) -> np.ndarray:
        """Live (height, width, 4) uint8 array backing this buffer

        Export boundary only. Writing through this array bypasses the
        drawer's pending-write batching.
        """
        return self._pixels

    def to_bytes(self) -> bytes:
        """Raw row-major RGBA stream, width * height * 4 bytes"""
        return self._pixels.tobytes()

    # ------------------------------------------------------------------------
    # Export (delegates to the imperative shell)
    # ------------------------------------------------------------------------

    def to_image(self):
        """Copy of the buffer as a Pillow RGBA image"""
        return image_encoder_shell.buffer_to_image(self)

    def save(self, path: str) -> None:
        """Save through Pillow; format chosen from the file extension"""
        image_encoder_shell.save_image(self, path)

    def write_image(self, output: Any, codec: str = DEFAULT_CODEC, verbose: bool = False) -> None:
        """Encode with ffmpeg and write the result to output (path or binary file)"""
        image_encoder_shell.write_image(
            self.to_bytes(),
            output,
            width=self._width,
            height=self._height,
            codec=codec,
            ffmpeg_path=self.ffmpeg_path,
            verbose=verbose,
        )
