"""
Draw Engine - Batched Shape Rasterization

Renders shapes into a PixelBuffer through a single primitive: staging one
logical pixel into a pending-write map keyed by linear pixel index. Nothing
reaches the buffer until flush(), which applies every staged pixel exactly
once (blended or overwritten) and clears the map.

Composite shapes (thick lines, paths, polygons, bezier curves) delegate to
other shapes inside a deferred() scope. Scopes nest; only the outermost one
flushes, so a pixel shared by several segments of one path is blended once
against the buffer's prior state instead of once per segment.

Geometry comes from draw_core (pure); this module only stages and flushes.
"""

import math
import numbers
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, TYPE_CHECKING

import numpy as np  # type: ignore

from raster_types import BYTES_PER_PIXEL, Color, InvalidInput, Point, round_half_up, round_point
from color_core import to_color
from draw_core import (
    bezier_parameters,
    bresenham_line,
    circle_outline_points,
    close_path,
    default_bezier_step,
    filled_circle_spans,
    lerp_points,
    polygon_spans,
    rectangle_outline_points,
    rectangle_spans,
    triangle_spans,
    unit_steps,
)

if TYPE_CHECKING:
    from pixel_buffer import PixelBuffer


# ============================================================================
# Argument Validation
# ============================================================================

def _as_point(value: Any) -> Point:
    try:
        x, y = value
        x, y = float(x), float(y)
    except (TypeError, ValueError):
        raise InvalidInput(f"Point must be an (x, y) pair of numbers, got {value!r}")
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidInput(f"Point coordinates must be finite, got {value!r}")
    return (x, y)


def _as_points(values: Sequence[Any], minimum: int) -> List[Point]:
    try:
        points = [_as_point(v) for v in values]
    except TypeError:
        raise InvalidInput(f"Expected a sequence of points, got {values!r}")
    if len(points) < minimum:
        raise InvalidInput(f"At least {minimum} points are required, got {len(points)}")
    return points


def _as_radius(value: Any) -> float:
    try:
        radius = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Radius must be a number, got {value!r}")
    if not math.isfinite(radius) or radius < 0:
        raise InvalidInput(f"Radius must be finite and non-negative, got {value!r}")
    return radius


# ============================================================================
# Engine
# ============================================================================

class DrawEngine:
    """Shape drawing on top of one PixelBuffer

    Attributes:
        buffer: Target buffer (not owned)
        blending: Alpha-blend flushed pixels (True) or overwrite them (False)
        line_thickness: Line diameter in pixels; > 1 stamps filled circles
    """

    def __init__(self, buffer: 'PixelBuffer', blending: bool = True, line_thickness: float = 1):
        self.buffer = buffer
        self.blending = blending
        self.line_thickness = line_thickness
        self._pending: Dict[int, Color] = {}
        self._depth = 0

    def __repr__(self) -> str:
        return (
            f"DrawEngine({self.buffer!r}, blending={self.blending}, "
            f"line_thickness={self.line_thickness})"
        )

    @property
    def pending_count(self) -> int:
        """Number of distinct pixels staged and not yet flushed"""
        return len(self._pending)

    @property
    def suppression_depth(self) -> int:
        return self._depth

    # ------------------------------------------------------------------------
    # Staging & Flushing
    # ------------------------------------------------------------------------

    def _stage(self, point: Point, color: Color) -> None:
        x, y = round_point(point)
        if not self.buffer.in_bounds(x, y):
            return
        self._pending[self.buffer.pixel_index(x, y)] = color

    def _stage_span(self, y: float, x_start: float, x_end: float, color: Color) -> None:
        row = round_half_up(y)
        width = self.buffer.width
        if not 0 <= row < self.buffer.height:
            return
        offset = row * width
        for x in unit_steps(x_start, x_end):
            column = round_half_up(x)
            if 0 <= column < width:
                self._pending[offset + column] = color

    def flush(self) -> None:
        """Apply every staged pixel to the buffer and clear the batch

        No-op while a deferred() scope is open.
        """
        if self._depth != 0 or not self._pending:
            return

        try:
            indices = np.fromiter(self._pending.keys(), dtype=np.int64, count=len(self._pending))
            colors = np.array(list(self._pending.values()), dtype=np.uint8).reshape(-1, BYTES_PER_PIXEL)

            if self.blending:
                self.buffer.add_many(indices, colors)
            else:
                self.buffer.set_many(indices, colors)
        finally:
            self._pending.clear()

    def discard_pending(self) -> None:
        """Drop staged pixels without applying them"""
        self._pending.clear()

    @contextmanager
    def deferred(self) -> Iterator['DrawEngine']:
        """Defer flushing until the outermost scope exits

        Scopes nest; each entry raises the suppression depth and each exit
        lowers it again, on every exit path. Leaving the outermost scope
        normally flushes the batch once. Leaving it through an exception
        discards the batch so a failed operation leaves no partial shape.

        Usage:
            with engine.deferred():
                engine.draw_line((0, 0), (9, 0), '#FF000080')
                engine.draw_line((0, 0), (0, 9), '#FF000080')
            # the shared corner (0, 0) is blended once
        """
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self.discard_pending()
            raise
        self._depth -= 1
        self.flush()

    # ------------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------------

    def draw_point(self, point: Point, color: Any) -> None:
        rgba = to_color(color)
        point = _as_point(point)
        with self.deferred():
            self._stage(point, rgba)

    def draw_line(self, start: Point, end: Point, color: Any) -> None:
        """Bresenham line from start to end, both endpoints inclusive

        With line_thickness > 1 every step stamps a filled circle of that
        diameter instead of a single pixel.
        """
        rgba = to_color(color)
        start, end = _as_point(start), _as_point(end)
        thickness = self.line_thickness

        with self.deferred():
            for pixel in bresenham_line(start, end):
                if thickness > 1:
                    self.draw_filled_circle(pixel, thickness / 2, rgba)
                else:
                    self._stage(pixel, rgba)

    def draw_rectangle(self, start: Point, end: Point, color: Any) -> None:
        """Rectangle outline between two opposite corners (inclusive)"""
        rgba = to_color(color)
        start, end = _as_point(start), _as_point(end)
        with self.deferred():
            for point in rectangle_outline_points(start, end):
                self._stage(point, rgba)

    def draw_filled_rectangle(self, start: Point, end: Point, color: Any) -> None:
        rgba = to_color(color)
        start, end = _as_point(start), _as_point(end)
        with self.deferred():
            for y, x_start, x_end in rectangle_spans(start, end):
                self._stage_span(y, x_start, x_end, rgba)

    def draw_circle(self, center: Point, radius: float, color: Any) -> None:
        """Midpoint circle outline"""
        rgba = to_color(color)
        center, radius = _as_point(center), _as_radius(radius)
        with self.deferred():
            for point in circle_outline_points(center, radius):
                self._stage(point, rgba)

    def draw_filled_circle(self, center: Point, radius: float, color: Any) -> None:
        rgba = to_color(color)
        center, radius = _as_point(center), _as_radius(radius)
        with self.deferred():
            for y, x_start, x_end in filled_circle_spans(center, radius):
                self._stage_span(y, x_start, x_end, rgba)

    def draw_triangle(self, triangle: Sequence[Point], color: Any) -> None:
        """Scanline-filled triangle; vertices may be given in any order"""
        rgba = to_color(color)
        vertices = _as_points(triangle, minimum=3)
        if len(vertices) != 3:
            raise InvalidInput(f"A triangle has exactly 3 vertices, got {len(vertices)}")

        with self.deferred():
            for y, x_start, x_end in triangle_spans(vertices):
                self._stage_span(y, x_start, x_end, rgba)

    def draw_path(self, points: Sequence[Point], color: Any) -> None:
        """Connected line segments through points, flushed once

        Raises:
            InvalidInput: If fewer than 2 points are given
        """
        rgba = to_color(color)
        points = _as_points(points, minimum=2)

        with self.deferred():
            for start, end in zip(points, points[1:]):
                self.draw_line(start, end, rgba)

    def draw_filled_path(self, points: Sequence[Point], color: Any) -> None:
        """Filled polygon bounded by points, implicitly closed

        The interior is filled with the edge-crossing scanline rule and the
        boundary edges are stroked, all in a single batch.

        Raises:
            InvalidInput: If fewer than 2 points are given
        """
        rgba = to_color(color)
        points = close_path(_as_points(points, minimum=2))

        with self.deferred():
            for y, x_start, x_end in polygon_spans(points):
                self._stage_span(y, x_start, x_end, rgba)
            for start, end in zip(points, points[1:]):
                self.draw_line(start, end, rgba)

    def draw_bezier(self, points: Sequence[Point], color: Any, step: Optional[float] = None) -> None:
        """Bezier curve through De Casteljau reduction of the control points

        Args:
            points: Control points (at least 2)
            color: Curve color
            step: Parameter increment; defaults to roughly one pixel per step

        Raises:
            InvalidInput: If fewer than 2 points are given or step <= 0
        """
        rgba = to_color(color)
        points = _as_points(points, minimum=2)

        if step is None:
            step = default_bezier_step(points)
        elif isinstance(step, bool) or not isinstance(step, numbers.Real) or not step > 0:
            raise InvalidInput(f"Bezier step must be a positive number, got {step!r}")

        with self.deferred():
            last_point = points[0]
            for t in bezier_parameters(step):
                point = lerp_points(points, t)
                self.draw_line(last_point, point, rgba)
                last_point = point

    def fill(self, color: Any) -> None:
        """Fill the whole buffer, discarding anything staged"""
        rgba = to_color(color)
        self.discard_pending()
        self.buffer.fill(rgba)
