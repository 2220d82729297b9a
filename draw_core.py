"""
Drawing Geometry - Functional Core

Pure generators that produce the pixel coordinates and horizontal spans of
every rasterized shape. They never touch a buffer: the drawing engine stages
whatever they yield, so bounds checks and blending stay out of the algorithms.

Functional Core Design:
- All functions are pure (deterministic, no I/O, no mutation of inputs)
- Coordinates may be fractional; rounding to pixels happens when staged
- Spans are (y, x_start, x_end) triples, both ends inclusive

Used by: draw_engine.py
"""

import math
from typing import Iterator, List, Sequence, Tuple

from raster_types import Point, round_half_up, round_point


Span = Tuple[float, float, float]


# ============================================================================
# Stepping Helpers
# ============================================================================

def unit_steps(start: float, end: float) -> Iterator[float]:
    """Yield start, start + 1, ... while not past end (inclusive)

    Equivalent to a `for (v = start; v <= end; v++)` loop, so fractional
    starts keep their fraction.

    Examples:
        >>> list(unit_steps(1, 3))
        [1, 2, 3]
        >>> list(unit_steps(0.5, 2.0))
        [0.5, 1.5]
    """
    if end < start:
        return
    for k in range(int(math.floor(end - start)) + 1):
        yield start + k


def ordered_corners(start: Point, end: Point) -> Tuple[float, float, float, float]:
    """Return (x_min, y_min, x_max, y_max) for two opposite corners"""
    (xa, ya), (xb, yb) = start, end
    return (min(xa, xb), min(ya, yb), max(xa, xb), max(ya, yb))


# ============================================================================
# Lines (Bresenham)
# ============================================================================

def bresenham_line(start: Point, end: Point) -> Iterator[Tuple[int, int]]:
    """Yield every pixel on the line from start to end, both inclusive

    Integer Bresenham stepping on the rounded endpoints: the error term
    starts at dx - dy, x advances when 2*err > -dy and y advances when
    2*err < dx.

    Examples:
        >>> list(bresenham_line((0, 0), (3, 1)))
        [(0, 0), (1, 0), (2, 1), (3, 1)]
    """
    x0, y0 = round_point(start)
    x1, y1 = round_point(end)

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    while True:
        yield (x0, y0)

        if x0 == x1 and y0 == y1:
            break

        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


# ============================================================================
# Rectangles
# ============================================================================

def rectangle_outline_points(start: Point, end: Point) -> Iterator[Point]:
    """Yield the border pixels of the rectangle spanned by two corners"""
    x0, y0, x1, y1 = ordered_corners(start, end)

    for x in unit_steps(x0, x1):
        yield (x, y0)
        yield (x, y1)

    for y in unit_steps(y0, y1):
        yield (x0, y)
        yield (x1, y)


def rectangle_spans(start: Point, end: Point) -> Iterator[Span]:
    """Yield one full-width span per row of the rectangle"""
    x0, y0, x1, y1 = ordered_corners(start, end)
    for y in unit_steps(y0, y1):
        yield (y, x0, x1)


# ============================================================================
# Circles (Bresenham midpoint)
# ============================================================================

def circle_octant_steps(radius: float) -> Iterator[Tuple[int, float]]:
    """Yield the (x, y) offsets of one octant of a midpoint circle

    Starts at (0, radius) with decision variable d = 3 - 2r and stops once
    x passes y. When d > 0, y steps inwards and d += 4(x - y) + 10,
    otherwise d += 4x + 6.

    Examples:
        >>> list(circle_octant_steps(3))
        [(0, 3), (1, 3), (2, 2)]
    """
    x = 0
    y = radius
    d = 3 - 2 * radius

    while x <= y:
        yield (x, y)

        if d > 0:
            y -= 1
            d = d + 4 * (x - y) + 10
        else:
            d = d + 4 * x + 6
        x += 1


def circle_outline_points(center: Point, radius: float) -> Iterator[Point]:
    """Yield the 8 symmetric outline points for every octant step"""
    xc, yc = center
    for x, y in circle_octant_steps(radius):
        yield (xc + x, yc + y)
        yield (xc - x, yc + y)
        yield (xc + x, yc - y)
        yield (xc - x, yc - y)
        yield (xc + y, yc + x)
        yield (xc - y, yc + x)
        yield (xc + y, yc - x)
        yield (xc - y, yc - x)


def filled_circle_spans(center: Point, radius: float) -> Iterator[Span]:
    """Yield the horizontal spans that cover a filled circle

    Every octant step contributes the narrow spans [xc - x, xc + x] on rows
    yc +/- y and the wide spans [xc - y, xc + y] on rows yc +/- x, sweeping
    out the interior band by band. Rows repeat between steps; the engine's
    pending set collapses the duplicates.
    """
    xc, yc = center
    for x, y in circle_octant_steps(radius):
        yield (yc + y, xc - x, xc + x)
        yield (yc - y, xc - x, xc + x)
        yield (yc + x, xc - y, xc + y)
        yield (yc - x, xc - y, xc + y)


# ============================================================================
# Triangles (scanline)
# ============================================================================

def _span_between(y: int, xa: float, xb: float) -> Span:
    return (y, round_half_up(min(xa, xb)), round_half_up(max(xa, xb)))


def triangle_spans(triangle: Sequence[Point]) -> Iterator[Span]:
    """Yield scanline spans of a filled triangle

    Vertices are rounded to pixels and sorted by y, so any winding or vertex
    order is accepted. The long edge (top to bottom) and the short edges
    (top to middle, then middle to bottom) are integrated one row at a time
    using their dx/dy slopes. Rows are half-open: [y_top, y_bottom).

    Examples:
        >>> list(triangle_spans([(0, 0), (0, 2), (2, 2)]))
        [(0, 0, 0), (1, 0, 1)]
    """
    (x0, y0), (x1, y1), (x2, y2) = sorted(
        (round_point(vertex) for vertex in triangle), key=lambda p: p[1]
    )

    if y2 == y0:
        return

    long_slope = (x2 - x0) / (y2 - y0)
    x_long = float(x0)

    if y1 > y0:
        short_slope = (x1 - x0) / (y1 - y0)
        x_short = float(x0)
        for y in range(y0, y1):
            yield _span_between(y, x_short, x_long)
            x_short += short_slope
            x_long += long_slope

    if y2 > y1:
        short_slope = (x2 - x1) / (y2 - y1)
        x_short = float(x1)
        for y in range(y1, y2):
            yield _span_between(y, x_short, x_long)
            x_short += short_slope
            x_long += long_slope


# ============================================================================
# Polygons (edge-crossing scanline)
# ============================================================================

def close_path(points: Sequence[Point]) -> List[Point]:
    """Return the points with the first one appended if the path is open"""
    closed = [tuple(p) for p in points]
    if closed and closed[0] != closed[-1]:
        closed.append(closed[0])
    return closed


def polygon_spans(points: Sequence[Point]) -> Iterator[Span]:
    """Yield interior spans of the polygon bounded by points

    The path is treated as closed. For each integer scanline y, the
    x-intersections with every non-horizontal edge whose half-open range
    [min_y, max_y) contains y are sorted and filled pairwise.

    Examples:
        >>> list(polygon_spans([(0, 0), (4, 0), (4, 2), (0, 2)]))
        [(0, 0, 4), (1, 0, 4)]
    """
    closed = close_path(points)
    edges = [
        (a, b) for a, b in zip(closed, closed[1:]) if a[1] != b[1]
    ]
    if not edges:
        return

    ys = [p[1] for p in closed]
    for y in range(int(math.ceil(min(ys))), int(math.floor(max(ys))) + 1):
        crossings = []
        for (xa, ya), (xb, yb) in edges:
            if min(ya, yb) <= y < max(ya, yb):
                crossings.append(xa + (y - ya) * (xb - xa) / (yb - ya))

        crossings.sort()
        for left, right in zip(crossings[0::2], crossings[1::2]):
            yield (y, round_half_up(left), round_half_up(right))


# ============================================================================
# Bezier Curves (De Casteljau)
# ============================================================================

def lerp_points(points: Sequence[Point], t: float) -> Point:
    """Reduce the control points to the single curve point at parameter t

    Repeatedly replaces an N-point sequence with the N-1 pairwise linear
    interpolations until one point remains.

    Examples:
        >>> lerp_points([(0, 0), (10, 0), (10, 10)], 0.5)
        (7.5, 2.5)
    """
    current = [(float(x), float(y)) for x, y in points]

    while len(current) > 1:
        current = [
            (x1 + (x2 - x1) * t, y1 + (y2 - y1) * t)
            for (x1, y1), (x2, y2) in zip(current, current[1:])
        ]

    return current[0]


def default_bezier_step(points: Sequence[Point]) -> float:
    """Parameter step that keeps sampled segments roughly pixel sized

    1 / | width - height | of the control points' bounding box. A square
    bounding box falls back to 1 / max(width, height), and a box with no
    extent to a single step of 1.
    """
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    width = abs(max(xs) - min(xs))
    height = abs(max(ys) - min(ys))

    difference = abs(width - height)
    if difference > 0:
        return 1 / difference

    span = max(width, height)
    return 1 / span if span > 0 else 1.0


def bezier_parameters(step: float) -> Iterator[float]:
    """Yield t = step, 2*step, ... below 1, then exactly 1.0

    Examples:
        >>> list(bezier_parameters(0.25))
        [0.25, 0.5, 0.75, 1.0]
    """
    t = step
    while t < 1:
        yield t
        t += step
    yield 1.0
