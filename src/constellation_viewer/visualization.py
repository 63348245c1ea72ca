"""Rendering of constellation figures.

Strokes are planned as plain point lists first, so the seam-break logic
can be checked without pixels, then rasterized onto an RGB numpy canvas
with OpenCV.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import cv2
import numpy as np

from constellation_viewer.catalog import StarRecord

Point = Tuple[float, float]

BACKGROUND_COLOR = (11, 16, 32)
LINE_COLOR = (68, 68, 255)
STAR_COLOR = (255, 255, 255)


def magnitude_to_radius(magnitude: Optional[float], scale_factor: float = 5.0) -> int:
    """Convert star magnitude to marker radius.

    Brighter stars (lower magnitude) get larger radii.

    Args:
        magnitude: Visual magnitude (lower = brighter); None for unknown
        scale_factor: Radius of a magnitude-0 star

    Returns:
        Marker radius in pixels (minimum 1, maximum 8). Unknown magnitudes
        get radius 2.

    Example:
        >>> magnitude_to_radius(0.5)
        4
        >>> magnitude_to_radius(6.0)
        1
    """
    if magnitude is None or not np.isfinite(magnitude):
        return 2

    mag_clamped = max(0.0, min(6.0, magnitude))

    # Exponential scaling matches perceived brightness
    radius = scale_factor * np.exp(-mag_clamped / 3.0)

    return max(1, min(8, int(radius)))


def color_index_to_rgb(
    color_index: Optional[float],
    default: tuple[int, int, int] = STAR_COLOR,
) -> tuple[int, int, int]:
    """Map a B-V color index to an RGB color (blue/hot to orange/cool).

    Args:
        color_index: B-V color index, None if unknown
        default: Color used when the index is missing

    Returns:
        RGB tuple
    """
    if color_index is None or not np.isfinite(color_index):
        return default
    if color_index <= 0.0:
        return (180, 200, 255)  # Blue (very hot stars)
    if color_index <= 0.3:
        return (220, 230, 255)  # Light blue
    if color_index <= 0.6:
        return (255, 255, 255)  # White
    if color_index <= 1.0:
        return (255, 235, 180)  # Yellow
    return (255, 210, 150)  # Orange/red (cool stars)


def is_wrap_crossing(p1: Point, p2: Point, viewport_width: float) -> bool:
    """True if two consecutive points are too far apart horizontally to be joined.

    A jump wider than half the viewport comes from a pair that sits on
    opposite sides of the RA seam, not from a real constellation line.

    The test runs in screen pixels, after zoom. At high scale a genuine
    edge can span more than half the viewport and is then broken too, so
    its line is not drawn until the view is zoomed back out.
    """
    return abs(p2[0] - p1[0]) > viewport_width / 2.0


def plan_strokes(
    segments: Iterable[Iterable[str]],
    points: Mapping[str, Point],
    viewport_width: float,
) -> List[List[Point]]:
    """Split figure segments into drawable sub-paths.

    Each segment starts a new sub-path. Ids without a projected point are
    skipped and neither break nor extend the current run. A wrap crossing
    between consecutive points ends the sub-path and starts a new one at
    the second point.

    Args:
        segments: Figure segments (lists of star ids)
        points: Star id -> screen point
        viewport_width: Viewport width in pixels

    Returns:
        List of sub-paths, each a list of screen points. Sub-paths with a
        single point are kept; they draw nothing.

    Example:
        >>> pts = {"A": (10.0, 0.0), "B": (20.0, 0.0), "C": (95.0, 0.0)}
        >>> plan_strokes([["A", "B", "C"]], pts, viewport_width=100)
        [[(10.0, 0.0), (20.0, 0.0)], [(95.0, 0.0)]]
    """
    strokes: List[List[Point]] = []
    for segment in segments:
        current: List[Point] = []
        for star_id in segment:
            point = points.get(str(star_id))
            if point is None:
                continue
            if current and is_wrap_crossing(current[-1], point, viewport_width):
                strokes.append(current)
                current = []
            current.append(point)
        if current:
            strokes.append(current)
    return strokes


def draw_strokes(
    canvas: np.ndarray,
    strokes: Sequence[Sequence[Point]],
    color: tuple[int, int, int] = LINE_COLOR,
    thickness: int = 1,
) -> np.ndarray:
    """Draw open polylines.

    Args:
        canvas: Image to draw on (H, W, 3)
        strokes: Sub-paths from plan_strokes()
        color: RGB color for lines
        thickness: Line thickness in pixels

    Returns:
        Canvas with lines drawn
    """
    for stroke in strokes:
        if len(stroke) < 2:
            continue
        pts = np.round(np.asarray(stroke, dtype=float)).astype(np.int32)
        cv2.polylines(
            canvas, [pts.reshape(-1, 1, 2)], False, color, thickness, cv2.LINE_AA
        )

    return canvas


def render_star_markers(
    canvas: np.ndarray,
    points: Mapping[str, Point],
    catalog: Optional[Mapping[str, StarRecord]] = None,
    color_by_index: bool = True,
    scale_factor: float = 5.0,
) -> np.ndarray:
    """Draw one marker per star.

    Marker size follows magnitude and color follows B-V when the catalog
    provides them.

    Args:
        canvas: Image to draw on (H, W, 3)
        points: Star id -> screen point (one entry per unique star)
        catalog: Optional catalog for magnitude and color lookups
        color_by_index: Color markers by B-V instead of plain white
        scale_factor: Radius scaling factor

    Returns:
        Canvas with markers drawn
    """
    height, width = canvas.shape[:2]
    for star_id, (x, y) in points.items():
        x_int, y_int = int(round(x)), int(round(y))
        if not (0 <= x_int < width and 0 <= y_int < height):
            continue

        star = catalog.get(star_id) if catalog is not None else None
        magnitude = star.magnitude if star is not None else None
        radius = magnitude_to_radius(magnitude, scale_factor)
        if color_by_index and star is not None:
            color = color_index_to_rgb(star.color_index)
        else:
            color = STAR_COLOR

        cv2.circle(canvas, (x_int, y_int), radius, color, -1)

    return canvas


def create_figure_visualization(
    image_shape: tuple[int, int, int],
    segments: Iterable[Iterable[str]],
    points: Mapping[str, Point],
    catalog: Optional[Mapping[str, StarRecord]] = None,
    background_color: tuple[int, int, int] = BACKGROUND_COLOR,
    line_color: tuple[int, int, int] = LINE_COLOR,
    draw_lines: bool = True,
    color_by_index: bool = True,
) -> np.ndarray:
    """Render a complete figure: background, seam-safe lines, then markers.

    Args:
        image_shape: Target image shape (H, W, 3)
        segments: Figure segments (lists of star ids)
        points: Star id -> screen point
        catalog: Optional catalog for marker size and color
        background_color: RGB background color
        line_color: RGB color for figure lines
        draw_lines: Whether to draw figure lines
        color_by_index: Color markers by B-V

    Returns:
        Rendered figure image
    """
    canvas = np.full(image_shape, background_color, dtype=np.uint8)

    # Lines first so markers sit on top
    if draw_lines:
        strokes = plan_strokes(segments, points, viewport_width=image_shape[1])
        canvas = draw_strokes(canvas, strokes, line_color)

    return render_star_markers(canvas, points, catalog, color_by_index=color_by_index)
