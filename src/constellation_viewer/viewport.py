"""Interactive zoom and pan on top of the sky projection.

Screen position of a base point ``(bx, by)``::

    x = width / 2 + bx * scale + offset_x
    y = height / 2 + by * scale + offset_y

Zooming keeps the base point under the pointer (or pinch centroid) fixed on
screen. Scale is always clamped to ``[scale_min, scale_max]``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

Point = Tuple[float, float]


@dataclass
class ViewportState:
    """Current zoom and pan. Offsets are in pixels."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0


@dataclass
class PinchGesture:
    """Two-finger gesture as recorded when it started."""

    start_distance: float
    start_scale: float


def _distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def _centroid(p1: Point, p2: Point) -> Point:
    return (p1[0] + p2[0]) / 2.0, (p1[1] + p2[1]) / 2.0


class ViewportTransform:
    """Scale and offset applied to base coordinates."""

    def __init__(
        self,
        width: float,
        height: float,
        scale_min: float = 0.5,
        scale_max: float = 20.0,
    ):
        """Initialize the transform at unit scale and zero offset.

        Args:
            width: Viewport width in pixels
            height: Viewport height in pixels
            scale_min: Smallest allowed scale
            scale_max: Largest allowed scale
        """
        if scale_min <= 0 or scale_min > scale_max:
            raise ValueError(f"Invalid scale range [{scale_min}, {scale_max}]")

        self.width = float(width)
        self.height = float(height)
        self.scale_min = float(scale_min)
        self.scale_max = float(scale_max)
        self.state = ViewportState(scale=self.clamp_scale(1.0))
        self._pinch: Optional[PinchGesture] = None

    @property
    def scale(self) -> float:
        return self.state.scale

    @property
    def offset(self) -> Point:
        return self.state.offset_x, self.state.offset_y

    def clamp_scale(self, scale: float) -> float:
        return max(self.scale_min, min(self.scale_max, scale))

    def project(self, base_point: Point) -> Point:
        """Map a base point to screen pixels."""
        bx, by = base_point
        s = self.state
        return (
            self.width / 2.0 + bx * s.scale + s.offset_x,
            self.height / 2.0 + by * s.scale + s.offset_y,
        )

    def unproject(self, screen_point: Point) -> Point:
        """Base point currently displayed at a screen position."""
        px, py = screen_point
        s = self.state
        return (
            (px - self.width / 2.0 - s.offset_x) / s.scale,
            (py - self.height / 2.0 - s.offset_y) / s.scale,
        )

    def project_points(self, base_points: Mapping[str, Point]) -> Dict[str, Point]:
        """Project a whole id -> base point map, keeping its order."""
        if not base_points:
            return {}

        ids = list(base_points)
        base = np.array([base_points[i] for i in ids], dtype=float)
        s = self.state
        screen = base * s.scale + np.array(
            [self.width / 2.0 + s.offset_x, self.height / 2.0 + s.offset_y]
        )
        return {star_id: (float(x), float(y)) for star_id, (x, y) in zip(ids, screen)}

    def zoom_at(self, pointer_x: float, pointer_y: float, factor: float) -> bool:
        """Zoom by ``factor`` keeping the point under the pointer fixed.

        Args:
            pointer_x: Pointer x in viewport pixels
            pointer_y: Pointer y in viewport pixels
            factor: Multiplicative scale change (> 1 zooms in)

        Returns:
            True if the scale changed, False if clamping made it a no-op
        """
        if not math.isfinite(factor) or factor <= 0:
            return False

        new_scale = self.clamp_scale(self.state.scale * factor)
        if new_scale == self.state.scale:
            return False

        bx, by = self.unproject((pointer_x, pointer_y))
        self.state.scale = new_scale
        self.state.offset_x = pointer_x - self.width / 2.0 - bx * new_scale
        self.state.offset_y = pointer_y - self.height / 2.0 - by * new_scale
        return True

    def zoom_to(self, pointer_x: float, pointer_y: float, scale: float) -> bool:
        """Zoom to an absolute scale, anchored at the pointer."""
        return self.zoom_at(pointer_x, pointer_y, scale / self.state.scale)

    def pan_by(self, dx: float, dy: float) -> None:
        """Shift the view by a pixel delta."""
        self.state.offset_x += dx
        self.state.offset_y += dy

    def reset(self) -> None:
        """Back to unit scale and zero offset."""
        self.state.scale = self.clamp_scale(1.0)
        self.state.offset_x = 0.0
        self.state.offset_y = 0.0

    def reset_offset(self) -> None:
        self.state.offset_x = 0.0
        self.state.offset_y = 0.0

    @property
    def pinching(self) -> bool:
        return self._pinch is not None

    def begin_pinch(self, touch_a: Point, touch_b: Point) -> None:
        """Record finger distance and scale at the start of a pinch.

        Coincident touches cannot define a ratio, so the gesture is ignored.
        """
        distance = _distance(touch_a, touch_b)
        if distance <= 0:
            self._pinch = None
            return
        self._pinch = PinchGesture(
            start_distance=distance, start_scale=self.state.scale
        )

    def update_pinch(self, touch_a: Point, touch_b: Point) -> bool:
        """Zoom to ``start_scale * distance / start_distance`` about the touch centroid.

        Returns:
            True if the scale changed
        """
        if self._pinch is None:
            return False

        ratio = _distance(touch_a, touch_b) / self._pinch.start_distance
        if ratio <= 0:
            return False

        cx, cy = _centroid(touch_a, touch_b)
        return self.zoom_to(cx, cy, self._pinch.start_scale * ratio)

    def end_pinch(self) -> None:
        self._pinch = None
