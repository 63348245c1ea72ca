"""Viewer session: the single owner of catalog, figures and viewport state.

Input handlers (wheel, drag, pinch, hover) mutate the session; the display
loop calls ``frame()`` once per frame and gets a new image only when
something changed.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from constellation_viewer.catalog import StarRecord, coerce_catalog
from constellation_viewer.config import ViewerConfig
from constellation_viewer.errors import NoResolvableStarsError, UnknownFigureError
from constellation_viewer.hit_testing import HitResult, hit_test
from constellation_viewer.lines import Figures, Segment, coerce_figures, figure_names
from constellation_viewer.projection import (
    ProjectionCenter,
    project_figure,
    resolve_figure_center,
)
from constellation_viewer.scheduler import FrameScheduler
from constellation_viewer.viewport import Point, ViewportTransform
from constellation_viewer.visualization import create_figure_visualization

logger = logging.getLogger(__name__)


class ViewerSession:
    """Interactive state for one viewport."""

    def __init__(
        self,
        catalog: Mapping[Any, Any],
        figures: Mapping[Any, Any],
        config: Optional[ViewerConfig] = None,
    ):
        """Create a session.

        The catalog and figure maps are copied into normalized dicts here,
        in full, before any render path can read them.

        Args:
            catalog: Star id -> StarRecord or {ra, dec, magnitude?, colorIndex?}
            figures: Figure name -> list of segments (lists of star ids)
            config: Viewer settings; defaults when None
        """
        self.config = config or ViewerConfig()
        self.catalog: Dict[str, StarRecord] = coerce_catalog(catalog)
        self.figures: Figures = coerce_figures(figures)
        self.transform = ViewportTransform(
            self.config.viewport_width,
            self.config.viewport_height,
            scale_min=self.config.scale_min,
            scale_max=self.config.scale_max,
        )
        self.scheduler = FrameScheduler()
        self.active_figure: Optional[str] = None
        self.center: Optional[ProjectionCenter] = None

    @property
    def figure_names(self) -> List[str]:
        return figure_names(self.figures)

    @property
    def active_segments(self) -> List[Segment]:
        if self.active_figure is None:
            return []
        return self.figures[self.active_figure]

    def select_figure(self, name: str) -> bool:
        """Make a figure active and recompute its projection center.

        The viewport is reset according to ``config.reset_policy``.

        Args:
            name: Figure name

        Returns:
            True if the figure can be drawn, False if none of its stars
            resolve (the viewport is then empty)

        Raises:
            UnknownFigureError: If the name is not in the figure map
        """
        if name not in self.figures:
            raise UnknownFigureError(name)

        self.active_figure = name
        self._apply_reset_policy()
        self.scheduler.request_redraw()

        try:
            self.center = resolve_figure_center(self.figures[name], self.catalog, name)
        except NoResolvableStarsError as e:
            logger.warning("%s; showing empty viewport", e)
            self.center = None
            return False

        logger.info(
            "Selected %s (center RA %.2f°, Dec %.2f°)",
            name,
            self.center.ra,
            self.center.dec,
        )
        return True

    def _apply_reset_policy(self) -> None:
        policy = self.config.reset_policy
        if policy == "both":
            self.scheduler.discard_pan()
            self.transform.reset()
        elif policy == "offset":
            self.scheduler.discard_pan()
            self.transform.reset_offset()

    def base_points(self) -> Dict[str, Point]:
        """Unit-scale coordinates of the active figure's stars."""
        if self.center is None:
            return {}
        return project_figure(
            self.active_segments,
            self.catalog,
            self.center,
            self.config.viewport_height,
        )

    def projected_points(self) -> Dict[str, Point]:
        """Screen coordinates of the active figure's stars, recomputed on each call."""
        return self.transform.project_points(self.base_points())

    def handle_wheel(self, x: float, y: float, delta_y: float) -> bool:
        """Zoom at the pointer; negative ``delta_y`` (wheel up) zooms in.

        Returns:
            True if the scale changed
        """
        if delta_y == 0:
            return False
        step = self.config.wheel_zoom_step
        factor = step if delta_y < 0 else 1.0 / step
        return self.zoom_at(x, y, factor)

    def zoom_at(self, x: float, y: float, factor: float) -> bool:
        """Pointer-anchored zoom. Pending drag deltas are applied first."""
        self.scheduler.flush_pan(self.transform)
        changed = self.transform.zoom_at(x, y, factor)
        if changed:
            self.scheduler.request_redraw()
        return changed

    def handle_drag(self, dx: float, dy: float) -> None:
        """Queue a drag delta; it is applied on the next frame."""
        self.scheduler.queue_pan(dx, dy)

    def begin_pinch(self, touch_a: Point, touch_b: Point) -> None:
        self.scheduler.flush_pan(self.transform)
        self.transform.begin_pinch(touch_a, touch_b)

    def update_pinch(self, touch_a: Point, touch_b: Point) -> bool:
        """Zoom about the touch centroid; returns True if the scale changed."""
        self.scheduler.flush_pan(self.transform)
        changed = self.transform.update_pinch(touch_a, touch_b)
        if changed:
            self.scheduler.request_redraw()
        return changed

    def end_pinch(self) -> None:
        self.transform.end_pinch()

    def reset_view(self) -> None:
        """Unit scale, zero offset."""
        self.scheduler.discard_pan()
        self.transform.reset()
        self.scheduler.request_redraw()

    def hover(self, x: float, y: float, pointer: str = "mouse") -> Optional[HitResult]:
        """Star under a mouse or touch position, or None.

        Args:
            x: Pointer x in viewport pixels
            y: Pointer y in viewport pixels
            pointer: 'mouse' or 'touch'; touch uses the larger radius
        """
        return hit_test(
            self.projected_points(),
            self.catalog,
            x,
            y,
            self.config.hit_radius(pointer),
        )

    def render(self) -> np.ndarray:
        """Draw the active figure at the current zoom and pan."""
        shape = (self.config.viewport_height, self.config.viewport_width, 3)
        return create_figure_visualization(
            shape,
            self.active_segments,
            self.projected_points(),
            self.catalog,
        )

    def frame(self) -> Optional[np.ndarray]:
        """Display-frame callback: returns a new image, or None if unchanged."""
        return self.scheduler.run_frame(self.transform, self.render)
