"""Per-frame redraw coalescing.

Input handlers only record what changed. Once per display frame the
scheduler applies the accumulated drag delta and renders at most once, so
a burst of pointer events between two frames costs a single redraw.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from constellation_viewer.viewport import ViewportTransform

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FrameScheduler:
    """Dirty flag plus a pending pan accumulator."""

    def __init__(self):
        self._dirty = False
        self._pan_x = 0.0
        self._pan_y = 0.0
        self.frames_rendered = 0

    @property
    def pending(self) -> bool:
        """True if the next frame will redraw."""
        return self._dirty

    @property
    def pending_pan(self) -> tuple[float, float]:
        return self._pan_x, self._pan_y

    def request_redraw(self) -> None:
        self._dirty = True

    def queue_pan(self, dx: float, dy: float) -> None:
        """Accumulate a drag delta to be applied on the next frame."""
        self._pan_x += dx
        self._pan_y += dy
        self._dirty = True

    def flush_pan(self, transform: ViewportTransform) -> bool:
        """Apply the accumulated drag delta to the transform now.

        Returns:
            True if a non-zero delta was applied
        """
        if self._pan_x == 0.0 and self._pan_y == 0.0:
            return False
        transform.pan_by(self._pan_x, self._pan_y)
        self._pan_x = 0.0
        self._pan_y = 0.0
        return True

    def discard_pan(self) -> None:
        self._pan_x = 0.0
        self._pan_y = 0.0

    def run_frame(
        self,
        transform: ViewportTransform,
        render: Callable[[], T],
    ) -> Optional[T]:
        """Run one frame: apply pending pan, then render once if anything changed.

        Args:
            transform: Transform receiving the coalesced pan
            render: Redraw callback

        Returns:
            The render result, or None when the frame had nothing to draw
        """
        self.flush_pan(transform)
        if not self._dirty:
            return None

        self._dirty = False
        self.frames_rendered += 1
        logger.debug("Rendering frame %d", self.frames_rendered)
        return render()
