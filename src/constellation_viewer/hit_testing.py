"""Pointer hit testing against projected stars."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from constellation_viewer.catalog import StarRecord

Point = Tuple[float, float]


@dataclass(frozen=True)
class HitResult:
    """Star under the pointer, with its catalog data and screen position."""

    star_id: str
    ra: float
    dec: float
    magnitude: Optional[float]
    color_index: Optional[float]
    screen_pos: Point

    def describe(self) -> List[str]:
        """Tooltip lines for display."""
        lines = [
            f"ID: {self.star_id}",
            f"RA: {self.ra:.3f}°, Dec: {self.dec:.3f}°",
        ]
        if self.magnitude is not None:
            lines.append(f"Vmag: {self.magnitude:.2f}")
        if self.color_index is not None:
            lines.append(f"B−V: {self.color_index:.2f}")
        return lines


def find_hit(
    points: Mapping[str, Point],
    x: float,
    y: float,
    radius: float,
) -> Optional[str]:
    """First star id within ``radius`` pixels of ``(x, y)``.

    Points are scanned in map order (segment order, then position within
    segment) and the first match wins, even if a later point is closer.
    """
    for star_id, (px, py) in points.items():
        if math.hypot(px - x, py - y) <= radius:
            return star_id
    return None


def hit_test(
    points: Mapping[str, Point],
    catalog: Mapping[str, StarRecord],
    x: float,
    y: float,
    radius: float,
) -> Optional[HitResult]:
    """Resolve the star under a pointer into a HitResult.

    Args:
        points: Star id -> screen point for the active figure
        catalog: Star catalog keyed by string id
        x: Pointer x in viewport pixels
        y: Pointer y in viewport pixels
        radius: Hit radius in pixels (e.g. 5 for mouse, 10 for touch)

    Returns:
        HitResult, or None if no star is close enough
    """
    star_id = find_hit(points, x, y, radius)
    if star_id is None:
        return None

    star = catalog.get(star_id)
    if star is None or not star.is_finite:
        return None

    return HitResult(
        star_id=star_id,
        ra=star.ra,
        dec=star.dec,
        magnitude=star.magnitude,
        color_index=star.color_index,
        screen_pos=points[star_id],
    )
