"""Sky-to-plane projection for constellation figures.

Stars are placed on a local equirectangular grid around a per-figure
center. The horizontal offset is the shortest signed RA difference to the
center, so figures straddling RA 0°/360° stay contiguous.

This is a small-angle approximation suited to single-constellation fields
of view (tens of degrees). It distorts near the poles and over very wide
fields; it is not a true spherical projection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from constellation_viewer.catalog import StarRecord
from constellation_viewer.errors import NoResolvableStarsError
from constellation_viewer.lines import figure_star_ids

logger = logging.getLogger(__name__)

# Full vertical field of view mapped onto the viewport height
VERTICAL_FIELD_DEG = 180.0

BasePoint = Tuple[float, float]


@dataclass(frozen=True)
class ProjectionCenter:
    """Center of projection in degrees."""

    ra: float
    dec: float


def circular_mean(angles: Iterable[float]) -> float:
    """Mean of angles in degrees that respects the 0°/360° wrap.

    Each angle becomes a unit vector; the mean is the direction of the
    vector sum, normalized to [0, 360).

    Known limitation: when the angles cancel out (e.g. 0° and 180°) the sum
    is close to the zero vector and the result is whatever ``arctan2`` gives
    for it, typically 0. No special-case fallback is applied.

    Args:
        angles: Angles in degrees

    Returns:
        Circular mean in degrees, in [0, 360)

    Raises:
        ValueError: If no angles are given

    Example:
        >>> round(circular_mean([359.0, 1.0]), 6)
        0.0
    """
    theta = np.deg2rad(np.asarray(list(angles), dtype=float))
    if theta.size == 0:
        raise ValueError("circular_mean() requires at least one angle")

    mean_deg = float(np.rad2deg(np.arctan2(np.sin(theta).sum(), np.cos(theta).sum())))
    return (mean_deg + 360.0) % 360.0


def resolve_star(catalog: Mapping[str, StarRecord], star_id) -> Optional[StarRecord]:
    """Look up a star, returning None if it is missing or has non-finite coordinates."""
    star = catalog.get(str(star_id))
    if star is None or not star.is_finite:
        return None
    return star


def resolve_figure_stars(
    segments: Iterable[Iterable[str]],
    catalog: Mapping[str, StarRecord],
) -> List[StarRecord]:
    """Catalog stars referenced by a figure, deduplicated, in encounter order."""
    stars = []
    for star_id in figure_star_ids(segments):
        star = resolve_star(catalog, star_id)
        if star is None:
            logger.debug("Skipping unresolvable star %s", star_id)
            continue
        stars.append(star)
    return stars


def resolve_figure_center(
    segments: Sequence[Sequence[str]],
    catalog: Mapping[str, StarRecord],
    figure_name: Optional[str] = None,
) -> ProjectionCenter:
    """Compute a stable projection center for a figure.

    RA uses the circular mean; Dec uses the arithmetic mean since it never
    wraps.

    Args:
        segments: Figure segments (lists of star ids)
        catalog: Star catalog keyed by string id
        figure_name: Used only for the error message

    Returns:
        ProjectionCenter for the figure

    Raises:
        NoResolvableStarsError: If no referenced star resolves in the catalog
    """
    stars = resolve_figure_stars(segments, catalog)
    if not stars:
        raise NoResolvableStarsError(figure_name)

    center_ra = circular_mean(star.ra for star in stars)
    center_dec = float(np.mean([star.dec for star in stars]))

    return ProjectionCenter(ra=center_ra, dec=center_dec)


def wrap_ra_offset(ra: float, center_ra: float) -> float:
    """Signed RA difference to the center, bounded to [-180, 180]."""
    dx = ra - center_ra
    if dx > 180.0:
        dx -= 360.0
    if dx < -180.0:
        dx += 360.0
    return dx


def units_per_degree(viewport_height: float) -> float:
    """Pixels per degree at unit zoom."""
    return viewport_height / VERTICAL_FIELD_DEG


def project_star(
    star: StarRecord,
    center: ProjectionCenter,
    viewport_height: float,
) -> BasePoint:
    """Project one star to base coordinates at unit zoom.

    The origin is the viewport center; x grows with RA offset and y grows
    downward (declination grows upward).

    Args:
        star: Star to project
        center: Projection center
        viewport_height: Viewport height in pixels

    Returns:
        (bx, by) in pixels relative to the viewport center

    Example:
        >>> star = StarRecord("A", ra=1.0, dec=0.0)
        >>> project_star(star, ProjectionCenter(0.0, 0.0), 180.0)
        (1.0, -0.0)
    """
    scale = units_per_degree(viewport_height)
    dx = wrap_ra_offset(star.ra, center.ra)
    dy = star.dec - center.dec
    return dx * scale, -dy * scale


def project_figure(
    segments: Iterable[Iterable[str]],
    catalog: Mapping[str, StarRecord],
    center: ProjectionCenter,
    viewport_height: float,
) -> Dict[str, BasePoint]:
    """Base coordinates for every resolvable star of a figure.

    Args:
        segments: Figure segments (lists of star ids)
        catalog: Star catalog keyed by string id
        center: Projection center
        viewport_height: Viewport height in pixels

    Returns:
        Dict mapping star id to (bx, by), in encounter order. Missing and
        degenerate stars are omitted.
    """
    points: Dict[str, BasePoint] = {}
    for star_id in figure_star_ids(segments):
        star = resolve_star(catalog, star_id)
        if star is not None:
            points[star_id] = project_star(star, center, viewport_height)
    return points
