"""Constellation stick-figure line support.

A figure is a named list of segments. Each segment is an ordered list of
star ids; consecutive ids are joined by a line. Ids need not exist in the
catalog, lookups that miss are skipped at render time.

If no data file is available, the loader returns an empty dictionary and
callers should handle the absence gracefully (e.g., show an empty viewport).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

logger = logging.getLogger(__name__)

Segment = List[str]
Figures = Dict[str, List[Segment]]


def _clean_segments(raw_segments: Any) -> List[Segment]:
    if not isinstance(raw_segments, list):
        return []
    segments: List[Segment] = []
    for segment in raw_segments:
        if not isinstance(segment, (list, tuple)):
            continue
        ids = [str(star_id).strip() for star_id in segment if star_id is not None]
        segments.append([star_id for star_id in ids if star_id])
    return segments


def coerce_figures(raw: Mapping[Any, Any]) -> Figures:
    """Normalize a raw figure mapping to ``{name: [[str id, ...], ...]}``.

    Non-list segments are discarded and figures left without any segment
    are dropped.
    """
    figures: Figures = {}
    for name, raw_segments in raw.items():
        segments = _clean_segments(raw_segments)
        if segments:
            figures[str(name)] = segments
        else:
            logger.debug("Dropping figure %r without usable segments", name)
    return figures


def load_figures(path: Path) -> Figures:
    """Load constellation line figures from JSON.

    The JSON file should map figure names to lists of segments, each a list
    of star ids, for example: {"Orion": [[27989, 26727, 26311], ...]}.

    Args:
        path: Path to the JSON file

    Returns:
        Dict mapping figure name to list of segments.
        Returns empty dict if file does not exist or is invalid.
    """
    p = Path(path)
    if not p.exists():
        logger.warning("Figure file not found: %s", p)
        return {}

    try:
        with open(p, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read figure file %s: %s", p, e)
        return {}

    if not isinstance(raw, dict):
        logger.warning("Figure file %s does not contain an object", p)
        return {}

    figures = coerce_figures(raw)
    logger.info("Loaded %d figures from %s", len(figures), p.name)
    return figures


def figure_names(figures: Mapping[str, Any]) -> List[str]:
    """Figure names sorted case-insensitively, for selection lists."""
    return sorted(figures, key=lambda name: (name.casefold(), name))


def figure_star_ids(segments: Iterable[Iterable[str]]) -> List[str]:
    """Unique star ids of a figure in encounter order (segment, then position)."""
    seen: Dict[str, None] = {}
    for segment in segments:
        for star_id in segment:
            seen.setdefault(str(star_id), None)
    return list(seen)
