"""Viewer configuration.

Defaults live on the ``ViewerConfig`` dataclass. ``ViewerConfig.from_env``
overlays values from an optional ``.env`` file and ``CONSTELLATION_VIEWER_*``
environment variables, for example::

    CONSTELLATION_VIEWER_VIEWPORT_HEIGHT=600
    CONSTELLATION_VIEWER_RESET_POLICY=offset
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "CONSTELLATION_VIEWER_"

# What happens to the viewport when a different figure is selected:
#   "both"   - scale back to 1 and offset back to (0, 0)
#   "offset" - keep the current scale, recenter the offset
#   "none"   - keep scale and offset as they are
RESET_POLICIES = ("both", "offset", "none")


def _default_cache_dir() -> Path:
    return Path.home() / ".constellation_viewer" / "star_cache"


@dataclass(frozen=True)
class ViewerConfig:
    """Settings for the viewport, interaction and catalog cache."""

    viewport_width: int = 1200
    viewport_height: int = 800
    scale_min: float = 0.5
    scale_max: float = 20.0
    wheel_zoom_step: float = 1.1
    mouse_hit_radius: float = 5.0
    touch_hit_radius: float = 10.0
    reset_policy: str = "both"
    cache_dir: Path = field(default_factory=_default_cache_dir)

    def __post_init__(self):
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError(
                f"Viewport must be positive, got "
                f"{self.viewport_width}x{self.viewport_height}"
            )
        if self.scale_min <= 0:
            raise ValueError(f"scale_min must be positive, got {self.scale_min}")
        if not self.scale_min <= 1.0 <= self.scale_max:
            raise ValueError(
                f"Scale range [{self.scale_min}, {self.scale_max}] must contain 1"
            )
        if self.wheel_zoom_step <= 1.0:
            raise ValueError(
                f"wheel_zoom_step must be greater than 1, got {self.wheel_zoom_step}"
            )
        if self.mouse_hit_radius < 0 or self.touch_hit_radius < 0:
            raise ValueError("Hit radii must be non-negative")
        if self.reset_policy not in RESET_POLICIES:
            raise ValueError(
                f"Unknown reset policy '{self.reset_policy}', "
                f"expected one of {RESET_POLICIES}"
            )

    def hit_radius(self, pointer: str = "mouse") -> float:
        """Hit radius in pixels for a pointer type ('mouse' or 'touch')."""
        if pointer == "touch":
            return self.touch_hit_radius
        return self.mouse_hit_radius

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "ViewerConfig":
        """Build a config from defaults, an optional .env file and the environment.

        Args:
            env_file: Path to a .env file. When None, python-dotenv searches
                the working directory tree for one.

        Returns:
            ViewerConfig with environment overrides applied

        Raises:
            ValueError: If a variable cannot be converted or fails validation
        """
        load_dotenv(dotenv_path=env_file, override=False)

        overrides = {}
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            overrides[f.name] = _convert(f.name, raw.strip())

        if overrides:
            logger.info("Config overrides from environment: %s", sorted(overrides))

        return replace(cls(), **overrides)


_CONVERTERS = {
    "viewport_width": int,
    "viewport_height": int,
    "scale_min": float,
    "scale_max": float,
    "wheel_zoom_step": float,
    "mouse_hit_radius": float,
    "touch_hit_radius": float,
    "reset_policy": lambda v: v.lower(),
    "cache_dir": lambda v: Path(v).expanduser(),
}


def _convert(name: str, raw: str):
    try:
        return _CONVERTERS[name](raw)
    except ValueError as e:
        raise ValueError(
            f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}"
        ) from e
