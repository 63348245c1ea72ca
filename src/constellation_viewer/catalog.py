"""Star catalog records and ingestion.

The viewer core only needs a mapping of star id to ``StarRecord``. This module
builds that mapping from plain dictionaries, pandas DataFrames, local CSV
files, or a cached Hipparcos download from VizieR.

Column names are configurable through ``CatalogColumns`` so header naming
never leaks into the projection code.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import numpy as np
import pandas as pd
from astropy import units as u
from astropy.coordinates import Angle
from astroquery.vizier import Vizier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StarRecord:
    """One catalog star. RA and Dec are in degrees."""

    star_id: str
    ra: float
    dec: float
    magnitude: Optional[float] = None
    color_index: Optional[float] = None

    @property
    def is_finite(self) -> bool:
        """True when both coordinates are usable for projection."""
        return math.isfinite(self.ra) and math.isfinite(self.dec)


@dataclass(frozen=True)
class CatalogColumns:
    """Source column names for catalog ingestion.

    Defaults match a VizieR Hipparcos export (``HIP``, ``RA(ICRS)``,
    ``DE(ICRS)``, ``Vmag``, ``B-V``). Optional columns may be None.
    """

    star_id: str = "HIP"
    ra: str = "RA(ICRS)"
    dec: str = "DE(ICRS)"
    magnitude: Optional[str] = "Vmag"
    color_index: Optional[str] = "B-V"


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _coordinate(value: Any) -> float:
    # Non-numeric coordinates become NaN so the record is kept but never projected
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def coerce_catalog(stars: Mapping[Any, Any]) -> Dict[str, StarRecord]:
    """Convert a raw star mapping into ``{str(id): StarRecord}``.

    Values may be ``StarRecord`` instances or dicts with ``ra``, ``dec`` and
    optional ``magnitude`` and ``colorIndex`` (``color_index`` is accepted too).

    Args:
        stars: Mapping of star id to record or dict

    Returns:
        Dict keyed by string star id, in input order
    """
    catalog: Dict[str, StarRecord] = {}
    for key, value in stars.items():
        star_id = str(key)
        if isinstance(value, StarRecord):
            if value.star_id != star_id:
                value = StarRecord(
                    star_id, value.ra, value.dec, value.magnitude, value.color_index
                )
            catalog[star_id] = value
            continue

        color = value.get("colorIndex", value.get("color_index"))
        catalog[star_id] = StarRecord(
            star_id=star_id,
            ra=_coordinate(value.get("ra")),
            dec=_coordinate(value.get("dec")),
            magnitude=_optional_float(value.get("magnitude")),
            color_index=_optional_float(color),
        )

    return catalog


def _normalize_id(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _parse_angle(text: str, unit: u.Unit) -> float:
    try:
        return float(Angle(text, unit=unit).deg)
    except (ValueError, TypeError, u.UnitsError):
        return float("nan")


def _to_degrees(values: pd.Series, unit: u.Unit) -> np.ndarray:
    """Convert one coordinate column to decimal degrees.

    Numeric entries are taken as degrees whatever the column's unit.
    The remaining entries are sexagesimal strings ("05 55 10.3",
    "+07 24 25") parsed with astropy in ``unit``: hour angle for RA,
    degrees for Dec. Entries that parse as neither become NaN.
    """
    degrees = pd.to_numeric(values, errors="coerce").to_numpy(dtype=float, copy=True)
    text_mask = np.isnan(degrees)
    if not text_mask.any():
        return degrees

    text = [str(v).strip() for v in values.to_numpy()[text_mask]]
    try:
        degrees[text_mask] = Angle(text, unit=unit).deg
    except (ValueError, TypeError, u.UnitsError):
        # One bad entry fails the whole batch; retry entry by entry
        degrees[text_mask] = [_parse_angle(t, unit) for t in text]

    return degrees


def catalog_from_dataframe(
    df: pd.DataFrame,
    columns: CatalogColumns = CatalogColumns(),
) -> Dict[str, StarRecord]:
    """Build a star catalog from a DataFrame.

    Args:
        df: Table with at least id, RA and Dec columns
        columns: Column name mapping

    Returns:
        Dict mapping star id to StarRecord

    Raises:
        ValueError: If a required column is missing
    """
    required = [columns.star_id, columns.ra, columns.dec]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Catalog is missing required columns: {missing}")

    table = df.replace("", np.nan).dropna(subset=required)
    if table.empty:
        return {}

    ra_deg = _to_degrees(table[columns.ra], u.hourangle)
    dec_deg = _to_degrees(table[columns.dec], u.deg)
    parsed = np.isfinite(ra_deg) & np.isfinite(dec_deg)
    if not parsed.all():
        logger.warning(
            "Dropping %d catalog rows with unparseable coordinates",
            int((~parsed).sum()),
        )
        table = table[parsed]
        ra_deg = ra_deg[parsed]
        dec_deg = dec_deg[parsed]

    def optional_column(name: Optional[str]) -> np.ndarray:
        if name is None or name not in table.columns:
            return np.full(len(table), np.nan)
        return pd.to_numeric(table[name], errors="coerce").to_numpy(dtype=float)

    magnitudes = optional_column(columns.magnitude)
    color_indices = optional_column(columns.color_index)

    catalog: Dict[str, StarRecord] = {}
    for raw_id, ra, dec, mag, bv in zip(
        table[columns.star_id].tolist(), ra_deg, dec_deg, magnitudes, color_indices
    ):
        star_id = _normalize_id(raw_id)
        if star_id is None:
            continue
        catalog[star_id] = StarRecord(
            star_id=star_id,
            ra=float(ra) % 360.0,
            dec=float(dec),
            magnitude=None if np.isnan(mag) else float(mag),
            color_index=None if np.isnan(bv) else float(bv),
        )

    return catalog


def load_catalog_csv(
    csv_path: Path,
    columns: CatalogColumns = CatalogColumns(),
) -> Dict[str, StarRecord]:
    """Load a star catalog from a CSV file.

    Args:
        csv_path: Path to the CSV file
        columns: Column name mapping

    Returns:
        Dict mapping star id to StarRecord

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If required columns are missing
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Star catalog not found: {csv_path}")

    logger.info("Loading star catalog from %s", csv_path)
    df = pd.read_csv(csv_path, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]
    catalog = catalog_from_dataframe(df, columns)
    logger.info("Loaded %d stars from %s", len(catalog), csv_path.name)

    return catalog


class StarCatalog:
    """Cached Hipparcos catalog downloaded from VizieR."""

    VIZIER_CATALOG = "I/239/hip_main"
    VIZIER_COLUMNS = ["HIP", "RAICRS", "DEICRS", "Vmag", "B-V"]

    def __init__(self, cache_dir: Optional[Path] = None):
        """Initialize star catalog manager.

        Args:
            cache_dir: Directory for caching catalog data
        """
        if cache_dir is None:
            cache_dir = Path.home() / ".constellation_viewer" / "star_cache"

        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.catalog_file = self.cache_dir / "hipparcos.csv"
        self._catalog: Optional[Dict[str, StarRecord]] = None

    def download_catalog(self, force_refresh: bool = False) -> Dict[str, StarRecord]:
        """Load the Hipparcos catalog from cache or download it from VizieR.

        Args:
            force_refresh: Force re-download even if cache exists

        Returns:
            Dict mapping HIP number (as string) to StarRecord

        Raises:
            RuntimeError: If VizieR returns no data
        """
        if self.catalog_file.exists() and not force_refresh:
            return load_catalog_csv(self.catalog_file)

        logger.info("Downloading Hipparcos catalog from VizieR...")

        vizier = Vizier(columns=self.VIZIER_COLUMNS, row_limit=-1)
        catalog_list = vizier.get_catalogs(self.VIZIER_CATALOG)

        if not catalog_list:
            raise RuntimeError("Failed to download star catalog from VizieR")

        table = catalog_list[0].to_pandas()
        table = table.rename(columns={"RAICRS": "RA(ICRS)", "DEICRS": "DE(ICRS)"})
        table.to_csv(self.catalog_file, index=False)
        logger.info("Saved catalog to %s", self.catalog_file)

        return catalog_from_dataframe(table)

    def load_catalog(self) -> Dict[str, StarRecord]:
        """Load catalog from cache or download if not available.

        Returns:
            Dict mapping star id to StarRecord
        """
        if self._catalog is None:
            self._catalog = self.download_catalog()

        return self._catalog
