from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Where the catalog store reads its seed data from.
    """

    whiskies_csv: Path = _DATA_DIR / "whiskies.csv"
    list_separator: str = "|"


DEFAULT_CATALOG_CONFIG = CatalogConfig()
