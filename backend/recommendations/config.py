from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .location import DEFAULT_TOLERANCE

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_CSV = Path(__file__).resolve().parent.parent / "data" / "recommendations.csv"


@dataclass(frozen=True)
class StoreConfig:
    data_path: Path = field(
        default_factory=lambda: Path(os.getenv("RECOMMENDATIONS_CSV", str(_DEFAULT_CSV)))
    )
    tolerance: float = field(
        default_factory=lambda: float(os.getenv("LOCATION_TOLERANCE", str(DEFAULT_TOLERANCE)))
    )

    def __post_init__(self) -> None:
        if not self.tolerance > 0:
            raise ValueError(f"LOCATION_TOLERANCE must be positive, got {self.tolerance!r}")


DEFAULT_STORE_CONFIG = StoreConfig()
