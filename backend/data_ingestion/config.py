import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class MigrationConfig:
    """
    Configuration for the one-shot legacy SQLite migration.
    """

    sqlite_path: Path = field(
        default_factory=lambda: Path(os.getenv("LEGACY_SQLITE_PATH", "recommendations.db"))
    )
    table: str = "recommendations"
    progress_every: int = 10


DEFAULT_MIGRATION_CONFIG = MigrationConfig()
