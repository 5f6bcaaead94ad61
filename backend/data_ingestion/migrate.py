from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any

import pandas as pd
from pydantic import ValidationError

from ..recommendations.data_store import RecommendationStore, StoreError, get_store
from ..recommendations.models import RecommendationCreate
from .config import DEFAULT_MIGRATION_CONFIG, MigrationConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationResult:
    success: int
    failed: int
    total: int


def _clean(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _read_legacy_rows(config: MigrationConfig) -> pd.DataFrame:
    if not config.sqlite_path.is_file():
        raise FileNotFoundError(f"Legacy SQLite database not found: {config.sqlite_path}")

    conn = sqlite3.connect(str(config.sqlite_path))
    try:
        return pd.read_sql_query(f'SELECT * FROM "{config.table}" ORDER BY id', conn)
    finally:
        conn.close()


def run_migration(
    config: MigrationConfig = DEFAULT_MIGRATION_CONFIG,
    store: RecommendationStore | None = None,
) -> MigrationResult:
    """
    Copy every legacy submission into the row store.

    Steps:
    - Read the legacy table ordered by id.
    - Validate each row the same way the submit endpoint does.
    - Insert it, keeping its original ``created_at`` when present.

    A row that fails is logged and counted; the copy carries on.
    """
    store = store or get_store()
    df = _read_legacy_rows(config)
    total = len(df)

    if total == 0:
        logger.warning("No rows to migrate in %s", config.sqlite_path)
        return MigrationResult(success=0, failed=0, total=0)

    logger.info("Found %d legacy rows in %s", total, config.sqlite_path)

    success = 0
    failed = 0
    for record in df.to_dict("records"):
        row = {k: _clean(v) for k, v in record.items()}
        try:
            submission = RecommendationCreate(
                place_name=row.get("place_name"),
                address=row.get("address"),
                x=row.get("x"),
                y=row.get("y"),
                reason=row.get("reason"),
            )
            store.insert(
                place_name=submission.place_name,
                reason=submission.reason,
                x=submission.x,
                y=submission.y,
                address=submission.address,
                created_at=row.get("created_at"),
            )
        except (ValidationError, StoreError) as exc:
            failed += 1
            logger.error("Failed to migrate legacy row %s: %s", row.get("id"), exc)
            continue

        success += 1
        if success % config.progress_every == 0:
            logger.info("Migrated %d/%d", success, total)

    logger.info("Migration finished: %d succeeded, %d failed, %d total", success, failed, total)
    return MigrationResult(success=success, failed=failed, total=total)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    result = run_migration()
    print(
        f"Migration complete. Success: {result.success}, "
        f"failed: {result.failed}, total: {result.total}"
    )
