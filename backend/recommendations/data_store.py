from __future__ import annotations

import logging
import threading
from pathlib import Path

import pandas as pd

from .config import DEFAULT_STORE_CONFIG
from .location import DEFAULT_TOLERANCE, is_valid_coordinate, quantize
from .models import RawSubmission

logger = logging.getLogger(__name__)

COLUMNS = ["id", "place_name", "address", "x", "y", "reason", "created_at"]
_TEXT_COLUMNS = ["place_name", "address", "reason", "created_at"]


class StoreError(RuntimeError):
    """The submissions file could not be read or written."""


def _normalize_timestamp(value: str | None) -> str:
    """Render a timestamp as UTC ISO-8601 so stored values sort lexically."""
    ts = pd.Timestamp.now(tz="UTC") if not value else pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    else:
        ts = ts.tz_convert("UTC")
    return ts.isoformat(timespec="microseconds")


class RecommendationStore:
    """Raw submissions kept in a single CSV file.

    Every call re-reads the file so that readers always see the latest
    writes; mutations rewrite it under a lock.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        # Highest id ever issued; ids of deleted rows are never reused.
        self._seq_path = self.path.with_name(self.path.name + ".seq")

    def _read(self) -> pd.DataFrame:
        if not self.path.exists():
            return pd.DataFrame(columns=COLUMNS)
        try:
            df = pd.read_csv(
                self.path,
                dtype={c: str for c in _TEXT_COLUMNS},
                keep_default_na=False,
                float_precision="round_trip",
            )
        except (OSError, ValueError) as exc:
            raise StoreError(f"Could not read submissions from {self.path}") from exc

        missing = [c for c in COLUMNS if c not in df.columns]
        if missing:
            raise StoreError(f"{self.path} is missing columns: {', '.join(missing)}")

        df = df[COLUMNS].copy()
        df["id"] = pd.to_numeric(df["id"], errors="coerce").fillna(0).astype(int)
        df["x"] = pd.to_numeric(df["x"], errors="coerce")
        df["y"] = pd.to_numeric(df["y"], errors="coerce")
        return df

    def _write(self, df: pd.DataFrame) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(self.path, index=False, columns=COLUMNS)
        except OSError as exc:
            raise StoreError(f"Could not write submissions to {self.path}") from exc

    def _read_last_id(self) -> int:
        if not self._seq_path.exists():
            return 0
        try:
            return int(self._seq_path.read_text().strip() or 0)
        except (OSError, ValueError) as exc:
            raise StoreError(f"Could not read id sequence from {self._seq_path}") from exc

    def _write_last_id(self, last_id: int) -> None:
        try:
            self._seq_path.write_text(f"{last_id}\n")
        except OSError as exc:
            raise StoreError(f"Could not write id sequence to {self._seq_path}") from exc

    def fetch_all(self) -> list[RawSubmission]:
        """Return every submission, newest first."""
        with self._lock:
            df = self._read()
        if df.empty:
            return []
        df = df.sort_values(["created_at", "id"], ascending=False)
        return [RawSubmission(**record) for record in df.to_dict("records")]

    def insert(
        self,
        place_name: str,
        reason: str,
        x: float,
        y: float,
        address: str | None = None,
        created_at: str | None = None,
    ) -> int:
        """Append one submission and return its assigned id."""
        try:
            stamp = _normalize_timestamp(created_at)
        except ValueError as exc:
            raise StoreError(f"Invalid created_at value: {created_at!r}") from exc

        with self._lock:
            df = self._read()
            last_id = int(df["id"].max()) if not df.empty else 0
            new_id = max(last_id, self._read_last_id()) + 1
            row = {
                "id": new_id,
                "place_name": place_name,
                "address": address or "",
                "x": float(x),
                "y": float(y),
                "reason": reason,
                "created_at": stamp,
            }
            if df.empty:
                df = pd.DataFrame([row], columns=COLUMNS)
            else:
                df = pd.concat([df, pd.DataFrame([row], columns=COLUMNS)], ignore_index=True)
            self._write(df)
            self._write_last_id(new_id)

        logger.info("Stored submission %d for %r", new_id, place_name)
        return new_id

    def delete_by_location(
        self,
        x: float,
        y: float,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> int:
        """Delete every submission whose location key matches ``(x, y)``."""
        target = quantize(x, y, tolerance)
        with self._lock:
            df = self._read()
            if df.empty:
                return 0
            keys = [
                quantize(rx, ry, tolerance)
                if is_valid_coordinate(rx) and is_valid_coordinate(ry)
                else None
                for rx, ry in zip(df["x"], df["y"])
            ]
            mask = pd.Series(keys, index=df.index) == target
            deleted = int(mask.sum())
            if deleted:
                self._write(df.loc[~mask])

        logger.info("Deleted %d submission(s) at %s", deleted, target)
        return deleted


_store: RecommendationStore | None = None


def get_store() -> RecommendationStore:
    """Return the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        _store = RecommendationStore(DEFAULT_STORE_CONFIG.data_path)
    return _store
