from __future__ import annotations

import pytest

from backend.app import app
from backend.recommendations.data_store import RecommendationStore, get_store


@pytest.fixture
def store(tmp_path):
    """A fresh CSV-backed store wired into the app for the duration of a test."""
    s = RecommendationStore(tmp_path / "recommendations.csv")
    app.dependency_overrides[get_store] = lambda: s
    yield s
    app.dependency_overrides.pop(get_store, None)
