from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from starlette.middleware.sessions import SessionMiddleware

from .auth.config import DEFAULT_AUTH_CONFIG
from .auth.dependencies import require_admin, require_user
from .auth.users import authenticate
from .recommendations.aggregation import aggregate
from .recommendations.config import DEFAULT_STORE_CONFIG
from .recommendations.data_store import RecommendationStore, StoreError, get_store
from .recommendations.models import (
    CanonicalEntry,
    DeleteRequest,
    DeleteResponse,
    LoginRequest,
    RecommendationCreate,
    RecommendationCreateResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Place Recommendation Map API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=DEFAULT_AUTH_CONFIG.session_secret,
)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/recommendations", response_model=dict[str, CanonicalEntry])
def list_recommendations(
    store: RecommendationStore = Depends(get_store),
) -> dict[str, CanonicalEntry]:
    try:
        rows = store.fetch_all()
    except StoreError:
        logger.exception("Failed to load recommendations")
        raise HTTPException(status_code=500, detail="Failed to load recommendations")

    places = aggregate(rows, tolerance=DEFAULT_STORE_CONFIG.tolerance)
    logger.debug("Aggregated %d submissions into %d places", len(rows), len(places))
    return places


@app.post("/api/recommendations", response_model=RecommendationCreateResponse)
def create_recommendation(
    body: RecommendationCreate,
    store: RecommendationStore = Depends(get_store),
) -> RecommendationCreateResponse:
    try:
        new_id = store.insert(
            place_name=body.place_name,
            reason=body.reason,
            x=body.x,
            y=body.y,
            address=body.address,
        )
    except StoreError:
        logger.exception("Failed to store recommendation for %r", body.place_name)
        raise HTTPException(status_code=500, detail="Failed to save recommendation")

    return RecommendationCreateResponse(
        success=True,
        message="Recommendation saved.",
        id=new_id,
    )


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.post("/api/recommendations/delete", response_model=DeleteResponse)
def delete_recommendation(
    body: DeleteRequest,
    user: dict = Depends(require_admin),
    store: RecommendationStore = Depends(get_store),
) -> DeleteResponse:
    try:
        deleted = store.delete_by_location(
            body.x, body.y, tolerance=DEFAULT_STORE_CONFIG.tolerance,
        )
    except StoreError:
        logger.exception("Failed to delete recommendations for %r", body.place_name)
        raise HTTPException(status_code=500, detail="Failed to delete recommendations")

    if deleted == 0:
        raise HTTPException(status_code=404, detail="No recommendations found at that location")

    logger.info(
        "%s deleted %d submission(s) for %r", user["username"], deleted, body.place_name,
    )
    return DeleteResponse(success=True, deleted_count=deleted)
