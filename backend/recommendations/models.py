from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RawSubmission(BaseModel):
    """One stored submission, as handed to the aggregation engine."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    place_name: str = ""
    address: str = ""
    x: float | None = None
    y: float | None = None
    reason: str = ""
    created_at: str | None = None


class RecommendationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    place_name: str = Field(..., min_length=1, alias="placeName")
    address: str | None = Field(default=None, description="Road or lot address, optional")
    x: float = Field(..., allow_inf_nan=False, description="Longitude")
    y: float = Field(..., allow_inf_nan=False, description="Latitude")
    reason: str = Field(..., min_length=1)


class RecommendationCreateResponse(BaseModel):
    success: bool
    message: str
    id: int


class DeleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    place_name: str = Field(..., min_length=1, alias="placeName")
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)


class DeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    deleted_count: int = Field(..., alias="deletedCount")


class CanonicalEntry(BaseModel):
    """A de-duplicated place: one map marker with every reason collected for it."""

    model_config = ConfigDict(populate_by_name=True)

    # Map key in the response body, not repeated inside each entry.
    display_key: str = Field(default="", exclude=True)
    place_name: str = Field(..., alias="placeName")
    address: str = ""
    x: float
    y: float
    reasons: list[str] = Field(default_factory=list)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
