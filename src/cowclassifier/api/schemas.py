"""Pydantic request/response schemas for the CowClassifier API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from cowclassifier.classification.aggregator import AggregateState
from cowclassifier.classification.models import GroupMode, ItemStatus, Label


class ItemView(BaseModel):
    """A single image tile with its classification state."""

    index: int
    id: str
    size: int = Field(description="Image payload size in bytes")
    status: ItemStatus
    label: Label | None = None
    score: float | None = Field(default=None, description="Probability of Good (0.0-1.0)")
    confidence: float | None = Field(default=None, description="Confidence in the label, in percent")
    error: str | None = Field(default=None, description="Predictor failure detail, if the request failed")


class AggregateView(BaseModel):
    """Pooled verdict across all images of a single cow."""

    state: AggregateState
    label: Label | None = None
    confidence: float | None = Field(default=None, description="Confidence in the label, in percent")
    message: str


class SessionView(BaseModel):
    """Full state of a classification session."""

    id: str
    mode: GroupMode
    running: bool
    items: list[ItemView]
    aggregate: AggregateView | None = None
    notice: str | None = Field(default=None, description="One-shot message to surface to the user")


class ModeRequest(BaseModel):
    """Request body for switching the grouping mode."""

    mode: GroupMode


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    predictor_url: str
    active_sessions: int
    running_sessions: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
