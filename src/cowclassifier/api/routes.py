"""API route definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, Response, UploadFile, status

from cowclassifier.api.middleware import get_settings_from_request, verify_api_key
from cowclassifier.api.schemas import (
    AggregateView,
    ErrorResponse,
    HealthResponse,
    ItemView,
    ModeRequest,
    SessionView,
)
from cowclassifier.classification.aggregator import aggregate, item_confidence
from cowclassifier.classification.image_source import UploadImageSource
from cowclassifier.classification.runner import ClassificationRunner

if TYPE_CHECKING:
    from cowclassifier.classification.predictor import Predictor
    from cowclassifier.classification.registry import SessionRegistry
    from cowclassifier.classification.session import ClassificationSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", dependencies=[Depends(verify_api_key)])

CLEARED_NOTICE = "Cleared all images"

_SESSION_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
}


def _get_registry(request: Request) -> SessionRegistry:
    registry: SessionRegistry = request.app.state.registry
    return registry


def _get_predictor(request: Request) -> Predictor:
    predictor: Predictor = request.app.state.predictor
    return predictor


def _get_session(request: Request, session_id: str) -> ClassificationSession:
    try:
        return _get_registry(request).get(session_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        ) from None


def render_session(session: ClassificationSession, notice: str | None = None) -> SessionView:
    """Build the JSON view of a session, recomputing the pooled verdict."""
    items = [
        ItemView(
            index=index,
            id=item.id,
            size=len(item.image_bytes),
            status=item.status,
            label=item.label,
            score=item.score,
            confidence=item_confidence(item),
            error=item.error,
        )
        for index, item in enumerate(session.items)
    ]
    pooled = aggregate(session.items, session.mode)
    aggregate_view = None
    if pooled is not None:
        aggregate_view = AggregateView(
            state=pooled.state,
            label=pooled.label,
            confidence=pooled.confidence,
            message=pooled.message,
        )
    return SessionView(
        id=session.id,
        mode=session.mode,
        running=session.is_running,
        items=items,
        aggregate=aggregate_view,
        notice=notice,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    settings = get_settings_from_request(request)
    registry = _get_registry(request)
    return HealthResponse(
        status="ok",
        predictor_url=settings.predictor_url,
        active_sessions=registry.active_count,
        running_sessions=registry.running_count,
    )


@router.post(
    "/sessions",
    response_model=SessionView,
    status_code=status.HTTP_201_CREATED,
    summary="Create an empty session",
)
async def create_session(request: Request) -> SessionView:
    session = _get_registry(request).create()
    return render_session(session)


@router.get(
    "/sessions/{session_id}",
    response_model=SessionView,
    responses=_SESSION_RESPONSES,
    summary="Get session state",
)
async def get_session(request: Request, session_id: str) -> SessionView:
    """Return per-image results and, in single-cow mode, the pooled verdict."""
    return render_session(_get_session(request, session_id))


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_SESSION_RESPONSES,
    summary="Discard a session",
)
async def delete_session(request: Request, session_id: str) -> Response:
    _get_session(request, session_id)
    _get_registry(request).discard(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/sessions/{session_id}/images",
    response_model=SessionView,
    responses=_SESSION_RESPONSES,
    summary="Replace the session's images",
)
async def upload_images(request: Request, session_id: str, files: list[UploadFile]) -> SessionView:
    """Load up to the configured number of images, replacing any previous batch.

    Non-image files and files over the size limit are skipped. If nothing
    usable remains, the session is left untouched.
    """
    session = _get_session(request, session_id)
    settings = get_settings_from_request(request)
    source = UploadImageSource(files, max_bytes=settings.max_image_bytes)
    images = await source.pick_images(min(settings.max_images, session.max_items))
    if images:
        session.load(images)
    return render_session(session)


@router.delete(
    "/sessions/{session_id}/images/{index}",
    response_model=SessionView,
    responses=_SESSION_RESPONSES,
    summary="Remove one image",
)
async def remove_image(request: Request, session_id: str, index: int) -> SessionView:
    session = _get_session(request, session_id)
    session.remove_at(index)
    return render_session(session)


@router.delete(
    "/sessions/{session_id}/images",
    response_model=SessionView,
    responses=_SESSION_RESPONSES,
    summary="Remove all images",
)
async def clear_images(request: Request, session_id: str) -> SessionView:
    session = _get_session(request, session_id)
    session.clear_all()
    return render_session(session, notice=CLEARED_NOTICE)


@router.put(
    "/sessions/{session_id}/mode",
    response_model=SessionView,
    responses=_SESSION_RESPONSES,
    summary="Switch between multiple-cow and single-cow mode",
)
async def set_mode(request: Request, session_id: str, body: ModeRequest) -> SessionView:
    session = _get_session(request, session_id)
    session.set_mode(body.mode)
    return render_session(session)


@router.post(
    "/sessions/{session_id}/classify",
    response_model=SessionView,
    responses={
        **_SESSION_RESPONSES,
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
    },
    summary="Classify every image in the session",
)
async def classify(request: Request, session_id: str) -> SessionView:
    """Send each image to the predictor in order and return the final state."""
    session = _get_session(request, session_id)
    runner = ClassificationRunner(_get_predictor(request))
    report = await runner.run(session)
    return render_session(session, notice=report.notice)
