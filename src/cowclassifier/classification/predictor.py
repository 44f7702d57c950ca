"""Predictor client: score one image against the remote conformation model.

Any failure to obtain a usable answer is raised as :class:`PredictorError`.
Callers decide how failures are represented; the runner renders them as
"no cow detected".
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from cowclassifier.classification.errors import PredictorError
from cowclassifier.classification.models import Label, PredictionOutcome

logger = logging.getLogger(__name__)


class Predictor(Protocol):
    """Protocol for remote image predictors."""

    async def predict(self, image_bytes: bytes) -> PredictionOutcome:
        """Classify a single image.

        Args:
            image_bytes: Raw image file bytes.

        Returns:
            The predicted label and, for Good/Bad, its probability.

        Raises:
            PredictorError: If the image could not be scored.
        """
        ...


class PredictResponse(BaseModel):
    """JSON body returned by the inference server on success."""

    prediction: str = Label.NO_COW_DETECTED.value
    score: float | None = Field(default=None, ge=0.0, le=1.0)


class HttpPredictor:
    """Sends each image as a multipart upload to the inference server."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def predict(self, image_bytes: bytes) -> PredictionOutcome:
        files = {"image": ("image.jpg", image_bytes, "application/octet-stream")}
        try:
            response = await self._client.post(self.endpoint, files=files)
        except httpx.HTTPError as exc:
            raise PredictorError(f"Failed to reach predictor: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            logger.warning("Predictor returned HTTP %s for %s", response.status_code, self.endpoint)
            raise PredictorError(f"Predictor returned HTTP {response.status_code}")

        try:
            body = PredictResponse.model_validate_json(response.content)
            label = Label.parse(body.prediction)
            return PredictionOutcome(label=label, score=body.score)
        except (ValidationError, ValueError) as exc:
            raise PredictorError(f"Invalid predictor response: {exc}") from exc

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
