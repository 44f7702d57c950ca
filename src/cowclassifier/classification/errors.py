"""Exceptions raised by the batch classification core."""

from __future__ import annotations


class CowClassifierError(Exception):
    """Base class for all classification core errors."""


class EmptyBatchError(CowClassifierError):
    """Raised when a run is requested for a session with no images."""

    def __init__(self, message: str = "Please select at least one image.") -> None:
        super().__init__(message)


class SessionBusyError(CowClassifierError):
    """Raised when a session is structurally mutated while a run is in flight."""


class PredictorError(CowClassifierError):
    """Raised by a predictor when a single image could not be scored."""
