"""Value types for a batch classification session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import uuid4


class Label(StrEnum):
    GOOD = "Good"
    BAD = "Bad"
    NO_COW_DETECTED = "No cow detected"

    @classmethod
    def parse(cls, value: str) -> Label:
        """Map a predictor label string to a Label, ignoring case and padding."""
        normalized = value.strip().lower()
        for label in cls:
            if label.value.lower() == normalized:
                return label
        raise ValueError(f"Unknown prediction label: {value!r}")


class ItemStatus(StrEnum):
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    FAILED = "failed"


class GroupMode(StrEnum):
    MULTIPLE_COWS = "multiple_cows"
    SINGLE_COW = "single_cow"


TERMINAL_STATUSES = frozenset({ItemStatus.COMPLETED, ItemStatus.FAILED})


@dataclass(frozen=True)
class PredictionOutcome:
    """Label and score returned by a predictor for one image.

    Good/Bad outcomes must carry a probability in [0, 1]. A "no cow" outcome
    never carries a score; any score passed with it is discarded.
    """

    label: Label
    score: float | None = None

    def __post_init__(self) -> None:
        if self.label is Label.NO_COW_DETECTED:
            object.__setattr__(self, "score", None)
            return
        if self.score is None:
            raise ValueError(f"A {self.label.value} prediction requires a score")
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"Score must be within [0, 1], got {self.score}")

    @classmethod
    def no_cow(cls) -> PredictionOutcome:
        return cls(label=Label.NO_COW_DETECTED, score=None)


@dataclass
class Item:
    """One submitted image and its classification state."""

    image_bytes: bytes
    id: str = field(default_factory=lambda: uuid4().hex)
    status: ItemStatus = ItemStatus.PENDING
    label: Label | None = None
    score: float | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def has_score(self) -> bool:
        """True when the item contributes a numeric score to pooled results."""
        return self.label in (Label.GOOD, Label.BAD) and self.score is not None

    def reset(self) -> None:
        self.status = ItemStatus.PENDING
        self.label = None
        self.score = None
        self.error = None
