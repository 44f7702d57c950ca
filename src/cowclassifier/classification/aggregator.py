"""Pooled single-cow verdicts and per-item confidence.

Everything here is a pure function of the current session state and is
recomputed on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from statistics import fmean
from typing import TYPE_CHECKING

from cowclassifier.classification.models import GroupMode, Label

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cowclassifier.classification.models import Item

GOOD_THRESHOLD: float = 0.5

NO_VALID_MESSAGE = "No overall prediction - no cow was detected in the selected images."
COMPUTING_MESSAGE = "Computing overall prediction..."


class AggregateState(StrEnum):
    COMPUTING = "computing"
    NO_VALID = "no_valid"
    VERDICT = "verdict"


@dataclass(frozen=True)
class Aggregate:
    """Pooled result for a single-cow batch.

    ``label`` and ``confidence`` are set only when ``state`` is VERDICT.
    """

    state: AggregateState
    label: Label | None = None
    confidence: float | None = None
    average_score: float | None = None

    @property
    def message(self) -> str:
        if self.state is AggregateState.COMPUTING:
            return COMPUTING_MESSAGE
        if self.state is AggregateState.NO_VALID:
            return NO_VALID_MESSAGE
        return f"{self.label} - {self.confidence:.1f}% confidence"


def confidence_for(label: Label | None, score: float | None) -> float | None:
    """Confidence percentage in ``label`` given the probability of Good."""
    if score is None or label not in (Label.GOOD, Label.BAD):
        return None
    return (score if label is Label.GOOD else 1.0 - score) * 100.0


def item_confidence(item: Item) -> float | None:
    return confidence_for(item.label, item.score)


def verdict_label(average_score: float) -> Label:
    # Exactly 0.5 resolves to Good.
    return Label.GOOD if average_score >= GOOD_THRESHOLD else Label.BAD


def aggregate(items: Sequence[Item], mode: GroupMode) -> Aggregate | None:
    """Compute the pooled verdict, or None when there is nothing to show."""
    if mode is not GroupMode.SINGLE_COW or not items:
        return None

    scores = [item.score for item in items if item.has_score and item.score is not None]
    if not scores:
        if all(item.is_terminal for item in items):
            return Aggregate(state=AggregateState.NO_VALID)
        return Aggregate(state=AggregateState.COMPUTING)

    average = fmean(scores)
    label = verdict_label(average)
    return Aggregate(
        state=AggregateState.VERDICT,
        label=label,
        confidence=confidence_for(label, average),
        average_score=average,
    )
