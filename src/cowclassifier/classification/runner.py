"""Classification runner: drive the predictor over a session, one item at a time.

Items are scored strictly in index order. Each call is awaited before the
next one starts, so partial results become visible in order and no two
predictor calls ever mutate the session concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cowclassifier.classification.errors import EmptyBatchError
from cowclassifier.classification.models import ItemStatus, Label

if TYPE_CHECKING:
    from collections.abc import Callable

    from cowclassifier.classification.models import Item
    from cowclassifier.classification.predictor import Predictor
    from cowclassifier.classification.session import ClassificationSession

logger = logging.getLogger(__name__)

NO_COW_NOTICE = "In one or more images, no cow was detected."


@dataclass(frozen=True)
class RunReport:
    """Summary of a finished run, including the one-shot "no cow" notice flag."""

    completed: int
    failed: int
    no_cow_detected: bool

    @property
    def notice(self) -> str | None:
        return NO_COW_NOTICE if self.no_cow_detected else None


class ClassificationRunner:
    """Scores every item of a session with a single predictor attempt each."""

    def __init__(self, predictor: Predictor) -> None:
        self._predictor = predictor

    async def run(
        self,
        session: ClassificationSession,
        on_progress: Callable[[Item], None] | None = None,
    ) -> RunReport:
        """Classify all items of ``session`` in place.

        Raises:
            EmptyBatchError: If the session holds no images. No calls are made.
            SessionBusyError: If another run is already in flight.
        """
        if len(session) == 0:
            raise EmptyBatchError()

        with session.run_guard():
            session.reset_results()
            logger.info("Classifying %d images for session %s", len(session), session.id)

            for index, item in enumerate(session.items):
                session.mark_in_flight(item.id)
                try:
                    outcome = await self._predictor.predict(item.image_bytes)
                except Exception as exc:  # noqa: BLE001
                    logger.warning("Prediction failed for image %d of session %s: %s", index, session.id, exc)
                    session.fail(item.id, error=str(exc) or type(exc).__name__)
                else:
                    session.complete(item.id, outcome)
                if on_progress is not None:
                    on_progress(item)

        items = session.items
        report = RunReport(
            completed=sum(1 for item in items if item.status is ItemStatus.COMPLETED),
            failed=sum(1 for item in items if item.status is ItemStatus.FAILED),
            no_cow_detected=any(item.label is Label.NO_COW_DETECTED for item in items),
        )
        logger.info(
            "Session %s finished (completed=%d, failed=%d, no_cow=%s)",
            session.id,
            report.completed,
            report.failed,
            report.no_cow_detected,
        )
        return report
