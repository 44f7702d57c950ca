"""Session store: the ordered batch of items and the grouping mode.

The store is the single owner of item state. The classification runner
borrows it for the duration of a run through :meth:`ClassificationSession.run_guard`;
while a run is in flight, structural mutations (``load``, ``remove_at`` and
``clear_all``) raise :class:`SessionBusyError` instead of racing the runner.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING
from uuid import uuid4

from cowclassifier.classification.errors import SessionBusyError
from cowclassifier.classification.models import GroupMode, Item, ItemStatus, Label, PredictionOutcome

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

MAX_ITEMS: int = 10


class ClassificationSession:
    """In-memory working set of submitted images."""

    def __init__(self, session_id: str | None = None, max_items: int = MAX_ITEMS) -> None:
        self.id = session_id or uuid4().hex
        self.max_items = max_items
        self.mode = GroupMode.MULTIPLE_COWS
        self._items: list[Item] = []
        self._running = False

    # -- Read access --------------------------------------------------------

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def is_running(self) -> bool:
        return self._running

    def labels(self) -> list[Label | None]:
        """Per-item labels, index-aligned with ``items``."""
        return [item.label for item in self._items]

    def scores(self) -> list[float | None]:
        """Per-item scores, index-aligned with ``items``."""
        return [item.score for item in self._items]

    # -- User-driven mutations ----------------------------------------------

    def load(self, images: Sequence[bytes]) -> None:
        """Replace the batch with fresh pending items, one per image."""
        self._ensure_idle("load images")
        if len(images) > self.max_items:
            raise ValueError(f"At most {self.max_items} images per session, got {len(images)}")
        self._items = [Item(image_bytes=bytes(image)) for image in images]
        logger.debug("Session %s loaded %d images", self.id, len(self._items))

    def remove_at(self, index: int) -> None:
        """Remove the item at ``index``. Out-of-range indices are ignored."""
        self._ensure_idle("remove an image")
        if index < 0 or index >= len(self._items):
            return
        del self._items[index]

    def clear_all(self) -> None:
        self._ensure_idle("clear images")
        self._items.clear()

    def set_mode(self, mode: GroupMode) -> None:
        self.mode = GroupMode(mode)

    # -- Runner-driven transitions -------------------------------------------

    @contextmanager
    def run_guard(self) -> Iterator[None]:
        """Mark the session busy for the duration of a classification run."""
        self._ensure_idle("start a run")
        self._running = True
        try:
            yield
        finally:
            self._running = False

    def reset_results(self) -> None:
        for item in self._items:
            item.reset()

    def mark_in_flight(self, item_id: str) -> Item:
        item = self._get(item_id)
        item.status = ItemStatus.IN_FLIGHT
        return item

    def complete(self, item_id: str, outcome: PredictionOutcome) -> Item:
        item = self._get(item_id)
        item.status = ItemStatus.COMPLETED
        item.label = outcome.label
        item.score = outcome.score
        item.error = None
        return item

    def fail(self, item_id: str, error: str | None = None) -> Item:
        item = self._get(item_id)
        item.status = ItemStatus.FAILED
        item.label = Label.NO_COW_DETECTED
        item.score = None
        item.error = error
        return item

    # -- Internal -----------------------------------------------------------

    def _get(self, item_id: str) -> Item:
        for item in self._items:
            if item.id == item_id:
                return item
        raise KeyError(f"Unknown item: {item_id}")

    def _ensure_idle(self, action: str) -> None:
        if self._running:
            raise SessionBusyError(f"Cannot {action} while classification is in progress")
