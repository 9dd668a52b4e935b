"""Immutable registry of submitted files and their lifecycle state.

Every operation returns a new `FileRegistry`; the orchestrator owns the single
mutable reference and publishes snapshots to observers. Unlike an upload
cache, entries are never evicted automatically, including after success or
permanent failure. Only explicit `remove`/`clear` drop them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import TYPE_CHECKING

from stock_metadata.core.types import ItemState, MetadataResult, WorkItem

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from stock_metadata.core.types import FilePayload

log = logging.getLogger(__name__)

ELIGIBLE_STATES = frozenset({ItemState.PENDING, ItemState.FAILED})


def is_eligible(item: WorkItem) -> bool:
    """Return True when an item should be dispatched in the next run.

    Failed items stay eligible, which makes re-running a batch the retry
    mechanism.
    """
    return item.state in ELIGIBLE_STATES


@dataclass(frozen=True, slots=True)
class FileRegistry:
    """Ordered collection of `WorkItem`s keyed by identity."""

    items: tuple[WorkItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[WorkItem]:
        return iter(self.items)

    def get(self, identity: str) -> WorkItem | None:
        """Return the item with `identity`, if present."""
        for item in self.items:
            if item.identity == identity:
                return item
        return None

    def position(self, identity: str) -> int | None:
        """Return the index of `identity` in the full registry, if present."""
        for idx, item in enumerate(self.items):
            if item.identity == identity:
                return idx
        return None

    # --- Transformations ---

    def submit(self, payloads: Iterable[FilePayload]) -> FileRegistry:
        """Append new files, silently discarding already-known identities.

        Duplicates inside the same submission are discarded too; survivors
        keep their relative submission order.
        """
        known = {item.identity for item in self.items}
        added: list[WorkItem] = []
        for payload in payloads:
            identity = payload.identity
            if identity in known:
                log.debug("Skipping duplicate submission %s", identity)
                continue
            known.add(identity)
            added.append(WorkItem.from_payload(payload))
        if not added:
            return self
        return FileRegistry((*self.items, *added))

    def transition(
        self,
        identity: str,
        state: ItemState,
        *,
        result: MetadataResult | None = None,
        error_message: str | None = None,
    ) -> FileRegistry:
        """Replace the matching item's state; no-op if `identity` is unknown.

        `result` is kept only for COMPLETED and `error_message` only for
        FAILED, so stale values from a previous run are cleared.
        """
        idx = self.position(identity)
        if idx is None:
            return self
        updated = replace(
            self.items[idx],
            state=state,
            result=result if state is ItemState.COMPLETED else None,
            error_message=error_message if state is ItemState.FAILED else None,
        )
        return FileRegistry((*self.items[:idx], updated, *self.items[idx + 1 :]))

    def remove(self, identity: str) -> FileRegistry:
        """Drop one item by identity; no-op if unknown."""
        if self.get(identity) is None:
            return self
        return FileRegistry(tuple(i for i in self.items if i.identity != identity))

    def clear(self) -> FileRegistry:
        """Return an empty registry."""
        return FileRegistry()

    # --- Derived views ---

    @property
    def pending(self) -> tuple[WorkItem, ...]:
        """Items eligible for dispatch (never attempted or previously failed)."""
        return tuple(i for i in self.items if is_eligible(i))

    @property
    def completed(self) -> tuple[WorkItem, ...]:
        return tuple(i for i in self.items if i.state is ItemState.COMPLETED)

    @property
    def failed(self) -> tuple[WorkItem, ...]:
        return tuple(i for i in self.items if i.state is ItemState.FAILED)

    @property
    def processing(self) -> tuple[WorkItem, ...]:
        return tuple(i for i in self.items if i.state is ItemState.PROCESSING)

    @property
    def results(self) -> tuple[MetadataResult, ...]:
        """Completed results in registry order, ready for export."""
        return tuple(i.result for i in self.completed if i.result is not None)
