"""Batch orchestration over the file registry.

Each run owns the only mutable reference to its registry and progress. It
marks every eligible file as processing, fans out one task per file with no
concurrency cap, applies exactly one transition per finished task and publishes
registry snapshots plus progress to an observer.

Registry transitions are synchronous and happen between awaits, so they are
atomic with respect to each other on the event loop; no locking is needed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Protocol

from stock_metadata.core.types import (
    BatchProgress,
    Failure,
    ItemState,
    Result,
    Success,
)
from stock_metadata.exceptions import StockMetadataError, ValidationError
from stock_metadata.failover import KeyFailoverExecutor, starting_offset
from stock_metadata.registry import FileRegistry
from stock_metadata.telemetry import TelemetryContext

if TYPE_CHECKING:
    from stock_metadata.client.base import GenerationClient
    from stock_metadata.core.types import (
        GenerationSettings,
        MetadataResult,
        WorkItem,
    )
    from stock_metadata.credentials import CredentialPool
    from stock_metadata.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


class RunObserver(Protocol):
    """Receives read-only snapshots while a batch runs."""

    def on_registry(self, registry: FileRegistry) -> None:
        """Called after every registry change."""
        ...

    def on_progress(self, progress: BatchProgress) -> None:
        """Called after every finished attempt."""
        ...


class NullObserver:
    """Observer that ignores every update."""

    def on_registry(self, registry: FileRegistry) -> None:
        pass

    def on_progress(self, progress: BatchProgress) -> None:
        pass


@dataclass(frozen=True, slots=True)
class BatchReport:
    """Outcome of one batch run."""

    registry: FileRegistry
    progress: BatchProgress

    @property
    def succeeded(self) -> int:
        return self.progress.succeeded

    @property
    def failed(self) -> int:
        return self.progress.failed


class _RunState:
    """Registry and progress owned by a single `run` call.

    Every task of a run mutates only its own state, so overlapping runs on
    one orchestrator never see each other's transitions or counters.
    """

    __slots__ = ("progress", "registry")

    def __init__(self, registry: FileRegistry, total: int) -> None:
        self.registry = registry
        self.progress = BatchProgress(finished=0, total=total)

    def report(self) -> BatchReport:
        return BatchReport(registry=self.registry, progress=self.progress)


class BatchOrchestrator:
    """Runs metadata generation for every eligible file in a registry."""

    def __init__(
        self,
        client: GenerationClient,
        *,
        observer: RunObserver | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Provider client used for each attempt.
            observer: Receives registry snapshots and progress updates.
            telemetry: Optional telemetry context.
        """
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()
        self._executor = KeyFailoverExecutor(client, telemetry=self._telemetry)
        self._observer: RunObserver = observer or NullObserver()
        self._latest: _RunState | None = None

    @property
    def registry(self) -> FileRegistry:
        """Registry snapshot of the most recently started run."""
        return self._latest.registry if self._latest else FileRegistry()

    @property
    def progress(self) -> BatchProgress:
        """Progress snapshot of the most recently started run."""
        if self._latest is None:
            return BatchProgress(finished=0, total=0)
        return self._latest.progress

    async def run(
        self,
        registry: FileRegistry,
        pool: CredentialPool,
        settings: GenerationSettings,
    ) -> BatchReport:
        """Generate metadata for all pending and previously failed files.

        Completed files are left untouched, so calling `run` again on the
        returned registry retries only the failures. Each call keeps its own
        registry and progress, so concurrent calls are independent.

        Raises:
            ValidationError: If the pool is empty or nothing is eligible. No
                state is changed in that case.
        """
        keys = pool.keys
        if not keys:
            raise ValidationError("Please provide at least one API key.")
        eligible = registry.pending
        if not eligible:
            raise ValidationError("Please upload at least one new or failed file.")

        total = len(eligible)
        log.info(
            "Starting batch run for %d file(s) with %d key(s).", total, len(keys)
        )
        state = _RunState(registry, total)
        self._latest = state
        self._notify("on_progress", state.progress)

        # Offsets come from the full registry, so a file keeps its starting
        # key across retry runs.
        positions = {item.identity: idx for idx, item in enumerate(registry)}
        offsets = {
            item.identity: starting_offset(positions[item.identity], len(keys))
            for item in eligible
        }
        for item in eligible:
            self._apply(state, item.identity, ItemState.PROCESSING)

        with self._telemetry("batch.run", files=total, keys=len(keys)):
            await asyncio.gather(
                *(
                    self._run_item(
                        state, item, keys, settings, offsets[item.identity]
                    )
                    for item in eligible
                )
            )

        log.info(
            "Batch run finished: %d succeeded, %d failed.",
            state.progress.succeeded,
            state.progress.failed,
        )
        return state.report()

    async def _run_item(
        self,
        state: _RunState,
        item: WorkItem,
        keys: tuple[str, ...],
        settings: GenerationSettings,
        offset: int,
    ) -> None:
        log.debug("Dispatching %s starting at key index %d", item.name, offset)
        with self._telemetry("batch.item"):
            outcome = await self._attempt(item, keys, settings, offset)

        if isinstance(outcome, Success):
            self._apply(
                state, item.identity, ItemState.COMPLETED, result=outcome.value
            )
        else:
            self._telemetry.count("batch.item_failed")
            log.error("Failed to process %s: %s", item.name, outcome.error)
            self._apply(
                state,
                item.identity,
                ItemState.FAILED,
                error_message=str(outcome.error),
            )
        self._advance(state, succeeded=isinstance(outcome, Success))

    async def _attempt(
        self,
        item: WorkItem,
        keys: tuple[str, ...],
        settings: GenerationSettings,
        offset: int,
    ) -> Result[MetadataResult, StockMetadataError]:
        try:
            result = await self._executor.execute(
                item.payload, settings, keys, offset=offset
            )
            return Success(result)
        except StockMetadataError as e:
            return Failure(e)
        except Exception as e:  # one file must never abort the batch
            return Failure(StockMetadataError(f"Unexpected error: {e}"))

    # --- State publication ---

    def _apply(
        self,
        state: _RunState,
        identity: str,
        item_state: ItemState,
        *,
        result: MetadataResult | None = None,
        error_message: str | None = None,
    ) -> None:
        state.registry = state.registry.transition(
            identity, item_state, result=result, error_message=error_message
        )
        self._notify("on_registry", state.registry)

    def _advance(self, state: _RunState, *, succeeded: bool) -> None:
        p = state.progress
        state.progress = BatchProgress(
            finished=p.finished + 1,
            total=p.total,
            succeeded=p.succeeded + (1 if succeeded else 0),
            failed=p.failed + (0 if succeeded else 1),
        )
        self._notify("on_progress", state.progress)

    def _notify(self, method: str, value: object) -> None:
        try:
            getattr(self._observer, method)(value)
        except Exception as e:
            log.error(
                "Observer '%s' failed in %s: %s",
                type(self._observer).__name__,
                method,
                e,
                exc_info=True,
            )
