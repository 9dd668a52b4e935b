"""Telemetry for batch runs and key attempts.

Disabled by default: `TelemetryContext()` hands back a shared no-op object so
instrumented code costs a method call and nothing more. With
``STOCK_METADATA_TELEMETRY=1`` (or ``DEBUG=1``) and at least one reporter,
scopes are timed and counters are forwarded to every reporter.

Scope names nest through a context variable, so concurrent file tasks each
see their own path, e.g. ``batch.run.batch.item.failover.attempt``.
"""

from collections import deque
from contextvars import ContextVar, Token
from dataclasses import dataclass
import logging
import os
import time
from types import TracebackType
from typing import Any, Literal, Protocol, Self, TypeAlias, runtime_checkable

log = logging.getLogger(__name__)

_scope_stack_var: ContextVar[tuple[str, ...]] = ContextVar(
    "stock_metadata_scope_stack",
    default=(),
)


def telemetry_enabled() -> bool:
    """Return True when telemetry is switched on via the environment.

    Read on every call so tests and long-lived processes can toggle it.
    """
    return (
        os.getenv("STOCK_METADATA_TELEMETRY") == "1" or os.getenv("DEBUG") == "1"
    )


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """Stateless stand-in used whenever telemetry is off."""

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        return None

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass

    def gauge(self, name: str, value: float, **metadata: Any) -> None:
        pass


def _path_and_context(name: str) -> tuple[str, dict[str, Any]]:
    stack = _scope_stack_var.get()
    return ".".join((*stack, name)), {
        "depth": len(stack),
        "parent_scope": ".".join(stack) or None,
    }


class _TimedScope:
    """One timed scope; pushes its name for the duration of the block."""

    __slots__ = (
        "_context",
        "_extra",
        "_metadata",
        "_name",
        "_path",
        "_started",
        "_token",
    )

    def __init__(
        self, context: "_EnabledTelemetryContext", name: str, metadata: dict[str, Any]
    ) -> None:
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")
        self._context = context
        self._name = name
        self._metadata = metadata
        self._started = 0.0
        self._token: Token[tuple[str, ...]] | None = None

    def __enter__(self) -> "_EnabledTelemetryContext":
        self._path, self._extra = _path_and_context(self._name)
        self._token = _scope_stack_var.set((*_scope_stack_var.get(), self._name))
        self._started = time.perf_counter()
        return self._context

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        duration = time.perf_counter() - self._started
        if self._token is not None:
            _scope_stack_var.reset(self._token)
        self._context._emit(
            "timing",
            self._path,
            duration,
            {**self._extra, "failed": exc_type is not None, **self._metadata},
        )


class _EnabledTelemetryContext:
    """Forwards scope timings and metrics to every reporter."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(self, name: str, **metadata: Any) -> _TimedScope:
        return _TimedScope(self, name, metadata)

    def _emit(
        self,
        kind: Literal["timing", "metric"],
        scope: str,
        value: Any,
        metadata: dict[str, Any],
    ) -> None:
        for reporter in self.reporters:
            try:
                if kind == "timing":
                    reporter.record_timing(scope, value, **metadata)
                else:
                    reporter.record_metric(scope, value, **metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record a metric under the current scope path."""
        path, extra = _path_and_context(name)
        self._emit("metric", path, value, {**extra, **metadata})

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        self.metric(name, increment, metric_type="counter", **metadata)

    def gauge(self, name: str, value: float, **metadata: Any) -> None:
        self.metric(name, value, metric_type="gauge", **metadata)


_NO_OP_SINGLETON = _NoOpTelemetryContext()

TelemetryContextProtocol: TypeAlias = _EnabledTelemetryContext | _NoOpTelemetryContext


def TelemetryContext(*reporters: TelemetryReporter) -> TelemetryContextProtocol:  # noqa: N802
    """Return an enabled context, or the shared no-op one.

    The no-op context is returned when telemetry is disabled or when no
    reporters are given.
    """
    if reporters and telemetry_enabled():
        return _EnabledTelemetryContext(*reporters)
    return _NO_OP_SINGLETON


class SimpleReporter:
    """In-memory reporter; keeps the most recent entries per scope."""

    def __init__(self, max_entries_per_scope: int = 1000):
        self.max_entries = max_entries_per_scope
        self.timings: dict[str, deque[tuple[float, dict[str, Any]]]] = {}
        self.metrics: dict[str, deque[tuple[Any, dict[str, Any]]]] = {}

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self.timings.setdefault(scope, deque(maxlen=self.max_entries)).append(
            (duration, metadata)
        )

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self.metrics.setdefault(scope, deque(maxlen=self.max_entries)).append(
            (value, metadata)
        )

    def get_report(self) -> str:
        """Render scope timings and counter totals, one scope per line."""
        lines = ["=== Telemetry Report ===", "", "--- Timings ---"]
        for scope, entries in sorted(self.timings.items()):
            durations = [d for d, _ in entries]
            failures = sum(1 for _, meta in entries if meta.get("failed"))
            lines.append(
                f"{scope:<48} | Calls: {len(durations):<4} | "
                f"Failed: {failures:<4} | Max: {max(durations):.3f}s | "
                f"Total: {sum(durations):.3f}s"
            )
        if self.metrics:
            lines += ["", "--- Counters ---"]
            for scope, entries in sorted(self.metrics.items()):
                total = sum(v for v, _ in entries if isinstance(v, int | float))
                lines.append(
                    f"{scope:<48} | Events: {len(entries):<4} | Sum: {total:g}"
                )
        return "\n".join(lines)
