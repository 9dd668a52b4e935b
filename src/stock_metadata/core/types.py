"""Core data types shared by the registry, executor and orchestrator.

These are immutable values. State changes produce new instances, so every
transition can be tested in isolation and snapshots can be handed to
observers without copying.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
import inspect
import mimetypes
from pathlib import Path
import typing

from stock_metadata.constants import (
    ADOBE_STOCK_CATEGORIES,
    CONTENT_TYPES,
    MAX_KEYWORD_COUNT,
    MAX_TITLE_LENGTH,
    MIN_KEYWORD_COUNT,
    MIN_TITLE_LENGTH,
)
from stock_metadata.exceptions import FileError, ValidationError

if typing.TYPE_CHECKING:
    from collections.abc import Callable

# --- Minimal guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _require_zero_arg_callable(func: typing.Any, field_name: str) -> None:
    _require(
        condition=callable(func),
        message="must be callable",
        field_name=field_name,
        exc=TypeError,
    )
    try:
        sig = inspect.signature(func)
    except (ValueError, RuntimeError):
        # Builtins without an introspectable signature are accepted as-is
        return
    has_required_params = any(
        p.default is p.empty
        and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
        for p in sig.parameters.values()
    )
    _require(
        condition=not has_required_params,
        message="must be a zero-argument callable",
        field_name=field_name,
        exc=TypeError,
    )


# --- Result type for per-item outcomes ---

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful outcome."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failed outcome, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]


# --- Enumerations ---


class ItemState(str, Enum):
    """Lifecycle state of a submitted file."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


ContentType = typing.Literal["image", "video"]


# --- Core data models ---


@dataclasses.dataclass(frozen=True, slots=True)
class GenerationSettings:
    """Settings applied uniformly to every file in one batch run."""

    title_length: int
    keyword_count: int
    content_type: ContentType = "image"

    def __post_init__(self) -> None:
        """Validate bounds so a bad snapshot never reaches the provider."""
        _require(
            condition=isinstance(self.title_length, int)
            and MIN_TITLE_LENGTH <= self.title_length <= MAX_TITLE_LENGTH,
            message=(
                f"must be an int within [{MIN_TITLE_LENGTH}, {MAX_TITLE_LENGTH}], "
                f"got {self.title_length!r}"
            ),
            field_name="title_length",
            exc=ValidationError,
        )
        _require(
            condition=isinstance(self.keyword_count, int)
            and MIN_KEYWORD_COUNT <= self.keyword_count <= MAX_KEYWORD_COUNT,
            message=(
                f"must be an int within [{MIN_KEYWORD_COUNT}, {MAX_KEYWORD_COUNT}], "
                f"got {self.keyword_count!r}"
            ),
            field_name="keyword_count",
            exc=ValidationError,
        )
        _require(
            condition=self.content_type in CONTENT_TYPES,
            message=f"must be one of {list(CONTENT_TYPES)}, got {self.content_type!r}",
            field_name="content_type",
            exc=ValidationError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class MetadataResult:
    """Generated marketplace metadata for one file."""

    file_name: str
    title: str
    keywords: tuple[str, ...]
    category: str

    def __post_init__(self) -> None:
        """Validate the closed category set and keyword container type."""
        _require(
            condition=isinstance(self.keywords, tuple)
            and all(isinstance(k, str) for k in self.keywords),
            message="must be a tuple[str, ...]",
            field_name="keywords",
            exc=TypeError,
        )
        _require(
            condition=self.category in ADOBE_STOCK_CATEGORIES,
            message=f"unknown category {self.category!r}",
            field_name="category",
        )


@dataclasses.dataclass(frozen=True, slots=True)
class FilePayload:
    """A caller-owned file handle.

    Content access is lazy via `content_loader`, so registering a file never
    reads its bytes; only image generation attempts do.
    """

    name: str
    last_modified: int  # epoch milliseconds
    mime_type: str
    size_bytes: int
    content_loader: Callable[[], bytes]

    def __post_init__(self) -> None:
        """Validate payload fields and loader signature."""
        _require(
            condition=isinstance(self.name, str) and self.name.strip() != "",
            message="must be a non-empty str",
            field_name="name",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.last_modified, int),
            message="must be an int (epoch milliseconds)",
            field_name="last_modified",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.size_bytes, int) and self.size_bytes >= 0,
            message="must be an int >= 0",
            field_name="size_bytes",
        )
        _require_zero_arg_callable(self.content_loader, "content_loader")

    @property
    def identity(self) -> str:
        """Deduplication key derived from name and modification time."""
        return f"{self.name}-{self.last_modified}"

    def read_bytes(self) -> bytes:
        """Load the file content, normalizing I/O failures to `FileError`."""
        try:
            return self.content_loader()
        except OSError as e:
            raise FileError(f"Failed to read {self.name}: {e}") from e

    # --- Ergonomic constructors ---
    @classmethod
    def from_file(cls, path: str | Path) -> FilePayload:
        """Create a payload from a local filesystem path.

        Args:
            path: Path to a local file.

        Returns:
            A `FilePayload` that lazily loads the file bytes.

        Raises:
            FileError: If the path is not a readable regular file.
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileError(f"Not a file: {file_path}")
        stat = file_path.stat()
        mime_type, _ = mimetypes.guess_type(str(file_path))
        return cls(
            name=file_path.name,
            last_modified=int(stat.st_mtime * 1000),
            mime_type=mime_type or "application/octet-stream",
            size_bytes=stat.st_size,
            content_loader=file_path.read_bytes,
        )

    @classmethod
    def from_bytes(
        cls,
        name: str,
        content: bytes,
        *,
        last_modified: int = 0,
        mime_type: str | None = None,
    ) -> FilePayload:
        """Create a payload from in-memory bytes (uploads, tests)."""
        guessed, _ = mimetypes.guess_type(name)
        return cls(
            name=name,
            last_modified=last_modified,
            mime_type=mime_type or guessed or "application/octet-stream",
            size_bytes=len(content),
            content_loader=lambda: content,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class WorkItem:
    """One submitted file and its generation lifecycle state."""

    identity: str
    payload: FilePayload
    state: ItemState = ItemState.PENDING
    result: MetadataResult | None = None
    error_message: str | None = None

    def __post_init__(self) -> None:
        """Keep result/error presence consistent with the state."""
        _require(
            condition=(self.result is not None) == (self.state is ItemState.COMPLETED),
            message="result is present only when state is COMPLETED",
            field_name="result",
        )
        _require(
            condition=(self.error_message is not None)
            == (self.state is ItemState.FAILED),
            message="error_message is present only when state is FAILED",
            field_name="error_message",
        )

    @classmethod
    def from_payload(cls, payload: FilePayload) -> WorkItem:
        """Create a pending item keyed by the payload's identity."""
        return cls(identity=payload.identity, payload=payload)

    @property
    def name(self) -> str:
        """File name of the underlying payload."""
        return self.payload.name


@dataclasses.dataclass(frozen=True, slots=True)
class BatchProgress:
    """Finished-count snapshot for one batch run."""

    finished: int
    total: int
    succeeded: int = 0
    failed: int = 0

    def __post_init__(self) -> None:
        """Validate counter ordering."""
        _require(
            condition=0 <= self.finished <= self.total,
            message=f"require 0 <= finished <= total, got {self.finished}/{self.total}",
            field_name="finished",
        )
        _require(
            condition=self.succeeded + self.failed == self.finished,
            message="succeeded + failed must equal finished",
            field_name="succeeded/failed",
        )

    @property
    def fraction(self) -> float:
        """Completed share in [0.0, 1.0]; 1.0 for an empty run."""
        if self.total == 0:
            return 1.0
        return self.finished / self.total
