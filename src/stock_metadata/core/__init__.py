"""Core value types for stock metadata generation."""

from stock_metadata.core.types import (
    BatchProgress,
    ContentType,
    Failure,
    FilePayload,
    GenerationSettings,
    ItemState,
    MetadataResult,
    Result,
    Success,
    WorkItem,
)

__all__ = [
    "BatchProgress",
    "ContentType",
    "Failure",
    "FilePayload",
    "GenerationSettings",
    "ItemState",
    "MetadataResult",
    "Result",
    "Success",
    "WorkItem",
]
