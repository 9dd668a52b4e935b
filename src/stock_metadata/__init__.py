"""Batch generation of stock marketplace metadata with multi-key failover."""

import importlib.metadata
import logging

from stock_metadata.client import (
    GeminiGenerationClient,
    GenerationClient,
    MockGenerationClient,
)
from stock_metadata.config import FrozenConfig, ResolvedConfig, resolve_config
from stock_metadata.core.types import (
    BatchProgress,
    Failure,
    FilePayload,
    GenerationSettings,
    ItemState,
    MetadataResult,
    Result,
    Success,
    WorkItem,
)
from stock_metadata.credentials import CredentialPool, parse_credentials
from stock_metadata.exceptions import (
    AllKeysFailedError,
    ConfigurationError,
    FileError,
    ProviderError,
    StockMetadataError,
    ValidationError,
)
from stock_metadata.export import export_csv, render_csv
from stock_metadata.failover import KeyFailoverExecutor
from stock_metadata.frontdoor import generate_metadata
from stock_metadata.orchestrator import BatchOrchestrator, BatchReport, RunObserver
from stock_metadata.registry import FileRegistry
from stock_metadata.telemetry import TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("stock-metadata")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Orchestration
    "BatchOrchestrator",
    "BatchReport",
    "RunObserver",
    "KeyFailoverExecutor",
    "generate_metadata",
    # Registry and keys
    "FileRegistry",
    "CredentialPool",
    "parse_credentials",
    # Clients
    "GenerationClient",
    "GeminiGenerationClient",
    "MockGenerationClient",
    # Core types
    "BatchProgress",
    "FilePayload",
    "GenerationSettings",
    "ItemState",
    "MetadataResult",
    "WorkItem",
    "Result",
    "Success",
    "Failure",
    # Export
    "export_csv",
    "render_csv",
    # Configuration
    "resolve_config",
    "FrozenConfig",
    "ResolvedConfig",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    # Exceptions
    "StockMetadataError",
    "ValidationError",
    "ConfigurationError",
    "FileError",
    "ProviderError",
    "AllKeysFailedError",
]
