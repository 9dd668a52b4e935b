"""Exceptions for stock metadata batch generation"""  # noqa: D415

from __future__ import annotations


class StockMetadataError(Exception):
    """Base exception for stock metadata generation errors"""  # noqa: D415


class ValidationError(StockMetadataError):
    """Raised when input validation fails before any work starts"""  # noqa: D415


class ConfigurationError(StockMetadataError):
    """Raised when configuration cannot be resolved"""  # noqa: D415


class FileError(StockMetadataError):
    """Raised when an input file cannot be read"""  # noqa: D415


class ProviderError(StockMetadataError):
    """A single generation attempt failed.

    Covers transport, authentication, quota and response-shape failures. The
    failover executor recovers from it by moving on to the next key.
    """

    def __init__(self, message: str, *, api_key_hint: str | None = None) -> None:
        """Initialize with a human-readable message and optional masked key."""
        super().__init__(message)
        self.message = message
        self.api_key_hint = api_key_hint


class AllKeysFailedError(StockMetadataError):
    """Every key in the pool failed for one file.

    Terminal for that file only; the rest of the batch is unaffected.
    """

    def __init__(
        self,
        file_name: str,
        last_error: str | None,
        attempts: list[tuple[str, str]] | None = None,
    ) -> None:
        """Initialize with the file name, last failure and attempt history."""
        self.file_name = file_name
        self.last_error = last_error
        self.attempts = list(attempts or [])
        super().__init__(
            f"All API keys failed for file {file_name}. Last error: {last_error}"
        )
