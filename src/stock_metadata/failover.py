"""Per-file key failover.

Each file walks the key pool in a rotated order, starting at an offset
derived from the file's registry position, and stops at the first success.
Every key is tried at most once per file.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stock_metadata.client.error_handler import to_provider_error
from stock_metadata.credentials import mask_key
from stock_metadata.exceptions import AllKeysFailedError, ProviderError, ValidationError
from stock_metadata.telemetry import TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stock_metadata.client.base import GenerationClient
    from stock_metadata.core.types import (
        FilePayload,
        GenerationSettings,
        MetadataResult,
    )
    from stock_metadata.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


def starting_offset(position: int, key_count: int) -> int:
    """Offset into the pool for the file at `position` in the registry."""
    if key_count <= 0:
        raise ValidationError("key_count must be positive")
    return position % key_count


def rotated_order(keys: Sequence[str], offset: int) -> tuple[str, ...]:
    """Return `keys` starting at `offset`, wrapping once.

    Example:
        >>> rotated_order(("a", "b", "c"), 1)
        ('b', 'c', 'a')
    """
    if not keys:
        return ()
    start = offset % len(keys)
    return tuple(keys[start:]) + tuple(keys[:start])


class KeyFailoverExecutor:
    """Tries keys for one file until one succeeds or all are exhausted.

    Stateless per invocation; a single instance is shared by every task of a
    batch run.
    """

    def __init__(
        self,
        client: GenerationClient,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._client = client
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    async def execute(
        self,
        payload: FilePayload,
        settings: GenerationSettings,
        keys: Sequence[str],
        *,
        offset: int = 0,
    ) -> MetadataResult:
        """Generate metadata for one file with key failover.

        Args:
            payload: The file to describe.
            settings: Batch settings snapshot.
            keys: Full ordered key pool.
            offset: Index of the first key to try.

        Returns:
            The first successful result.

        Raises:
            ValidationError: If `keys` is empty.
            AllKeysFailedError: If every key failed; carries the last message.
        """
        if not keys:
            raise ValidationError("At least one API key is required")

        attempts: list[tuple[str, str]] = []
        last_error: str | None = None
        for attempt, key in enumerate(rotated_order(keys, offset), start=1):
            hint = mask_key(key)
            try:
                with self._telemetry("failover.attempt", attempt=attempt):
                    return await self._client.generate(payload, settings, key)
            except ProviderError as e:
                last_error = e.message
            except Exception as e:  # normalize unexpected client failures
                last_error = to_provider_error(
                    e, api_key=key, content_type=settings.content_type
                ).message
            attempts.append((hint, last_error))
            self._telemetry.count("failover.key_failed")
            log.warning(
                "API key ending in %s failed for file %s. Trying next key. Error: %s",
                hint,
                payload.name,
                last_error,
            )

        raise AllKeysFailedError(payload.name, last_error, attempts)
