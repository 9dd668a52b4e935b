"""Scenario-first convenience helpers.

Thin entry points over `BatchOrchestrator` for the common case: a handful of
local files, a key blob, and resolved configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stock_metadata.client import GeminiGenerationClient, MockGenerationClient
from stock_metadata.config import FrozenConfig, resolve_config
from stock_metadata.credentials import CredentialPool
from stock_metadata.files import collect_payloads
from stock_metadata.orchestrator import BatchOrchestrator
from stock_metadata.registry import FileRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from stock_metadata.client.base import GenerationClient
    from stock_metadata.orchestrator import BatchReport, RunObserver
    from stock_metadata.telemetry import TelemetryContextProtocol


def create_client(cfg: FrozenConfig) -> GenerationClient:
    """Return the Gemini client when enabled, else the deterministic mock."""
    if cfg.use_real_api:
        return GeminiGenerationClient(cfg.model, temperature=cfg.temperature)
    return MockGenerationClient()


async def generate_metadata(
    paths: Iterable[str | Path],
    *,
    api_keys: str | None = None,
    cfg: FrozenConfig | None = None,
    registry: FileRegistry | None = None,
    client: GenerationClient | None = None,
    observer: RunObserver | None = None,
    telemetry: TelemetryContextProtocol | None = None,
) -> BatchReport:
    """Submit files and run one batch.

    Args:
        paths: Files or directories to submit.
        api_keys: Raw key blob; overrides the configured keys when given.
        cfg: Frozen configuration; resolved from the environment if omitted.
        registry: Existing registry to submit into (enables retry runs).
        client: Generation client override; chosen from `cfg` if omitted.
        observer: Receives registry snapshots and progress.
        telemetry: Optional telemetry context.

    Returns:
        The batch report with the final registry.

    Example:
        ```python
        report = await generate_metadata(["shots/"], api_keys="k1, k2")
        export_csv(report.registry.results)
        ```
    """
    final_cfg = cfg or resolve_config()
    settings = final_cfg.generation_settings()
    pool = (
        CredentialPool.from_text(api_keys)
        if api_keys is not None
        else final_cfg.credential_pool()
    )
    payloads = collect_payloads(paths, content_type=settings.content_type)
    current = (registry or FileRegistry()).submit(payloads)

    orchestrator = BatchOrchestrator(
        client or create_client(final_cfg),
        observer=observer,
        telemetry=telemetry,
    )
    return await orchestrator.run(current, pool, settings)
