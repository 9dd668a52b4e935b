"""Test doubles shared across the suite."""

import asyncio

from stock_metadata.client import MockGenerationClient
from stock_metadata.exceptions import ProviderError


class RecordingClient:
    """Mock client that records every (file name, key) attempt.

    Files named in `failing_files` fail with every key; keys in
    `failing_keys` fail for every file. `delays` maps a file name to the
    seconds its attempts sleep, so tests can control completion order.
    """

    def __init__(self, *, failing_keys=(), failing_files=(), delays=None) -> None:
        self._inner = MockGenerationClient(failing_keys=failing_keys)
        self.failing_files: set[str] = set(failing_files)
        self.delays: dict[str, float] = dict(delays or {})
        self.calls: list[tuple[str, str]] = []
        self.finished: list[str] = []

    async def generate(self, payload, settings, api_key):
        self.calls.append((payload.name, api_key))
        await asyncio.sleep(self.delays.get(payload.name, 0.0))
        try:
            if payload.name in self.failing_files:
                raise ProviderError(f"Provider rejected {payload.name}")
            return await self._inner.generate(payload, settings, api_key)
        finally:
            self.finished.append(payload.name)

    def keys_for(self, name: str) -> list[str]:
        """Keys tried for `name`, in attempt order."""
        return [key for file_name, key in self.calls if file_name == name]


class RecordingObserver:
    """Collects every registry snapshot and progress update."""

    def __init__(self) -> None:
        self.registries = []
        self.progress = []

    def on_registry(self, registry) -> None:
        self.registries.append(registry)

    def on_progress(self, progress) -> None:
        self.progress.append(progress)
