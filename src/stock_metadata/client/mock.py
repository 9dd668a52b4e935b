"""Deterministic generation client used by default (no network)."""

from __future__ import annotations

import asyncio
from pathlib import PurePath
import re
from typing import TYPE_CHECKING

from stock_metadata.constants import ADOBE_STOCK_CATEGORIES
from stock_metadata.core.types import MetadataResult
from stock_metadata.credentials import mask_key
from stock_metadata.exceptions import ProviderError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stock_metadata.core.types import FilePayload, GenerationSettings

_WORD = re.compile(r"[A-Za-z0-9]+")


class MockGenerationClient:
    """Derives metadata from the file name.

    Keys listed in `failing_keys` raise `ProviderError`, which makes failover
    behavior observable without a provider.
    """

    def __init__(
        self,
        *,
        failing_keys: Iterable[str] = (),
        delay_seconds: float = 0.0,
    ) -> None:
        self._failing_keys = frozenset(failing_keys)
        self._delay_seconds = delay_seconds

    async def generate(
        self,
        payload: FilePayload,
        settings: GenerationSettings,
        api_key: str,
    ) -> MetadataResult:
        await asyncio.sleep(self._delay_seconds)
        if api_key in self._failing_keys:
            raise ProviderError(
                f"API key not valid ({mask_key(api_key)})",
                api_key_hint=mask_key(api_key),
            )

        words = [w.lower() for w in _WORD.findall(PurePath(payload.name).stem)]
        base = words or ["untitled"]
        title = " ".join(base).capitalize()
        title = f"{title} {settings.content_type}"[: settings.title_length].rstrip()
        keywords = list(dict.fromkeys(base))
        filler = 1
        while len(keywords) < settings.keyword_count:
            keywords.append(f"{base[0]}-{filler}")
            filler += 1
        category = ADOBE_STOCK_CATEGORIES[
            sum(payload.name.encode("utf-8")) % len(ADOBE_STOCK_CATEGORIES)
        ]
        return MetadataResult(
            file_name=payload.name,
            title=title,
            keywords=tuple(keywords[: settings.keyword_count]),
            category=category,
        )
