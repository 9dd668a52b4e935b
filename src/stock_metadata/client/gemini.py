"""Gemini-backed generation client.

One `genai.Client` is created per API key on first use and reused for every
later attempt with that key. Calls with different keys never share SDK state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from google import genai
from google.genai import types

from stock_metadata.client.error_handler import to_provider_error
from stock_metadata.client.prompts import build_prompt, build_response_schema
from stock_metadata.client.response import parse_metadata_response
from stock_metadata.constants import DEFAULT_MODEL, DEFAULT_TEMPERATURE
from stock_metadata.credentials import mask_key
from stock_metadata.exceptions import FileError, ProviderError
from stock_metadata.telemetry import TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Callable

    from stock_metadata.core.types import (
        FilePayload,
        GenerationSettings,
        MetadataResult,
    )
    from stock_metadata.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


class GeminiGenerationClient:
    """Generates stock metadata with the Google GenAI SDK."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        client_factory: Callable[[str], Any] | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            model: Gemini model identifier.
            temperature: Sampling temperature for generation.
            client_factory: Builds an SDK client from an API key, once per key;
                defaults to ``genai.Client(api_key=...)``. Injected in tests.
            telemetry: Optional telemetry context.
        """
        self.model = model
        self.temperature = temperature
        self._client_factory = client_factory or (
            lambda api_key: genai.Client(api_key=api_key)
        )
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()
        self._clients: dict[str, Any] = {}

    def _client_for(self, api_key: str) -> Any:
        client = self._clients.get(api_key)
        if client is None:
            client = self._client_factory(api_key)
            self._clients[api_key] = client
        return client

    def _build_contents(
        self, payload: FilePayload, settings: GenerationSettings
    ) -> list[types.Part]:
        parts = [types.Part.from_text(text=build_prompt(payload.name, settings))]
        if settings.content_type == "image":
            parts.insert(
                0,
                types.Part.from_bytes(
                    data=payload.read_bytes(), mime_type=payload.mime_type
                ),
            )
        return parts

    def _build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=build_response_schema(),
            temperature=self.temperature,
        )

    async def generate(
        self,
        payload: FilePayload,
        settings: GenerationSettings,
        api_key: str,
    ) -> MetadataResult:
        """Run one generation attempt; every failure surfaces as `ProviderError`."""
        try:
            contents = self._build_contents(payload, settings)
        except FileError as e:
            raise ProviderError(str(e), api_key_hint=mask_key(api_key)) from e

        with self._telemetry("client.generate", model=self.model):
            try:
                client = self._client_for(api_key)
                response = await client.aio.models.generate_content(
                    model=self.model,
                    contents=contents,
                    config=self._build_config(),
                )
            except Exception as e:
                raise to_provider_error(
                    e, api_key=api_key, content_type=settings.content_type
                ) from e

        log.debug(
            "Gemini response received for %s with key %s",
            payload.name,
            mask_key(api_key),
        )
        return parse_metadata_response(
            getattr(response, "text", None),
            file_name=payload.name,
            settings=settings,
        )
