"""Protocol for generation clients."""

from typing import Protocol, runtime_checkable

from stock_metadata.core.types import FilePayload, GenerationSettings, MetadataResult


@runtime_checkable
class GenerationClient(Protocol):
    """Performs one generation attempt for one file with one key.

    Implementations must not share mutable state across calls, since the
    orchestrator invokes them concurrently with different keys and payloads.
    """

    async def generate(
        self,
        payload: FilePayload,
        settings: GenerationSettings,
        api_key: str,
    ) -> MetadataResult:
        """Generate metadata for `payload`.

        Raises:
            ProviderError: On any transport, authentication, quota or
                response-shape failure.
        """
        ...
