"""Generation clients: the provider seam of the batch pipeline.

`MockGenerationClient` is the default; the Gemini client is used only when
explicitly requested via configuration (``use_real_api``).
"""

from .base import GenerationClient
from .error_handler import to_provider_error
from .gemini import GeminiGenerationClient
from .mock import MockGenerationClient
from .prompts import build_prompt, build_response_schema
from .response import ProviderMetadata, parse_metadata_response

__all__ = [  # noqa: RUF022
    "GenerationClient",
    "GeminiGenerationClient",
    "MockGenerationClient",
    # Building blocks for custom clients
    "build_prompt",
    "build_response_schema",
    "parse_metadata_response",
    "ProviderMetadata",
    "to_provider_error",
]
