"""Validation of provider responses into `MetadataResult`.

The provider is asked for structured JSON but is not trusted to honor the
limits: keywords are truncated to the requested count, the title is capped
and the category is matched against the closed category set.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from stock_metadata.constants import ADOBE_STOCK_CATEGORIES
from stock_metadata.core.types import MetadataResult
from stock_metadata.exceptions import ProviderError

if TYPE_CHECKING:
    from stock_metadata.core.types import GenerationSettings

log = logging.getLogger(__name__)

_CATEGORY_LOOKUP = {c.casefold(): c for c in ADOBE_STOCK_CATEGORIES}


class ProviderMetadata(BaseModel):
    """Raw metadata shape returned by the provider."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    file_name: str = ""
    title: str = Field(min_length=1)
    keywords: list[str]
    category: str

    @field_validator("keywords")
    @classmethod
    def drop_blank_keywords(cls, v: list[str]) -> list[str]:
        """Strip keywords and drop empty entries, preserving order."""
        return [k.strip() for k in v if k and k.strip()]

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        """Map the category onto the closed set, ignoring case."""
        try:
            return _CATEGORY_LOOKUP[v.casefold()]
        except KeyError:
            raise ValueError(f"unknown category {v!r}") from None

    def to_result(self, file_name: str, settings: GenerationSettings) -> MetadataResult:
        """Apply the batch limits and return an immutable result."""
        return MetadataResult(
            file_name=file_name,
            title=self.title[: settings.title_length].rstrip(),
            keywords=tuple(self.keywords[: settings.keyword_count]),
            category=self.category,
        )


def parse_metadata_response(
    text: str | None,
    *,
    file_name: str,
    settings: GenerationSettings,
) -> MetadataResult:
    """Parse provider response text into a `MetadataResult`.

    Args:
        text: Raw response body (expected to be a JSON object).
        file_name: Name of the file the result belongs to.
        settings: Batch settings supplying the keyword and title limits.

    Raises:
        ProviderError: If the body is not JSON or does not match the schema.
    """
    raw = (text or "").strip()
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        log.error("Failed to parse provider response as JSON: %.200s", raw)
        raise ProviderError("Invalid JSON response from API") from e
    try:
        parsed = ProviderMetadata.model_validate(data)
    except PydanticValidationError as e:
        raise ProviderError(
            f"Response did not match the metadata schema: {e.error_count()} "
            f"validation error(s); first: {e.errors()[0]['msg']}"
        ) from e
    return parsed.to_result(file_name, settings)
