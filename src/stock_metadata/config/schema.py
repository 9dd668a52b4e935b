"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from various sources (environment, files, programmatic) into the correct
types with proper defaults.
"""

from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stock_metadata.constants import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_KEYWORD_COUNT,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TITLE_LENGTH,
    MAX_KEYWORD_COUNT,
    MAX_TITLE_LENGTH,
    MIN_KEYWORD_COUNT,
    MIN_TITLE_LENGTH,
)
from stock_metadata.credentials import parse_credentials

ENV_PREFIX = "STOCK_METADATA_"


class StockMetadataSettings(BaseSettings):
    """Pydantic settings schema for stock metadata configuration.

    Handles validation, type coercion, and defaults for every configuration
    field. Environment variables use the ``STOCK_METADATA_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=None,  # .env files are only read when explicitly requested
        case_sensitive=False,
        extra="ignore",
    )

    api_keys: str | None = Field(
        default=None,
        description="Newline or comma separated Gemini API keys",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Gemini model identifier",
        min_length=1,
    )

    temperature: float = Field(
        default=DEFAULT_TEMPERATURE,
        ge=0.0,
        le=2.0,
    )

    title_length: int = Field(
        default=DEFAULT_TITLE_LENGTH,
        ge=MIN_TITLE_LENGTH,
        le=MAX_TITLE_LENGTH,
    )

    keyword_count: int = Field(
        default=DEFAULT_KEYWORD_COUNT,
        ge=MIN_KEYWORD_COUNT,
        le=MAX_KEYWORD_COUNT,
    )

    content_type: Literal["image", "video"] = DEFAULT_CONTENT_TYPE

    use_real_api: bool = Field(
        default=False,
        description="Call Gemini instead of the deterministic mock client",
    )

    @field_validator("content_type", mode="before")
    @classmethod
    def normalize_content_type(cls, v: Any) -> Any:
        """Accept content types case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("api_keys", mode="before")
    @classmethod
    def join_key_lists(cls, v: Any) -> Any:
        """Allow a TOML list of keys in addition to a raw string."""
        if isinstance(v, list | tuple):
            return "\n".join(str(k) for k in v)
        return v

    @model_validator(mode="after")
    def validate_api_keys_requirement(self) -> "StockMetadataSettings":
        """Ensure at least one key is present when use_real_api is True."""
        if self.use_real_api and not parse_credentials(self.api_keys):
            raise ValueError(
                "api_keys is required when use_real_api=True. "
                "Set STOCK_METADATA_API_KEYS, provide keys in a config file, "
                "or pass them programmatically."
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary keyed by field name."""
        return {name: getattr(self, name) for name in type(self).model_fields}


def default_values() -> dict[str, Any]:
    """Schema defaults, without reading the environment."""
    return {
        name: field.default
        for name, field in StockMetadataSettings.model_fields.items()
    }
