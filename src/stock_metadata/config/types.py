"""Core configuration data types.

Configuration is resolved once, then frozen and passed explicitly to the
components that need it.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

from stock_metadata.core.types import ContentType, GenerationSettings
from stock_metadata.credentials import CredentialPool, parse_credentials

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER = (
    "api_keys",
    "model",
    "temperature",
    "title_length",
    "keyword_count",
    "content_type",
    "use_real_api",
)


def _redact_keys(api_keys: str | None) -> str | None:
    if not api_keys:
        return None
    return f"[REDACTED x{len(parse_credentials(api_keys))}]"


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, with origin tracking."""

    api_keys: str | None
    model: str
    temperature: float
    title_length: int
    keyword_count: int
    content_type: ContentType
    use_real_api: bool

    # Where each field value came from
    origin: SourceMap

    def __repr__(self) -> str:
        """Repr with redacted API keys for safe logging."""
        return (
            f"ResolvedConfig(api_keys={_redact_keys(self.api_keys)!r}, "
            f"model={self.model!r}, temperature={self.temperature!r}, "
            f"title_length={self.title_length!r}, "
            f"keyword_count={self.keyword_count!r}, "
            f"content_type={self.content_type!r}, "
            f"use_real_api={self.use_real_api!r}, origin={dict(self.origin)!r})"
        )

    __str__ = __repr__

    def to_frozen(self) -> "FrozenConfig":
        """Drop audit metadata and return the immutable runtime config."""
        return FrozenConfig(
            api_keys=self.api_keys,
            model=self.model,
            temperature=self.temperature,
            title_length=self.title_length,
            keyword_count=self.keyword_count,
            content_type=self.content_type,
            use_real_api=self.use_real_api,
        )

    def audit(self) -> str:
        """Human-readable origin report with API keys redacted."""
        lines = []
        for field in FIELD_ORDER:
            if field not in self.origin:
                continue
            origin = self.origin[field]
            value = getattr(self, field)
            if field == "api_keys":
                value = _redact_keys(value)
            lines.append(f"{field}: {origin}:{value}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration used at runtime."""

    api_keys: str | None
    model: str
    temperature: float
    title_length: int
    keyword_count: int
    content_type: ContentType
    use_real_api: bool

    def __repr__(self) -> str:
        """Repr with redacted API keys for safe debugging."""
        return (
            f"FrozenConfig(api_keys={_redact_keys(self.api_keys)!r}, "
            f"model={self.model!r}, temperature={self.temperature!r}, "
            f"title_length={self.title_length!r}, "
            f"keyword_count={self.keyword_count!r}, "
            f"content_type={self.content_type!r}, "
            f"use_real_api={self.use_real_api!r})"
        )

    __str__ = __repr__

    def generation_settings(self) -> GenerationSettings:
        """Settings snapshot for one batch run."""
        return GenerationSettings(
            title_length=self.title_length,
            keyword_count=self.keyword_count,
            content_type=self.content_type,
        )

    def credential_pool(self) -> CredentialPool:
        """Key pool parsed from the configured key blob."""
        return CredentialPool.from_text(self.api_keys)
