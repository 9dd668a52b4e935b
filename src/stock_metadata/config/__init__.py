"""Configuration for stock metadata generation.

Resolve once, freeze, then pass the `FrozenConfig` explicitly.

Key components:
- StockMetadataSettings: Pydantic schema with defaults and bounds
- ResolvedConfig: merged configuration with per-field origin
- FrozenConfig: immutable configuration used at runtime
"""

from pathlib import Path
from typing import Any, Literal, overload

from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import StockMetadataSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

_resolver = ConfigResolver()


@overload
def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    explain: Literal[False] = False,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> FrozenConfig: ...


@overload
def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    explain: Literal[True],
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig: ...


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    explain: bool = False,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> FrozenConfig | ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Precedence: Programmatic > Environment > Project file > Home file > Defaults

    Args:
        programmatic: Overrides with the highest precedence.
        explain: Return the `ResolvedConfig` with origin tracking instead of
            the frozen config.
        profile: Profile name to load from configuration files.
        use_env_file: Optional .env file to read before the environment.
        project_root: Directory to search for pyproject.toml.

    Example:
        config = resolve_config({"content_type": "video"})
        settings = config.generation_settings()
    """
    resolved = _resolver.resolve(
        programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )
    return resolved if explain else resolved.to_frozen()


__all__ = [  # noqa: RUF022
    "resolve_config",
    "FrozenConfig",
    "ResolvedConfig",
    "ConfigOrigin",
    "SourceMap",
    "StockMetadataSettings",
    "ConfigResolver",
    "FileConfigLoader",
    "ConfigFileError",
]
