"""Configuration resolution with precedence handling.

Merges configuration from every source in this order:
Programmatic > Environment > Project file > Home file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from stock_metadata.exceptions import ConfigurationError

from .env_loader import EnvironmentConfigLoader
from .file_loader import FileConfigLoader
from .schema import StockMetadataSettings, default_values
from .types import ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)

PROFILE_ENV = "STOCK_METADATA_PROFILE"


class ConfigResolver:
    """Resolves configuration from multiple sources with source tracking."""

    def __init__(self) -> None:
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Overrides with the highest precedence. ``None``
                values are ignored so CLI flags can be passed through as-is.
            profile: Profile name to load from configuration files. Defaults
                to ``STOCK_METADATA_PROFILE``.
            use_env_file: Optional .env file to read.
            project_root: Directory to search for pyproject.toml.

        Raises:
            ConfigurationError: If a source is malformed or the merged values
                fail validation.
        """
        merged: dict[str, Any] = default_values()
        origin: dict[str, ConfigOrigin] = dict.fromkeys(merged, "default")

        def _apply(values: dict[str, Any], source: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged and value is not None:
                    merged[field] = value
                    origin[field] = source

        if profile is None:
            profile = os.getenv(PROFILE_ENV)

        _apply(self.file_loader.load_home_config(profile=profile), "file")
        _apply(
            self.file_loader.load_project_config(
                project_root=project_root, profile=profile
            ),
            "file",
        )
        try:
            _apply(self.env_loader.load_env_config(env_file=use_env_file), "env")
        except FileNotFoundError as e:
            raise ConfigurationError(f"Environment configuration error: {e}") from e
        _apply(programmatic or {}, "programmatic")

        try:
            validated = StockMetadataSettings(**merged).to_dict()
        except PydanticValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        resolved = ResolvedConfig(**validated, origin=origin)
        log.debug("Resolved configuration: %s", resolved)
        return resolved
