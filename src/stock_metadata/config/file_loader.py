"""File-based configuration loading with profile support.

Reads ``[tool.stock_metadata]`` from the nearest pyproject.toml and the home
file ``~/.config/stock_metadata.toml``. Named profiles live under
``profiles.<name>`` in either file.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from stock_metadata.exceptions import ConfigurationError

TOOL_SECTION = "stock_metadata"
HOME_CONFIG_ENV = "STOCK_METADATA_CONFIG_HOME"


class ConfigFileError(ConfigurationError):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause."""
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open(mode="rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e


def _select_profile(
    path: Path, section: dict[str, Any], profile: str | None
) -> dict[str, Any]:
    if profile:
        profiles = section.get("profiles", {})
        if profile not in profiles:
            raise ConfigFileError(
                path,
                f"Profile '{profile}' not found. Available profiles: {list(profiles)}",
            )
        return dict(profiles[profile])
    config = dict(section)
    config.pop("profiles", None)
    return config


class FileConfigLoader:
    """Loads configuration from TOML files."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load ``[tool.stock_metadata]`` from the nearest pyproject.toml.

        Returns:
            Configuration values; empty if there is no file or no section.

        Raises:
            ConfigFileError: If the file exists but cannot be parsed, or the
                requested profile does not exist.
        """
        pyproject_path = self.find_pyproject_toml(project_root)
        if pyproject_path is None:
            return {}
        section = _read_toml(pyproject_path).get("tool", {}).get(TOOL_SECTION, {})
        if not section:
            return {}
        return _select_profile(pyproject_path, section, profile)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load configuration from the home file, if it exists."""
        home_path = self.home_config_path()
        if not home_path.exists():
            return {}
        return _select_profile(home_path, _read_toml(home_path), profile)

    def find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Search upwards from `start_dir` (default: cwd) for pyproject.toml."""
        current = Path(start_dir or Path.cwd()).resolve()
        while True:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            if current == current.parent:
                return None
            current = current.parent

    def home_config_path(self) -> Path:
        """Path of the home config file; overridable via environment."""
        override = os.getenv(HOME_CONFIG_ENV)
        if override:
            return Path(override)
        return Path.home() / ".config" / "stock_metadata.toml"
