"""Environment variable configuration loading.

Reads ``STOCK_METADATA_*`` variables, optionally seeded from a ``.env`` file,
and returns only the fields that are actually set. Values are returned raw;
type coercion happens once, when the resolver validates the merged result.
"""

import os
from pathlib import Path

from dotenv import dotenv_values

from .schema import ENV_PREFIX, StockMetadataSettings


def env_var_names() -> dict[str, str]:
    """Map environment variable names to settings field names."""
    return {
        f"{ENV_PREFIX}{name.upper()}": name
        for name in StockMetadataSettings.model_fields
    }


class EnvironmentConfigLoader:
    """Loads configuration from environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, str]:
        """Load configuration from ``STOCK_METADATA_*`` variables.

        Args:
            env_file: Optional .env file. Its values fill in variables that
                are not already set in the process environment.

        Returns:
            Raw values for the fields present in the environment.

        Raises:
            FileNotFoundError: If `env_file` does not exist.
        """
        environ: dict[str, str] = {}
        if env_file:
            env_path = Path(env_file)
            if not env_path.exists():
                raise FileNotFoundError(f"Environment file not found: {env_path}")
            environ.update(
                {k: v for k, v in dotenv_values(env_path).items() if v is not None}
            )
        environ.update(os.environ)

        return {
            field: environ[var]
            for var, field in env_var_names().items()
            if var in environ
        }

    def get_env_summary(self) -> dict[str, str]:
        """Current ``STOCK_METADATA_*`` variables with API keys redacted."""
        summary = {}
        for var in env_var_names():
            if var in os.environ:
                summary[var] = "<redacted>" if "API_KEY" in var else os.environ[var]
        return summary
