"""Configuration precedence, origin tracking and redaction.

Precedence: programmatic > environment > project file > home file > defaults.
"""

import os

import pytest

from stock_metadata.config import ConfigFileError, FrozenConfig, resolve_config
from stock_metadata.config.env_loader import EnvironmentConfigLoader
from stock_metadata.constants import DEFAULT_KEYWORD_COUNT, DEFAULT_MODEL
from stock_metadata.exceptions import ConfigurationError


@pytest.fixture
def home_file(tmp_path):
    return tmp_path / "home_config_isolated" / "stock_metadata.toml"


def _pyproject(tmp_path, body: str) -> None:
    (tmp_path / "pyproject.toml").write_text(body, encoding="utf-8")


class TestDefaults:
    @pytest.mark.unit
    def test_defaults_when_no_source_is_present(self, tmp_path):
        resolved = resolve_config(explain=True, project_root=tmp_path)

        assert resolved.model == DEFAULT_MODEL
        assert resolved.keyword_count == DEFAULT_KEYWORD_COUNT
        assert resolved.use_real_api is False
        assert resolved.api_keys is None
        assert set(resolved.origin.values()) == {"default"}

    @pytest.mark.unit
    def test_resolve_returns_frozen_config_by_default(self, tmp_path):
        cfg = resolve_config(project_root=tmp_path)

        assert isinstance(cfg, FrozenConfig)
        settings = cfg.generation_settings()
        assert settings.content_type == "image"
        assert not cfg.credential_pool()


class TestPrecedence:
    @pytest.mark.unit
    def test_environment_overrides_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STOCK_METADATA_KEYWORD_COUNT", "40")
        monkeypatch.setenv("STOCK_METADATA_USE_REAL_API", "true")
        monkeypatch.setenv("STOCK_METADATA_API_KEYS", "k1,k2")

        resolved = resolve_config(explain=True, project_root=tmp_path)

        assert resolved.keyword_count == 40
        assert resolved.use_real_api is True
        assert resolved.origin["keyword_count"] == "env"

    @pytest.mark.unit
    def test_programmatic_overrides_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STOCK_METADATA_MODEL", "env-model")

        resolved = resolve_config(
            {"model": "code-model"}, explain=True, project_root=tmp_path
        )

        assert resolved.model == "code-model"
        assert resolved.origin["model"] == "programmatic"

    @pytest.mark.unit
    def test_none_overrides_are_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STOCK_METADATA_TITLE_LENGTH", "70")

        resolved = resolve_config(
            {"title_length": None, "model": None}, explain=True, project_root=tmp_path
        )

        assert resolved.title_length == 70
        assert resolved.origin["title_length"] == "env"
        assert resolved.origin["model"] == "default"

    @pytest.mark.unit
    def test_project_file_overrides_home_file(self, tmp_path, home_file):
        home_file.write_text("keyword_count = 10\nmodel = 'home-model'\n")
        _pyproject(tmp_path, "[tool.stock_metadata]\nkeyword_count = 20\n")

        resolved = resolve_config(explain=True, project_root=tmp_path)

        assert resolved.keyword_count == 20
        assert resolved.model == "home-model"
        assert resolved.origin["keyword_count"] == "file"

    @pytest.mark.unit
    def test_environment_overrides_files(self, tmp_path, monkeypatch):
        _pyproject(tmp_path, "[tool.stock_metadata]\nkeyword_count = 20\n")
        monkeypatch.setenv("STOCK_METADATA_KEYWORD_COUNT", "25")

        resolved = resolve_config(explain=True, project_root=tmp_path)

        assert resolved.keyword_count == 25
        assert resolved.origin["keyword_count"] == "env"

    @pytest.mark.unit
    def test_project_file_is_found_from_the_working_directory(self, tmp_path):
        _pyproject(tmp_path, "[tool.stock_metadata]\ncontent_type = 'VIDEO'\n")

        cfg = resolve_config()

        assert cfg.content_type == "video"


class TestProfilesAndFiles:
    @pytest.mark.unit
    def test_profile_selects_nested_table(self, tmp_path):
        _pyproject(
            tmp_path,
            "[tool.stock_metadata]\n"
            "keyword_count = 20\n"
            "[tool.stock_metadata.profiles.short]\n"
            "keyword_count = 8\n"
            "title_length = 40\n",
        )

        cfg = resolve_config(profile="short", project_root=tmp_path)

        assert cfg.keyword_count == 8
        assert cfg.title_length == 40

    @pytest.mark.unit
    def test_profile_can_come_from_environment(self, tmp_path, monkeypatch):
        _pyproject(
            tmp_path,
            "[tool.stock_metadata.profiles.video]\ncontent_type = 'video'\n",
        )
        monkeypatch.setenv("STOCK_METADATA_PROFILE", "video")

        assert resolve_config(project_root=tmp_path).content_type == "video"

    @pytest.mark.unit
    def test_missing_profile_is_a_config_file_error(self, tmp_path):
        _pyproject(tmp_path, "[tool.stock_metadata]\nkeyword_count = 20\n")

        with pytest.raises(ConfigFileError, match="Profile 'nope' not found"):
            resolve_config(profile="nope", project_root=tmp_path)

    @pytest.mark.unit
    def test_malformed_toml_is_a_configuration_error(self, tmp_path):
        _pyproject(tmp_path, "[tool.stock_metadata\n")

        with pytest.raises(ConfigurationError):
            resolve_config(project_root=tmp_path)

    @pytest.mark.unit
    def test_key_list_in_toml_becomes_a_pool(self, tmp_path, home_file):
        home_file.write_text("api_keys = ['k1', 'k2', 'k1']\n")

        cfg = resolve_config(project_root=tmp_path)

        assert cfg.credential_pool().keys == ("k1", "k2")


class TestEnvFile:
    @pytest.mark.unit
    def test_env_file_values_are_used(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("STOCK_METADATA_API_KEYS=a,b\nSTOCK_METADATA_TEMPERATURE=1.2\n")

        cfg = resolve_config(use_env_file=env_file, project_root=tmp_path)

        assert cfg.credential_pool().keys == ("a", "b")
        assert cfg.temperature == 1.2

    @pytest.mark.unit
    def test_process_environment_wins_over_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / "custom.env"
        env_file.write_text("STOCK_METADATA_MODEL=file-model\n")
        monkeypatch.setenv("STOCK_METADATA_MODEL", "process-model")

        cfg = resolve_config(use_env_file=env_file, project_root=tmp_path)

        assert cfg.model == "process-model"
        # The .env file never leaks into the process environment.
        assert os.environ["STOCK_METADATA_MODEL"] == "process-model"

    @pytest.mark.unit
    def test_missing_env_file_is_a_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_config(use_env_file=tmp_path / "missing.env", project_root=tmp_path)


class TestValidation:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "overrides",
        [
            {"title_length": 500},
            {"keyword_count": 0},
            {"temperature": 3.0},
            {"content_type": "audio"},
        ],
    )
    def test_out_of_range_values_fail_resolution(self, tmp_path, overrides):
        with pytest.raises(ConfigurationError, match="validation failed"):
            resolve_config(overrides, project_root=tmp_path)

    @pytest.mark.unit
    def test_real_api_requires_keys(self, tmp_path):
        with pytest.raises(ConfigurationError, match="api_keys is required"):
            resolve_config({"use_real_api": True}, project_root=tmp_path)


class TestRedaction:
    @pytest.mark.unit
    def test_keys_never_appear_in_repr_or_audit(self, tmp_path):
        resolved = resolve_config(
            {"api_keys": "secret-one\nsecret-two"}, explain=True, project_root=tmp_path
        )

        for text in (repr(resolved), str(resolved), repr(resolved.to_frozen())):
            assert "secret" not in text
            assert "[REDACTED x2]" in text
        assert "api_keys: programmatic:[REDACTED x2]" in resolved.audit()


class TestEnvironmentSummary:
    @pytest.mark.unit
    def test_summary_redacts_keys(self, monkeypatch):
        monkeypatch.setenv("STOCK_METADATA_API_KEYS", "secret-one")
        monkeypatch.setenv("STOCK_METADATA_MODEL", "gemini-test")

        summary = EnvironmentConfigLoader().get_env_summary()

        assert summary == {
            "STOCK_METADATA_API_KEYS": "<redacted>",
            "STOCK_METADATA_MODEL": "gemini-test",
        }
