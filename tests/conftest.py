"""
Global test configuration and shared fixtures.
"""

from collections.abc import Callable
import os
from pathlib import Path

import pytest

from stock_metadata.core.types import FilePayload, GenerationSettings
from tests.helpers import RecordingClient, RecordingObserver


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_stock_metadata_env(request, monkeypatch, tmp_path):
    """Ensure a clean STOCK_METADATA_* environment for each test.

    - Removes all STOCK_METADATA_* variables and the DEBUG toggle
    - Points the home config file at an isolated temp path
    - Runs the test from a temp directory so no real pyproject.toml is found

    Escape hatch: mark a test with @pytest.mark.allow_env_pollution.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("STOCK_METADATA_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)

    fake_home_dir = tmp_path / "home_config_isolated"
    fake_home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv(
        "STOCK_METADATA_CONFIG_HOME", str(fake_home_dir / "stock_metadata.toml")
    )
    monkeypatch.chdir(tmp_path)


# --- Shared builders ---


@pytest.fixture
def settings() -> GenerationSettings:
    return GenerationSettings(title_length=100, keyword_count=30)


@pytest.fixture
def make_payload() -> Callable[..., FilePayload]:
    """Factory for in-memory image payloads."""

    def _make(
        name: str = "sunset.jpg", last_modified: int = 1_700_000_000_000
    ) -> FilePayload:
        return FilePayload.from_bytes(
            name, b"\xff\xd8fake-jpeg", last_modified=last_modified
        )

    return _make


@pytest.fixture
def image_dir(tmp_path) -> Path:
    """Directory with three small images and one non-image file."""
    root = tmp_path / "shots"
    root.mkdir()
    for name in ("beach_sunset.jpg", "city-night.png", "forest.jpg"):
        (root / name).write_bytes(b"fake-image-bytes")
    (root / "notes.txt").write_text("not an image", encoding="utf-8")
    return root


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()
