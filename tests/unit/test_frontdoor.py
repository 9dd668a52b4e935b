import pytest

from stock_metadata import generate_metadata, resolve_config
from stock_metadata.client import GeminiGenerationClient, MockGenerationClient
from stock_metadata.exceptions import ValidationError
from stock_metadata.frontdoor import create_client
from tests.helpers import RecordingClient


@pytest.mark.unit
def test_mock_client_is_the_default():
    assert isinstance(create_client(resolve_config()), MockGenerationClient)


@pytest.mark.unit
def test_real_client_is_opt_in():
    cfg = resolve_config({"use_real_api": True, "api_keys": "k1"})
    client = create_client(cfg)

    assert isinstance(client, GeminiGenerationClient)
    assert client.model == cfg.model


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_metadata_for_a_directory(image_dir):
    report = await generate_metadata([image_dir], api_keys="k1, k2")

    assert report.succeeded == 3
    assert [r.file_name for r in report.registry.results] == [
        "beach_sunset.jpg",
        "city-night.png",
        "forest.jpg",
    ]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_configured_keys_are_used_when_none_are_passed(image_dir, monkeypatch):
    monkeypatch.setenv("STOCK_METADATA_API_KEYS", "env-key")
    client = RecordingClient()

    await generate_metadata([image_dir], client=client)

    assert {key for _, key in client.calls} == {"env-key"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_resubmitting_completed_files_leaves_nothing_to_do(image_dir):
    report = await generate_metadata([image_dir], api_keys="k1")

    with pytest.raises(ValidationError, match="new or failed file"):
        await generate_metadata([image_dir], api_keys="k1", registry=report.registry)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_keys_are_reported_before_any_work(image_dir):
    client = RecordingClient()

    with pytest.raises(ValidationError, match="at least one API key"):
        await generate_metadata([image_dir], client=client)

    assert client.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_mock_client_respects_settings(image_dir):
    cfg = resolve_config({"keyword_count": 7, "title_length": 12})

    report = await generate_metadata([image_dir], api_keys="k1", cfg=cfg)

    for result in report.registry.results:
        assert len(result.keywords) == 7
        assert len(result.title) <= 12
