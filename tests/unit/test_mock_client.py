import pytest

from stock_metadata.client import GenerationClient, MockGenerationClient
from stock_metadata.constants import ADOBE_STOCK_CATEGORIES
from stock_metadata.exceptions import ProviderError


@pytest.mark.unit
def test_mock_satisfies_the_client_protocol():
    assert isinstance(MockGenerationClient(), GenerationClient)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_mock_output_is_deterministic(make_payload, settings):
    client = MockGenerationClient()
    payload = make_payload("golden_beach-sunset.jpg")

    first = await client.generate(payload, settings, "k1")
    second = await client.generate(payload, settings, "k2")

    assert first == second
    assert first.title == "Golden beach sunset image"
    assert first.keywords[:3] == ("golden", "beach", "sunset")
    assert len(first.keywords) == settings.keyword_count
    assert first.category in ADOBE_STOCK_CATEGORIES


@pytest.mark.unit
@pytest.mark.asyncio
async def test_mock_failing_keys_raise_provider_errors(make_payload, settings):
    client = MockGenerationClient(failing_keys={"bad-key-0000"})

    with pytest.raises(ProviderError) as exc_info:
        await client.generate(make_payload(), settings, "bad-key-0000")

    assert exc_info.value.api_key_hint == "...0000"
