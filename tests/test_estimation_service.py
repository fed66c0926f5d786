"""Tests for the food estimation service."""

import asyncio

import pytest

from calai.errors import EstimationError
from calai.services.estimation import (
    IMAGE_ONLY_DESCRIPTION,
    EstimationService,
    _to_data_url,
    parse_estimates,
)
from tests.conftest import FakeEstimationClient, estimate_payload


def _service(client: FakeEstimationClient | None) -> EstimationService:
    return EstimationService(client=client, model="gpt-5.2", reasoning_effort="low")


def test_estimate_returns_validated_items() -> None:
    client = FakeEstimationClient()

    result = asyncio.run(_service(client).estimate("a bowl of oatmeal"))

    assert result[0].food_name == "Oatmeal"
    assert result[0].macros.protein == 10
    assert result[0].micronutrients is not None
    assert result[0].micronutrients.saturated_fat == 1.2
    assert "a bowl of oatmeal" in client.prompts[0]
    assert client.images == [None]


def test_estimate_sends_image_and_default_description() -> None:
    client = FakeEstimationClient()
    png = b"\x89PNG\r\n\x1a\n" + b"rest"

    asyncio.run(_service(client).estimate("  ", png))

    assert IMAGE_ONLY_DESCRIPTION in client.prompts[0]
    assert client.images[0] is not None
    assert client.images[0].startswith("data:image/png;base64,")


def test_estimate_wraps_client_failure() -> None:
    client = FakeEstimationClient(error=TimeoutError("slow"))

    with pytest.raises(EstimationError):
        asyncio.run(_service(client).estimate("pizza"))


def test_estimate_requires_input_and_client() -> None:
    with pytest.raises(EstimationError, match="Nothing to analyze"):
        asyncio.run(_service(FakeEstimationClient()).estimate(""))
    with pytest.raises(EstimationError, match="not configured"):
        asyncio.run(_service(None).estimate("pizza"))


def test_parse_estimates_accepts_bare_list() -> None:
    items = parse_estimates([estimate_payload("Apple", 95)])

    assert items[0].food_name == "Apple"
    assert items[0].calories == 95


@pytest.mark.parametrize(
    "payload",
    [
        {"foods": []},
        "not json",
        [{"description": "missing name", "calories": 10}],
        [{"foodName": "Soup", "calories": "lots"}],
    ],
)
def test_parse_estimates_rejects_bad_shapes(payload: object) -> None:
    with pytest.raises(EstimationError):
        parse_estimates(payload)


def test_to_data_url_defaults_to_jpeg() -> None:
    assert _to_data_url(b"unknown").startswith("data:image/jpeg;base64,")
