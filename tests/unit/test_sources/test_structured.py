"""Unit tests for the structured (JSON endpoint) source."""

import asyncio
from typing import Any, AsyncGenerator

import pytest
from aiohttp import ClientConnectionError
from aioresponses import aioresponses
from yarl import URL

from warranty_checker.models import WarrantyStatus
from warranty_checker.sources.base import Found, Unavailable
from warranty_checker.sources.structured import StructuredSource


@pytest.fixture
async def structured_source(settings) -> AsyncGenerator[StructuredSource, None]:
    """Return a StructuredSource instance for testing."""
    source = StructuredSource(settings)
    yield source
    await source.close()


@pytest.fixture
def api_url(settings) -> str:
    return settings.api_url


@pytest.fixture
def success_payload() -> dict[str, Any]:
    return {
        "status": "success",
        "data": {
            "product": "ThinkPad T14 Gen 3",
            "warranty": {
                "startDate": "2024-03-01",
                "endDate": "2026-03-01",
                "type": "Onsite",
                "status": "In warranty",
            },
        },
    }


@pytest.mark.asyncio
async def test_lookup_successful(structured_source, api_url, success_payload, today):
    """Test a well-formed success payload yields a classified record."""
    with aioresponses() as mock:
        mock.post(api_url, payload=success_payload)

        outcome = await structured_source.lookup("PF2ABCDE", today=today)

    assert isinstance(outcome, Found)
    record = outcome.record
    assert record.serial_number == "PF2ABCDE"
    assert record.product_name == "ThinkPad T14 Gen 3"
    assert record.warranty_start_date == "2024-03-01"
    assert record.warranty_end_date == "2026-03-01"
    assert record.warranty_type == "Onsite"
    assert record.days_remaining == 45
    assert record.warranty_status is WarrantyStatus.ACTIVE


@pytest.mark.asyncio
async def test_lookup_sends_serial_payload(structured_source, api_url, success_payload, today):
    """Test the request body and headers sent to the endpoint."""
    with aioresponses() as mock:
        mock.post(api_url, payload=success_payload)

        await structured_source.lookup("PF2ABCDE", today=today)

        request = mock.requests[("POST", URL(api_url))][0]
    assert request.kwargs["json"] == {"serialNumber": "PF2ABCDE"}
    assert request.kwargs["headers"]["User-Agent"] == "LenovoWarrantyChecker/1.0"


@pytest.mark.asyncio
async def test_lookup_success_without_warranty_is_not_found(structured_source, api_url):
    """Test a success payload with no warranty data maps to Not Found."""
    with aioresponses() as mock:
        mock.post(api_url, payload={"status": "success", "data": {"product": "IdeaPad 5"}})

        outcome = await structured_source.lookup("PF2ABCDE")

    assert isinstance(outcome, Found)
    assert outcome.record.warranty_status is WarrantyStatus.NOT_FOUND
    assert outcome.record.product_name == "IdeaPad 5"


@pytest.mark.asyncio
async def test_lookup_ignores_non_text_fields(structured_source, api_url, success_payload, today):
    """Test nested objects in text fields are treated as absent."""
    success_payload["data"]["product"] = {"name": "ThinkPad T14 Gen 3"}
    success_payload["data"]["warranty"]["type"] = ["Onsite"]
    with aioresponses() as mock:
        mock.post(api_url, payload=success_payload)

        outcome = await structured_source.lookup("PF2ABCDE", today=today)

    assert isinstance(outcome, Found)
    assert outcome.record.product_name is None
    assert outcome.record.warranty_type is None
    assert outcome.record.warranty_status is WarrantyStatus.ACTIVE


@pytest.mark.asyncio
async def test_lookup_error_status_is_unavailable(structured_source, api_url):
    with aioresponses() as mock:
        mock.post(api_url, payload={"status": "error", "error": "unsupported region"})

        outcome = await structured_source.lookup("PF2ABCDE")

    assert isinstance(outcome, Unavailable)
    assert outcome.reason == "unsupported region"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 429, 500, 503])
async def test_lookup_http_error_is_unavailable(structured_source, api_url, status):
    with aioresponses() as mock:
        mock.post(api_url, status=status)

        outcome = await structured_source.lookup("PF2ABCDE")

    assert isinstance(outcome, Unavailable)
    assert str(status) in outcome.reason


@pytest.mark.asyncio
async def test_lookup_invalid_json_is_unavailable(structured_source, api_url):
    with aioresponses() as mock:
        mock.post(api_url, body="<html>Not an API</html>", content_type="text/html")

        outcome = await structured_source.lookup("PF2ABCDE")

    assert isinstance(outcome, Unavailable)


@pytest.mark.asyncio
async def test_lookup_network_error_is_unavailable(structured_source, api_url):
    with aioresponses() as mock:
        mock.post(api_url, exception=ClientConnectionError("connection refused"))

        outcome = await structured_source.lookup("PF2ABCDE")

    assert isinstance(outcome, Unavailable)
    assert "network error" in outcome.reason


@pytest.mark.asyncio
async def test_lookup_timeout_is_unavailable(structured_source, api_url):
    with aioresponses() as mock:
        mock.post(api_url, exception=asyncio.TimeoutError())

        outcome = await structured_source.lookup("PF2ABCDE")

    assert outcome == Unavailable("request timed out")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        ["not", "an", "object"],
        {"status": "success"},
        {"status": "success", "data": "nope"},
        {"status": "success", "data": {"warranty": "nope"}},
        {"status": "success", "data": {"warranty": {"endDate": "someday"}}},
    ],
)
async def test_lookup_malformed_payload_is_unavailable(structured_source, api_url, payload):
    with aioresponses() as mock:
        mock.post(api_url, payload=payload)

        outcome = await structured_source.lookup("PF2ABCDE")

    assert isinstance(outcome, Unavailable)


@pytest.mark.asyncio
async def test_close_is_idempotent(settings):
    source = StructuredSource(settings)
    await source._get_session()

    await source.close()
    await source.close()

    assert source._session is None
