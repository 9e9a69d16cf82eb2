import httpx
import pytest

from models.lead import Lead
from services.hunter.client import HunterClient


def domain_search_response(emails: list[dict]) -> dict:
    return {"data": {"domain": "acme.io", "organization": "Acme", "emails": emails}}


@pytest.mark.asyncio
async def test_find_emails_queries_bare_domain_and_picks_decision_maker():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=domain_search_response(
                [
                    {"value": "info@acme.io", "type": "generic", "confidence": 70},
                    {
                        "value": "jane@acme.io",
                        "first_name": "Jane",
                        "last_name": "Doe",
                        "position": "Founder & CEO",
                        "confidence": 94,
                    },
                ]
            ),
        )

    client = HunterClient(api_key="test-key", transport=httpx.MockTransport(handler))

    result = await client.find_emails(Lead(company_name="Acme", website="https://www.acme.io/about"))

    assert requests[0].url.params["domain"] == "acme.io"
    assert requests[0].url.params["limit"] == "10"
    assert result.primary_email == "jane@acme.io"
    assert result.owner_name == "Jane Doe"
    assert result.owner_position == "Founder & CEO"
    assert result.confidence == 94
    assert len(result.emails) == 2


@pytest.mark.asyncio
async def test_find_emails_falls_back_to_first_mailbox():
    handler = lambda request: httpx.Response(  # noqa: E731
        200, json=domain_search_response([{"value": "hello@acme.io"}, {"value": "sales@acme.io"}])
    )
    client = HunterClient(api_key="test-key", transport=httpx.MockTransport(handler))

    result = await client.find_emails(Lead(company_name="Acme", website="acme.io"))

    assert result.primary_email == "hello@acme.io"
    assert result.owner_name is None


@pytest.mark.asyncio
async def test_find_emails_needs_domain():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = HunterClient(api_key="test-key", transport=httpx.MockTransport(handler))

    assert await client.find_emails(Lead(company_name="Acme", website="N/A")) is None


@pytest.mark.asyncio
async def test_find_emails_returns_none_on_failure():
    client = HunterClient(
        api_key="test-key",
        transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"errors": []})),
    )

    assert await client.find_emails(Lead(company_name="Acme", website="acme.io")) is None


@pytest.mark.asyncio
async def test_verify_email():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["email"] == "jane@acme.io"
        return httpx.Response(
            200, json={"data": {"email": "jane@acme.io", "status": "valid", "score": 96, "result": "deliverable"}}
        )

    client = HunterClient(api_key="test-key", transport=httpx.MockTransport(handler))

    verification = await client.verify_email("jane@acme.io")

    assert verification.status == "valid"
    assert verification.score == 96
