import httpx
import pytest

from services.people_data_labs.client import PeopleDataLabsClient, build_owner_query
from services.people_data_labs.schemas import best_email


@pytest.fixture
def people():
    return [
        {
            "id": "pdl-1",
            "full_name": "Jane Doe",
            "first_name": "Jane",
            "last_name": "Doe",
            "job_title": "Owner",
            "job_title_role": "owner",
            "job_company_name": "Acme",
            "emails": [
                {"address": "jane@gmail.com", "type": "personal"},
                {"address": "jane@acme.io", "type": "professional"},
            ],
            "phone_numbers": ["+15125550100"],
            "location_locality": "austin",
        },
        {
            "id": "pdl-2",
            "full_name": "John Roe",
            "job_title": "President",
            "emails": [{"address": "john@roe.com", "current": True}],
        },
    ]


def test_build_owner_query_filters_and_escapes():
    query = build_owner_query("Joe's Diner", city="Austin", country="united states")

    assert query.startswith("SELECT * FROM person WHERE job_company_name='Joe''s Diner'")
    assert "location_locality='Austin'" in query
    assert "location_country='united states'" in query
    assert "location_region" not in query
    assert "job_title_role IN ('owner', 'ceo', 'founder'" in query
    assert query.endswith("ORDER BY job_start_date DESC LIMIT 10")


def test_best_email_preference():
    assert best_email([{"address": "a@x.com"}, {"address": "b@x.com", "type": "professional"}]) == "b@x.com"
    assert best_email([{"address": "a@x.com"}, {"address": "b@x.com", "current": True}]) == "b@x.com"
    assert best_email([{"address": "a@x.com"}]) == "a@x.com"
    assert best_email([]) is None


@pytest.mark.asyncio
async def test_find_owner_returns_primary_and_contacts(people):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"status": 200, "data": people})

    client = PeopleDataLabsClient(api_key="test-key", transport=httpx.MockTransport(handler))

    owner = await client.find_owner("Acme", city="Austin")

    assert owner.owner_name == "Jane Doe"
    assert owner.email == "jane@acme.io"
    assert owner.personal_emails == ["jane@gmail.com"]
    assert owner.phone == "+15125550100"
    assert owner.confidence == 90
    assert [contact.full_name for contact in owner.contacts] == ["Jane Doe", "John Roe"]
    assert owner.contacts[1].email == "john@roe.com"
    assert requests[0].url.path.endswith("person/search")
    assert requests[0].url.params["size"] == "10"
    assert requests[0].headers["x-api-key"] == "test-key"


@pytest.mark.asyncio
async def test_find_owner_returns_none_without_matches():
    client = PeopleDataLabsClient(
        api_key="test-key",
        transport=httpx.MockTransport(lambda request: httpx.Response(404, json={"error": {"type": "not_found"}})),
    )

    assert await client.find_owner("Nobody Inc") is None


@pytest.mark.asyncio
async def test_find_owner_skips_without_key_or_name():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    unconfigured = PeopleDataLabsClient(api_key="", transport=httpx.MockTransport(handler))
    configured = PeopleDataLabsClient(api_key="test-key", transport=httpx.MockTransport(handler))

    assert await unconfigured.find_owner("Acme") is None
    assert await configured.find_owner("   ") is None
