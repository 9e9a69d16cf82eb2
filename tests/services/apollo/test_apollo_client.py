import json

import httpx
import pytest
from pydantic import ValidationError

from common.errors import ConfigurationError
from models.lead import Lead
from services.apollo.client import ApolloClient
from services.apollo.schemas import OrganizationFilters, PeopleFilters
from services.base_client import ProviderError


def organization(index: int) -> dict:
    return {
        "id": f"org-{index}",
        "name": f"Company {index}",
        "website_url": f"https://company{index}.com",
        "city": "Austin",
        "state": "Texas",
        "country": "United States",
        "industry": "Technology",
        "estimated_num_employees": 42,
        "annual_revenue_printed": "5M",
    }


class ApolloStub:
    """Serves ``total`` organizations in pages, recording request bodies."""

    def __init__(self, total: int, by_name: int | None = None):
        self.total = total
        self.by_name = by_name
        self.bodies: list[dict] = []
        self.headers: list[httpx.Headers] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.bodies.append(body)
        self.headers.append(request.headers)
        total = self.by_name if "q_organization_name" in body and self.by_name is not None else self.total
        start = (body["page"] - 1) * body["per_page"]
        end = min(start + body["per_page"], total)
        return httpx.Response(200, json={"organizations": [organization(i) for i in range(start, end)]})


def make_client(handler) -> ApolloClient:
    return ApolloClient(api_key="test-key", transport=httpx.MockTransport(handler), batch_delay=0)


@pytest.mark.asyncio
async def test_search_organizations_paginates_to_target():
    stub = ApolloStub(total=500)
    client = make_client(stub)

    leads = await client.search_organizations(OrganizationFilters(keywords=["saas"], target_count=250))

    assert len(leads) == 250
    assert [body["page"] for body in stub.bodies] == [1, 2, 3]
    assert all(body["per_page"] == 100 for body in stub.bodies)
    assert stub.bodies[0]["q_organization_keyword_tags"] == ["saas"]
    assert stub.headers[0]["x-api-key"] == "test-key"


@pytest.mark.asyncio
async def test_search_organizations_stops_on_short_page():
    stub = ApolloStub(total=130)
    client = make_client(stub)

    leads = await client.search_organizations(OrganizationFilters(keywords=["saas"], target_count=300))

    assert len(leads) == 130
    assert len(stub.bodies) == 2


@pytest.mark.asyncio
async def test_search_organizations_maps_leads():
    client = make_client(ApolloStub(total=1))

    lead = (await client.search_organizations(OrganizationFilters(locations=["Austin, TX"])))[0]

    assert lead.company_name == "Company 0"
    assert lead.organization_id == "org-0"
    assert lead.employee_count == "42"
    assert lead.source == "Apollo Organizations"
    assert lead.phone == "N/A"


@pytest.mark.asyncio
async def test_search_organizations_retries_name_as_keyword():
    stub = ApolloStub(total=3, by_name=0)
    client = make_client(stub)

    leads = await client.search_organizations(OrganizationFilters(company_name="Acme"))

    assert len(leads) == 3
    assert stub.bodies[0]["q_organization_name"] == "Acme"
    assert stub.bodies[1]["q_organization_keyword_tags"] == ["Acme"]
    assert "q_organization_name" not in stub.bodies[1]


def test_keywords_and_company_name_are_exclusive():
    with pytest.raises(ValidationError):
        OrganizationFilters(keywords=["saas"], company_name="Acme")


def test_page_size_is_capped():
    with pytest.raises(ValidationError):
        OrganizationFilters(per_page=101)


@pytest.mark.asyncio
async def test_search_organizations_wraps_http_errors():
    client = make_client(lambda request: httpx.Response(401, json={"error": "invalid key"}))

    with pytest.raises(ProviderError):
        await client.search_organizations(OrganizationFilters(keywords=["saas"]))


@pytest.mark.asyncio
async def test_search_requires_api_key():
    client = ApolloClient(api_key="", transport=httpx.MockTransport(ApolloStub(total=1)), batch_delay=0)

    with pytest.raises(ConfigurationError):
        await client.search_organizations(OrganizationFilters(keywords=["saas"]))


@pytest.mark.asyncio
async def test_search_people_maps_contacts():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert request.url.path.endswith("mixed_people/search")
        assert body["person_titles"] == ["owner"]
        return httpx.Response(
            200,
            json={
                "contacts": [
                    {
                        "id": "person-1",
                        "first_name": "Jane",
                        "last_name": "Doe",
                        "title": "Owner",
                        "email": "jane@acme.io",
                        "organization_name": "Acme",
                    }
                ]
            },
        )

    client = make_client(handler)

    leads = await client.search_people(PeopleFilters(titles=["owner"], target_count=1))

    assert leads[0].owner_name == "Jane Doe"
    assert leads[0].company_name == "Acme"
    assert leads[0].person_id == "person-1"


def test_build_match_request_splits_owner_name():
    lead = Lead(company_name="Acme", owner_name="Jane van Doe", website="https://www.acme.io")

    body = ApolloClient.build_match_request(lead)

    assert body == {
        "first_name": "Jane",
        "last_name": "van Doe",
        "organization_name": "Acme",
        "domain": "acme.io",
    }


def test_build_match_request_prefers_email():
    lead = Lead(company_name="Acme", owner_name="Jane Doe", email="jane@acme.io")

    assert ApolloClient.build_match_request(lead) == {"email": "jane@acme.io", "organization_name": "Acme"}


def test_build_match_request_needs_person_signal():
    assert ApolloClient.build_match_request(Lead(company_name="Acme", website="acme.io")) is None


@pytest.mark.asyncio
async def test_match_person_returns_match():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("people/match")
        return httpx.Response(
            200,
            json={
                "person": {
                    "id": "p-1",
                    "name": "Jane Doe",
                    "title": "CEO",
                    "email": "jane@acme.io",
                    "organization": {"name": "Acme", "estimated_num_employees": 12},
                }
            },
        )

    client = make_client(handler)

    match = await client.match_person(Lead(company_name="Acme", owner_name="Jane Doe"))

    assert match.owner_name == "Jane Doe"
    assert match.employee_count == "12"
    assert match.confidence == 90


@pytest.mark.asyncio
async def test_match_person_returns_none_on_failure():
    client = make_client(lambda request: httpx.Response(500))

    assert await client.match_person(Lead(company_name="Acme", owner_name="Jane Doe")) is None
