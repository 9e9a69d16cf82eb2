import httpx
import pytest

from services.base_client import ProviderError
from services.nominatim.client import NominatimClient


@pytest.mark.asyncio
async def test_geocode_sends_user_agent_and_parses_results():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=[
                {"display_name": "Austin, Travis County, Texas", "lat": "30.2711", "lon": "-97.7437", "type": "city"},
                {"display_name": "No coordinates"},
            ],
        )

    client = NominatimClient(transport=httpx.MockTransport(handler))

    results = await client.geocode("Austin")

    assert [result.display_name for result in results] == ["Austin, Travis County, Texas"]
    assert results[0].lat == pytest.approx(30.2711)
    assert requests[0].headers["user-agent"] == "LeadScraperApp/1.0"
    assert requests[0].url.params["format"] == "json"
    assert requests[0].url.params["limit"] == "5"


@pytest.mark.asyncio
async def test_geocode_wraps_failures():
    client = NominatimClient(transport=httpx.MockTransport(lambda request: httpx.Response(503)))

    with pytest.raises(ProviderError):
        await client.geocode("Austin")
