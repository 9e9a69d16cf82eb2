from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from models.lead import Lead
from services.ai.analyzer import AIAnalyzer, build_analysis_prompt, primary_analyzer, secondary_analyzer


def completion(content: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def mock_client(content: str | None = None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=completion(content) if content is not None else None,
        side_effect=error,
    )
    return client


def make_analyzer(client, api_key: str = "sk-test", system_prompt: str | None = None) -> AIAnalyzer:
    return AIAnalyzer(
        name="Claude",
        label="Claude (Primary)",
        api_key=api_key,
        model="claude-test",
        system_prompt=system_prompt,
        client=client,
    )


@pytest.fixture
def lead():
    return Lead(
        company_name="Acme Coffee",
        phone="(512) 555-0100",
        address="600 Congress Ave, Austin, TX 78701",
        website="https://acme.io",
        industry="Food & Beverage",
    )


def test_prompt_includes_lead_and_allowed_labels(lead):
    prompt = build_analysis_prompt(lead)

    assert "Company: Acme Coffee" in prompt
    assert "Website: https://acme.io" in prompt
    assert "Professional Services, or Business" in prompt
    assert "ownerName, industry, employeeCount, revenue, businessDetails, confidence" in prompt


@pytest.mark.asyncio
async def test_analyze_parses_model_reply(lead):
    client = mock_client(
        '```json\n{"ownerName": "Jane Doe", "industry": "Food & Beverage", "employeeCount": "10-20", '
        '"revenue": "$1M", "businessDetails": "Specialty coffee roaster", "confidence": 88}\n```'
    )
    analyzer = make_analyzer(client, system_prompt="You are an analyst.")

    analysis = await analyzer.analyze(lead)

    assert analysis.owner_name == "Jane Doe"
    assert analysis.confidence == 88
    assert analysis.source == "Claude"
    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert kwargs["messages"][0] == {"role": "system", "content": "You are an analyst."}
    assert kwargs["messages"][1]["role"] == "user"


@pytest.mark.asyncio
async def test_analyze_returns_none_on_unparseable_reply(lead):
    analyzer = make_analyzer(mock_client("I could not find anything about this business."))

    assert await analyzer.analyze(lead) is None


@pytest.mark.asyncio
async def test_analyze_returns_none_on_provider_error(lead):
    analyzer = make_analyzer(mock_client(error=RuntimeError("connection reset")))

    assert await analyzer.analyze(lead) is None


@pytest.mark.asyncio
async def test_analyze_skips_without_key(lead):
    client = mock_client("{}")
    analyzer = make_analyzer(client, api_key="")

    assert await analyzer.analyze(lead) is None
    client.chat.completions.create.assert_not_awaited()


def test_factories_label_analyzers():
    client = MagicMock()

    primary = primary_analyzer(client)
    secondary = secondary_analyzer(client)

    assert (primary.name, primary.label) == ("Claude", "Claude (Primary)")
    assert (secondary.name, secondary.label) == ("ChatGPT", "ChatGPT (Secondary)")
    assert primary.base_url == "https://api.anthropic.com/v1/"
    assert secondary.system_prompt is not None
    assert primary.client is client
