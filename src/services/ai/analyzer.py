from openai import AsyncOpenAI
from pydantic import SecretStr

from common.config import config, is_configured
from common.logging import get_logger
from common.openai_errors import handle_openai_errors
from common.retry import with_retry
from enrichments.industry import AI_INDUSTRY_LABELS
from models.lead import Lead
from services.ai.client_factory import AIClientService
from services.ai.parsing import extract_json_object
from services.ai.schemas import AIAnalysis

logger = get_logger(__name__)

PRIMARY_LABEL = "Claude (Primary)"
SECONDARY_LABEL = "ChatGPT (Secondary)"

ANALYST_SYSTEM_PROMPT = (
    "You are a business intelligence assistant that verifies and enriches business lead "
    "information. Provide accurate, researched data in JSON format."
)


def build_analysis_prompt(lead: Lead) -> str:
    labels = ", ".join(AI_INDUSTRY_LABELS[:-1]) + f", or {AI_INDUSTRY_LABELS[-1]}"
    return f"""Your PRIMARY GOAL is to find the OWNER NAME for this business. Use every source available to you to identify the owner or founder.

Business Information:
Company: {lead.company_name}
Phone: {lead.phone}
Address: {lead.address}
Website: {lead.website or 'Unknown'}
Current Industry: {lead.industry or 'Unknown'}

PRIORITY TASK - Find Owner Name:
- Look for the owner, founder, CEO or proprietor
- Check the business website "About" page
- Look for "Founded by", "Owner:" or "Proprietor:" mentions
- Check social media profiles (LinkedIn, Facebook business pages)
- Review business registration records and news articles
- If found, provide the FULL NAME (first and last)

Also provide:
1. Owner/Founder Full Name (HIGHEST PRIORITY)
2. Industry classification - USE ONLY one of: {labels}
3. Estimated employee count range
4. Estimated annual revenue range
5. Key business details
6. Confidence score (0-100)

Return as JSON with keys: ownerName, industry, employeeCount, revenue, businessDetails, confidence
If the owner name is found, include it even if confidence is low. If it is not found, set it to "N/A"."""


class AIAnalyzer:
    """
    One AI verification adapter.

    Structurally identical for both providers; only the endpoint, model and
    label differ. ``analyze`` never raises.
    """

    def __init__(
        self,
        name: str,
        label: str,
        api_key: SecretStr | str | None,
        model: str,
        base_url: str | None = None,
        max_tokens: int = 500,
        temperature: float | None = None,
        system_prompt: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        self.name = name
        self.label = label
        self.api_key = (api_key or "").strip()
        self.model = model
        self.base_url = base_url
        self.max_tokens = max_tokens
        self.temperature = temperature if temperature is not None else config.temperature
        self.system_prompt = system_prompt
        self._client = client

    @property
    def configured(self) -> bool:
        return is_configured(self.api_key)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AIClientService.get_client(self.api_key, base_url=self.base_url)
        return self._client

    @with_retry("AI completion")
    async def _complete(self, prompt: str) -> str:
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})

        with handle_openai_errors(self.name, provider=self.name):
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        return completion.choices[0].message.content or ""

    async def analyze(self, lead: Lead) -> AIAnalysis | None:
        if not self.configured:
            logger.info(f"[{self.name}] API key not configured, skipping AI verification")
            return None

        logger.info(f"[{self.name}] Analyzing: {lead.company_name}")
        try:
            raw = await self._complete(build_analysis_prompt(lead))
            analysis = AIAnalysis.model_validate(extract_json_object(raw))
        except Exception as e:
            logger.error(f"[{self.name}] Verification failed: {type(e).__name__}: {e}")
            return None

        analysis.source = self.name
        logger.info(f"[{self.name}] Owner: {analysis.owner_name}, confidence: {analysis.confidence}")
        return analysis


def primary_analyzer(client: AsyncOpenAI | None = None) -> AIAnalyzer:
    return AIAnalyzer(
        name="Claude",
        label=PRIMARY_LABEL,
        api_key=config.anthropic_api_key,
        model=config.primary_ai_model,
        base_url=config.primary_ai_base_url,
        max_tokens=config.primary_ai_max_tokens,
        client=client,
    )


def secondary_analyzer(client: AsyncOpenAI | None = None) -> AIAnalyzer:
    return AIAnalyzer(
        name="ChatGPT",
        label=SECONDARY_LABEL,
        api_key=config.openai_api_key,
        model=config.secondary_ai_model,
        base_url=config.secondary_ai_base_url,
        max_tokens=config.secondary_ai_max_tokens,
        system_prompt=ANALYST_SYSTEM_PROMPT,
        client=client,
    )
