import httpx
from pydantic import SecretStr

from common.config import config
from common.logging import get_logger
from services.base_client import ProviderClient
from services.people_data_labs.schemas import DECISION_MAKER_ROLES, OwnerRecord

logger = get_logger(__name__)

MAX_CANDIDATES = 10


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def build_owner_query(
    company_name: str,
    city: str | None = None,
    state: str | None = None,
    country: str | None = None,
) -> str:
    """SQL person query for a company's decision makers, most recent job start first."""
    clauses = [f"job_company_name={_quote(company_name)}"]
    if city:
        clauses.append(f"location_locality={_quote(city)}")
    if state:
        clauses.append(f"location_region={_quote(state)}")
    if country:
        clauses.append(f"location_country={_quote(country)}")

    roles = ", ".join(_quote(role) for role in DECISION_MAKER_ROLES)
    clauses.append(f"job_title_role IN ({roles})")

    return f"SELECT * FROM person WHERE {' AND '.join(clauses)} ORDER BY job_start_date DESC LIMIT {MAX_CANDIDATES}"


class PeopleDataLabsClient(ProviderClient):
    provider = "People Data Labs"

    def __init__(
        self,
        api_key: SecretStr | str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            api_key=api_key if api_key is not None else config.pdl_api_key,
            base_url=base_url or config.pdl_base_url,
            transport=transport,
        )

    def default_headers(self) -> dict[str, str]:
        return {**super().default_headers(), "X-Api-Key": self.api_key}

    async def find_owner(
        self,
        company_name: str | None,
        city: str | None = None,
        state: str | None = None,
        country: str | None = None,
    ) -> OwnerRecord | None:
        """
        Find the owner/decision maker of a company.

        Returns None when the key is missing, nothing matches, or the request fails.
        """
        if not self.configured:
            logger.info(f"[{self.provider}] API key not configured, skipping owner search")
            return None
        if not company_name or not company_name.strip():
            return None

        query = build_owner_query(company_name.strip(), city, state, country)
        logger.info(f"[{self.provider}] Searching for owner of: {company_name}{f' in {city}' if city else ''}")
        logger.debug(f"[{self.provider}] SQL: {query}")

        try:
            data = await self._get_request(
                "person/search",
                {"sql": query, "size": MAX_CANDIDATES, "dataset": "all"},
            )
        except Exception as e:
            logger.error(f"[{self.provider}] Owner search failed: {type(e).__name__}: {e}")
            return None

        people = data.get("data") if isinstance(data, dict) else None
        if not people:
            logger.info(f"[{self.provider}] No owners found for {company_name}")
            return None

        owner = OwnerRecord.from_results(people)
        logger.info(f"[{self.provider}] Found primary owner: {owner.owner_name} ({owner.title}), {len(people)} candidates")
        return owner
