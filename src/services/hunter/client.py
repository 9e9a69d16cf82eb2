import httpx
from pydantic import SecretStr

from common.config import config
from common.logging import get_logger
from enrichments.normalize import extract_domain
from models.lead import Lead, has_value
from services.base_client import ProviderClient
from services.hunter.schemas import DomainEmails, EmailVerification, Mailbox

logger = get_logger(__name__)

DOMAIN_SEARCH_LIMIT = 10


class HunterClient(ProviderClient):
    """Email finder (domain search) and verifier."""

    provider = "Hunter.io"

    def __init__(
        self,
        api_key: SecretStr | str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            api_key=api_key if api_key is not None else config.hunter_api_key,
            base_url=base_url or config.hunter_base_url,
            transport=transport,
        )

    async def find_emails(self, lead: Lead) -> DomainEmails | None:
        if not self.configured:
            logger.info(f"[{self.provider}] API key not configured, skipping email search")
            return None

        domain = extract_domain(lead.website)
        if not domain:
            logger.info(f"[{self.provider}] No domain available for {lead.company_name}")
            return None

        logger.info(f"[{self.provider}] Domain search: {domain}")
        try:
            data = await self._get_request(
                "domain-search",
                {"domain": domain, "api_key": self.api_key, "limit": DOMAIN_SEARCH_LIMIT},
            )
        except Exception as e:
            logger.error(f"[{self.provider}] Email search failed: {type(e).__name__}: {e}")
            return None

        payload = (data or {}).get("data") or {}
        mailboxes = [Mailbox.from_dict(item) for item in payload.get("emails") or [] if item.get("value")]
        if not mailboxes:
            logger.info(f"[{self.provider}] No emails found for {domain}")
            return None

        primary = next((m for m in mailboxes if m.is_decision_maker()), mailboxes[0])
        logger.info(f"[{self.provider}] Found {len(mailboxes)} email(s), primary: {primary.email}")

        return DomainEmails(
            domain=domain,
            organization_name=payload.get("organization") or lead.company_name,
            emails=mailboxes,
            primary_email=primary.email,
            owner_name=primary.full_name,
            owner_position=primary.position,
            confidence=primary.confidence or 0,
        )

    async def verify_email(self, email: str | None) -> EmailVerification | None:
        if not self.configured or not has_value(email):
            return None

        logger.info(f"[{self.provider}] Verifying email: {email}")
        try:
            data = await self._get_request("email-verifier", {"email": email, "api_key": self.api_key})
        except Exception as e:
            logger.error(f"[{self.provider}] Email verification failed: {type(e).__name__}: {e}")
            return None

        payload = (data or {}).get("data") or {}
        return EmailVerification(
            email=payload.get("email"),
            status=payload.get("status"),
            score=payload.get("score"),
            result=payload.get("result"),
            disposable=payload.get("disposable"),
            webmail=payload.get("webmail"),
            mx_records=payload.get("mx_records"),
            smtp_check=payload.get("smtp_check"),
            accept_all=payload.get("accept_all"),
        )
