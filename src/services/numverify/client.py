import httpx
from pydantic import SecretStr

from common.config import config
from common.logging import get_logger
from enrichments.normalize import strip_phone_for_lookup
from models.lead import NOT_AVAILABLE, PhoneValidation, has_value
from services.base_client import ProviderClient

logger = get_logger(__name__)


class NumverifyClient(ProviderClient):
    provider = "Numverify"

    def __init__(
        self,
        api_key: SecretStr | str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            api_key=api_key if api_key is not None else config.numverify_api_key,
            base_url=base_url or config.numverify_base_url,
            transport=transport,
        )

    async def validate(self, phone: str | None) -> PhoneValidation | None:
        """
        Validate a phone number.

        A number the provider rejects still yields ``PhoneValidation(valid=False)``;
        None means the lookup itself did not happen (no key, no number, request failed).
        """
        if not self.configured:
            logger.info(f"[{self.provider}] API key not configured, skipping phone validation")
            return None
        if not has_value(phone):
            return None

        number = strip_phone_for_lookup(phone)
        logger.info(f"[{self.provider}] Validating phone: {number}")
        try:
            data = await self._get_request(
                "validate",
                {"access_key": self.api_key, "number": number, "format": 1},
            )
        except Exception as e:
            logger.error(f"[{self.provider}] Validation failed: {type(e).__name__}: {e}")
            return None

        if isinstance(data, dict) and data.get("error"):
            # Provider errors come back as HTTP 200 with an error object
            logger.error(f"[{self.provider}] Validation failed: {data['error']}")
            return None

        if not isinstance(data, dict) or not data.get("valid"):
            logger.info(f"[{self.provider}] Phone number is invalid: {phone}")
            return PhoneValidation(valid=False, number=phone, international_format=phone)

        logger.info(f"[{self.provider}] Phone valid: {data.get('international_format')}")
        return PhoneValidation(
            valid=True,
            number=data.get("number"),
            local_format=data.get("local_format"),
            international_format=data.get("international_format"),
            country_code=data.get("country_code"),
            country_name=data.get("country_name"),
            location=data.get("location") or NOT_AVAILABLE,
            carrier=data.get("carrier") or NOT_AVAILABLE,
            line_type=data.get("line_type") or NOT_AVAILABLE,
        )
