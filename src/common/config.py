from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_MARKERS = ("your_", "api_key_here")


class Config(BaseSettings):
    # Maps / places search (discovery)
    google_places_api_key: SecretStr = SecretStr("")
    google_places_base_url: str = "https://maps.googleapis.com/maps/api"

    # Apollo (organization + people search, person match)
    apollo_api_key: SecretStr = SecretStr("")
    apollo_base_url: str = "https://api.apollo.io/api/v1"

    # People Data Labs (owner search)
    pdl_api_key: SecretStr = SecretStr("")
    pdl_base_url: str = "https://api.peopledatalabs.com/v5"

    # Hunter (email finder / verifier)
    hunter_api_key: SecretStr = SecretStr("")
    hunter_base_url: str = "https://api.hunter.io/v2"

    # Numverify (phone validation)
    numverify_api_key: SecretStr = SecretStr("")
    numverify_base_url: str = "http://apilayer.net/api"

    # Yelp Fusion (review-site matching)
    yelp_api_key: SecretStr = SecretStr("")
    yelp_base_url: str = "https://api.yelp.com/v3"

    # Nominatim (forward geocoding)
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "LeadScraperApp/1.0"

    # AI verification (primary = Claude through the OpenAI-compatible endpoint, secondary = ChatGPT)
    anthropic_api_key: SecretStr = SecretStr("")
    primary_ai_base_url: str = "https://api.anthropic.com/v1/"
    primary_ai_model: str = "claude-sonnet-4-20250514"
    primary_ai_max_tokens: int = 1024

    openai_api_key: SecretStr = SecretStr("")
    secondary_ai_base_url: str | None = None
    secondary_ai_model: str = "gpt-4o"
    secondary_ai_max_tokens: int = 500

    # LLM settings
    temperature: float = 0.7
    ai_parallel: bool = False

    # Provider pacing (seconds)
    page_token_delay: float = 2.0
    detail_request_delay: float = 0.1
    batch_delay: float = 0.5

    # HTTP / retry
    http_timeout: float = 30.0
    adapter_max_attempts: int = 1
    adapter_retry_delay: float = 1.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


def is_configured(secret: SecretStr | str | None) -> bool:
    """True when a credential is present and is not an obvious placeholder."""
    if secret is None:
        return False
    value = secret.get_secret_value() if isinstance(secret, SecretStr) else secret
    value = value.strip()
    if not value:
        return False
    return not any(marker in value.lower() for marker in PLACEHOLDER_MARKERS)


config = Config()
