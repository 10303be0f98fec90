from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from models.errors import ConfigError


class Settings(BaseSettings):
    # Shopify app credentials
    shopify_api_key: str = Field(..., min_length=1)
    shopify_api_secret: str = Field(..., min_length=1)

    # Shop hostname, e.g. "example.myshopify.com" (scheme is tolerated)
    shopify_shop: str = Field(..., min_length=1)
    shopify_access_token: str = Field(..., min_length=1)

    # Comma-separated, e.g. "read_orders,write_orders,write_fulfillments"
    shopify_scopes: str = ""

    # Pinned Admin API version. orderClose is used in place of the removed
    # archive mutations.
    shopify_api_version: str = "2025-01"
    shopify_request_timeout: float = Field(30.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def scopes(self) -> list[str]:
        return [s.strip() for s in self.shopify_scopes.split(",") if s.strip()]

    @property
    def shop_host(self) -> str:
        host = self.shopify_shop.strip()
        for prefix in ("https://", "http://"):
            if host.startswith(prefix):
                host = host[len(prefix):]
        return host.rstrip("/")

    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_host}/admin/api/{self.shopify_api_version}/graphql.json"


REQUIRED_ENV_VARS = [
    "SHOPIFY_API_KEY",
    "SHOPIFY_API_SECRET",
    "SHOPIFY_SHOP",
    "SHOPIFY_ACCESS_TOKEN",
]


def load_settings(**overrides) -> Settings:
    """
    Build the process settings once.

    Raises ConfigError naming every missing (or empty) required variable, and
    for any other invalid value.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        missing = []
        invalid = []
        for err in exc.errors():
            name = str(err["loc"][0]).upper() if err["loc"] else "?"
            if err["type"] in ("missing", "string_too_short"):
                missing.append(name)
            else:
                invalid.append(f"{name} ({err['msg']})")
        parts = []
        if missing:
            parts.append(f"Missing required environment variables: {', '.join(missing)}")
        if invalid:
            parts.append(f"Invalid environment variables: {', '.join(invalid)}")
        raise ConfigError("; ".join(parts)) from exc
