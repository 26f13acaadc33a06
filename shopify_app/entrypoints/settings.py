from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="SHOPIFY_"
    )

    API_KEY: str = ""
    API_SECRET: str = ""
    API_VERSION: str | None = None  # e.g. "2025-01"; unversioned endpoint when unset

    API_RATE_LIMITING_ENABLED: bool = False
    API_RATE_LIMIT_CYCLE: int = 500  # ms
    API_RATE_LIMIT_CYCLE_BUFFER: int = 100  # ms

    MYSHOPIFY_DOMAIN: str = "myshopify.com"
    DEBUG: bool = False

    # Used by the demo entrypoint only
    SHOP_DOMAIN: str = ""
    ACCESS_TOKEN: str = ""
