from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key; requests run with the caller's JWT so RLS applies

    # App
    app_name: str = "wctips"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    search_rate_limit: str = "30/minute"
    redeem_rate_limit: str = "20/minute"

    # Used for join links when the request carries no host headers
    public_host: str = "localhost:3000"

    # Invites
    invite_token_bytes: int = 24
    invite_token_attempts: int = 3
    invite_claim_attempts: int = 5

    # User search
    user_search_min_length: int = 2
    user_search_limit: int = 10

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
