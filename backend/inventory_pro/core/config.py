from pydantic_settings import BaseSettings
from typing import List, Literal


class Settings(BaseSettings):
    env: str = "dev"
    secret_key: str = "change_me_super_secret_signing_key"
    jwt_algorithm: str = "HS256"
    # Tokens are issued once at login/registration; there is no refresh flow.
    access_token_expire_minutes: int = 60 * 24 * 7
    database_url: str = "postgresql+psycopg2://inventory:inventory@db:5432/inventory_pro"
    backend_cors_origins: str = "http://localhost:3000,http://localhost:8080,http://127.0.0.1:3000"
    log_level: str = "INFO"

    bcrypt_rounds: int = 12
    min_password_length: int = 6
    temporary_password_length: int = 10
    expose_temporary_password: bool = True

    # "global": a barcode may exist once in the whole store.
    # "tenant": a barcode may exist once per tenant.
    barcode_scope: Literal["global", "tenant"] = "global"
    record_zero_delta_adjustments: bool = False
    activity_feed_limit: int = 100
    low_stock_threshold: int = 5

    default_subscription_tier: str = "trial"
    default_max_users: int = 50

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        origins = self.backend_cors_origins
        return [origin.strip() for origin in origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
