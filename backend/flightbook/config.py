from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

DEFAULT_JWT_SECRET = "change-me-in-production"

class Settings(BaseSettings):
    # App Settings
    app_name: str = "Flightbook Booking API"
    env: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./flightbook.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Auth
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # CORS
    cors_origins: str = ""  # Comma-separated production origins

    # Flight times are stored in UTC and searched in this fixed local offset
    local_utc_offset_hours: int = 7

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @model_validator(mode="after")
    def require_real_secret_in_production(self):
        if self.env == "production" and self.jwt_secret_key == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set when ENV=production")
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()
