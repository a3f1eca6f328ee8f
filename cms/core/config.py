from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration.

    Values are loaded from environment variables (prefix ``CMS_``) and an optional .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="CMS_", case_sensitive=False)

    # App
    app_name: str = "Customer Management System"
    environment: str = "dev"  # dev|staging|prod
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./cms.db"
    sqlite_busy_timeout_seconds: int = 30
    auto_init_db: bool = True

    # Security / JWT
    secret_key: str = "CHANGE_ME"  # change in prod
    access_token_exp_minutes: int = 60 * 24
    jwt_algorithm: str = "HS256"
    session_cookie_name: str = "auth-token"

    # Password hashing
    bcrypt_rounds: int = 10
    min_password_length: int = 6

    # Record codes
    code_retry_attempts: int = 3

    # Bootstrap admin, created once when the store is first initialized
    bootstrap_employee_code: str = "ADMIN001"
    bootstrap_password: str = "admin123"
    bootstrap_email: str = "admin@cms.com"
    bootstrap_firstname: str = "Admin"
    bootstrap_lastname: str = "User"
    bootstrap_mobile: str = "1234567890"
    bootstrap_date_of_birth: str = "1990-01-01"

    @property
    def cookie_secure(self) -> bool:
        return self.environment != "dev"


@lru_cache
def get_settings() -> Settings:
    return Settings()
