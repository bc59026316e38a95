from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # App
    app_name: str = "ERP Forms"
    debug: bool = False

    # Database (one URL per tenant process)
    database_url: str = "sqlite:///./erpforms.db"
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"
    log_dir: str = "/var/log/erpforms"
    log_to_file: bool = False

    # Security
    secret_key: str = "dev-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Approval
    super_admin_role: str = "super admin"
    form_number_increment_digits: int = 3
    tax_rate: float = 0.1

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ERPFORMS_",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
