from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────
    database_hostname: str
    database_port: str = "5432"
    database_password: str
    database_name: str
    database_username: str
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_echo: bool = False

    # ── JWT ───────────────────────────────────────────────────
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7

    # ── OTP ───────────────────────────────────────────────────
    otp_expiry_minutes: int = 5

    # ── SMTP ──────────────────────────────────────────────────
    mail_username: str
    mail_password: str
    mail_from: str
    mail_server: str = "smtp.gmail.com"
    mail_port: int = 587
    # fastapi-mail builds the message but never opens an SMTP connection
    mail_suppress_send: bool = False

    # ── App ───────────────────────────────────────────────────
    app_name: str = "Servease"
    api_prefix: str = "/v1"
    cors_origins: str = "*"
    rate_limit_enabled: bool = True
    log_level: str = "INFO"

    # ── Seeding (python -m app.seed) ──────────────────────────
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    @property
    def cors_origins_list(self) -> list[str]:
        """Split comma-separated origins into a list, stripping whitespace."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def database_url(self) -> str:
        return (
            f"postgresql://{self.database_username}:{self.database_password}"
            f"@{self.database_hostname}:{self.database_port}/{self.database_name}"
        )

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings loader: reads .env once and reuses.
    Use this everywhere instead of instantiating Settings() directly.
    """
    return Settings()


settings = get_settings()
