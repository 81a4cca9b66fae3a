"""OTP Guard — configuration loaded from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Redis (expiring key-value store) ──────────────────
    redis_url: str = "redis://localhost:6379/0"

    # ── SMTP ──────────────────────────────────────────────
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_start_tls: bool = True
    email_from: str = "no-reply@example.com"

    # ── App ───────────────────────────────────────────────
    app_name: str = "OTP Guard"
    debug: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host)


# Singleton settings instance
settings = Settings()
