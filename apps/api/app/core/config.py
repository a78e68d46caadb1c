from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "dev"
    auth_mode: str = "forwardauth"  # forwardauth | dev
    internal_admin_token: str = "change-me"
    admin_emails: str = ""  # comma-separated bootstrap admins
    root_path: str = ""
    log_level: str = "INFO"

    postgres_db: str = "family_hub"
    postgres_user: str = "family_hub"
    postgres_password: str = "family_hub_pass"
    postgres_host: str = "db"
    postgres_port: int = 5432
    database_url_override: str | None = Field(
        default=None, validation_alias=AliasChoices("DATABASE_URL", "DATABASE_URL_OVERRIDE")
    )
    redis_host: str = "redis"
    redis_port: int = 6379

    activity_debounce_seconds: int = 30
    activity_gap_seconds: int = 15 * 60
    chat_ttl_days: int = 7
    chat_page_size: int = 100
    notification_page_size: int = 50
    upcoming_window_days: int = 30
    gallery_batch_limit: int = 10
    gallery_monthly_limit: int = 30

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def admin_email_set(self) -> set[str]:
        return {item.strip().lower() for item in self.admin_emails.split(",") if item.strip()}


settings = Settings()
