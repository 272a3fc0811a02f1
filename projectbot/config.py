# projectbot/config.py
"""Application configuration using pydantic-settings.

Provides a centralized Settings class for all environment variables.
Missing Slack or Airtable credentials are reported, never fatal, so the
health endpoints keep answering while the integration is misconfigured.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Environment variables the bot needs to talk to Slack and Airtable
REQUIRED_ENV_VARS: tuple[str, ...] = (
    "SLACK_BOT_TOKEN",
    "SLACK_SIGNING_SECRET",
    "AIRTABLE_BASE_ID",
    "AIRTABLE_API_KEY",
    "AIRTABLE_PROJECTS_TABLE_ID",
    "AIRTABLE_EMPLOYEES_TABLE_ID",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from .env file and environment variables.
    Environment variables take precedence over .env file values.
    """

    # Slack Integration
    slack_bot_token: str = ""
    slack_signing_secret: str = ""

    # Airtable
    airtable_api_key: str = ""
    airtable_base_id: str = ""
    airtable_projects_table_id: str = ""
    airtable_employees_table_id: str = ""
    airtable_api_url: str = "https://api.airtable.com/v0"

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging / Observability
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"
    logfire_token: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        case_sensitive=False,  # Allow case-insensitive env var names
    )

    def missing_required(self) -> list[str]:
        """List required environment variables that are not set.

        Returns:
            Upper-case variable names, in declaration order.
        """
        return [name for name in REQUIRED_ENV_VARS if not getattr(self, name.lower())]


# Singleton instance - import this in your code
settings = Settings()
