"""Application configuration."""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    PORT: int = 3004
    CORS_ORIGINS: List[str] = ["*"]

    # Database
    DATABASE_URL: str = "sqlite:///./data/leads-gen.sqlite"

    # OpenAI (optional - heuristic fallbacks are used when unset)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4.1-mini"
    OPENAI_IMAGE_MODEL: str = "gpt-image-1"

    # Lead Desk CRM
    LEADDESK_API_BASE: str = "http://127.0.0.1:3003"
    LEADDESK_DEFAULT_OWNER: str = "Zax Kalyan"

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 15.0
    DOMAIN_EXCERPT_MAX_LENGTH: int = 8000

    # Branding used in AI prompts
    COMPANY_NAME: str = "Kalyan AI"
    COMPANY_PITCH: str = (
        "bespoke hosted AI software to automate processes and streamline operations, "
        "saving time and money, improving customer experience and increasing profit "
        "without taking on new staff"
    )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
