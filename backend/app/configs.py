"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the app. Every value
has a default so the service starts without a ``.env`` file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # API parameters
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ROOT_PATH_BACKEND: str = ""
    ALLOWED_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Comparison tuning
    DEFAULT_METHOD: str = "axios"
    MAX_CARDS_PER_PROFILE: int = 15
    TOP_DEALS_LIMIT: int = 10
    BATCH_MAX_QUERIES: int = 5
    BATCH_DELAY_SECONDS: float = 1.0

    # Static fetch
    STATIC_TIMEOUT_SECONDS: float = 15
    STATIC_MAX_REDIRECTS: int = 5

    # Rendered fetch
    NAVIGATION_TIMEOUT_MS: int = 45_000
    SETTLE_DELAY_MS: int = 5_000
    BROWSER_HEADLESS: bool = True

    model_config = SettingsConfigDict(env_file=(".env", "../../.env"), extra="ignore")


settings = Settings()
