"""
Application configuration management
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # GitHub API Configuration
    github_token: Optional[str] = Field(None, alias="GITHUB_TOKEN")
    github_api_base_url: str = Field("https://api.github.com", alias="GITHUB_API_BASE_URL")
    github_webhook_secret: Optional[str] = Field(None, alias="GITHUB_WEBHOOK_SECRET")
    github_request_timeout: float = Field(10.0, alias="GITHUB_REQUEST_TIMEOUT")

    # Labeler Configuration
    labeler_config_path: str = Field(".github/labeler.yml", alias="LABELER_CONFIG_PATH")

    # Application Configuration
    app_name: str = Field("PR Labeler", alias="APP_NAME")
    app_version: str = Field("1.0.0", alias="APP_VERSION")
    debug: bool = Field(False, alias="DEBUG")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8000, alias="PORT")

    # API Configuration
    api_prefix: str = "/api/v1"

    # Logging Configuration
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s", alias="LOG_FORMAT")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def get_github_headers(token: Optional[str] = None) -> dict:
    """Get GitHub API headers, with authentication when a token is available"""
    settings = get_settings()
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": f"{settings.app_name}/{settings.app_version}",
    }
    token = token or settings.github_token
    if token:
        headers["Authorization"] = f"token {token}"
    return headers
