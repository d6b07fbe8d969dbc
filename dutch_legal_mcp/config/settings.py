"""
Configuration settings for the Dutch Legal MCP service
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Service
    service_name: str = "dutch-legal-mcp"
    service_version: str = "2.1.0"
    log_level: str = "INFO"

    # Rechtspraak open data
    dutch_legal_api_base_url: str = Field(
        default="https://data.rechtspraak.nl/uitspraken",
        description="Base URL of the court data API (search lives under /zoeken, details under /content)",
    )
    dutch_legal_view_base_url: str = Field(
        default="https://uitspraken.rechtspraak.nl",
        description="Base URL used to build human-readable decision links",
    )
    user_agent: str = "Dutch-Legal-MCP/2.1 (+https://github.com/mediazone/dutch-legal-mcp)"

    # Transport
    http_timeout: float = 10.0  # seconds, per request
    cache_ttl: int = 300  # 5 minutes
    retry_max_retries: int = 3
    retry_base_delay: float = 1.0
    retry_max_delay: float = 5.0
    retry_multiplier: float = 2.0

    # Search
    search_timeout: float = 60.0  # overall budget for one search call
    default_max_results: int = 10
    max_search_results: int = 50
    registry_warn_size: int = 32  # distinct base addresses before warning

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False


# Global settings instance
settings = Settings()
