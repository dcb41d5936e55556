"""Application settings loaded from the environment."""
from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.linear.app/graphql"


class ConfigurationError(Exception):
    """Raised when the process environment cannot produce valid settings."""


class Settings(BaseSettings):
    """Linear MCP server settings.

    Attributes:
        linear_api_key: Personal API key or OAuth token sent as the Authorization header
        linear_api_url: GraphQL endpoint
        request_timeout: Per-request timeout in seconds
        log_level: Root log level for the stderr handler
    """

    model_config = SettingsConfigDict(extra="ignore")

    linear_api_key: str = Field(..., min_length=1, validation_alias="LINEAR_API_KEY")
    linear_api_url: str = Field(DEFAULT_API_URL, validation_alias="LINEAR_API_URL")
    request_timeout: float = Field(30.0, gt=0, validation_alias="LINEAR_REQUEST_TIMEOUT")
    log_level: str = Field("INFO", validation_alias="LINEAR_MCP_LOG_LEVEL")


def load_settings() -> Settings:
    """Build settings from the environment.

    Raises:
        ConfigurationError: If LINEAR_API_KEY is missing or a value is invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        missing = [err for err in e.errors() if err["loc"] == ("LINEAR_API_KEY",)]
        if missing:
            raise ConfigurationError("LINEAR_API_KEY environment variable is required") from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return load_settings()
