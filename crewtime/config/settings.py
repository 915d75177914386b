"""
Configuration management for the report engine.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CrewTimeConfig(BaseSettings):
    """Configuration settings for the report engine."""

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Report Rules
    overtime_threshold_hours: float = Field(
        default=40.0, gt=0, alias="OVERTIME_THRESHOLD_HOURS"
    )
    monthly_overtime_policy: str = Field(
        default="month_aggregate", alias="MONTHLY_OVERTIME_POLICY"
    )
    invalid_entry_policy: str = Field(default="skip", alias="INVALID_ENTRY_POLICY")

    # Time Entry Sources
    entries_file: Optional[str] = Field(default=None, alias="ENTRIES_FILE")
    crew_api_base_url: Optional[str] = Field(default=None, alias="CREW_API_BASE_URL")
    crew_api_token: Optional[str] = Field(default=None, alias="CREW_API_TOKEN")
    request_timeout: float = Field(default=30.0, gt=0, alias="REQUEST_TIMEOUT")

    # Retry Configuration
    max_retries: int = Field(default=3, ge=0, alias="MAX_RETRIES")
    retry_delay: float = Field(default=1.0, ge=0, alias="RETRY_DELAY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("monthly_overtime_policy")
    @classmethod
    def validate_monthly_overtime_policy(cls, v):
        """Ensure monthly overtime policy is known."""
        valid_policies = ["month_aggregate", "sum_of_periods"]
        if v.lower() not in valid_policies:
            raise ValueError(f"Monthly overtime policy must be one of: {valid_policies}")
        return v.lower()

    @field_validator("invalid_entry_policy")
    @classmethod
    def validate_invalid_entry_policy(cls, v):
        """Ensure invalid entry policy is known."""
        valid_policies = ["skip", "fail"]
        if v.lower() not in valid_policies:
            raise ValueError(f"Invalid entry policy must be one of: {valid_policies}")
        return v.lower()

    @field_validator("crew_api_base_url")
    @classmethod
    def validate_crew_api_base_url(cls, v):
        """Ensure the API base URL is an http(s) URL without a trailing slash."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("Crew API base URL must start with http:// or https://")
        return v.rstrip("/")

    def get_api_headers(self) -> dict:
        """Get HTTP headers for the crew API."""
        headers = {"Accept": "application/json"}
        if self.crew_api_token:
            headers["Authorization"] = f"Bearer {self.crew_api_token}"
        return headers


def load_config(env_file: Optional[str] = None) -> CrewTimeConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return CrewTimeConfig()


# Global configuration instance
_config: Optional[CrewTimeConfig] = None


def get_config() -> CrewTimeConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> CrewTimeConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
