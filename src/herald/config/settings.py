"""Application settings and configuration management using Pydantic."""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Main application settings combining all configuration sections."""

    # Environment and deployment
    environment: str = "development"
    debug: bool = False

    # API settings
    endpoint_host: str = "0.0.0.0"
    endpoint_port: int = 8000
    endpoint_auth_token: Optional[str] = None
    api_reload: bool = False
    api_log_level: str = "INFO"

    # Database settings
    database_url: Optional[str] = None
    data_directory: str = "data"
    database_echo_sql: bool = False
    database_pool_pre_ping: bool = True
    database_pool_recycle: int = 3600

    # Email provider (SendGrid)
    sendgrid_api_key: Optional[str] = None
    sendgrid_from_email: str = "alerts@herald.local"

    # SMS provider (Twilio)
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_phone_number: Optional[str] = None

    # Push provider (Expo)
    expo_push_enabled: bool = False
    expo_access_token: Optional[str] = None

    # Delivery settings
    channel_send_timeout_seconds: float = 5.0
    simulation_delay_seconds: float = 0.1
    alert_cancel_window_minutes: int = 5
    supervisor_roles: List[str] = ["admin", "operator"]

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "structured"  # 'structured' or 'plain'
    log_file_enabled: bool = True
    log_file_path: str = "data/herald.log"
    log_max_file_size: str = "10MB"
    log_backup_count: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        valid_environments = ["development", "testing", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("endpoint_port")
    @classmethod
    def validate_port(cls, v):
        """Validate port number is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("channel_send_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v):
        """Validate per-channel send timeout."""
        if v <= 0 or v > 60:
            raise ValueError("Channel send timeout must be between 0 and 60 seconds")
        return v

    @field_validator("simulation_delay_seconds")
    @classmethod
    def validate_simulation_delay(cls, v):
        if v < 0 or v > 5:
            raise ValueError("Simulation delay must be between 0 and 5 seconds")
        return v

    @field_validator("alert_cancel_window_minutes")
    @classmethod
    def validate_cancel_window(cls, v):
        if v < 0:
            raise ValueError("Cancel window cannot be negative")
        return v

    @field_validator("supervisor_roles")
    @classmethod
    def validate_supervisor_roles(cls, v):
        """Roles told about acknowledgments; blanks are dropped."""
        roles = [role.strip() for role in v if role and role.strip()]
        if not roles:
            raise ValueError("At least one supervisor role is required")
        return roles

    @field_validator("log_level", "api_log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        valid_formats = ["structured", "plain"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    def get_database_url(self) -> str:
        """Get the complete database URL."""
        if self.database_url:
            return self.database_url

        # Default to SQLite in data directory
        db_dir = Path(self.data_directory)
        db_dir.mkdir(exist_ok=True)
        db_path = db_dir / "herald.db"
        return f"sqlite:///{db_path}"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()


def get_required_env_vars() -> list[str]:
    """
    Get list of required environment variables.

    Provider credentials are optional: channels without them run in
    simulation mode.
    """
    return ["ENDPOINT_AUTH_TOKEN"]

