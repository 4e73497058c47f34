"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "text")


class TellerConfig(BaseSettings):
    """Teller console bank configuration"""

    # Store configuration
    store_path: str = "bank_accounts.txt"
    first_account_number: int = Field(default=1000, ge=1000)

    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr

    class Config:
        env_prefix = "TELLER_"
        env_file = ".env"
        case_sensitive = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        fmt = v.lower()
        if fmt not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return fmt


# Global configuration instance
config = TellerConfig()


def get_config() -> TellerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> TellerConfig:
    """Reload configuration from environment"""
    global config
    config = TellerConfig()
    return config
