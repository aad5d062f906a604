from pydantic_settings import BaseSettings, SettingsConfigDict
from decimal import Decimal
from functools import lru_cache
import os


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "Banking Ledger"
    app_version: str = "1.0.0"

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Business rules
    pay_in_limit: Decimal = Decimal("4000")
    low_funds_mark: Decimal = Decimal("500")
    pay_in_headroom_mark: Decimal = Decimal("500")

    # Feature flags
    enable_detailed_logging: bool = True


# Environment-specific configurations
class DevelopmentSettings(Settings):
    log_level: str = "DEBUG"
    log_format: str = "text"
    enable_detailed_logging: bool = True


class ProductionSettings(Settings):
    log_level: str = "INFO"
    enable_detailed_logging: bool = False


class TestingSettings(Settings):
    log_level: str = "WARNING"  # Reduce noise in tests
    log_format: str = "text"


def get_settings_for_environment(env: str = "development") -> Settings:
    """Get settings for specific environment."""
    settings_map = {
        "development": DevelopmentSettings,
        "production": ProductionSettings,
        "testing": TestingSettings,
    }

    settings_class = settings_map.get(env.lower(), Settings)
    return settings_class()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings for the environment named by LEDGER_ENV."""
    return get_settings_for_environment(os.getenv("LEDGER_ENV", "development"))
