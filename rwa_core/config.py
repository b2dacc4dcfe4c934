"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class RwaConfig(BaseSettings):
    """RWA fractional ownership core configuration"""

    # Storage configuration
    database_url: str = "sqlite:///rwa.db"  # or memory://

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    api_workers: int = 1

    # Security configuration
    auth_enabled: bool = True
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiry_hours: int = 24
    authority_secret: str = "change-me-in-production"  # Seeds derived mint authorities

    # Logging configuration
    log_level: str = "INFO"
    log_file: Optional[str] = None  # If None, logs to stdout

    # Unit and settlement configuration
    unit_decimals: int = 6
    settlement_symbol: str = "USDC"
    settlement_decimals: int = 6
    treasury_identity: str = "treasury"

    # Purchase pricing
    slippage_floor_percent: int = 99  # Minimum payment as % of nominal price

    # Feature flags
    enable_audit_logging: bool = True

    class Config:
        env_prefix = "RWA_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = RwaConfig()


def get_config() -> RwaConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> RwaConfig:
    """Reload configuration from environment"""
    global config
    config = RwaConfig()
    return config
