"""
Configuration and settings
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings

DEFAULT_ADMIN_PASSWORD = "weathernow"


class Settings(BaseSettings):
    """Application settings"""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_level: str = "INFO"

    # Admin secret for all mutating announcement calls.
    # The default exists for local demos only - MUST be overridden in production!
    admin_password: str = DEFAULT_ADMIN_PASSWORD

    # CORS
    cors_origins: str = "*"  # Comma-separated list or "*" for kiosks on any origin

    # REST API rate limiting (slowapi)
    api_rate_limit_enabled: bool = True
    api_rate_limit_default: str = "120/minute"
    api_rate_limit_poll: str = "600/minute"   # Every kiosk polls every 5s
    api_rate_limit_admin: str = "60/minute"

    @property
    def cors_origins_list(self) -> List[str]:
        """Returns cors_origins as a list"""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def uses_default_admin_password(self) -> bool:
        return self.admin_password == DEFAULT_ADMIN_PASSWORD

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()


@lru_cache()
def get_settings() -> Settings:
    """Returns the settings instance (cached)"""
    return settings
