"""
Configuration for the change service

The listening port is the only setting, read from ``PORT``.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings for the change service"""

    port: int = 8080


# Global settings instance
settings = Settings()
