"""
Environment-aware settings for denoise-evidence.

This module uses pydantic-settings to load defaults from environment
variables (prefixed ``DENOISE_EVIDENCE_``) and .env files, so batch jobs can
tune logging and the enumeration depth without touching code.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import PoissonBackendName


class Settings(BaseSettings):
    """
    Defines the package's configuration settings, loaded from environment variables.
    """

    LOG_LEVEL: str = "INFO"

    # Enumeration cost grows as C(11 + d, 11) per edit distance, keep this small.
    DEFAULT_MAX_D: int = Field(4, ge=0, le=12)

    POISSON_BACKEND: PoissonBackendName = "scipy"

    model_config = SettingsConfigDict(
        env_prefix="DENOISE_EVIDENCE_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
