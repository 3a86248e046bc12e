"""Library configuration loaded from the environment."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Rulify settings loaded from environment."""

    # Expression arithmetic
    decimal_precision: int = 28

    # Paths
    rules_file: str | None = None
    rules_dir: str | None = None

    model_config = {"env_prefix": "RULIFY_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
