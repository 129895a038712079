"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    token_secret: str = Field(min_length=1)
    token_ttl_seconds: int = Field(default=3600, gt=0)
    posts_per_page: int = Field(default=2, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    image_dir: str = "images"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="POSTFEED_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
