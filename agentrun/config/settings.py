from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AGENTRUN_", case_sensitive=False)

    # Basic service settings
    app_name: str = "agentrun-history"
    service_name: str = "agentrun-history"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Reconciliation
    drop_unpaired_calls: bool = Field(
        default=True, description="Filter never-answered function calls before reconciling"
    )

    # Media uri resolution (env overrides)
    media_resolver: Literal["none", "template", "http"] = "none"
    media_url_template: str = Field(
        default="", description="Template with a {uri} placeholder, used by the template resolver"
    )
    media_service_url: str = Field(
        default="http://localhost:8889", description="Base URL of the resource service"
    )
    media_timeout_seconds: float = 5.0
    media_cache_enabled: bool = False
    media_cache_size: int = 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()
