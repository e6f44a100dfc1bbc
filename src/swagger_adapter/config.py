"""Configuration for the Swagger Adapter."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional, Set

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    service_name: str = Field(default="swagger-adapter")

    adapter_transport: str = Field(default="streamable-http")
    adapter_host: str = Field(default="0.0.0.0")
    adapter_port: int = Field(default=8000)
    adapter_auth_token: Optional[str] = Field(default=None)

    adapter_request_timeout_seconds: float = Field(default=10)
    adapter_max_document_bytes: int = Field(default=5 * 1024 * 1024)

    adapter_tool_allowlist: Optional[str] = Field(default=None)

    adapter_log_level: str = Field(default="INFO")

    def tool_allowlist(self) -> Set[str]:
        if not self.adapter_tool_allowlist:
            return set()
        return {item.strip() for item in self.adapter_tool_allowlist.split(",") if item.strip()}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
