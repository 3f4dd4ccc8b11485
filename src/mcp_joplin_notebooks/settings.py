"""Application settings (env/.env)."""

from __future__ import annotations

from typing import Literal

from pydantic import AnyHttpUrl, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the MCP server and Joplin Data API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    joplin_token: str = Field(alias="JOPLIN_TOKEN", min_length=1)
    joplin_base_url: AnyHttpUrl = Field(
        default="http://127.0.0.1:41184",
        alias="JOPLIN_BASE_URL",
    )

    mcp_transport: Literal["http", "stdio"] = Field(default="http", alias="MCP_TRANSPORT")
    mcp_api_key: str = Field(default="", alias="MCP_API_KEY")
    mcp_host: str = Field(default="127.0.0.1", alias="MCP_HOST")
    mcp_port: int = Field(default=5005, alias="MCP_PORT", ge=1, le=65535)

    http_timeout_seconds: float = Field(
        default=15.0,
        alias="HTTP_TIMEOUT_SECONDS",
        gt=0,
    )
    page_size: int = Field(default=100, alias="PAGE_SIZE", ge=1, le=100)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _api_key_required_for_http(self) -> Settings:
        if self.mcp_transport == "http" and not self.mcp_api_key:
            raise ValueError("MCP_API_KEY is required when MCP_TRANSPORT=http")
        return self
