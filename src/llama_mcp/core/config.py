"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class LlamaServerConfig(BaseSettings):
    """Connection to llama-server and the executable used to spawn it."""

    model_config = {"env_prefix": "LLAMA_", "frozen": True, "protected_namespaces": ()}

    server_url: str = "http://localhost:8080"
    server_timeout: int = Field(default=30000, gt=0)  # milliseconds
    model_path: str | None = None
    server_path: str = "llama-server"

    @field_validator("server_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parsed = urlparse(value.strip())
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"server_url must be an http(s) URL, got {value!r}")
        return value.strip().rstrip("/")

    @property
    def timeout_s(self) -> float:
        return self.server_timeout / 1000.0


class LifecycleConfig(BaseSettings):
    """Health polling budget used while a spawned server warms up."""

    model_config = {"env_prefix": "LLAMA_MCP_HEALTH_", "frozen": True}

    attempts: int = Field(default=30, gt=0)
    interval_s: float = Field(default=1.0, ge=0)


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "LLAMA_MCP_", "frozen": True}

    log_level: str = "INFO"

    server: LlamaServerConfig = Field(default_factory=LlamaServerConfig)
    lifecycle: LifecycleConfig = Field(default_factory=LifecycleConfig)
