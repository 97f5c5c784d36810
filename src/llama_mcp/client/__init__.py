"""llama-server HTTP client behind the ILlamaClient protocol."""

from __future__ import annotations

from llama_mcp.client.llama_client import LlamaClient
from llama_mcp.core.config import AppSettings


def create_client(settings: AppSettings | None = None) -> LlamaClient:
    """Create a client wired to the configured llama-server."""
    if settings is None:
        settings = AppSettings()

    return LlamaClient(
        base_url=settings.server.server_url,
        timeout_ms=settings.server.server_timeout,
    )


__all__ = ["LlamaClient", "create_client"]
