"""Local llama-server process lifecycle."""

from __future__ import annotations

from llama_mcp.core.config import AppSettings
from llama_mcp.core.protocols import ILlamaClient
from llama_mcp.lifecycle.process_manager import ServerProcessManager
from llama_mcp.lifecycle.process_state import ProcessState


def create_process_manager(
    client: ILlamaClient, settings: AppSettings | None = None
) -> ServerProcessManager:
    """Create a manager with its own fresh ProcessState from application settings."""
    if settings is None:
        settings = AppSettings()

    return ServerProcessManager(
        client=client,
        server_path=settings.server.server_path,
        state=ProcessState(),
        health_attempts=settings.lifecycle.attempts,
        poll_interval_s=settings.lifecycle.interval_s,
    )


__all__ = ["ProcessState", "ServerProcessManager", "create_process_manager"]
