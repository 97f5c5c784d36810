"""FastMCP server: llama.cpp's llama-server as MCP tools.

Exposes every llama-server endpoint as one tool, plus ``llama_start`` /
``llama_stop`` to run the server as a child process. Talks MCP over stdio.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from llama_mcp import __version__
from llama_mcp.client import LlamaClient, create_client
from llama_mcp.core.config import AppSettings
from llama_mcp.core.exceptions import ServerLifecycleError
from llama_mcp.lifecycle import ServerProcessManager, create_process_manager
from llama_mcp.skills.inference_tools import InferenceTools
from llama_mcp.skills.lora_tools import LoraTools
from llama_mcp.skills.model_tools import ModelTools
from llama_mcp.skills.process_tools import ProcessTools
from llama_mcp.skills.server_tools import ServerTools
from llama_mcp.skills.token_tools import TokenTools

logger = logging.getLogger(__name__)

SERVER_NAME = "llama-mcp-server"


def create_server(
    settings: AppSettings | None = None,
    *,
    client: LlamaClient | None = None,
    manager: ServerProcessManager | None = None,
) -> FastMCP:
    """Create the MCP server with all llama-server tools registered."""
    if settings is None:
        settings = AppSettings()
    if client is None:
        client = create_client(settings)
    if manager is None:
        manager = create_process_manager(client, settings)

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[None]:
        """Close the HTTP client and stop a still-running child server on shutdown."""
        try:
            yield
        finally:
            if manager.state.is_running:
                with contextlib.suppress(ServerLifecycleError):
                    await manager.stop()
            await client.aclose()

    mcp = FastMCP(SERVER_NAME, lifespan=lifespan)

    groups = [
        ServerTools(client=client),
        TokenTools(client=client),
        InferenceTools(client=client),
        ModelTools(client=client),
        LoraTools(client=client),
        ProcessTools(client=client, manager=manager, default_model=settings.server.model_path),
    ]
    for group in groups:
        group.register(mcp)
    return mcp


def configure_logging(level: str) -> None:
    # stdout carries the MCP protocol; logs go to stderr.
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    settings = AppSettings()
    configure_logging(settings.log_level)
    logger.info(
        "%s %s -> %s", SERVER_NAME, __version__, settings.server.server_url,
    )
    create_server(settings).run("stdio")


if __name__ == "__main__":
    main()
