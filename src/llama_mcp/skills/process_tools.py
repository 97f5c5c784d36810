"""MCP tools for starting and stopping a local llama-server."""

from __future__ import annotations

from typing import Annotated, Optional

from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from llama_mcp.core.protocols import ILlamaClient
from llama_mcp.lifecycle.process_manager import (
    DEFAULT_CTX_SIZE,
    DEFAULT_GPU_LAYERS,
    DEFAULT_PORT,
    ServerProcessManager,
)
from llama_mcp.skills.base import ToolGroup


class ProcessTools(ToolGroup):
    TOOLS = {
        "llama_start": "Start llama-server as a child process with the specified model",
        "llama_stop": "Stop the running llama-server process",
    }

    def __init__(
        self,
        *,
        client: ILlamaClient,
        manager: ServerProcessManager,
        default_model: Optional[str] = None,
    ) -> None:
        super().__init__(client=client)
        self._manager = manager
        self._default_model = default_model

    async def llama_start(
        self,
        model: Annotated[
            Optional[str],
            Field(description="Path to GGUF model file (defaults to LLAMA_MODEL_PATH)"),
        ] = None,
        port: Annotated[int, Field(description="Port to listen on")] = DEFAULT_PORT,
        ctx_size: Annotated[int, Field(description="Context size")] = DEFAULT_CTX_SIZE,
        n_gpu_layers: Annotated[int, Field(description="GPU layers (-1 = all)")] = DEFAULT_GPU_LAYERS,
        threads: Annotated[Optional[int], Field(description="CPU threads")] = None,
    ) -> str:
        """Blocks until the server reports healthy or the health budget runs out."""
        model = model or self._default_model
        if not model:
            raise ToolError("Error: no model given and LLAMA_MODEL_PATH is not set.")
        return await self._run(
            self._manager.start(
                model, port=port, ctx_size=ctx_size, n_gpu_layers=n_gpu_layers, threads=threads,
            )
        )

    async def llama_stop(self) -> str:
        return await self._run(self._manager.stop())
