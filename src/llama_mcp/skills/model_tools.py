"""MCP tools for router-mode model management."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field

from llama_mcp.skills.base import ToolGroup, render


def _ack(model: str, verb: str) -> dict[str, Any]:
    return {"success": True, "model": model, "message": f'Model "{model}" {verb} successfully'}


class ModelTools(ToolGroup):
    TOOLS = {
        "llama_load_model": "Load a model (router mode only)",
        "llama_unload_model": "Unload the current model (router mode only)",
    }

    async def llama_load_model(
        self,
        model: Annotated[str, Field(description="Model name or path to load")],
    ) -> str:
        """May take a while for large models."""
        await self._run(self._client.load_model(model))
        return render(_ack(model, "loaded"))

    async def llama_unload_model(
        self,
        model: Annotated[str, Field(description="Model to unload")],
    ) -> str:
        await self._run(self._client.unload_model(model))
        return render(_ack(model, "unloaded"))
