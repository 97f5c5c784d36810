"""MCP tools for llama-server status: health, props, models, slots, metrics."""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import Field

from llama_mcp.skills.base import ToolGroup


class ServerTools(ToolGroup):
    TOOLS = {
        "llama_health": "Check if llama-server is running and get status",
        "llama_props": "Get or set server properties and default generation settings",
        "llama_models": "List available/loaded models",
        "llama_slots": "View current slot processing state",
        "llama_metrics": "Get Prometheus-compatible metrics (tokens processed, latency, etc.)",
    }

    async def llama_health(self) -> str:
        return await self._run(self._client.health())

    async def llama_props(
        self,
        default_generation_settings: Annotated[
            Optional[dict[str, Any]],
            Field(
                description="Generation settings to update (e.g. temperature, top_p, top_k). "
                "If omitted, returns current settings."
            ),
        ] = None,
    ) -> str:
        return await self._run(self._client.props(default_generation_settings))

    async def llama_models(self) -> str:
        return await self._run(self._client.models())

    async def llama_slots(self) -> str:
        """Each slot handles one inference request at a time."""
        return await self._run(self._client.slots())

    async def llama_metrics(self) -> str:
        return await self._run(self._client.metrics())
