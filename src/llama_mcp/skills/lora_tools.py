"""MCP tools for LoRA adapter scale control."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from llama_mcp.models.requests import LoraAdapterUpdate
from llama_mcp.skills.base import ToolGroup


class LoraTools(ToolGroup):
    TOOLS = {
        "llama_lora_list": "List loaded LoRA adapters",
        "llama_lora_set": "Set LoRA adapter scales",
    }

    async def llama_lora_list(self) -> str:
        return await self._run(self._client.lora_list())

    async def llama_lora_set(
        self,
        adapters: Annotated[
            list[LoraAdapterUpdate],
            Field(description="Adapters to update with new scale values (scale 0 disables)"),
        ],
    ) -> str:
        return await self._run(self._client.lora_set(adapters))
