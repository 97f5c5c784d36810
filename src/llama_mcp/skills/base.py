"""Base tool group with common registration, rendering, and error handling.

Each group exposes async methods named after their MCP tool. Successful results
are rendered as indented JSON; llama-mcp failures become MCP tool errors with a
message the agent can act on.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, ClassVar

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import BaseModel

from llama_mcp.core.exceptions import LlamaConnectionError, LlamaMCPError
from llama_mcp.core.protocols import ILlamaClient


def format_error(exc: LlamaMCPError, base_url: str) -> str:
    """Turn a failure into advice the calling agent can act on."""
    if isinstance(exc, LlamaConnectionError):
        if exc.timed_out:
            return "Request timed out. Try reducing max_tokens or check server load."
        return (
            f"Cannot connect to llama-server at {base_url}. "
            "Is it running? Use llama_start or start it manually."
        )
    return str(exc)


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def render(result: Any) -> str:
    if isinstance(result, str):
        return result
    return json.dumps(_plain(result), indent=2)


class ToolGroup:
    """Common base for all llama-mcp tool groups.

    Subclasses list their tools in ``TOOLS`` (tool name -> description); the
    tool name is also the name of the handler method.
    """

    TOOLS: ClassVar[dict[str, str]] = {}

    def __init__(self, *, client: ILlamaClient) -> None:
        self._client = client

    def register(self, mcp: FastMCP) -> None:
        for name, description in self.TOOLS.items():
            mcp.add_tool(getattr(self, name), name=name, description=description)

    async def _run(self, awaitable: Awaitable[Any]) -> str:
        try:
            result = await awaitable
        except LlamaMCPError as exc:
            raise ToolError(f"Error: {format_error(exc, self._client.base_url)}") from exc
        return render(result)
