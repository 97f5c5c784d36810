"""MCP tools for tokenization and chat template formatting."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from llama_mcp.models.requests import ChatMessage, TokenizeOptions
from llama_mcp.skills.base import ToolGroup


class TokenTools(ToolGroup):
    TOOLS = {
        "llama_tokenize": "Convert text to token IDs",
        "llama_detokenize": "Convert token IDs back to text",
        "llama_apply_template": "Format chat messages using model's template without inference",
    }

    async def llama_tokenize(
        self,
        content: Annotated[str, Field(description="Text to tokenize")],
        add_special: Annotated[bool, Field(description="Add BOS/EOS tokens")] = True,
        with_pieces: Annotated[bool, Field(description="Include token strings")] = False,
    ) -> str:
        options = TokenizeOptions(add_special=add_special, with_pieces=with_pieces)
        return await self._run(self._client.tokenize(content, options))

    async def llama_detokenize(
        self,
        tokens: Annotated[list[int], Field(description="Token IDs to convert")],
    ) -> str:
        return await self._run(self._client.detokenize(tokens))

    async def llama_apply_template(
        self,
        messages: Annotated[list[ChatMessage], Field(description="Chat messages to format")],
    ) -> str:
        return await self._run(self._client.apply_template(messages))
