"""MCP tools for inference: completion, chat, embeddings, infill, rerank."""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import Field

from llama_mcp.models.requests import ChatMessage, ChatOptions, CompletionOptions, InfillOptions
from llama_mcp.skills.base import ToolGroup

MaxTokens = Annotated[int, Field(description="Maximum tokens to generate")]
Temperature = Annotated[float, Field(description="Sampling temperature (0-2)")]
TopP = Annotated[float, Field(description="Nucleus sampling threshold")]
Stop = Annotated[Optional[list[str]], Field(description="Stop sequences")]
Seed = Annotated[Optional[int], Field(description="Random seed for reproducibility")]


class InferenceTools(ToolGroup):
    TOOLS = {
        "llama_complete": "Generate text completion from a prompt",
        "llama_chat": "Chat completion (OpenAI-compatible format)",
        "llama_embed": "Generate embeddings for text",
        "llama_infill": "Code completion with prefix and suffix context (fill-in-middle)",
        "llama_rerank": "Rerank documents by relevance to a query",
    }

    async def llama_complete(
        self,
        prompt: Annotated[str, Field(description="The prompt to complete")],
        max_tokens: MaxTokens = 256,
        temperature: Temperature = 0.7,
        top_p: TopP = 0.9,
        top_k: Annotated[int, Field(description="Top-k sampling")] = 40,
        stop: Stop = None,
        seed: Seed = None,
    ) -> str:
        options = CompletionOptions(
            max_tokens=max_tokens,
            temperature=temperature,
            top_p=top_p,
            top_k=top_k,
            stop=stop,
            seed=seed,
        )
        return await self._run(self._client.complete(prompt, options))

    async def llama_chat(
        self,
        messages: Annotated[list[ChatMessage], Field(description="Chat messages")],
        max_tokens: MaxTokens = 256,
        temperature: Temperature = 0.7,
        top_p: TopP = 0.9,
        stop: Stop = None,
        seed: Seed = None,
    ) -> str:
        options = ChatOptions(
            max_tokens=max_tokens,
            temperature=temperature,
            top_p=top_p,
            stop=stop,
            seed=seed,
        )
        return await self._run(self._client.chat(messages, options))

    async def llama_embed(
        self,
        content: Annotated[str, Field(description="Text to embed")],
    ) -> str:
        return await self._run(self._client.embed(content))

    async def llama_infill(
        self,
        input_prefix: Annotated[str, Field(description="Code before cursor")],
        input_suffix: Annotated[str, Field(description="Code after cursor")],
        max_tokens: MaxTokens = 256,
        temperature: Temperature = 0.7,
        stop: Stop = None,
    ) -> str:
        options = InfillOptions(max_tokens=max_tokens, temperature=temperature, stop=stop)
        return await self._run(self._client.infill(input_prefix, input_suffix, options))

    async def llama_rerank(
        self,
        query: Annotated[str, Field(description="Search query")],
        documents: Annotated[list[str], Field(description="Documents to rerank")],
    ) -> str:
        return await self._run(self._client.rerank(query, documents))
