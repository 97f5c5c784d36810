"""Protocol interfaces for the llama-server client and managed processes.

Structural typing, no inheritance required, easy to swap for fakes in tests.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Protocol, runtime_checkable

from llama_mcp.models.requests import (
    ChatMessage,
    ChatOptions,
    CompletionOptions,
    InfillOptions,
    LoraAdapterUpdate,
    TokenizeOptions,
)
from llama_mcp.models.responses import (
    ApplyTemplateResponse,
    ChatResponse,
    CompletionResponse,
    DetokenizeResponse,
    EmbedResponse,
    HealthResponse,
    InfillResponse,
    LoraAdapter,
    ModelsResponse,
    PropsResponse,
    RerankResponse,
    SlotInfo,
    TokenizeResponse,
)


# ---------------------------------------------------------------------------
# llama-server HTTP client
# ---------------------------------------------------------------------------

@runtime_checkable
class ILlamaClient(Protocol):
    """One method per llama-server capability."""

    base_url: str

    # Server
    async def health(self) -> HealthResponse: ...

    async def props(self, settings: Optional[dict[str, Any]] = None) -> PropsResponse: ...

    async def models(self) -> ModelsResponse: ...

    async def slots(self) -> list[SlotInfo]: ...

    async def metrics(self) -> str: ...

    # Tokens
    async def tokenize(
        self, content: str, options: Optional[TokenizeOptions] = None
    ) -> TokenizeResponse: ...

    async def detokenize(self, tokens: list[int]) -> DetokenizeResponse: ...

    async def apply_template(self, messages: list[ChatMessage]) -> ApplyTemplateResponse: ...

    # Inference
    async def complete(
        self, prompt: str, options: Optional[CompletionOptions] = None
    ) -> CompletionResponse: ...

    async def chat(
        self, messages: list[ChatMessage], options: Optional[ChatOptions] = None
    ) -> ChatResponse: ...

    async def embed(self, content: str) -> EmbedResponse: ...

    async def infill(
        self, prefix: str, suffix: str, options: Optional[InfillOptions] = None
    ) -> InfillResponse: ...

    async def rerank(self, query: str, documents: list[str]) -> RerankResponse: ...

    # Router-mode model management
    async def load_model(self, model: str) -> None: ...

    async def unload_model(self, model: str) -> None: ...

    # LoRA
    async def lora_list(self) -> list[LoraAdapter]: ...

    async def lora_set(self, adapters: list[LoraAdapterUpdate]) -> list[LoraAdapter]: ...


# ---------------------------------------------------------------------------
# Managed child process
# ---------------------------------------------------------------------------

@runtime_checkable
class IServerProcess(Protocol):
    """The subset of ``asyncio.subprocess.Process`` the lifecycle manager uses."""

    pid: int
    returncode: Optional[int]
    stdout: Optional[asyncio.StreamReader]
    stderr: Optional[asyncio.StreamReader]

    def terminate(self) -> None: ...

    async def wait(self) -> int: ...
