"""Typed async client for the llama-server HTTP API.

Every method performs exactly one request through :class:`HttpTransport` and
lets its errors propagate unchanged.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import TypeAdapter

from llama_mcp.client.transport import HttpTransport
from llama_mcp.core.types import JsonDict
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

_SLOTS = TypeAdapter(list[SlotInfo])
_ADAPTERS = TypeAdapter(list[LoraAdapter])


def _compact(body: JsonDict) -> JsonDict:
    """Drop unset optional fields so they are absent on the wire."""
    return {k: v for k, v in body.items() if v is not None}


class LlamaClient:
    """ILlamaClient implementation backed by httpx."""

    def __init__(
        self,
        base_url: str,
        timeout_ms: int,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = HttpTransport(base_url, timeout_ms, transport=transport)
        self.base_url = self._http.base_url
        self.timeout_ms = timeout_ms

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "LlamaClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ---- server ----

    async def health(self) -> HealthResponse:
        return HealthResponse.model_validate(await self._http.request_json("/health"))

    async def props(self, settings: Optional[dict[str, Any]] = None) -> PropsResponse:
        if settings is None:
            data = await self._http.request_json("/props")
        else:
            data = await self._http.request_json(
                "/props", method="POST", body={"default_generation_settings": settings},
            )
        return PropsResponse.model_validate(data or {})

    async def models(self) -> ModelsResponse:
        return ModelsResponse.model_validate(await self._http.request_json("/v1/models"))

    async def slots(self) -> list[SlotInfo]:
        return _SLOTS.validate_python(await self._http.request_json("/slots"))

    async def metrics(self) -> str:
        return await self._http.request_text("/metrics")

    # ---- tokens ----

    async def tokenize(
        self, content: str, options: Optional[TokenizeOptions] = None
    ) -> TokenizeResponse:
        opts = options or TokenizeOptions()
        body = {
            "content": content,
            "add_special": opts.add_special,
            "with_pieces": opts.with_pieces,
        }
        data = await self._http.request_json("/tokenize", method="POST", body=body)
        return TokenizeResponse.model_validate(data)

    async def detokenize(self, tokens: list[int]) -> DetokenizeResponse:
        data = await self._http.request_json(
            "/detokenize", method="POST", body={"tokens": list(tokens)},
        )
        return DetokenizeResponse.model_validate(data)

    async def apply_template(self, messages: list[ChatMessage]) -> ApplyTemplateResponse:
        body = {"messages": [m.model_dump() for m in messages]}
        data = await self._http.request_json("/apply-template", method="POST", body=body)
        return ApplyTemplateResponse.model_validate(data)

    # ---- inference ----

    async def complete(
        self, prompt: str, options: Optional[CompletionOptions] = None
    ) -> CompletionResponse:
        opts = options or CompletionOptions()
        body = _compact({
            "prompt": prompt,
            "n_predict": opts.max_tokens,
            "temperature": opts.temperature,
            "top_p": opts.top_p,
            "top_k": opts.top_k,
            "stop": opts.stop,
            "seed": opts.seed,
        })
        data = await self._http.request_json("/completion", method="POST", body=body)
        return CompletionResponse.model_validate(data)

    async def chat(
        self, messages: list[ChatMessage], options: Optional[ChatOptions] = None
    ) -> ChatResponse:
        opts = options or ChatOptions()
        body = _compact({
            "messages": [m.model_dump() for m in messages],
            "max_tokens": opts.max_tokens,
            "temperature": opts.temperature,
            "top_p": opts.top_p,
            "stop": opts.stop,
            "seed": opts.seed,
        })
        data = await self._http.request_json("/v1/chat/completions", method="POST", body=body)
        return ChatResponse.model_validate(data)

    async def embed(self, content: str) -> EmbedResponse:
        data = await self._http.request_json("/embedding", method="POST", body={"content": content})
        return EmbedResponse.model_validate(data)

    async def infill(
        self, prefix: str, suffix: str, options: Optional[InfillOptions] = None
    ) -> InfillResponse:
        opts = options or InfillOptions()
        body = _compact({
            "input_prefix": prefix,
            "input_suffix": suffix,
            "n_predict": opts.max_tokens,
            "temperature": opts.temperature,
            "stop": opts.stop,
        })
        data = await self._http.request_json("/infill", method="POST", body=body)
        return InfillResponse.model_validate(data)

    async def rerank(self, query: str, documents: list[str]) -> RerankResponse:
        body = {"query": query, "documents": list(documents)}
        data = await self._http.request_json("/reranking", method="POST", body=body)
        return RerankResponse.model_validate(data or {})

    # ---- router-mode model management ----

    async def load_model(self, model: str) -> None:
        await self._http.request_json("/models/load", method="POST", body={"model": model})

    async def unload_model(self, model: str) -> None:
        await self._http.request_json("/models/unload", method="POST", body={"model": model})

    # ---- LoRA ----

    async def lora_list(self) -> list[LoraAdapter]:
        return _ADAPTERS.validate_python(await self._http.request_json("/lora-adapters"))

    async def lora_set(self, adapters: list[LoraAdapterUpdate]) -> list[LoraAdapter]:
        body = [a.model_dump() for a in adapters]
        data = await self._http.request_json("/lora-adapters", method="POST", body=body)
        return _ADAPTERS.validate_python(data)
