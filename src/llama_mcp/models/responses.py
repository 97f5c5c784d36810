"""Response models mirroring llama-server's JSON.

Fields the server adds beyond the ones declared here are kept, so results can be
handed back to the caller without losing information.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Passthrough(BaseModel):
    model_config = ConfigDict(extra="allow")


class HealthStatus(StrEnum):
    OK = "ok"
    LOADING = "loading"
    ERROR = "error"


class HealthResponse(_Passthrough):
    status: HealthStatus
    slots_idle: Optional[int] = None
    slots_processing: Optional[int] = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        # Older servers report "loading_model" while weights are read.
        if value in ("loading_model", "loading model"):
            return HealthStatus.LOADING
        return value


class PropsResponse(_Passthrough):
    default_generation_settings: Optional[dict[str, Any]] = None


class ModelInfo(_Passthrough):
    id: str
    object: str = "model"
    created: Optional[int] = None
    owned_by: Optional[str] = None


class ModelsResponse(_Passthrough):
    object: str = "list"
    data: list[ModelInfo] = Field(default_factory=list)


class SlotInfo(_Passthrough):
    id: int
    state: Any = None


class TokenizeResponse(_Passthrough):
    tokens: list[Any]
    pieces: Optional[list[str]] = None


class DetokenizeResponse(_Passthrough):
    content: str


class ApplyTemplateResponse(_Passthrough):
    prompt: str


class Timings(_Passthrough):
    prompt_n: Optional[int] = None
    predicted_n: Optional[int] = None


class CompletionResponse(_Passthrough):
    content: str
    stop: bool = False
    generation_settings: dict[str, Any] = Field(default_factory=dict)
    timings: Optional[Timings] = None


class ChatChoiceMessage(_Passthrough):
    role: str = "assistant"
    content: Optional[str] = None


class ChatChoice(_Passthrough):
    index: int = 0
    message: ChatChoiceMessage
    finish_reason: Optional[str] = None


class Usage(_Passthrough):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResponse(_Passthrough):
    id: Optional[str] = None
    object: str = "chat.completion"
    created: Optional[int] = None
    model: Optional[str] = None
    choices: list[ChatChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None


class EmbedResponse(_Passthrough):
    embedding: list[float]


class InfillResponse(_Passthrough):
    content: str


class RerankResult(_Passthrough):
    index: int
    relevance_score: float


class RerankResponse(_Passthrough):
    results: list[RerankResult] = Field(default_factory=list)


class LoraAdapter(_Passthrough):
    id: int
    path: str = ""
    scale: float
