"""Request-side models: chat messages, adapter updates, per-endpoint options.

Each options model carries the endpoint defaults. Passing ``None`` for a field
is the same as leaving it out, so callers can forward optional tool arguments
without filtering them first.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class ChatMessage(BaseModel):
    """One chat turn in OpenAI format."""

    role: Literal["system", "user", "assistant"]
    content: str


class LoraAdapterUpdate(BaseModel):
    """New scale for a loaded LoRA adapter (0 disables it)."""

    id: int
    scale: float


class _Options(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class TokenizeOptions(_Options):
    add_special: bool = True
    with_pieces: bool = False


class CompletionOptions(_Options):
    max_tokens: int = 256
    temperature: float = 0.7
    top_p: float = 0.9
    top_k: int = 40
    stop: Optional[list[str]] = None
    seed: Optional[int] = None


class ChatOptions(_Options):
    max_tokens: int = 256
    temperature: float = 0.7
    top_p: float = 0.9
    stop: Optional[list[str]] = None
    seed: Optional[int] = None


class InfillOptions(_Options):
    max_tokens: int = 256
    temperature: float = 0.7
    stop: Optional[list[str]] = None
