"""Results of local llama-server lifecycle operations."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class StartResult(BaseModel):
    status: Literal["started"] = "started"
    pid: int
    model: str
    port: int


class StopResult(BaseModel):
    status: Literal["stopped"] = "stopped"
    pid: int
