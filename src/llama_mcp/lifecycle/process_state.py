"""Shared record of the locally spawned llama-server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from llama_mcp.core.protocols import IServerProcess


@dataclass
class ProcessState:
    """Handle and pid of the managed server; both set (running) or both None (stopped)."""

    process: Optional[IServerProcess] = None
    pid: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self.process is not None and self.pid is not None

    def record(self, process: IServerProcess) -> None:
        if process.pid is None:
            raise ValueError("cannot record a process without a pid")
        self.process = process
        self.pid = process.pid

    def clear(self) -> None:
        self.process = None
        self.pid = None

    def holds(self, process: IServerProcess) -> bool:
        return self.process is process
