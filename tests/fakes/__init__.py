"""Shared test doubles: scripted health client, fake child process, fake spawner."""

from __future__ import annotations

import asyncio
from typing import Optional, Union

from llama_mcp.models.responses import HealthResponse, HealthStatus
from tests.fakes.llama_server_app import create_fake_llama_server

HEALTH_OK = HealthResponse(status=HealthStatus.OK, slots_idle=1, slots_processing=0)
HEALTH_LOADING = HealthResponse(status=HealthStatus.LOADING)


class ScriptedHealthClient:
    """Answers health() from a script; the last entry repeats forever."""

    base_url = "http://fake-llama:8080"

    def __init__(self, *script: Union[HealthResponse, Exception]) -> None:
        self._script = list(script) or [HEALTH_OK]
        self.calls = 0

    async def health(self) -> HealthResponse:
        item = self._script[min(self.calls, len(self._script) - 1)]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item


class FakeProcess:
    """IServerProcess double; terminate() makes the process exit."""

    def __init__(self, pid: Optional[int] = 4242, returncode: Optional[int] = None) -> None:
        self.pid = pid
        self.returncode = returncode
        self.stdout = None
        self.stderr = None
        self.terminated = 0
        self.terminate_error: Optional[BaseException] = None
        self._exited = asyncio.Event()
        if returncode is not None:
            self._exited.set()

    def terminate(self) -> None:
        if self.terminate_error is not None:
            raise self.terminate_error
        self.terminated += 1
        self.exit(-15)

    def exit(self, code: int) -> None:
        self.returncode = code
        self._exited.set()

    async def wait(self) -> int:
        await self._exited.wait()
        return self.returncode


class FakeSpawner:
    """Records spawn calls and hands out prepared processes in order."""

    def __init__(self, *processes: FakeProcess, error: Optional[OSError] = None) -> None:
        self._processes = list(processes)
        self._error = error
        self.calls: list[tuple[str, list[str]]] = []

    async def __call__(self, executable: str, args: list[str]) -> FakeProcess:
        self.calls.append((executable, args))
        if self._error is not None:
            raise self._error
        return self._processes.pop(0)


__all__ = [
    "HEALTH_LOADING",
    "HEALTH_OK",
    "FakeProcess",
    "FakeSpawner",
    "ScriptedHealthClient",
    "create_fake_llama_server",
]
