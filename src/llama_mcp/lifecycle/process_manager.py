"""Start and stop a local llama-server child process.

``start`` spawns the server, records it in :class:`ProcessState`, and polls the
health endpoint until the model is loaded. A server that never becomes healthy
is terminated and the state rolled back. ``stop`` signals the recorded process
and clears the state.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Optional

from llama_mcp.core.exceptions import (
    ServerAlreadyRunningError,
    ServerExitedError,
    ServerHealthTimeoutError,
    ServerNotRunningError,
    ServerSpawnError,
    ServerStopError,
)
from llama_mcp.core.protocols import ILlamaClient, IServerProcess
from llama_mcp.lifecycle.process_state import ProcessState
from llama_mcp.models.lifecycle import StartResult, StopResult
from llama_mcp.models.responses import HealthStatus

logger = logging.getLogger(__name__)

SpawnFn = Callable[[str, list[str]], Awaitable[IServerProcess]]

DEFAULT_PORT = 8080
DEFAULT_CTX_SIZE = 2048
DEFAULT_GPU_LAYERS = -1  # offload every layer


async def spawn_server(executable: str, args: list[str]) -> IServerProcess:
    """Launch llama-server with stdin closed and stdout/stderr piped."""
    return await asyncio.create_subprocess_exec(
        executable,
        *args,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )


def build_server_args(
    model: str,
    port: int = DEFAULT_PORT,
    ctx_size: int = DEFAULT_CTX_SIZE,
    n_gpu_layers: int = DEFAULT_GPU_LAYERS,
    threads: Optional[int] = None,
) -> list[str]:
    args = [
        "-m", model,
        "--port", str(port),
        "-c", str(ctx_size),
        "-ngl", str(n_gpu_layers),
    ]
    if threads is not None:
        args.extend(["-t", str(threads)])
    return args


class ServerProcessManager:
    """Owns at most one llama-server child process.

    Provides the same dependency injection pattern as the rest of the package:
    the health client, executable path, and shared state are passed in at
    construction time, so independent managers can coexist in one host.
    """

    def __init__(
        self,
        *,
        client: ILlamaClient,
        server_path: str,
        state: Optional[ProcessState] = None,
        spawn: SpawnFn = spawn_server,
        health_attempts: int = 30,
        poll_interval_s: float = 1.0,
    ) -> None:
        self._client = client
        self._server_path = server_path
        self.state = state if state is not None else ProcessState()
        self._spawn = spawn
        self._health_attempts = health_attempts
        self._poll_interval_s = poll_interval_s
        self._lock = asyncio.Lock()
        self._background: set[asyncio.Task] = set()

    async def start(
        self,
        model: str,
        port: int = DEFAULT_PORT,
        ctx_size: int = DEFAULT_CTX_SIZE,
        n_gpu_layers: int = DEFAULT_GPU_LAYERS,
        threads: Optional[int] = None,
    ) -> StartResult:
        async with self._lock:
            if self.state.is_running:
                raise ServerAlreadyRunningError(self.state.pid)

            args = build_server_args(model, port, ctx_size, n_gpu_layers, threads)
            logger.info("Starting %s %s", self._server_path, " ".join(args))
            try:
                process = await self._spawn(self._server_path, args)
            except OSError as exc:
                raise ServerSpawnError(self._server_path, str(exc)) from exc
            if process.pid is None:
                raise ServerSpawnError(self._server_path)

            self.state.record(process)
            self._watch(process)

            await self._wait_until_healthy(process)
            logger.info("llama-server ready (pid=%s, port=%s)", process.pid, port)
            return StartResult(pid=process.pid, model=model, port=port)

    async def stop(self) -> StopResult:
        async with self._lock:
            if not self.state.is_running:
                raise ServerNotRunningError()

            process = self.state.process
            pid = self.state.pid
            try:
                process.terminate()
            except (ProcessLookupError, OSError) as exc:
                raise ServerStopError(pid, str(exc) or type(exc).__name__) from exc

            self.state.clear()
            logger.info("Stopped llama-server (pid=%s)", pid)
            return StopResult(pid=pid)

    async def _wait_until_healthy(self, process: IServerProcess) -> None:
        for attempt in range(1, self._health_attempts + 1):
            returncode = process.returncode
            if returncode is not None:
                logger.warning("llama-server (pid=%s) exited during startup with code %s", process.pid, returncode)
                if self.state.holds(process):
                    self.state.clear()
                raise ServerExitedError(returncode)
            try:
                health = await self._client.health()
            except Exception as exc:
                logger.debug("Health check %d/%d failed: %s", attempt, self._health_attempts, exc)
            else:
                if health.status == HealthStatus.OK:
                    return
                logger.debug(
                    "Health check %d/%d: %s", attempt, self._health_attempts, health.status,
                )
            if attempt < self._health_attempts:
                await asyncio.sleep(self._poll_interval_s)

        self._rollback(process)
        raise ServerHealthTimeoutError(self._health_attempts, self._poll_interval_s)

    def _rollback(self, process: IServerProcess) -> None:
        logger.warning("llama-server (pid=%s) did not become healthy, terminating", process.pid)
        with contextlib.suppress(ProcessLookupError):
            process.terminate()
        if self.state.holds(process):
            self.state.clear()

    # ---- background tasks ----

    def _watch(self, process: IServerProcess) -> None:
        self._spawn_task(self._on_exit(process))
        for name, stream in (("stdout", process.stdout), ("stderr", process.stderr)):
            if stream is not None:
                self._spawn_task(self._drain(process.pid, name, stream))

    def _spawn_task(self, coro: Awaitable[None]) -> None:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _on_exit(self, process: IServerProcess) -> None:
        returncode = await process.wait()
        if self.state.holds(process):
            logger.info("llama-server (pid=%s) exited with code %s", process.pid, returncode)
            self.state.clear()

    async def _drain(self, pid: int, name: str, stream: asyncio.StreamReader) -> None:
        while True:
            line = await stream.readline()
            if not line:
                return
            logger.debug("[llama-server %s %s] %s", pid, name, line.decode(errors="replace").rstrip())
