"""llama-mcp exception hierarchy."""

from __future__ import annotations


class LlamaMCPError(Exception):
    """Base exception for all llama-mcp errors."""


class LlamaConnectionError(LlamaMCPError):
    """llama-server could not be reached, or the request was aborted at its deadline."""

    def __init__(self, message: str, url: str, timed_out: bool = False) -> None:
        self.url = url
        self.timed_out = timed_out
        super().__init__(message)


class LlamaHTTPError(LlamaMCPError):
    """llama-server answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, url: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        self.url = url
        super().__init__(f"HTTP {status_code}: {reason}")


class ServerLifecycleError(LlamaMCPError):
    """Starting or stopping the local llama-server process failed."""


class ServerAlreadyRunningError(ServerLifecycleError):
    """A managed llama-server is already running."""

    def __init__(self, pid: int) -> None:
        self.pid = pid
        super().__init__(
            f"llama-server is already running with PID {pid}. Use llama_stop first."
        )


class ServerNotRunningError(ServerLifecycleError):
    """No managed llama-server is running."""

    def __init__(self) -> None:
        super().__init__("llama-server is not running. Nothing to stop.")


class ServerSpawnError(ServerLifecycleError):
    """The llama-server executable could not be launched."""

    def __init__(self, server_path: str, detail: str = "") -> None:
        self.server_path = server_path
        message = (
            f"Failed to start llama-server at {server_path}. "
            "Check that the binary exists and is executable."
        )
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ServerHealthTimeoutError(ServerLifecycleError):
    """The spawned server never reported a healthy status."""

    def __init__(self, attempts: int, interval_s: float) -> None:
        self.attempts = attempts
        self.interval_s = interval_s
        super().__init__(
            f"llama-server started but did not become healthy after {attempts} checks "
            f"({attempts * interval_s:g}s). Check model path and server logs."
        )


class ServerExitedError(ServerLifecycleError):
    """The spawned server exited before it became healthy."""

    def __init__(self, returncode: int | None) -> None:
        self.returncode = returncode
        super().__init__(
            f"llama-server exited during startup (code={returncode}). "
            "Check model path and server logs."
        )


class ServerStopError(ServerLifecycleError):
    """Sending the termination signal to the managed server failed."""

    def __init__(self, pid: int, detail: str) -> None:
        self.pid = pid
        super().__init__(f"Failed to stop llama-server (PID {pid}): {detail}")
