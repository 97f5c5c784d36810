"""Single-attempt JSON/text HTTP transport with a per-request deadline."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Optional, TypeVar

import httpx

from llama_mcp.core.exceptions import LlamaConnectionError, LlamaHTTPError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestAborted(Exception):
    """Raised by :class:`AbortSignal` when the deadline fires first."""


class AbortSignal:
    """One-shot cancellation signal that fires after ``timeout_s`` seconds.

    Created per request. Either the scheduled trigger fires (and the guarded
    request is cancelled) or :meth:`disarm` runs first; never both.
    """

    def __init__(self, timeout_s: float) -> None:
        loop = asyncio.get_running_loop()
        self._fired: asyncio.Future[None] = loop.create_future()
        self._handle = loop.call_later(timeout_s, self._trigger)

    def _trigger(self) -> None:
        if not self._fired.done():
            self._fired.set_result(None)

    @property
    def aborted(self) -> bool:
        return self._fired.done()

    def disarm(self) -> None:
        self._handle.cancel()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the signal fires first."""
        task = asyncio.ensure_future(awaitable)
        try:
            done, _ = await asyncio.wait(
                {task, self._fired}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task in done:
            return task.result()
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise RequestAborted()


class HttpTransport:
    """Sends one request to ``{base_url}{path}`` and normalizes failures.

    Non-2xx responses raise :class:`LlamaHTTPError`. Unreachable servers and
    requests that outlive the deadline both raise :class:`LlamaConnectionError`;
    only the message (and ``timed_out``) tells them apart.
    """

    def __init__(
        self,
        base_url: str,
        timeout_ms: int,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        # The abort signal owns the deadline; httpx's own timeouts stay off.
        self._http = httpx.AsyncClient(timeout=None, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request_json(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        response = await self._send(path, method=method, body=body, headers=headers)
        if not response.content:
            return None
        return response.json()

    async def request_text(
        self,
        path: str,
        *,
        method: str = "GET",
        headers: Optional[dict[str, str]] = None,
    ) -> str:
        response = await self._send(path, method=method, headers=headers)
        return response.text

    async def _send(
        self,
        path: str,
        *,
        method: str,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        merged = {"Content-Type": "application/json"}
        if headers:
            merged.update(headers)
        content = json.dumps(body) if body is not None else None

        logger.debug("%s %s", method, url)
        signal = AbortSignal(self.timeout_ms / 1000.0)
        try:
            response = await signal.guard(
                self._http.request(method, url, content=content, headers=merged)
            )
        except RequestAborted as exc:
            raise LlamaConnectionError(
                f"Request to {url} aborted: timed out after {self.timeout_ms} ms",
                url=url,
                timed_out=True,
            ) from exc
        except httpx.TimeoutException as exc:
            raise LlamaConnectionError(
                f"Request to {url} aborted: timed out ({exc})", url=url, timed_out=True,
            ) from exc
        except httpx.ConnectError as exc:
            raise LlamaConnectionError(
                f"Failed to connect to {url}: connection refused ({exc})", url=url,
            ) from exc
        except httpx.TransportError as exc:
            raise LlamaConnectionError(f"Failed to connect to {url}: {exc}", url=url) from exc
        finally:
            signal.disarm()

        if not response.is_success:
            raise LlamaHTTPError(response.status_code, response.reason_phrase, url=url)
        return response
