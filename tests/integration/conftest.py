"""Integration test fixtures: a real llama-server reachable over HTTP."""

from __future__ import annotations

import os

import httpx
import pytest

from llama_mcp.client import LlamaClient

LLAMA_SERVER_URL = os.environ.get("LLAMA_SERVER_URL", "http://localhost:8080").rstrip("/")


def _llama_server_available() -> bool:
    """Check if a llama-server with a loaded model answers /health."""
    try:
        response = httpx.get(f"{LLAMA_SERVER_URL}/health", timeout=2.0)
        return response.status_code == 200 and response.json().get("status") == "ok"
    except (httpx.HTTPError, ValueError):
        return False


skip_no_llama_server = pytest.mark.skipif(
    not _llama_server_available(),
    reason="llama-server not available",
)


@pytest.fixture
async def llama_client():
    """Client pointing at the real server with a generous timeout."""
    async with LlamaClient(LLAMA_SERVER_URL, 120_000) as client:
        yield client
