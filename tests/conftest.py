"""Keep the developer's llama-server environment out of unit tests."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _clean_llama_env(monkeypatch, request):
    if request.node.get_closest_marker("integration"):
        return
    for name in list(os.environ):
        if name.startswith("LLAMA_"):
            monkeypatch.delenv(name, raising=False)
