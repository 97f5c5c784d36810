"""Type aliases used across llama-mcp."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
