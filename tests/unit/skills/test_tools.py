"""Tests for the MCP tool groups and server wiring."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from mcp.server.fastmcp.exceptions import ToolError

from llama_mcp.client import LlamaClient
from llama_mcp.core.config import AppSettings, LlamaServerConfig
from llama_mcp.core.exceptions import LlamaConnectionError, LlamaHTTPError, ServerNotRunningError
from llama_mcp.lifecycle import ServerProcessManager
from llama_mcp.mcp_servers.llama_server import create_server
from llama_mcp.models.requests import ChatMessage, LoraAdapterUpdate
from llama_mcp.skills.base import format_error, render
from llama_mcp.skills.inference_tools import InferenceTools
from llama_mcp.skills.lora_tools import LoraTools
from llama_mcp.skills.model_tools import ModelTools
from llama_mcp.skills.process_tools import ProcessTools
from llama_mcp.skills.server_tools import ServerTools
from llama_mcp.skills.token_tools import TokenTools
from tests.fakes import FakeProcess, FakeSpawner, ScriptedHealthClient, create_fake_llama_server
from tests.fakes.llama_server_app import METRICS_TEXT

BASE_URL = "http://fake-llama:8080"

ALL_TOOLS = {
    "llama_health", "llama_props", "llama_models", "llama_slots", "llama_metrics",
    "llama_tokenize", "llama_detokenize", "llama_apply_template",
    "llama_complete", "llama_chat", "llama_embed", "llama_infill", "llama_rerank",
    "llama_load_model", "llama_unload_model",
    "llama_lora_list", "llama_lora_set",
    "llama_start", "llama_stop",
}


@pytest.fixture
def app():
    return create_fake_llama_server()


@pytest.fixture
def client(app):
    return LlamaClient(BASE_URL, 5000, transport=httpx.ASGITransport(app=app))


def _failing_client(exc_factory) -> LlamaClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return LlamaClient(BASE_URL, 5000, transport=httpx.MockTransport(handler))


# ---------- rendering ----------


class TestRendering:
    def test_strings_pass_through(self):
        assert render("a\nb") == "a\nb"

    def test_models_and_lists_are_indented_json(self):
        out = render([LoraAdapterUpdate(id=0, scale=0.5)])
        assert out == json.dumps([{"id": 0, "scale": 0.5}], indent=2)

    def test_format_error_timeout(self):
        exc = LlamaConnectionError("aborted", BASE_URL, timed_out=True)
        assert format_error(exc, BASE_URL) == "Request timed out. Try reducing max_tokens or check server load."

    def test_format_error_refused(self):
        exc = LlamaConnectionError("Failed to connect", BASE_URL)
        message = format_error(exc, BASE_URL)
        assert BASE_URL in message
        assert "llama_start" in message

    def test_format_error_other(self):
        assert format_error(LlamaHTTPError(404, "Not Found"), BASE_URL) == "HTTP 404: Not Found"


# ---------- happy paths against the fake server ----------


class TestServerTools:
    async def test_health_json(self, client):
        out = await ServerTools(client=client).llama_health()
        assert json.loads(out) == {"status": "ok", "slots_idle": 2, "slots_processing": 0}

    async def test_metrics_returned_raw(self, client):
        assert await ServerTools(client=client).llama_metrics() == METRICS_TEXT

    async def test_slots_are_a_json_list(self, client):
        slots = json.loads(await ServerTools(client=client).llama_slots())
        assert [s["id"] for s in slots] == [0, 1]
        assert slots[0]["n_ctx"] == 2048

    async def test_props_update(self, client, app):
        await ServerTools(client=client).llama_props(default_generation_settings={"temperature": 0.3})
        assert app.state.props["default_generation_settings"]["temperature"] == 0.3


class TestTokenTools:
    async def test_tokenize_then_detokenize(self, client):
        tools = TokenTools(client=client)
        tokens = json.loads(await tools.llama_tokenize("hi"))["tokens"]
        assert json.loads(await tools.llama_detokenize(tokens)) == {"content": "hi"}

    async def test_apply_template(self, client):
        out = await TokenTools(client=client).llama_apply_template([ChatMessage(role="user", content="x")])
        assert json.loads(out)["prompt"].startswith("<|user|>x")


class TestInferenceTools:
    async def test_complete_sends_defaults(self, client, app):
        out = json.loads(await InferenceTools(client=client).llama_complete("hello"))
        assert out["content"] == " echo:hello"
        assert app.state.requests[-1] == ("/completion", {
            "prompt": "hello", "n_predict": 256, "temperature": 0.7, "top_p": 0.9, "top_k": 40,
        })

    async def test_chat(self, client):
        out = json.loads(await InferenceTools(client=client).llama_chat(
            [ChatMessage(role="user", content="ping")], temperature=0,
        ))
        assert out["choices"][0]["message"]["content"] == "re: ping"

    async def test_embed_infill_rerank(self, client):
        tools = InferenceTools(client=client)
        assert json.loads(await tools.llama_embed("abc"))["embedding"][0] == 3.0
        assert json.loads(await tools.llama_infill("a", "b"))["content"] == "return a + b"
        assert json.loads(await tools.llama_rerank("q", [])) == {"results": []}


class TestModelAndLoraTools:
    async def test_load_model_ack(self, client, app):
        out = json.loads(await ModelTools(client=client).llama_load_model("qwen.gguf"))
        assert out == {"success": True, "model": "qwen.gguf", "message": 'Model "qwen.gguf" loaded successfully'}
        assert "qwen.gguf" in app.state.loaded_models

    async def test_unload_model_ack(self, client):
        out = json.loads(await ModelTools(client=client).llama_unload_model("qwen.gguf"))
        assert out["message"] == 'Model "qwen.gguf" unloaded successfully'

    async def test_lora_set_then_list(self, client):
        tools = LoraTools(client=client)
        await tools.llama_lora_set([LoraAdapterUpdate(id=1, scale=0)])
        listed = json.loads(await tools.llama_lora_list())
        assert {a["id"]: a["scale"] for a in listed} == {0: 1.0, 1: 0.0}


# ---------- failures become tool errors ----------


class TestToolErrors:
    async def test_connection_refused(self):
        client = _failing_client(lambda r: httpx.ConnectError("refused", request=r))
        with pytest.raises(ToolError) as info:
            await ServerTools(client=client).llama_health()
        assert str(info.value) == (
            f"Error: Cannot connect to llama-server at {BASE_URL}. "
            "Is it running? Use llama_start or start it manually."
        )

    async def test_timeout(self):
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(2)
            return httpx.Response(200, json={})

        client = LlamaClient(BASE_URL, 20, transport=httpx.MockTransport(slow))
        with pytest.raises(ToolError) as info:
            await InferenceTools(client=client).llama_complete("x")
        assert "timed out" in str(info.value)

    async def test_http_status(self):
        client = LlamaClient(BASE_URL, 5000, transport=httpx.MockTransport(lambda r: httpx.Response(404)))
        with pytest.raises(ToolError) as info:
            await LoraTools(client=client).llama_lora_list()
        assert str(info.value) == "Error: HTTP 404: Not Found"

    async def test_load_model_failure_has_no_ack(self):
        client = LlamaClient(BASE_URL, 5000, transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        with pytest.raises(ToolError):
            await ModelTools(client=client).llama_load_model("m")


# ---------- process tools ----------


def _process_tools(default_model=None, *processes):
    health = ScriptedHealthClient()
    manager = ServerProcessManager(
        client=health,
        server_path="llama-server",
        spawn=FakeSpawner(*processes),
        health_attempts=2,
        poll_interval_s=0,
    )
    return ProcessTools(client=health, manager=manager, default_model=default_model), manager


class TestProcessTools:
    async def test_start_without_any_model(self):
        tools, manager = _process_tools(None, FakeProcess())
        with pytest.raises(ToolError) as info:
            await tools.llama_start()
        assert "LLAMA_MODEL_PATH" in str(info.value)
        assert not manager.state.is_running

    async def test_start_uses_default_model_then_stop(self):
        tools, manager = _process_tools("/models/default.gguf", FakeProcess(pid=31))
        started = json.loads(await tools.llama_start())
        assert started == {"status": "started", "pid": 31, "model": "/models/default.gguf", "port": 8080}
        stopped = json.loads(await tools.llama_stop())
        assert stopped == {"status": "stopped", "pid": 31}

    async def test_second_start_is_a_tool_error(self):
        tools, _ = _process_tools("/m.gguf", FakeProcess(pid=32))
        await tools.llama_start()
        with pytest.raises(ToolError) as info:
            await tools.llama_start()
        assert "already running with PID 32" in str(info.value)

    async def test_stop_when_idle(self):
        tools, _ = _process_tools("/m.gguf")
        with pytest.raises(ToolError) as info:
            await tools.llama_stop()
        assert str(info.value) == f"Error: {ServerNotRunningError()}"


# ---------- server wiring ----------


class TestCreateServer:
    async def test_registers_every_tool(self, client):
        mcp = create_server(AppSettings(), client=client)
        tools = {tool.name: tool for tool in await mcp.list_tools()}
        assert set(tools) == ALL_TOOLS

    async def test_schemas_mark_required_arguments(self, client):
        mcp = create_server(AppSettings(), client=client)
        tools = {tool.name: tool for tool in await mcp.list_tools()}
        assert tools["llama_complete"].inputSchema["required"] == ["prompt"]
        assert set(tools["llama_infill"].inputSchema["required"]) == {"input_prefix", "input_suffix"}
        assert "required" not in tools["llama_start"].inputSchema or not tools["llama_start"].inputSchema["required"]

    async def test_descriptions_come_from_groups(self, client):
        mcp = create_server(AppSettings(), client=client)
        tools = {tool.name: tool for tool in await mcp.list_tools()}
        assert tools["llama_stop"].description == "Stop the running llama-server process"

    def test_default_model_from_settings(self, client):
        settings = AppSettings(server=LlamaServerConfig(model_path="/m.gguf"))
        assert create_server(settings, client=client).name == "llama-mcp-server"
