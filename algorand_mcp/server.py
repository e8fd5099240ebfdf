"""FastAPI application wiring Algorand MCP tools to HTTP routes."""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from algorand_mcp import mcp
from algorand_mcp.algorand_api import default_algod_client, default_indexer_client
from algorand_mcp.config import AlgorandMcpConfig, default_config
from algorand_mcp.metrics import default_metrics
from algorand_mcp.response import get_items_per_page, render_text, set_items_per_page

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in ("tool", "request_id", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload)


def _configure_logging(config: AlgorandMcpConfig) -> None:
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if config.log_format.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level)


_configure_logging(default_config)
HEALTH_STATUS = {"status": "ok"}
APP_VERSION = "0.1.0"
MCP_SERVER_NAME = "algorand-mcp-server"
MCP_SERVER_VERSION = APP_VERSION


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    yield
    # Shutdown
    await default_algod_client.aclose()
    await default_indexer_client.aclose()


app = FastAPI(
    title="Algorand MCP Server",
    description="Read-only Algorand tool surface for LLM agents, with paginated responses.",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    default_metrics.incr_request()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    default_metrics.record_duration(request_id, duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


def _log_tool_result(tool_name: str, result: Dict[str, Any], request_id: Optional[str] = None) -> None:
    if isinstance(result, dict) and result.get("error"):
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s",
            tool_name,
            result.get("error"),
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "error": result.get("error")},
        )
        default_metrics.record_tool(tool_name, success=False)
    else:
        paginated = isinstance(result, dict) and "metadata" in result
        logger.info(
            "tool=%s outcome=success paginated=%s request_id=%s",
            tool_name,
            paginated,
            request_id,
            extra={"tool": tool_name, "request_id": request_id},
        )
        default_metrics.record_tool(tool_name, success=True, paginated=paginated)


def _resolve_items_per_page(raw_value: Any, config: AlgorandMcpConfig = default_config) -> Optional[int]:
    """Page size requested at session start; None when the value is unusable."""
    if raw_value is None:
        return config.items_per_page
    if isinstance(raw_value, bool) or not isinstance(raw_value, int) or raw_value < 1:
        return None
    return min(raw_value, config.max_items_per_page)


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.post("/tools/{tool_name}")
async def tool_route(tool_name: str, request: Request) -> JSONResponse:
    """Call a tool with a JSON object of parameters and return its envelope."""
    request_id = getattr(request.state, "request_id", None)
    if tool_name not in mcp.TOOL_REGISTRY:
        return JSONResponse(status_code=404, content={"error": f"Unknown tool: {tool_name}"})
    try:
        params = await request.json()
    except ValueError:
        params = None
    if params is None:
        params = {}
    if not isinstance(params, dict):
        return JSONResponse(status_code=400, content={"error": "Parameters must be a JSON object."})
    result = await mcp.call_tool(tool_name, params)
    _log_tool_result(tool_name, result, request_id)
    return JSONResponse(content=result)


@app.post("/mcp")
async def mcp_gateway(request: Request) -> Response:
    """
    Minimal JSON-RPC gateway for MCP-style integrations.

    Supported methods:
      - initialize (optional ``itemsPerPage`` sets the page size)
      - list_tools / tools/list
      - call_tool / tools/call
    """
    request_id = getattr(request.state, "request_id", None)
    start_time = time.time()

    def _respond(
        payload: Dict[str, Any],
        status_code: int = 200,
        *,
        outcome: str,
        method_label: Optional[str] = None,
        tool_label: Optional[str] = None,
        error_code: Optional[int] = None,
    ) -> JSONResponse:
        duration_ms = (time.time() - start_time) * 1000
        logger.debug(
            "mcp outcome=%s method=%s tool=%s id=%s status=%s duration_ms=%.2f error_code=%s",
            outcome,
            method_label,
            tool_label,
            payload.get("id"),
            status_code,
            duration_ms,
            error_code,
            extra={"request_id": request_id, "tool": tool_label, "error": error_code},
        )
        return JSONResponse(status_code=status_code, content=payload)

    try:
        body = await request.json()
    except ValueError:
        payload = _jsonrpc_error_payload(None, -32700, "Parse error")
        return _respond(payload, status_code=400, outcome="error", error_code=-32700)

    if not isinstance(body, dict):
        payload = _jsonrpc_error_payload(None, -32600, "Invalid request")
        return _respond(payload, status_code=400, outcome="error", error_code=-32600)

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
        return _respond(payload, outcome="error", method_label=method, error_code=-32602)

    if not method:
        payload = _jsonrpc_error_payload(rpc_id, -32600, "Invalid request")
        return _respond(payload, outcome="error", error_code=-32600)

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        items_per_page = _resolve_items_per_page(params.get("itemsPerPage"))
        if not isinstance(protocol_version, str) or not protocol_version or items_per_page is None:
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
            return _respond(payload, outcome="error", method_label=method, error_code=-32602)

        # Session start: the page size applies process-wide from here on.
        set_items_per_page(items_per_page)
        logger.debug(
            "mcp initialize requested protocol=%s items_per_page=%d request_id=%s",
            protocol_version,
            items_per_page,
            request_id,
            extra={"request_id": request_id},
        )
        result = {
            "protocolVersion": protocol_version,
            "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
            "capabilities": {"tools": {"listChanged": False}},
            "pagination": {"itemsPerPage": get_items_per_page()},
        }
        return _respond(_jsonrpc_success_payload(rpc_id, result), outcome="success", method_label=method)

    if method in ("list_tools", "tools/list"):
        result = {"tools": mcp.list_tools()}
        return _respond(_jsonrpc_success_payload(rpc_id, result), outcome="success", method_label=method)

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("tool") or params.get("name")
        tool_params = params.get("params")
        if tool_params is None:
            tool_params = params.get("arguments") or {}
        if not isinstance(tool_name, str) or not tool_name.strip() or not isinstance(tool_params, dict):
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
            return _respond(payload, outcome="error", method_label=method, tool_label=None, error_code=-32602)
        result = await mcp.call_tool(tool_name, tool_params)
        _log_tool_result(tool_name, result, request_id)
        return _respond(
            _jsonrpc_success_payload(rpc_id, _wrap_tool_result(result)),
            outcome="success",
            method_label=method,
            tool_label=tool_name,
        )

    if method in ("notifications/initialized", "initialized"):
        # Notifications should not return a JSON-RPC response body.
        logger.debug("mcp initialized notification received request_id=%s", request_id, extra={"request_id": request_id})
        return Response(status_code=204)

    payload = _jsonrpc_error_payload(rpc_id, -32601, "Method not found")
    return _respond(payload, outcome="error", method_label=method, error_code=-32601)


# Run with: uvicorn algorand_mcp.server:app --reload


def _jsonrpc_success_payload(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _jsonrpc_error_payload(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


def _wrap_tool_result(result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shape tool outputs into an MCP content array.
    """
    # Tool-level errors are returned in-band with isError flag.
    if "error" in result and "data" not in result:
        message = result.get("error") or "Error"
        return {
            "content": [{"type": "text", "text": str(message)}],
            "isError": True,
            "structuredContent": result,
        }

    return {
        "content": [{"type": "text", "text": render_text(result)}],
        "structuredContent": result,
    }
