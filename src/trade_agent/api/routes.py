"""Tool invocation and health endpoints."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

log = structlog.get_logger(__name__)

router = APIRouter()


class ToolCall(BaseModel):
    """Body of a tool invocation: raw capability args plus the action context."""

    args: dict[str, Any] = Field(default_factory=dict)
    action: dict[str, Any] | None = None


@router.post("/tools/{tool_name}")
async def invoke_tool(tool_name: str, call: ToolCall, request: Request) -> JSONResponse:
    """Run a capability; the JSON-encoded result string is returned under ``result``."""
    capabilities = request.app.state.capabilities
    capability = capabilities.get(tool_name)
    if capability is None:
        log.warning("unknown_tool_requested", tool=tool_name)
        return JSONResponse(status_code=404, content={"error": f"Tool {tool_name} not found"})

    log.info("tool_invoked", tool=tool_name)
    result = await capability.invoke(call.args, call.action)
    return JSONResponse(content={"result": result})


@router.get("/health")
async def health(request: Request) -> JSONResponse:
    """Liveness probe listing registered capabilities."""
    return JSONResponse(
        content={
            "status": "ok",
            "capabilities": sorted(request.app.state.capabilities),
        }
    )
