"""Diagnostic ``test`` capability: echoes arguments and action context."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from trade_agent.capabilities.base import Capability
from trade_agent.logging import get_logger

logger = get_logger(__name__)


class EchoArgs(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str | None = Field(default=None, description="Optional test message")


def summarize_action(action: dict | None) -> dict | None:
    """Reduce an action context to the identifiers worth logging."""
    if not action:
        return None
    return {
        "type": action.get("type"),
        "taskId": (action.get("task") or {}).get("id"),
        "workspaceId": (action.get("workspace") or {}).get("id"),
    }


def create_test_capability() -> Capability:
    """Build the ``test`` capability."""

    async def run(args: EchoArgs, action: dict | None) -> dict:
        received = args.model_dump(exclude_none=True)
        logger.info("test_capability_invoked", args=received, action=summarize_action(action))
        return {
            "success": True,
            "message": "Test capability executed successfully",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "receivedArgs": received,
        }

    return Capability(
        name="test",
        description="Test capability that logs all received parameters",
        schema=EchoArgs,
        run=run,
    )
