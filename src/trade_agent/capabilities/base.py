"""Capability definition shared by every tool the agent exposes."""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from trade_agent.logging import get_logger

logger = get_logger(__name__)

RunFn = Callable[[Any, Any], Awaitable[dict]]


def _summarize_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "args"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


@dataclass(frozen=True)
class Capability:
    """A named, schema-validated async operation.

    Attributes:
        name: Tool name used by the invocation surface.
        description: Human-readable summary.
        schema: Pydantic model the raw args must satisfy.
        run: Coroutine taking (validated args, action context) and returning
            a result dict that always carries ``success``.
    """

    name: str
    description: str
    schema: type[BaseModel]
    run: RunFn

    async def invoke(self, args: dict | None, action: dict | None = None) -> str:
        """Validate args, run, and return the JSON-encoded result."""
        try:
            parsed = self.schema.model_validate(args or {})
        except ValidationError as e:
            error = f"Invalid arguments for {self.name}: {_summarize_validation_error(e)}"
            logger.warning("capability_invalid_args", capability=self.name, error=error)
            result: dict = {"success": False, "error": error}
        else:
            result = await self.run(parsed, action)
        return json.dumps(result, indent=2, default=str)
