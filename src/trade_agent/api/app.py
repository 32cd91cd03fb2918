"""FastAPI application factory for the agent's tool invocation surface."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from trade_agent.api import routes
from trade_agent.capabilities.base import Capability


def create_app(capabilities: list[Capability], lifespan: Any = None) -> FastAPI:
    """Create and configure the agent HTTP application.

    Args:
        capabilities: Capabilities to expose under ``/tools/{name}``.
        lifespan: Optional async context manager for application lifespan events.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="Hyperliquid Trade Agent",
        lifespan=lifespan,
    )

    app.state.capabilities = {capability.name: capability for capability in capabilities}

    app.include_router(routes.router)

    return app
