"""HTTP invocation surface -- FastAPI app exposing registered capabilities."""

from trade_agent.api.app import create_app

__all__ = ["create_app"]
