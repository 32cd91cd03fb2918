"""Agent capabilities -- every tool the agent registers."""

from trade_agent.capabilities.base import Capability
from trade_agent.capabilities.echo import create_test_capability
from trade_agent.capabilities.trade import TradeArgs, create_trade_capability
from trade_agent.config import AppSettings
from trade_agent.orchestrator import TradeOrchestrator


def get_all_capabilities(
    settings: AppSettings, orchestrator: TradeOrchestrator | None = None
) -> list[Capability]:
    """Return every capability the agent exposes, in registration order."""
    return [
        create_test_capability(),
        create_trade_capability(orchestrator or TradeOrchestrator(settings)),
    ]


__all__ = [
    "Capability",
    "TradeArgs",
    "create_test_capability",
    "create_trade_capability",
    "get_all_capabilities",
]
