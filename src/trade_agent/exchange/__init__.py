"""Exchange client layer -- Hyperliquid via ccxt (reads) and hyperliquid-python-sdk (signing)."""

from trade_agent.exchange.client import ExchangeClient
from trade_agent.exchange.hyperliquid_client import HyperliquidClient, base_url_for

__all__ = ["ExchangeClient", "HyperliquidClient", "base_url_for"]
