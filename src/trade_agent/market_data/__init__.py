"""Market data layer -- mid prices and universe metadata, read per request."""

from trade_agent.market_data.reader import MarketDataReader, find_asset

__all__ = ["MarketDataReader", "find_asset"]
