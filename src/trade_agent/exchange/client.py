"""Abstract exchange client interface.

Defines the contract for the exchange implementation. Pipeline code depends
only on this interface, keeping Hyperliquid transport and signing details
isolated in the concrete implementation.

Responses are returned as the exchange's raw JSON payloads: interpreting them
is the job of the market data reader and the outcome classifier.
"""

from abc import ABC, abstractmethod

from trade_agent.models import AssetMetadata


class ExchangeClient(ABC):
    """Abstract base class for exchange API clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Build the signing client (may perform network calls)."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (CRITICAL for ccxt async)."""
        ...

    @abstractmethod
    async def fetch_all_mids(self) -> dict:
        """Return the mid price map: coin -> price string."""
        ...

    @abstractmethod
    async def fetch_meta(self) -> dict:
        """Return perpetuals metadata: {"universe": [{"name", "szDecimals", ...}]}."""
        ...

    @abstractmethod
    async def update_leverage(
        self, asset: AssetMetadata, leverage: int, is_cross: bool = True
    ) -> dict:
        """Set account leverage for an asset. Returns the raw exchange reply."""
        ...

    @abstractmethod
    async def place_order(
        self,
        asset: AssetMetadata,
        is_buy: bool,
        limit_price: str,
        size: str,
        reduce_only: bool = False,
        tif: str = "Ioc",
    ) -> dict:
        """Submit a single limit order. Returns the raw exchange reply."""
        ...
