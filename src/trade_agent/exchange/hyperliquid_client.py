"""Hyperliquid exchange client.

Reads (mid prices, perpetuals metadata) go through ccxt's async hyperliquid
client using the raw ``/info`` endpoint, so payloads keep Hyperliquid's own
shape. Signed actions (leverage, orders) go through the official
hyperliquid-python-sdk, which is synchronous and is therefore run in a worker
thread.

One client is built per trade request from freshly resolved credentials and
must be closed when the request ends.
"""

import asyncio

import ccxt.async_support as ccxt_async
from eth_account import Account
from hyperliquid.exchange import Exchange
from hyperliquid.utils import constants

from trade_agent.config import HyperliquidSettings
from trade_agent.exchange.client import ExchangeClient
from trade_agent.logging import get_logger
from trade_agent.models import AssetMetadata, Network, ResolvedCredentials

logger = get_logger(__name__)


def base_url_for(network: Network) -> str:
    """Return the SDK API URL for a network."""
    if network is Network.TESTNET:
        return constants.TESTNET_API_URL
    return constants.MAINNET_API_URL


class HyperliquidClient(ExchangeClient):
    """Concrete Hyperliquid client: ccxt async for reads, SDK for signed actions.

    Args:
        settings: Network selection and timeout budget.
        credentials: Wallet key and optional vault address for this request.
    """

    def __init__(
        self, settings: HyperliquidSettings, credentials: ResolvedCredentials
    ) -> None:
        self._settings = settings
        self._credentials = credentials
        self._base_url = base_url_for(credentials.network)

        # Raises on a malformed key, which fails the client_ready stage.
        self._wallet = Account.from_key(credentials.private_key)
        self._exchange: Exchange | None = None

        self._info = ccxt_async.hyperliquid(
            {
                "enableRateLimit": True,
                "timeout": int(settings.timeout_seconds * 1000),
            }
        )
        if credentials.network is Network.TESTNET:
            self._info.set_sandbox_mode(True)

    @property
    def wallet_address(self) -> str:
        return self._wallet.address

    async def connect(self) -> None:
        """Build the SDK exchange client (loads exchange metadata over HTTP)."""
        logger.info(
            "connecting_to_hyperliquid",
            network=self._credentials.network.value,
            wallet=self._wallet.address,
            vault=self._credentials.vault_address,
        )
        self._exchange = await asyncio.to_thread(
            Exchange,
            self._wallet,
            base_url=self._base_url,
            vault_address=self._credentials.vault_address,
            timeout=self._settings.timeout_seconds,
        )
        logger.info("hyperliquid_connected", base_url=self._base_url)

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        await self._info.close()
        logger.debug("hyperliquid_connection_closed")

    def _require_exchange(self) -> Exchange:
        if self._exchange is None:
            raise RuntimeError("HyperliquidClient not connected; call connect() first")
        return self._exchange

    async def fetch_all_mids(self) -> dict:
        return await self._info.public_post_info({"type": "allMids"})

    async def fetch_meta(self) -> dict:
        return await self._info.public_post_info({"type": "meta"})

    async def update_leverage(
        self, asset: AssetMetadata, leverage: int, is_cross: bool = True
    ) -> dict:
        exchange = self._require_exchange()
        logger.info(
            "updating_leverage",
            coin=asset.name,
            asset=asset.index,
            leverage=leverage,
            is_cross=is_cross,
        )
        return await asyncio.to_thread(
            exchange.update_leverage, leverage, asset.name, is_cross
        )

    async def place_order(
        self,
        asset: AssetMetadata,
        is_buy: bool,
        limit_price: str,
        size: str,
        reduce_only: bool = False,
        tif: str = "Ioc",
    ) -> dict:
        exchange = self._require_exchange()
        logger.info(
            "placing_order",
            coin=asset.name,
            asset=asset.index,
            is_buy=is_buy,
            limit_price=limit_price,
            size=size,
            reduce_only=reduce_only,
            tif=tif,
        )
        # The SDK signs float wire values; both inputs are exact decimal strings.
        return await asyncio.to_thread(
            exchange.order,
            asset.name,
            is_buy,
            float(size),
            float(limit_price),
            {"limit": {"tif": tif}},
            reduce_only,
        )
