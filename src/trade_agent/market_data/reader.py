"""Market data reader: mid prices and per-coin universe metadata.

Nothing is cached. The universe can change between calls (listings,
delistings, reordering), so every request reads it afresh.
"""

from decimal import Decimal, InvalidOperation

from trade_agent.exceptions import UnknownCoin
from trade_agent.exchange.client import ExchangeClient
from trade_agent.logging import get_logger
from trade_agent.models import AssetMetadata

logger = get_logger(__name__)


def find_asset(coin: str, meta: dict) -> AssetMetadata:
    """Locate a coin in a perpetuals meta payload by exact name.

    The asset index is the coin's position in the universe listing.

    Raises:
        UnknownCoin: If the coin is absent from the universe.
    """
    universe = meta.get("universe") if isinstance(meta, dict) else None
    for index, entry in enumerate(universe or []):
        if isinstance(entry, dict) and entry.get("name") == coin:
            return AssetMetadata(
                name=coin,
                index=index,
                size_decimals=int(entry.get("szDecimals", 0)),
            )
    raise UnknownCoin(coin, f'Asset "{coin}" not found in universe')


class MarketDataReader:
    """Reads prices and asset constraints through an exchange client.

    Args:
        client: Connected exchange client for the current request.
    """

    def __init__(self, client: ExchangeClient) -> None:
        self._client = client

    async def current_price(self, coin: str) -> Decimal:
        """Return the current mid price for a coin.

        Raises:
            UnknownCoin: If the coin has no (usable) price entry.
        """
        mids = await self._client.fetch_all_mids()
        raw = mids.get(coin) if isinstance(mids, dict) else None
        if not raw:
            raise UnknownCoin(coin)
        try:
            price = Decimal(str(raw))
        except InvalidOperation as e:
            raise UnknownCoin(coin) from e
        logger.info("mid_price_fetched", coin=coin, price=str(price))
        return price

    async def asset_metadata(self, coin: str) -> AssetMetadata:
        """Return the universe entry (index, size decimals) for a coin."""
        meta = await self._client.fetch_meta()
        asset = find_asset(coin, meta)
        logger.info(
            "asset_metadata_fetched",
            coin=coin,
            asset=asset.index,
            size_decimals=asset.size_decimals,
        )
        return asset
