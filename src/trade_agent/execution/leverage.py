"""Best-effort leverage adjustment before order placement.

Leverage is always requested in cross-margin mode. Any failure -- unknown
asset, network error, SDK validation error, or an ``err`` reply from the
exchange -- is logged as a warning and reported back as text. It never
propagates: the order proceeds with whatever leverage the account already has.
"""

from trade_agent.exceptions import LeverageUpdateFailed
from trade_agent.exchange.client import ExchangeClient
from trade_agent.logging import get_logger
from trade_agent.market_data.reader import MarketDataReader

logger = get_logger(__name__)


class LeverageAdjuster:
    """Optionally updates account leverage for one asset.

    Args:
        client: Connected exchange client.
        reader: Market data reader used to resolve the asset index.
    """

    def __init__(self, client: ExchangeClient, reader: MarketDataReader) -> None:
        self._client = client
        self._reader = reader

    async def apply(self, coin: str, leverage: int | None) -> str | None:
        """Request cross-margin leverage for a coin.

        Returns:
            None on success or when no leverage was requested, otherwise the
            warning text describing why the update did not happen.
        """
        if leverage is None:
            return None

        try:
            asset = await self._reader.asset_metadata(coin)
            response = await self._client.update_leverage(asset, leverage, is_cross=True)
            if not isinstance(response, dict) or response.get("status") != "ok":
                detail = response.get("response") if isinstance(response, dict) else response
                raise LeverageUpdateFailed(f"Leverage update rejected: {detail}")
        except Exception as e:
            warning = str(e) or type(e).__name__
            logger.warning(
                "leverage_update_failed",
                coin=coin,
                leverage=leverage,
                error=warning,
                note="continuing with current account leverage",
            )
            return warning

        logger.info("leverage_updated", coin=coin, leverage=leverage, is_cross=True)
        return None
