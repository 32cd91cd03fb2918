"""Immediate-or-cancel order submission.

An IoC limit executes against resting liquidity right away and cancels any
remainder, which approximates a market order while bounding the fill price.
No retries: a failed submission terminates the request.
"""

from trade_agent.exchange.client import ExchangeClient
from trade_agent.logging import get_logger
from trade_agent.models import AssetMetadata

logger = get_logger(__name__)

TIME_IN_FORCE = "Ioc"


class OrderSubmitter:
    """Submits a single IoC limit order through an exchange client.

    The client was built from the resolved wallet; when a vault address was
    resolved the client signs on behalf of the vault.

    Args:
        client: Connected exchange client for the current request.
    """

    def __init__(self, client: ExchangeClient) -> None:
        self._client = client

    async def submit(
        self,
        asset: AssetMetadata,
        is_buy: bool,
        limit_price: str,
        size: str,
        reduce_only: bool = False,
    ) -> dict:
        """Place the order and return the exchange's raw reply."""
        response = await self._client.place_order(
            asset,
            is_buy,
            limit_price,
            size,
            reduce_only=reduce_only,
            tif=TIME_IN_FORCE,
        )
        logger.info("order_submitted", coin=asset.name, asset=asset.index, response=response)
        return response
