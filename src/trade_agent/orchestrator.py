"""Trade orchestrator -- sequences one trade request end to end.

State machine (strictly sequential, no branching back):

    start -> credentials_resolved -> client_ready -> price_known
          -> leverage_attempted -> metadata_known -> price_quantized
          -> submitted -> classified -> done

Any transition may fail; the orchestrator then halts immediately and returns
a structured failure result. The single exception is leverage_attempted,
which always succeeds from the pipeline's point of view (see
trade_agent.execution.leverage).

There is no rollback. A request that changed leverage but never submitted an
order is an accepted outcome. There is also no per-wallet serialization:
concurrent requests for one wallet may race at the exchange.

This is the operation boundary: execute() never raises, every path ends in
a result dict.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

import structlog

from trade_agent.config import AppSettings
from trade_agent.exceptions import ConfigurationMissing, TradeAgentError
from trade_agent.exchange.client import ExchangeClient
from trade_agent.exchange.hyperliquid_client import HyperliquidClient
from trade_agent.execution.classifier import classify, outcome_to_result
from trade_agent.execution.leverage import LeverageAdjuster
from trade_agent.execution.pricing import quantize
from trade_agent.execution.submitter import OrderSubmitter
from trade_agent.logging import get_logger
from trade_agent.market_data.reader import MarketDataReader
from trade_agent.models import Network, ResolvedCredentials, TradeRequest
from trade_agent.secrets.resolver import SecretResolver
from trade_agent.secrets.store import OpenServSecretStore, SecretStore

logger = get_logger(__name__)

SecretStoreFactory = Callable[[], SecretStore]
ClientFactory = Callable[[ResolvedCredentials], ExchangeClient]


class TradeStage(str, Enum):
    """Pipeline states, in order."""

    START = "start"
    CREDENTIALS_RESOLVED = "credentials_resolved"
    CLIENT_READY = "client_ready"
    PRICE_KNOWN = "price_known"
    LEVERAGE_ATTEMPTED = "leverage_attempted"
    METADATA_KNOWN = "metadata_known"
    PRICE_QUANTIZED = "price_quantized"
    SUBMITTED = "submitted"
    CLASSIFIED = "classified"
    DONE = "done"


class TradeOrchestrator:
    """Runs the resolve -> price -> submit -> classify pipeline per request.

    Holds only configuration and factories; all trade state lives in local
    variables of execute(), so concurrent invocations share nothing.

    Args:
        settings: Application-wide settings.
        secret_store_factory: Builds a fresh secret store per request.
            Defaults to the OpenServ store.
        client_factory: Builds an exchange client from resolved credentials.
            Defaults to HyperliquidClient.
    """

    def __init__(
        self,
        settings: AppSettings,
        secret_store_factory: SecretStoreFactory | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._settings = settings
        self._secret_store_factory = secret_store_factory or (
            lambda: OpenServSecretStore(settings.openserv)
        )
        self._client_factory = client_factory or (
            lambda credentials: HyperliquidClient(settings.hyperliquid, credentials)
        )

    @property
    def network(self) -> Network:
        return Network.TESTNET if self._settings.hyperliquid.testnet else Network.MAINNET

    async def execute(self, request: TradeRequest, workspace_id: str | None) -> dict:
        """Execute one trade request and return its caller-facing result."""
        with structlog.contextvars.bound_contextvars(
            coin=request.coin,
            side=request.side.value,
            workspace_id=workspace_id,
        ):
            logger.info(
                "trade_started",
                size=request.size,
                leverage=request.leverage,
                reduce_only=request.reduce_only,
                pk_name=request.pk_name,
                vault_name=request.vault_name,
            )
            stage = TradeStage.START
            client: ExchangeClient | None = None
            try:
                if not workspace_id:
                    raise ConfigurationMissing("Workspace ID is required to fetch secrets")

                async with self._secret_store_factory() as store:
                    resolver = SecretResolver(store, workspace_id)
                    credentials = await resolver.resolve_credentials(
                        request.pk_name, request.vault_name, self.network
                    )
                stage = TradeStage.CREDENTIALS_RESOLVED

                client = self._client_factory(credentials)
                await client.connect()
                stage = TradeStage.CLIENT_READY

                reader = MarketDataReader(client)
                price = await reader.current_price(request.coin)
                stage = TradeStage.PRICE_KNOWN

                await LeverageAdjuster(client, reader).apply(request.coin, request.leverage)
                stage = TradeStage.LEVERAGE_ATTEMPTED

                asset = await reader.asset_metadata(request.coin)
                stage = TradeStage.METADATA_KNOWN

                plan = quantize(price, request.side, asset.size_decimals)
                logger.info(
                    "limit_price_computed",
                    mid_price=str(price),
                    size_decimals=asset.size_decimals,
                    tick_size=str(plan.tick_size),
                    limit_price=plan.limit_price,
                )
                stage = TradeStage.PRICE_QUANTIZED

                response = await OrderSubmitter(client).submit(
                    asset,
                    request.side.is_buy,
                    plan.limit_price,
                    request.size,
                    reduce_only=request.reduce_only,
                )
                stage = TradeStage.SUBMITTED

                outcome = classify(response, fallback_price=plan.limit_price)
                stage = TradeStage.CLASSIFIED

                result = outcome_to_result(outcome, request)
                stage = TradeStage.DONE
                logger.info(
                    "trade_finished",
                    outcome=type(outcome).__name__.lower(),
                    success=result["success"],
                )
                return result

            except TradeAgentError as e:
                logger.error(
                    "trade_halted",
                    stage=stage.value,
                    error_type=type(e).__name__,
                    error=e.message,
                )
                return {"success": False, "error": e.message, **e.context}
            except Exception as e:
                logger.error(
                    "trade_exception",
                    stage=stage.value,
                    error=str(e),
                    exc_info=True,
                )
                return {"success": False, "error": str(e) or "Unknown error"}
            finally:
                if client is not None:
                    await self._close_client(client)

    async def _close_client(self, client: ExchangeClient) -> None:
        try:
            await client.close()
        except Exception as e:
            logger.warning("exchange_client_close_failed", error=str(e))
