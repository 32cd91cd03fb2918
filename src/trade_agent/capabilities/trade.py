"""Trade capability -- leverage buy/sell on Hyperliquid perpetuals."""

from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trade_agent.capabilities.base import Capability
from trade_agent.logging import get_logger
from trade_agent.models import OrderSide, TradeRequest
from trade_agent.orchestrator import TradeOrchestrator

logger = get_logger(__name__)


class TradeArgs(BaseModel):
    """Arguments accepted by the ``trade`` capability."""

    model_config = ConfigDict(populate_by_name=True)

    coin: str = Field(min_length=1, description='Coin symbol (e.g., "BTC", "ETH", "SOL")')
    side: OrderSide = Field(description="Trade side: buy (long) or sell (short)")
    size: str = Field(description='Position size in coin units (e.g., "0.1" for 0.1 BTC)')
    leverage: str | int | None = Field(
        default=None,
        description='Leverage multiplier (e.g., "5" for 5x, default: account leverage)',
    )
    reduce_only: bool = Field(
        default=False,
        alias="reduceOnly",
        description="Whether this is a reduce-only order (close position, default: false)",
    )
    pk_name: str = Field(
        min_length=1,
        description='Secret name containing the private key (e.g., "hl_key1")',
    )
    vault_name: str | None = Field(
        default=None,
        description='Secret name containing the vault address (e.g., "hl_vault1", optional)',
    )

    @field_validator("size")
    @classmethod
    def _size_positive(cls, value: str) -> str:
        value = value.strip()
        try:
            size = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"size must be a numeric string, got {value!r}") from None
        if not size.is_finite() or size <= 0:
            raise ValueError(f"size must be positive, got {value!r}")
        return value

    @field_validator("leverage")
    @classmethod
    def _leverage_integer(cls, value: str | int | None) -> str | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        text = str(value).strip()
        if not text.isdigit() or int(text) <= 0:
            raise ValueError(f"leverage must be a positive integer, got {value!r}")
        return text

    def to_request(self) -> TradeRequest:
        return TradeRequest(
            coin=self.coin,
            side=self.side,
            size=self.size,
            pk_name=self.pk_name,
            leverage=int(self.leverage) if self.leverage is not None else None,
            reduce_only=self.reduce_only,
            vault_name=self.vault_name or None,
        )


def workspace_id_from(action: dict | None) -> str | None:
    """Extract the workspace id from an invocation's action context."""
    workspace = (action or {}).get("workspace") or {}
    workspace_id = workspace.get("id") if isinstance(workspace, dict) else None
    return str(workspace_id) if workspace_id not in (None, "") else None


def create_trade_capability(orchestrator: TradeOrchestrator) -> Capability:
    """Build the ``trade`` capability around an orchestrator."""

    async def run(args: TradeArgs, action: dict | None) -> dict:
        return await orchestrator.execute(args.to_request(), workspace_id_from(action))

    return Capability(
        name="trade",
        description="Place a leverage trade on Hyperliquid perpetuals (e.g., BTC, ETH)",
        schema=TradeArgs,
        run=run,
    )
