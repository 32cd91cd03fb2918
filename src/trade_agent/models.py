"""Shared data models for the trade agent.

CRITICAL: All monetary values use Decimal. Floats only appear at the signing
SDK boundary (trade_agent.exchange.hyperliquid_client).

Every model here is request-scoped. Nothing is cached between invocations.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Union


class OrderSide(str, Enum):
    """Order direction."""

    BUY = "buy"
    SELL = "sell"

    @property
    def is_buy(self) -> bool:
        return self is OrderSide.BUY


class Network(str, Enum):
    """Hyperliquid network."""

    MAINNET = "mainnet"
    TESTNET = "testnet"


@dataclass(frozen=True)
class TradeRequest:
    """Validated trade intent for a single invocation."""

    coin: str
    side: OrderSide
    size: str  # positive decimal string, passed to the exchange as given
    pk_name: str
    leverage: int | None = None
    reduce_only: bool = False
    vault_name: str | None = None


@dataclass(frozen=True)
class ResolvedCredentials:
    """Wallet identity resolved from the secret store for one request."""

    private_key: str = field(repr=False)
    network: Network
    vault_address: str | None = None


@dataclass(frozen=True)
class SecretEntry:
    """One row of a workspace secret listing."""

    id: str
    name: str


@dataclass(frozen=True)
class AssetMetadata:
    """Per-coin universe entry: position in the listing and size precision."""

    name: str
    index: int
    size_decimals: int


@dataclass(frozen=True)
class TickPlan:
    """Exchange-compliant limit price derived from a market price."""

    tick_size: Decimal
    limit_price: str
    price_decimals: int


@dataclass(frozen=True)
class Filled:
    """IoC order executed (fully or partially)."""

    avg_price: str
    total_size: str
    order_id: int | str | None


@dataclass(frozen=True)
class Resting:
    """Order accepted onto the book; the caller has to poll for fills."""

    order_id: int | str | None


@dataclass(frozen=True)
class Rejected:
    """Exchange rejected the order; reason is passed through verbatim."""

    reason: str


@dataclass(frozen=True)
class Malformed:
    """Response did not match any known status shape."""

    raw_response: Any


OrderOutcome = Union[Filled, Resting, Rejected, Malformed]
