"""Limit price computation under a fixed slippage bias.

Quantization flow:
1. Bias the market price: x1.002 for buys (limit above market, favours a fill),
   x0.998 for sells (limit below market).
2. Pick tick size and price decimals from the asset's size decimals using the
   ordered rule table below. This is the exchange's price granularity rule,
   not a tunable, and is NOT derivable from size decimals by division.
3. Round to the nearest tick (half-up), then format to the price decimals.

All arithmetic is Decimal, so the limit price is an exact multiple of the tick.
"""

from decimal import ROUND_HALF_UP, Decimal

from trade_agent.exceptions import PriceQuantizationError
from trade_agent.models import OrderSide, TickPlan

SLIPPAGE_BIAS: dict[OrderSide, Decimal] = {
    OrderSide.BUY: Decimal("1.002"),
    OrderSide.SELL: Decimal("0.998"),
}

# (minimum size decimals, tick size, price decimals) -- first match wins
TICK_RULES: tuple[tuple[int, Decimal, int], ...] = (
    (5, Decimal("1"), 0),
    (4, Decimal("0.1"), 1),
    (3, Decimal("0.01"), 2),
)
FALLBACK_TICK_RULE: tuple[Decimal, int] = (Decimal("0.001"), 3)


def tick_rule_for(size_decimals: int) -> tuple[Decimal, int]:
    """Return (tick_size, price_decimals) for an asset's size decimals."""
    for min_decimals, tick_size, price_decimals in TICK_RULES:
        if size_decimals >= min_decimals:
            return tick_size, price_decimals
    return FALLBACK_TICK_RULE


def round_to_tick(price: Decimal, tick_size: Decimal) -> Decimal:
    """Round a price to the nearest multiple of tick_size (halves round up)."""
    ticks = (price / tick_size).to_integral_value(rounding=ROUND_HALF_UP)
    return ticks * tick_size


def format_price(price: Decimal, price_decimals: int) -> str:
    """Format a price with exactly price_decimals fractional digits."""
    exponent = Decimal(1).scaleb(-price_decimals)
    return format(price.quantize(exponent, rounding=ROUND_HALF_UP), "f")


def quantize(raw_price: Decimal, side: OrderSide, size_decimals: int) -> TickPlan:
    """Convert a market price into an exchange-compliant limit price.

    Args:
        raw_price: Current mid price.
        side: Order side; selects the slippage bias direction.
        size_decimals: Asset size precision from the universe listing.

    Returns:
        TickPlan with tick size, formatted limit price and price decimals.

    Raises:
        PriceQuantizationError: If the rounded price is not positive.
    """
    biased = raw_price * SLIPPAGE_BIAS[side]
    tick_size, price_decimals = tick_rule_for(size_decimals)
    rounded = round_to_tick(biased, tick_size)
    if rounded <= 0:
        raise PriceQuantizationError(
            f"Price {raw_price} rounds to a non-positive limit at tick {tick_size}",
            rawPrice=str(raw_price),
        )
    return TickPlan(
        tick_size=tick_size,
        limit_price=format_price(rounded, price_decimals),
        price_decimals=price_decimals,
    )
