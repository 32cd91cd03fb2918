"""Outcome classification for exchange order replies.

The exchange reply is loosely typed, so it is parsed and tagged explicitly:

    {"status": "ok",
     "response": {"type": "order",
                  "data": {"statuses": [<one status per submitted order>]}}}

The single status is classified by shape:
- {"filled": {"totalSz", "avgPx", "oid"}}  -> Filled
- {"error": "<message>"}                    -> Rejected (message verbatim)
- {"resting": {"oid"}}                      -> Resting
- anything else, including an "err" envelope -> Malformed (raw reply kept)
"""

from typing import Any

from trade_agent.models import (
    Filled,
    Malformed,
    OrderOutcome,
    Rejected,
    Resting,
    TradeRequest,
)

UNEXPECTED_RESPONSE_ERROR = "Unexpected response from exchange"


def _first_status(response: Any) -> dict | None:
    if not isinstance(response, dict) or response.get("status") != "ok":
        return None
    payload = response.get("response")
    if not isinstance(payload, dict) or payload.get("type") != "order":
        return None
    data = payload.get("data")
    if not isinstance(data, dict):
        return None
    statuses = data.get("statuses")
    if not isinstance(statuses, list) or not statuses:
        return None
    status = statuses[0]
    return status if isinstance(status, dict) else None


def classify(response: Any, fallback_price: str) -> OrderOutcome:
    """Map an exchange order reply onto exactly one OrderOutcome.

    Args:
        response: Raw reply from the order endpoint.
        fallback_price: Limit price reported when a fill carries no avgPx.
    """
    status = _first_status(response)
    if status is None:
        return Malformed(raw_response=response)

    filled = status.get("filled")
    if isinstance(filled, dict):
        avg_price = filled.get("avgPx") or fallback_price
        return Filled(
            avg_price=str(avg_price),
            total_size=str(filled.get("totalSz")),
            order_id=filled.get("oid"),
        )

    if "error" in status:
        return Rejected(reason=str(status["error"]))

    resting = status.get("resting")
    if isinstance(resting, dict):
        return Resting(order_id=resting.get("oid"))

    return Malformed(raw_response=response)


def outcome_to_result(outcome: OrderOutcome, request: TradeRequest) -> dict:
    """Render an outcome as the caller-facing result object."""
    side = request.side.value
    if isinstance(outcome, Filled):
        verb = "longed" if request.side.is_buy else "shorted"
        return {
            "success": True,
            "coin": request.coin,
            "side": side,
            "size": request.size,
            "leverage": str(request.leverage) if request.leverage is not None else None,
            "avgFillPrice": outcome.avg_price,
            "totalFilled": outcome.total_size,
            "oid": outcome.order_id,
            "message": f"Successfully {verb} {request.size} {request.coin}",
        }
    if isinstance(outcome, Resting):
        return {
            "success": True,
            "status": "resting",
            "oid": outcome.order_id,
            "message": "Order placed and waiting to be filled",
            "coin": request.coin,
            "side": side,
        }
    if isinstance(outcome, Rejected):
        return {
            "success": False,
            "error": outcome.reason,
            "coin": request.coin,
            "side": side,
        }
    return {
        "success": False,
        "error": UNEXPECTED_RESPONSE_ERROR,
        "response": outcome.raw_response,
    }
