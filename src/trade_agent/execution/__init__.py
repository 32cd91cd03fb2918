"""Order execution layer -- pricing, leverage, submission and outcome classification."""

from trade_agent.execution.classifier import classify, outcome_to_result
from trade_agent.execution.leverage import LeverageAdjuster
from trade_agent.execution.pricing import quantize, round_to_tick, tick_rule_for
from trade_agent.execution.submitter import OrderSubmitter

__all__ = [
    "LeverageAdjuster",
    "OrderSubmitter",
    "classify",
    "outcome_to_result",
    "quantize",
    "round_to_tick",
    "tick_rule_for",
]
