"""Custom exceptions for the trade agent.

Every fatal pipeline failure raises a subclass of TradeAgentError. The
orchestrator turns it into a ``{"success": false, ...}`` result, merging the
exception's ``context`` so callers get remediation details (for example the
list of secret names that do exist).

Exchange rejections and unexpected response shapes are NOT exceptions; they
are OrderOutcome variants (see trade_agent.models).
"""

from typing import Any


class TradeAgentError(Exception):
    """Base exception for all trade agent errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context


class ConfigurationMissing(TradeAgentError):
    """Raised when a required identifier or setting is absent (workspace id, API key)."""


class InvalidTradeRequest(TradeAgentError):
    """Raised when capability arguments fail validation."""


class SecretStoreUnavailable(TradeAgentError):
    """Raised when the secret listing or value fetch does not succeed."""


class SecretNotFound(TradeAgentError):
    """Raised when no secret in the workspace matches the requested name."""

    def __init__(self, secret_name: str, available: list[str]) -> None:
        super().__init__(
            f'Secret "{secret_name}" not found in OpenServ workspace',
            availableSecrets=list(available),
        )
        self.secret_name = secret_name
        self.available = list(available)


class UnknownCoin(TradeAgentError):
    """Raised when a coin has no price entry or is absent from the asset universe."""

    def __init__(self, coin: str, message: str | None = None) -> None:
        super().__init__(
            message or f'Coin "{coin}" not found. Check symbol (e.g., "BTC", "ETH")',
            coin=coin,
        )
        self.coin = coin


class LeverageUpdateFailed(TradeAgentError):
    """Raised inside the leverage adjuster; never escapes it."""


class PriceQuantizationError(TradeAgentError):
    """Raised when a biased price rounds to a non-positive limit price."""
