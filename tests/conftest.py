"""Shared test fixtures for the trade agent."""

from unittest.mock import AsyncMock

import pytest

from trade_agent.config import AppSettings, HyperliquidSettings, OpenServSettings
from trade_agent.exceptions import SecretStoreUnavailable
from trade_agent.exchange.client import ExchangeClient
from trade_agent.models import SecretEntry
from trade_agent.secrets.store import SecretStore

FILLED_RESPONSE = {
    "status": "ok",
    "response": {
        "type": "order",
        "data": {
            "statuses": [
                {"filled": {"totalSz": "0.01", "avgPx": "50010", "oid": 77738308}}
            ]
        },
    },
}

MOCK_META = {
    "universe": [
        {"name": "BTC", "szDecimals": 5, "maxLeverage": 40},
        {"name": "ETH", "szDecimals": 4, "maxLeverage": 25},
        {"name": "SOL", "szDecimals": 2, "maxLeverage": 20},
    ]
}

MOCK_MIDS = {"BTC": "50000", "ETH": "3000", "SOL": "150.25"}


class FakeSecretStore(SecretStore):
    """In-memory secret store recording every call."""

    def __init__(
        self,
        secrets: dict[str, str],
        fail_listing: bool = False,
        failing_values: set[str] | None = None,
    ) -> None:
        self._entries = [
            SecretEntry(id=f"secret-{i}", name=name) for i, name in enumerate(secrets)
        ]
        self._values = {f"secret-{i}": value for i, value in enumerate(secrets.values())}
        self._fail_listing = fail_listing
        self._failing_values = failing_values or set()
        self.list_calls = 0
        self.value_calls: list[str] = []
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    async def list_secrets(self, workspace_id: str) -> list[SecretEntry]:
        self.list_calls += 1
        if self._fail_listing:
            raise SecretStoreUnavailable("Failed to list secrets: 500", status=500)
        return list(self._entries)

    async def get_secret_value(self, workspace_id: str, secret_id: str) -> str:
        self.value_calls.append(secret_id)
        name = next(e.name for e in self._entries if e.id == secret_id)
        if name in self._failing_values:
            raise SecretStoreUnavailable(f"Failed to get secret {secret_id} value: 503", status=503)
        return self._values[secret_id]


@pytest.fixture
def settings() -> AppSettings:
    """Return AppSettings with test defaults (mainnet, dummy OpenServ key)."""
    return AppSettings(
        log_level="DEBUG",
        openserv=OpenServSettings(
            api_key="test-openserv-key",  # type: ignore[arg-type]
            api_url="https://api.openserv.test",
        ),
        hyperliquid=HyperliquidSettings(testnet=False),
    )


@pytest.fixture
def secret_store() -> FakeSecretStore:
    """Workspace with two keys (one JSON-quoted) and a vault address."""
    return FakeSecretStore(
        {
            "k1": '"0xprivatekey1"',
            "k2": "0xprivatekey2",
            "vault1": '"0xvaultaddress"',
        }
    )


@pytest.fixture
def make_secret_store() -> type[FakeSecretStore]:
    """Return the FakeSecretStore class for tests needing custom contents."""
    return FakeSecretStore


@pytest.fixture
def mock_client() -> AsyncMock:
    """Mock ExchangeClient with BTC/ETH/SOL market data and a filled order reply."""
    client = AsyncMock(spec=ExchangeClient)
    client.fetch_all_mids.return_value = dict(MOCK_MIDS)
    client.fetch_meta.return_value = MOCK_META
    client.update_leverage.return_value = {"status": "ok", "response": {"type": "default"}}
    client.place_order.return_value = FILLED_RESPONSE
    return client
