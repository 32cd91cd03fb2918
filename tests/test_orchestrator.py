"""Tests for the trade orchestrator.

Tests verify:
- A BTC buy runs the full pipeline and returns the filled result
- Missing secrets halt before any exchange contact and list available names
- Unknown coins halt before leverage or submission
- Leverage failures never block the order
- Rejected, resting and malformed replies map onto their result shapes
- Vault addresses and network selection reach the client factory
- execute() never raises and always closes the client it built
- Concurrent requests share no state
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from trade_agent.config import AppSettings, HyperliquidSettings, OpenServSettings
from trade_agent.exchange.client import ExchangeClient
from trade_agent.models import (
    AssetMetadata,
    Network,
    OrderSide,
    ResolvedCredentials,
    TradeRequest,
)
from trade_agent.orchestrator import TradeOrchestrator


def _request(**overrides) -> TradeRequest:
    fields = {
        "coin": "BTC",
        "side": OrderSide.BUY,
        "size": "0.01",
        "pk_name": "k1",
        "leverage": 5,
    }
    fields.update(overrides)
    return TradeRequest(**fields)


@pytest.fixture
def built_clients() -> list[ResolvedCredentials]:
    """Credentials handed to the client factory, in call order."""
    return []


@pytest.fixture
def orchestrator(settings, secret_store, mock_client, built_clients) -> TradeOrchestrator:
    def client_factory(credentials: ResolvedCredentials) -> ExchangeClient:
        built_clients.append(credentials)
        return mock_client

    return TradeOrchestrator(
        settings,
        secret_store_factory=lambda: secret_store,
        client_factory=client_factory,
    )


class TestHappyPath:

    @pytest.mark.asyncio
    async def test_btc_buy_filled(self, orchestrator, mock_client) -> None:
        result = await orchestrator.execute(_request(), "ws-1")

        assert result == {
            "success": True,
            "coin": "BTC",
            "side": "buy",
            "size": "0.01",
            "leverage": "5",
            "avgFillPrice": "50010",
            "totalFilled": "0.01",
            "oid": 77738308,
            "message": "Successfully longed 0.01 BTC",
        }
        btc = AssetMetadata(name="BTC", index=0, size_decimals=5)
        mock_client.connect.assert_awaited_once()
        mock_client.update_leverage.assert_awaited_once_with(btc, 5, is_cross=True)
        assert mock_client.place_order.await_args.args == (btc, True, "50100", "0.01")
        assert mock_client.place_order.await_args.kwargs == {"reduce_only": False, "tif": "Ioc"}
        mock_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sell_without_leverage(self, orchestrator, mock_client) -> None:
        result = await orchestrator.execute(
            _request(coin="ETH", side=OrderSide.SELL, size="0.5", leverage=None), "ws-1"
        )

        assert result["success"] is True
        assert result["leverage"] is None
        assert result["message"] == "Successfully shorted 0.5 ETH"
        mock_client.update_leverage.assert_not_awaited()
        assert mock_client.place_order.await_args.args[2] == "2994.0"

    @pytest.mark.asyncio
    async def test_reduce_only_forwarded(self, orchestrator, mock_client) -> None:
        await orchestrator.execute(_request(reduce_only=True), "ws-1")
        assert mock_client.place_order.await_args.kwargs["reduce_only"] is True

    @pytest.mark.asyncio
    async def test_quoted_key_is_unquoted(self, orchestrator, built_clients) -> None:
        await orchestrator.execute(_request(), "ws-1")
        assert built_clients[0].private_key == "0xprivatekey1"
        assert built_clients[0].network is Network.MAINNET
        assert built_clients[0].vault_address is None

    @pytest.mark.asyncio
    async def test_secret_store_closed(self, orchestrator, secret_store) -> None:
        await orchestrator.execute(_request(), "ws-1")
        assert secret_store.closed is True


class TestCredentialFailures:

    @pytest.mark.asyncio
    async def test_missing_workspace(self, orchestrator, secret_store, built_clients) -> None:
        result = await orchestrator.execute(_request(), None)
        assert result == {
            "success": False,
            "error": "Workspace ID is required to fetch secrets",
        }
        assert secret_store.list_calls == 0
        assert built_clients == []

    @pytest.mark.asyncio
    async def test_missing_secret_lists_available(self, orchestrator, mock_client, built_clients) -> None:
        result = await orchestrator.execute(_request(pk_name="missing"), "ws-1")

        assert result == {
            "success": False,
            "error": 'Secret "missing" not found in OpenServ workspace',
            "availableSecrets": ["k1", "k2", "vault1"],
        }
        assert built_clients == []
        mock_client.place_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_listing_failure(self, settings, make_secret_store, mock_client) -> None:
        store = make_secret_store({"k1": "x"}, fail_listing=True)
        orchestrator = TradeOrchestrator(
            settings, secret_store_factory=lambda: store, client_factory=lambda c: mock_client
        )
        result = await orchestrator.execute(_request(), "ws-1")
        assert result == {
            "success": False,
            "error": "Failed to list secrets: 500",
            "status": 500,
        }
        assert store.closed is True

    @pytest.mark.asyncio
    async def test_missing_api_key(self, mock_client) -> None:
        settings = AppSettings(openserv=OpenServSettings(api_key=""))  # type: ignore[arg-type]
        orchestrator = TradeOrchestrator(settings, client_factory=lambda c: mock_client)
        result = await orchestrator.execute(_request(), "ws-1")
        assert result == {"success": False, "error": "OPENSERV_API_KEY not configured"}


class TestVaultAndNetwork:

    @pytest.mark.asyncio
    async def test_vault_address_resolved(self, orchestrator, built_clients) -> None:
        result = await orchestrator.execute(_request(vault_name="vault1"), "ws-1")
        assert result["success"] is True
        assert built_clients[0].vault_address == "0xvaultaddress"

    @pytest.mark.asyncio
    async def test_missing_vault_continues(self, orchestrator, built_clients, mock_client) -> None:
        result = await orchestrator.execute(_request(vault_name="no_vault"), "ws-1")
        assert result["success"] is True
        assert built_clients[0].vault_address is None
        mock_client.place_order.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_testnet_selected(self, secret_store, mock_client, built_clients) -> None:
        settings = AppSettings(hyperliquid=HyperliquidSettings(testnet=True))

        def client_factory(credentials: ResolvedCredentials) -> ExchangeClient:
            built_clients.append(credentials)
            return mock_client

        orchestrator = TradeOrchestrator(
            settings, secret_store_factory=lambda: secret_store, client_factory=client_factory
        )
        assert orchestrator.network is Network.TESTNET
        await orchestrator.execute(_request(), "ws-1")
        assert built_clients[0].network is Network.TESTNET


class TestMarketFailures:

    @pytest.mark.asyncio
    async def test_unknown_coin(self, orchestrator, mock_client) -> None:
        result = await orchestrator.execute(_request(coin="ZZZ"), "ws-1")

        assert result["success"] is False
        assert result["error"].startswith('Coin "ZZZ" not found')
        assert result["coin"] == "ZZZ"
        mock_client.update_leverage.assert_not_awaited()
        mock_client.place_order.assert_not_awaited()
        mock_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_price_without_universe_entry(self, orchestrator, mock_client) -> None:
        mock_client.fetch_all_mids.return_value = {"BTC": "50000", "NEW": "1.5"}
        result = await orchestrator.execute(_request(coin="NEW", leverage=None), "ws-1")
        assert result["success"] is False
        assert result["error"] == 'Asset "NEW" not found in universe'
        mock_client.place_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connect_failure(self, orchestrator, mock_client) -> None:
        mock_client.connect.side_effect = ConnectionError("dns failure")
        result = await orchestrator.execute(_request(), "ws-1")
        assert result == {"success": False, "error": "dns failure"}
        mock_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_client_construction_failure(self, settings, secret_store) -> None:
        def client_factory(credentials: ResolvedCredentials) -> ExchangeClient:
            raise ValueError("Non-hexadecimal digit found")

        orchestrator = TradeOrchestrator(
            settings, secret_store_factory=lambda: secret_store, client_factory=client_factory
        )
        result = await orchestrator.execute(_request(), "ws-1")
        assert result == {"success": False, "error": "Non-hexadecimal digit found"}


class TestLeverageIsBestEffort:

    @pytest.mark.asyncio
    async def test_leverage_exception_still_submits(self, orchestrator, mock_client) -> None:
        mock_client.update_leverage.side_effect = RuntimeError("leverage endpoint down")
        result = await orchestrator.execute(_request(), "ws-1")
        assert result["success"] is True
        mock_client.place_order.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_leverage_err_reply_still_submits(self, orchestrator, mock_client) -> None:
        mock_client.update_leverage.return_value = {"status": "err", "response": "Invalid leverage"}
        result = await orchestrator.execute(_request(leverage=100), "ws-1")
        assert result["success"] is True
        assert result["leverage"] == "100"
        mock_client.place_order.assert_awaited_once()


class TestOrderOutcomes:

    @pytest.mark.asyncio
    async def test_rejected(self, orchestrator, mock_client) -> None:
        mock_client.place_order.return_value = {
            "status": "ok",
            "response": {
                "type": "order",
                "data": {"statuses": [{"error": "Insufficient margin to place order."}]},
            },
        }
        result = await orchestrator.execute(_request(), "ws-1")
        assert result == {
            "success": False,
            "error": "Insufficient margin to place order.",
            "coin": "BTC",
            "side": "buy",
        }

    @pytest.mark.asyncio
    async def test_resting(self, orchestrator, mock_client) -> None:
        mock_client.place_order.return_value = {
            "status": "ok",
            "response": {"type": "order", "data": {"statuses": [{"resting": {"oid": 5}}]}},
        }
        result = await orchestrator.execute(_request(), "ws-1")
        assert result["success"] is True
        assert result["status"] == "resting"
        assert result["oid"] == 5

    @pytest.mark.asyncio
    async def test_malformed(self, orchestrator, mock_client) -> None:
        reply = {"status": "err", "response": "User or API Wallet does not exist."}
        mock_client.place_order.return_value = reply
        result = await orchestrator.execute(_request(), "ws-1")
        assert result == {
            "success": False,
            "error": "Unexpected response from exchange",
            "response": reply,
        }

    @pytest.mark.asyncio
    async def test_submit_exception(self, orchestrator, mock_client) -> None:
        mock_client.place_order.side_effect = ConnectionError()
        result = await orchestrator.execute(_request(), "ws-1")
        assert result == {"success": False, "error": "Unknown error"}
        mock_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_failure_does_not_mask_result(self, orchestrator, mock_client) -> None:
        mock_client.close.side_effect = RuntimeError("already closed")
        result = await orchestrator.execute(_request(), "ws-1")
        assert result["success"] is True


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_concurrent_requests_are_independent(self, settings, make_secret_store) -> None:
        stores = []
        clients = {}

        def store_factory():
            store = make_secret_store({"k1": "0xkeyA", "k2": "0xkeyB"})
            stores.append(store)
            return store

        def client_factory(credentials: ResolvedCredentials) -> ExchangeClient:
            client = AsyncMock(spec=ExchangeClient)
            client.fetch_all_mids.return_value = {"BTC": "50000", "ETH": "3000"}
            client.fetch_meta.return_value = {
                "universe": [
                    {"name": "BTC", "szDecimals": 5},
                    {"name": "ETH", "szDecimals": 4},
                ]
            }
            client.update_leverage.return_value = {"status": "ok"}
            client.place_order.return_value = {
                "status": "ok",
                "response": {
                    "type": "order",
                    "data": {"statuses": [{"filled": {"totalSz": "1", "avgPx": "1", "oid": 1}}]},
                },
            }
            clients[credentials.private_key] = client
            return client

        orchestrator = TradeOrchestrator(
            settings, secret_store_factory=store_factory, client_factory=client_factory
        )

        btc, eth = await asyncio.gather(
            orchestrator.execute(_request(pk_name="k1"), "ws-a"),
            orchestrator.execute(
                _request(coin="ETH", side=OrderSide.SELL, size="0.5", pk_name="k2"), "ws-b"
            ),
        )

        assert btc["coin"] == "BTC"
        assert btc["success"] is True
        assert eth["coin"] == "ETH"
        assert eth["success"] is True
        assert len(stores) == 2
        assert all(store.list_calls == 1 for store in stores)
        assert clients["0xkeyA"].place_order.await_args.args[2] == "50100"
        assert clients["0xkeyB"].place_order.await_args.args[2] == "2994.0"
        clients["0xkeyA"].close.assert_awaited_once()
        clients["0xkeyB"].close.assert_awaited_once()
