"""Tests for ConnectionManager, REST routes and the /ws/live WebSocket endpoint."""
import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

import api.main as api_main
from common.entitlements import StaticEntitlementProvider
from common.models import AssetSnapshot, PricePoint, ScanResult
from scanner.cycle import classify
from storage.latest import store


@pytest.fixture
def manager():
    """Fresh ConnectionManager for each test."""
    from api.main import ConnectionManager
    return ConnectionManager()


def make_snapshot(id, change=None, volume=None, market_cap=None, history=()):
    return AssetSnapshot(
        id=id, symbol=id.upper(), name=id.title(), price=0.25,
        change_24h=change, volume=volume, market_cap=market_cap,
        price_history=tuple(PricePoint(time=i, price=p) for i, p in enumerate(history)),
    )


@pytest.fixture
def published():
    """Publish a small scan into the shared store, clear it afterwards."""
    result = ScanResult(
        assets=classify([
            make_snapshot("alpha", change=12, volume=1.2e9, market_cap=2e9, history=[1, 2, 3, 4, 5]),
            make_snapshot("beta", change=-8, volume=3e7, market_cap=5e7, history=[5, 4, 3, 2, 1]),
            make_snapshot("gamma", change=-8, history=[5, 4, 3, 2, 1]),
        ]),
        page=4,
        timestamp=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )
    store.publish(result)
    yield result
    store.clear()


@pytest.fixture
def client(monkeypatch):
    # no lifespan: the background poller never starts
    monkeypatch.setattr(api_main, "poller", MagicMock(busy=False))
    store.clear()
    yield TestClient(api_main.app)
    store.clear()


class TestConnectionManager:
    def test_initial_state_empty(self, manager):
        assert manager.active_connections == []

    @pytest.mark.asyncio
    async def test_connect_adds_websocket(self, manager):
        ws = AsyncMock()
        await manager.connect(ws)
        assert ws in manager.active_connections
        ws.accept.assert_awaited_once()

    def test_disconnect_unknown_websocket_is_safe(self, manager):
        manager.disconnect(AsyncMock())

    @pytest.mark.asyncio
    async def test_broadcast_sends_to_all_connections(self, manager):
        ws1, ws2 = AsyncMock(), AsyncMock()
        await manager.connect(ws1)
        await manager.connect(ws2)

        payload = {"type": "scan_error", "timestamp": "2026-10-19T12:00:00Z", "message": "x"}
        await manager.broadcast(payload)

        expected = json.dumps(payload)
        ws1.send_text.assert_awaited_once_with(expected)
        ws2.send_text.assert_awaited_once_with(expected)

    @pytest.mark.asyncio
    async def test_broadcast_removes_dead_connections(self, manager):
        ws_dead = AsyncMock()
        ws_dead.send_text.side_effect = RuntimeError("connection closed")
        ws_alive = AsyncMock()
        await manager.connect(ws_dead)
        await manager.connect(ws_alive)

        await manager.broadcast({"type": "scores_update", "scores": []})

        assert ws_dead not in manager.active_connections
        ws_alive.send_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_broadcast_survives_disconnect_during_send(self, manager):
        a, b, c = AsyncMock(), AsyncMock(), AsyncMock()
        for ws in (a, b, c):
            await manager.connect(ws)

        async def drop_first(message):
            manager.disconnect(a)
        b.send_text.side_effect = drop_first

        await manager.broadcast({"type": "scores_update", "scores": []})

        assert c.send_text.await_count == 1
        assert manager.active_connections == [b, c]


class TestScoresRoutes:
    def test_empty_before_first_scan(self, client):
        body = client.get("/scores").json()
        assert body["scores"] == []
        assert body["count"] == 0

    def test_default_sorted_by_score(self, client, published):
        body = client.get("/scores").json()
        assert [r["id"] for r in body["scores"]] == ["alpha", "beta", "gamma"]
        assert body["page"] == 4
        top = body["scores"][0]
        assert top["score"] == 89
        assert top["signal"] == "BUY"
        assert top["sentiment"] == "BULLISH"
        assert top["trend"] == "UP"
        assert top["display"]["price"] == "0.250000"
        assert top["display"]["change_24h"] == "+12.00%"
        assert top["display"]["volume"] == "$1.2B"

    def test_filter_by_signal(self, client, published):
        body = client.get("/scores", params={"signal": "SELL"}).json()
        assert [r["id"] for r in body["scores"]] == ["gamma"]

    def test_sort_by_volume(self, client, published):
        body = client.get("/scores", params={"sort": "volume"}).json()
        assert [r["id"] for r in body["scores"]] == ["alpha", "beta", "gamma"]

    def test_api_prefix(self, client, published):
        assert client.get("/api/scores").json()["count"] == 3

    def test_invalid_filter_rejected(self, client):
        assert client.get("/scores", params={"signal": "HOLD"}).status_code == 422
        assert client.get("/scores", params={"sort": "name"}).status_code == 422

    def test_detail(self, client, published):
        body = client.get("/scores/beta").json()
        assert body["score"] == 56
        assert body["signal"] == "WAIT"
        assert body["factor_scores"]["momentum"] == 25
        assert [p["price"] for p in body["price_history"]] == [5, 4, 3, 2, 1]

    def test_detail_unknown(self, client, published):
        assert client.get("/scores/nope").status_code == 404

    def test_failure_visible_alongside_stale_data(self, client, published):
        store.record_failure("Scanner temporarily rate-limited. Please wait 30s.")
        body = client.get("/scores").json()
        assert body["count"] == 3
        assert body["error"].startswith("Scanner temporarily")


class TestOtherRoutes:
    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["last_scan"] is None

    def test_summary(self, client, published):
        assert client.get("/summary").json() == {
            "total": 3, "buy": 1, "sell": 1, "wait": 1, "avg_confidence": 88,
        }

    def test_refresh_triggers_scan(self, client):
        resp = client.post("/scan/refresh")
        assert resp.json()["status"] == "scan triggered"
        api_main.poller.trigger_in_background.assert_called_once()

    def test_refresh_while_busy(self, client):
        api_main.poller.busy = True
        assert client.post("/scan/refresh").json()["status"] == "scan already in progress"
        api_main.poller.trigger_in_background.assert_not_called()

    def test_me_entitlement(self, client, monkeypatch):
        monkeypatch.setattr(api_main, "entitlements", StaticEntitlementProvider(["pro@example.com"]))
        assert client.get("/me", headers={"X-User-Email": "PRO@example.com"}).json()["pro"] is True
        assert client.get("/me", headers={"X-User-Email": "other@example.com"}).json()["pro"] is False
        assert client.get("/me").json() == {"email": None, "pro": False}


class TestWebSocket:
    def test_sends_latest_scan_on_connect(self, client, published):
        with client.websocket_connect("/ws/live") as ws:
            data = ws.receive_json()
        assert data["type"] == "scores_update"
        assert data["timestamp"] == "2026-10-19T12:00:00Z"
        assert [r["id"] for r in data["scores"]] == ["alpha", "beta", "gamma"]
