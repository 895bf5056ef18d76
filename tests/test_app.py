"""Tests for the HTTP surface."""

import httpx
import pytest
from fastapi.testclient import TestClient

import app as app_module
from brain_service.agent_core import BrainCore
from brain_service.errors import UpstreamAuthFailure, UpstreamError, UpstreamRateLimited
from brain_service.price_gateway import PriceGateway
from brain_service.session_context import ANONYMOUS_SESSION
from brain_service.solana_gateway import SolanaGateway

from conftest import WALLET


@pytest.fixture
def api(monkeypatch, store, client, solana, profile):
    """Point the app's singletons at fakes."""
    core = BrainCore(
        memory_store=store,
        completion_client=client,
        solana_gateway=solana,
        profile=profile,
    )
    monkeypatch.setattr(app_module, "brain_core", core)
    monkeypatch.setattr(app_module.settings, "APP_ENV", "production")
    return TestClient(app_module.app, raise_server_exceptions=False)


class TestHealth:
    def test_health(self, api):
        resp = api.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["claudeReady"] is True
        assert body["sessions"] == 0
        assert body["timestamp"].endswith("Z")

    def test_health_without_key(self, api, client):
        client.ready = False
        assert api.get("/api/health").json()["claudeReady"] is False

    def test_index_lists_endpoints(self, api):
        body = api.get("/").json()
        assert body["status"] == "active"
        assert "POST /api/generate" in body["endpoints"]


class TestGenerateEndpoint:
    def test_hello(self, api):
        resp = api.post("/api/generate", json={"message": "Hello"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["response"] == "Hi there"
        assert body["context"]["requestCount"] == 1
        assert set(body["context"]) == {"timestamp", "requestCount"}

    def test_counter_and_wallet_context(self, api, store):
        resp = api.post(
            "/api/generate",
            json={"message": "Hello", "context": {"wallet": WALLET, "requestCount": 2}},
        )
        assert resp.json()["context"]["requestCount"] == 3
        assert len(store.get(WALLET)) == 2

    def test_fractional_counter(self, api):
        resp = api.post("/api/generate", json={"message": "hi", "context": {"requestCount": 2.5}})
        assert resp.status_code == 200
        assert resp.json()["context"]["requestCount"] == 3.5

    @pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "   "}, {"message": 5}])
    def test_bad_message(self, api, store, payload):
        resp = api.post("/api/generate", json=payload)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Message is required"}
        assert store.session_count == 0

    def test_body_not_json(self, api):
        resp = api.post(
            "/api/generate",
            content="message=hi",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_not_configured(self, api, client):
        client.ready = False
        resp = api.post("/api/generate", json={"message": "Hello"})
        assert resp.status_code == 500
        assert resp.json()["error"] == "Claude AI not configured"

    def test_upstream_auth_failure(self, api, client):
        client.error = UpstreamAuthFailure(401, "invalid x-api-key")
        resp = api.post("/api/generate", json={"message": "Hello"})
        assert resp.status_code == 500
        assert "authentication failed" in resp.json()["error"]
        assert len(client.calls) == 1

    def test_upstream_rate_limited(self, api, client, store):
        client.error = UpstreamRateLimited(429, "slow down")
        resp = api.post("/api/generate", json={"message": "Hello"})
        assert resp.status_code == 429
        assert resp.json()["retryAfter"] == 60
        assert resp.headers["retry-after"] == "60"
        assert ANONYMOUS_SESSION not in store

    def test_generic_upstream_error_hides_details_in_production(self, api, client):
        client.error = UpstreamError(500, "boom")
        resp = api.post("/api/generate", json={"message": "Hello"})
        assert resp.status_code == 500
        assert "details" not in resp.json()

    def test_details_in_development(self, api, client, monkeypatch):
        monkeypatch.setattr(app_module.settings, "APP_ENV", "development")
        client.error = UpstreamError(500, "boom")
        body = api.post("/api/generate", json={"message": "Hello"}).json()
        assert body["error"] == "Internal server error. Please try again."
        assert "status=500" in body["details"]

    def test_unexpected_exception_is_500(self, api, client):
        client.error = RuntimeError("kaboom")
        resp = api.post("/api/generate", json={"message": "Hello"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Something went wrong!"}


class TestSolanaEndpoints:
    @pytest.fixture
    def rpc(self, monkeypatch):
        def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"value": 1_000_000_000}})

        gateway = SolanaGateway(rpc_url="https://rpc.test", transport=httpx.MockTransport(handler))
        monkeypatch.setattr(app_module, "solana_gateway", gateway)

    def test_validate_wallet(self, api, rpc):
        resp = api.post("/api/solana/validate-wallet", json={"address": WALLET})
        assert resp.json() == {"valid": True, "balance": 1.0, "address": WALLET}

    @pytest.mark.parametrize("payload", [{"address": "bogus"}, {}, {"address": 7}, ["x"]])
    def test_validate_wallet_invalid(self, api, rpc, payload):
        resp = api.post("/api/solana/validate-wallet", json=payload)
        assert resp.status_code == 200
        assert resp.json() == {"valid": False, "error": "Invalid wallet address"}

    def test_validate_wallet_garbage_body(self, api, rpc):
        resp = api.post("/api/solana/validate-wallet", content=b"\x00\x01")
        assert resp.json()["valid"] is False

    def test_price(self, api, monkeypatch):
        gateway = PriceGateway(
            feed_url="https://prices.test",
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"solana": {"usd": 99.5}})),
        )
        monkeypatch.setattr(app_module, "price_gateway", gateway)
        assert api.get("/api/solana/price").json() == {"price": 99.5}

    def test_price_failure(self, api, monkeypatch):
        gateway = PriceGateway(
            feed_url="https://prices.test",
            transport=httpx.MockTransport(lambda r: httpx.Response(502)),
        )
        monkeypatch.setattr(app_module, "price_gateway", gateway)
        resp = api.get("/api/solana/price")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to fetch SOL price"


class TestNotFound:
    def test_unknown_route(self, api):
        resp = api.get("/api/nope")
        assert resp.status_code == 404
        body = resp.json()
        assert body["error"] == "Endpoint not found"
        assert body["path"] == "/api/nope"
        assert body["method"] == "GET"
        assert "GET /api/solana/price" in body["availableEndpoints"]

    def test_wrong_method_gets_listing(self, api):
        resp = api.get("/api/generate")
        assert resp.status_code == 404
        body = resp.json()
        assert body["method"] == "GET"
        assert "POST /api/generate" in body["availableEndpoints"]
