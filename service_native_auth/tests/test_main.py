"""
Tests for the native auth HTTP service.
"""

import httpx
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from shared.config import get_config

from service_native_auth.app.main import NativeAuthService, strip_bearer
from service_native_auth.app.validation import InvalidWildcardOriginError
from .helpers import API_URL, BLOCK_TIMESTAMP, IMPERSONATE_URL, ORIGIN, WalletAccount, build_token


def make_service(transport, **overrides) -> NativeAuthService:
    options = {"api_url": API_URL, "accepted_origins": [ORIGIN], "redis_url": None}
    options.update(overrides)
    return NativeAuthService(transport=transport, **options)


@pytest.fixture
def service(block_api):
    return make_service(block_api.transport)


@pytest.fixture
def client(service):
    """Create test client."""
    return TestClient(service.app)


@pytest.fixture
def failing_client():
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    return TestClient(make_service(transport).app)


def test_strip_bearer():
    assert strip_bearer("Bearer abc.def.0a") == "abc.def.0a"
    assert strip_bearer("abc.def.0a") == "abc.def.0a"


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "native_auth"
    assert data["version"] == "1.0.0"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "native_auth"
    assert data["status"] == "ok"
    assert data["dependencies"] == {"block_api": "ok"}


def test_health_check_reports_block_api_failure(failing_client):
    response = failing_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["dependencies"]["block_api"] == "error"


def test_metrics_endpoint(client, account):
    client.post("/auth/verify", json={"token": build_token(account)})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "native_auth_validations_total" in response.text


def test_request_id_echoed(client):
    response = client.get("/", headers={"x-request-id": "req-123"})
    assert response.headers["x-request-id"] == "req-123"


def test_invalid_wildcard_origin_fails_startup(block_api):
    with pytest.raises(InvalidWildcardOriginError):
        make_service(block_api.transport, accepted_origins=["a*b*c"])


class TestVerifyEndpoint:
    """Test cases for POST /auth/verify."""

    def test_valid_token(self, client, account):
        response = client.post("/auth/verify", json={"token": build_token(account)})

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["result"] == {
            "issued": BLOCK_TIMESTAMP,
            "expires": BLOCK_TIMESTAMP + 3600 * 1000,
            "origin": ORIGIN,
            "address": account.address,
            "signerAddress": account.address,
        }

    def test_bearer_prefix_accepted(self, client, account):
        response = client.post("/auth/verify", json={"token": f"Bearer {build_token(account)}"})

        assert response.status_code == 200

    def test_expired_token(self, client, block_api, account):
        block_api.current_timestamp = BLOCK_TIMESTAMP + 3600 * 1000 + 1

        response = client.post(
            "/auth/verify",
            json={"token": build_token(account)},
            headers={"x-request-id": "req-expired"}
        )

        assert response.status_code == 401
        assert "TOKEN_EXPIRED" in response.headers["www-authenticate"]
        data = response.json()
        assert data["code"] == "TOKEN_EXPIRED"
        assert data["request_id"] == "req-expired"

    def test_origin_not_accepted(self, client, account):
        response = client.post(
            "/auth/verify", json={"token": build_token(account, origin="https://evil.example.org")}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "ORIGIN_NOT_ACCEPTED"

    def test_malformed_token(self, client):
        response = client.post("/auth/verify", json={"token": "garbage"})

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"

    def test_block_api_failure(self, failing_client, account):
        response = failing_client.post("/auth/verify", json={"token": build_token(account)})

        assert response.status_code == 502
        assert response.json()["code"] == "EXTERNAL_SERVICE_ERROR"

    def test_missing_body(self, client):
        response = client.post("/auth/verify", json={})

        assert response.status_code == 422


class TestDecodeEndpoint:
    """Test cases for POST /auth/decode."""

    def test_decode(self, client, block_api, account):
        response = client.post("/auth/decode", json={"token": build_token(account, ttl=120)})

        assert response.status_code == 200
        decoded = response.json()["decoded"]
        assert decoded["address"] == account.address
        assert decoded["origin"] == ORIGIN
        assert decoded["ttl"] == 120
        assert "blockHash" in decoded
        assert block_api.requests == []

    def test_decode_malformed(self, client):
        response = client.post("/auth/decode", json={"token": "a.b"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TOKEN"


class TestQueryEndpoint:
    """Test cases for GET /auth."""

    def test_missing_token(self, client):
        response = client.get("/auth")

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_invalid_token(self, client, other_account, account):
        response = client.get("/auth", params={"accessToken": build_token(account, signer=other_account)})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid or expired token"}

    def test_valid_token(self, client, account):
        response = client.get("/auth", params={"accessToken": build_token(account)})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"] == {"user": account.address}

    def test_impersonated_account_is_the_user(self, block_api, account):
        target = WalletAccount.generate().address
        service = make_service(block_api.transport, validate_impersonate_url=IMPERSONATE_URL)
        token = build_token(account, extra_info={"impersonate": target})

        response = TestClient(service.app).get("/auth", params={"accessToken": token})

        assert response.status_code == 200
        assert response.json()["user"] == {"user": target}


class TestChainDefaults:
    """Test cases for the default chain settings."""

    def test_defaults(self):
        config = get_config("native_auth", 8010)

        assert config.address_hrp == "vibe"
        assert config.api_url == "https://api.vibechain.ai"

    def test_foreign_chain_address_rejected(self, client):
        account = WalletAccount.generate(hrp="erd")

        response = client.post("/auth/verify", json={"token": build_token(account)})

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"


class TestCors:
    """Test cases for browser access to /auth."""

    @pytest.fixture
    def cors_client(self, block_api):
        return TestClient(make_service(block_api.transport, cors_origins=[ORIGIN]).app)

    def test_preflight(self, cors_client):
        response = cors_client.options(
            "/auth",
            headers={"Origin": ORIGIN, "Access-Control-Request-Method": "GET"}
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ORIGIN

    def test_preflight_from_unknown_origin(self, cors_client):
        response = cors_client.options(
            "/auth",
            headers={"Origin": "https://evil.example.org", "Access-Control-Request-Method": "GET"}
        )

        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers

    def test_response_carries_allow_origin(self, cors_client, account):
        response = cors_client.get(
            "/auth",
            params={"accessToken": build_token(account)},
            headers={"Origin": ORIGIN}
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ORIGIN


class TestStartupWarnings:
    """Test cases for startup logging."""

    def test_open_origins_warned(self, block_api):
        service = make_service(block_api.transport, accepted_origins=["*"])

        with patch.object(service, "logger") as logger:
            with TestClient(service.app):
                pass

        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["accepted_origins"] == ["*"]

    def test_restricted_origins_not_warned(self, service):
        with patch.object(service, "logger") as logger:
            with TestClient(service.app):
                pass

        logger.warning.assert_not_called()
