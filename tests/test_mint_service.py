"""Validate mint requests against a mocked admin API."""

import asyncio
import json

import httpx
import pytest

from nftgate.core.config import AdminApiConfig
from nftgate.core.exceptions import ApiKeyMissingError, ExternalServiceError, MintingError
from nftgate.data.admin_client import SECRET_KEY_HEADER, AdminApiClient
from nftgate.services.mint_service import start_mint_721, start_mint_1155

OK_RESPONSE = {"status": "ok", "error_code": "", "message": "", "data": {"request_id": "req_123"}}


class RecordingHandler:
    """MockTransport handler that returns a canned response and keeps requests."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = OK_RESPONSE if payload is None else payload
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


def make_client(handler, secret_api_key="sk_live_123"):
    return AdminApiClient(
        AdminApiConfig(secret_api_key=secret_api_key, api_base_url="https://admin.test"),
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestStartMint:
    """Validate both mint endpoints."""

    def test_mint_721_request(self):
        """Test the ERC721 mint path, headers and body."""
        handler = RecordingHandler()

        result = asyncio.run(start_mint_721(make_client(handler), "contract-1", 2, "0xdest"))

        assert result.request_id == "req_123"
        assert result.status == "ok"
        request = handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://admin.test/v1/admin/nft/mint/721_mint"
        assert request.headers[SECRET_KEY_HEADER] == "sk_live_123"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {
            "contract_id": "contract-1",
            "quantity": 2,
            "destination_address": "0xdest",
        }

    def test_mint_1155_request(self):
        """Test the ERC1155 mint body includes the token id."""
        handler = RecordingHandler()

        result = asyncio.run(start_mint_1155(make_client(handler), "contract-2", 5, "0xdest", 42))

        assert result.request_id == "req_123"
        request = handler.requests[0]
        assert str(request.url) == "https://admin.test/v1/admin/nft/mint/1155_mint"
        assert json.loads(request.content) == {
            "contract_id": "contract-2",
            "quantity": 5,
            "destination_address": "0xdest",
            "token_id": 42,
        }

    def test_missing_secret_key_fails_before_network(self):
        """Test minting without a key never sends a request."""
        handler = RecordingHandler()

        with pytest.raises(ApiKeyMissingError) as exc_info:
            asyncio.run(start_mint_721(make_client(handler, secret_api_key=None), "c", 1, "0xd"))

        assert exc_info.value.code == "ERROR_SECRET_API_KEY_MISSING"
        assert handler.requests == []

    @pytest.mark.parametrize(
        "payload",
        [
            {"status": "failed", "error_code": "QUOTA", "message": "no", "data": {"request_id": "r"}},
            {"status": "ok"},
            {"status": "ok", "data": {}},
            {"status": "ok", "data": {"request_id": ""}},
            {"data": {"request_id": "r"}},
            {"status": "ok", "data": "req_123"},
        ],
    )
    def test_rejected_or_misshaped_response(self, payload):
        """Test non-ok or misshaped envelopes raise MintingError."""
        handler = RecordingHandler(payload=payload)

        with pytest.raises(MintingError) as exc_info:
            asyncio.run(start_mint_1155(make_client(handler), "c", 1, "0xd", 1))

        assert exc_info.value.code == "ERROR_MINTING"
        assert str(exc_info.value) == "An error occurred while minting."

    def test_http_error_is_operational(self):
        """Test HTTP errors surface as ExternalServiceError."""
        handler = RecordingHandler(status_code=502, payload={"status": "failed"})

        with pytest.raises(ExternalServiceError) as exc_info:
            asyncio.run(start_mint_721(make_client(handler), "c", 1, "0xd"))
        assert exc_info.value.status_code == 502


class TestAdminApiClient:
    """Validate admin client error mapping."""

    def test_non_json_response(self):
        """Test a non-JSON body raises ExternalServiceError."""
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ExternalServiceError, match="not valid JSON"):
            asyncio.run(client.post("/x", {}))

    def test_non_object_response(self):
        """Test a JSON array body raises ExternalServiceError."""
        client = make_client(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(ExternalServiceError, match="not a JSON object"):
            asyncio.run(client.post("/x", {}))

    def test_transport_error(self):
        """Test connection failures raise ExternalServiceError."""
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ExternalServiceError):
            asyncio.run(make_client(handler).post("/x", {}))

    def test_timeout(self):
        """Test read timeouts raise TimeoutError."""
        from nftgate.core.exceptions import TimeoutError as NFTGateTimeoutError

        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(NFTGateTimeoutError):
            asyncio.run(make_client(handler).post("/x", {}))

    def test_get_unwraps_data(self):
        """Test GET returns the envelope's data object."""
        client = make_client(
            lambda request: httpx.Response(200, json={"status": "ok", "data": {"a": 1}})
        )

        assert asyncio.run(client.get("/x")) == {"a": 1}

    def test_base_url_trailing_slash_is_stripped(self):
        """Test a trailing slash on the base URL is dropped."""
        config = AdminApiConfig(secret_api_key="k", api_base_url="https://admin.test/")

        assert config.api_base_url == "https://admin.test"
