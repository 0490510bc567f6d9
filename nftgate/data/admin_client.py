"""
Async admin API client.

Wraps the admin REST API with secret-key authentication, JSON envelopes and
structured error handling.
"""

from typing import Any, Dict, Optional

import httpx
import structlog
from httpx import HTTPStatusError, TimeoutException

from nftgate.core.config import AdminApiConfig
from nftgate.core.exceptions import (
    ApiKeyMissingError,
    ExternalServiceError,
    TimeoutError as NFTGateTimeoutError,
)
from nftgate.core.models import SUCCESS_STATUS

logger = structlog.get_logger(__name__)

SECRET_KEY_HEADER = "X-Magic-Secret-key"
SERVICE_NAME = "admin_api"


class AdminApiClient:
    """
    Async client for the admin REST API.

    The secret key is checked lazily so callers can build the client before
    configuration is complete; every authenticated call goes through
    ``require_secret_key`` first.
    """

    def __init__(self, config: AdminApiConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_seconds), follow_redirects=True
        )

        logger.debug(
            "Admin API client initialized",
            base_url=config.api_base_url,
            has_secret_key=bool(config.secret_api_key),
        )

    @property
    def base_url(self) -> str:
        return self.config.api_base_url

    def require_secret_key(self) -> str:
        """Return the secret key or raise before any network call is made."""
        if not self.config.secret_api_key:
            raise ApiKeyMissingError()
        return self.config.secret_api_key

    def _get_headers(self) -> Dict[str, str]:
        return {
            SECRET_KEY_HEADER: self.require_secret_key(),
            "Content-Type": "application/json",
        }

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an authenticated request to the admin API.

        Args:
            method: HTTP method
            path: API path (without base URL)
            json_data: JSON payload
            params: Query parameters

        Returns:
            Decoded JSON envelope

        Raises:
            ApiKeyMissingError: No secret key configured
            ExternalServiceError: HTTP error or undecodable response
            TimeoutError: Request exceeded the configured timeout
        """
        headers = self._get_headers()
        url = f"{self.base_url}{path}"

        try:
            logger.debug("Making admin API request", method=method, path=path, has_data=bool(json_data))

            response = await self.client.request(
                method=method, url=url, json=json_data, params=params, headers=headers
            )
            response.raise_for_status()

        except HTTPStatusError as e:
            logger.error(
                "Admin API HTTP error",
                status_code=e.response.status_code,
                response_text=e.response.text[:500],
                path=path,
            )
            raise ExternalServiceError(
                SERVICE_NAME,
                f"HTTP {e.response.status_code} - {e.response.text[:200]}",
                status_code=e.response.status_code,
                details={"path": path},
            ) from e

        except TimeoutException as e:
            logger.error("Admin API timeout", path=path, error=str(e))
            raise NFTGateTimeoutError(f"Admin API timeout: {e}", details={"path": path}) from e

        except httpx.HTTPError as e:
            logger.error("Admin API transport error", path=path, error=str(e))
            raise ExternalServiceError(SERVICE_NAME, str(e), details={"path": path}) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                SERVICE_NAME,
                "response is not valid JSON",
                status_code=response.status_code,
                details={"path": path},
            ) from e

        if not isinstance(payload, dict):
            raise ExternalServiceError(
                SERVICE_NAME,
                "response is not a JSON object",
                status_code=response.status_code,
                details={"path": path},
            )
        return payload

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET ``path`` and return the ``data`` of a successful envelope."""
        payload = await self.request("GET", path, params=params)
        if payload.get("status") != SUCCESS_STATUS:
            logger.warning(
                "Admin API returned failure status",
                path=path,
                status=payload.get("status"),
                error_code=payload.get("error_code"),
            )
            raise ExternalServiceError(
                SERVICE_NAME,
                payload.get("message") or "request failed",
                details={"path": path, "error_code": payload.get("error_code")},
            )
        data = payload.get("data")
        return data if isinstance(data, dict) else {}

    async def post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON ``body`` and return the raw envelope for the caller to check."""
        return await self.request("POST", path, json_data=body)
