"""Mint job requests against the admin API."""

from typing import Any, Dict

import structlog
from pydantic import ValidationError

from nftgate.core.exceptions import MintingError
from nftgate.core.models import MintRequest
from nftgate.data.admin_client import AdminApiClient

logger = structlog.get_logger(__name__)

V1_START_MINT_721_PATH = "/v1/admin/nft/mint/721_mint"
V1_START_MINT_1155_PATH = "/v1/admin/nft/mint/1155_mint"


async def _start_mint(client: AdminApiClient, path: str, body: Dict[str, Any]) -> MintRequest:
    client.require_secret_key()

    response = await client.post(path, body)
    try:
        request = MintRequest.model_validate(response)
    except ValidationError as e:
        logger.error("Mint response has unexpected shape", path=path, error=str(e))
        raise MintingError(details={"path": path}) from e

    if not request.succeeded:
        logger.error(
            "Mint request rejected",
            path=path,
            status=request.status,
            error_code=request.error_code,
        )
        raise MintingError(details={"path": path, "status": request.status})

    logger.info("Mint request queued", path=path, request_id=request.request_id)
    return request


async def start_mint_721(
    client: AdminApiClient, contract_id: str, quantity: int, destination_address: str
) -> MintRequest:
    body = {
        "contract_id": contract_id,
        "quantity": quantity,
        "destination_address": destination_address,
    }
    return await _start_mint(client, V1_START_MINT_721_PATH, body)


async def start_mint_1155(
    client: AdminApiClient,
    contract_id: str,
    quantity: int,
    destination_address: str,
    token_id: int,
) -> MintRequest:
    body = {
        "contract_id": contract_id,
        "quantity": quantity,
        "destination_address": destination_address,
        "token_id": token_id,
    }
    return await _start_mint(client, V1_START_MINT_1155_PATH, body)
