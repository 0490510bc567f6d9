"""
Admin SDK entry point.

``NFTGate`` wires settings, the admin API client and the DID token verifier
together and exposes them as ``token``, ``users`` and ``nft``.
"""

from typing import Any, Dict, Optional, Union

import httpx
from web3 import AsyncWeb3

from nftgate.core.config import AdminApiConfig, Settings, get_settings
from nftgate.core.models import MintRequest, OwnershipVerdict, TokenStandard, UserMetadata
from nftgate.data.admin_client import AdminApiClient
from nftgate.data.contracts import ContractReader, Web3ContractReader
from nftgate.data.identity import DIDTokenVerifier
from nftgate.services import mint_service
from nftgate.services.ownership_service import validate_token_ownership


class UsersModule:
    """User metadata lookups."""

    def __init__(self, verifier: DIDTokenVerifier):
        self._verifier = verifier

    async def get_metadata_by_issuer(self, issuer: str) -> UserMetadata:
        return await self._verifier.get_metadata_by_issuer(issuer)

    async def get_metadata_by_token(self, did_token: str) -> UserMetadata:
        return await self._verifier.get_metadata_by_token(did_token)

    async def get_metadata_by_public_address(self, public_address: str) -> UserMetadata:
        return await self.get_metadata_by_issuer(f"did:ethr:{public_address}")


class NFTModule:
    """Minting and token gating."""

    def __init__(self, sdk: "NFTGate"):
        self.sdk = sdk

    async def start_mint_721(
        self, contract_id: str, quantity: int, destination_address: str
    ) -> MintRequest:
        return await mint_service.start_mint_721(
            self.sdk.admin, contract_id, quantity, destination_address
        )

    async def start_mint_1155(
        self, contract_id: str, quantity: int, destination_address: str, token_id: int
    ) -> MintRequest:
        return await mint_service.start_mint_1155(
            self.sdk.admin, contract_id, quantity, destination_address, token_id
        )

    async def validate_token_ownership(
        self,
        did_token: str,
        contract_address: str,
        contract_type: Union[TokenStandard, str],
        web3: Union[AsyncWeb3, ContractReader],
        token_id: Optional[str] = None,
    ) -> OwnershipVerdict:
        """
        Token gating: validate the DID token and check on-chain NFT ownership.

        ``web3`` may be an ``AsyncWeb3`` instance or any ``ContractReader``.
        """
        reader = self.sdk.contract_reader(web3)
        return await validate_token_ownership(
            self.sdk.token, did_token, contract_address, contract_type, reader, token_id
        )


class NFTGate:
    """Admin SDK facade."""

    def __init__(
        self,
        secret_api_key: Optional[str] = None,
        api_base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()

        overrides: Dict[str, Any] = {}
        if secret_api_key is not None:
            overrides["secret_api_key"] = secret_api_key
        if api_base_url is not None:
            overrides["api_base_url"] = api_base_url.rstrip("/")
        admin_config: AdminApiConfig = self.settings.admin.model_copy(update=overrides)

        self.admin = AdminApiClient(admin_config, client=http_client)
        self.token = DIDTokenVerifier(
            self.admin, nbf_leeway_seconds=self.settings.identity.nbf_leeway_seconds
        )
        self.users = UsersModule(self.token)
        self.nft = NFTModule(self)

    @property
    def secret_api_key(self) -> Optional[str]:
        return self.admin.config.secret_api_key

    @property
    def api_base_url(self) -> str:
        return self.admin.base_url

    def contract_reader(self, web3: Union[AsyncWeb3, ContractReader]) -> ContractReader:
        if isinstance(web3, ContractReader):
            return web3
        return Web3ContractReader(web3, timeout_seconds=self.settings.chain.read_timeout_seconds)

    async def aclose(self) -> None:
        await self.admin.aclose()

    async def __aenter__(self) -> "NFTGate":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
