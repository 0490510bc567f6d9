"""
Read-only NFT contract access.

Each token standard maps to a fixed contract shape: a minimal ``balanceOf``
ABI and the argument list that ABI expects.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple, Type, runtime_checkable

import structlog
from web3 import AsyncWeb3, Web3

from nftgate.core.exceptions import ConfigurationError, ContractReadError, NFTGateError
from nftgate.core.models import TokenStandard
from nftgate.utils.reliability import run_with_timeout

logger = structlog.get_logger(__name__)

# ============================================
# ABIs (minimal, read-only)
# ============================================

ERC721_BALANCE_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC1155_BALANCE_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "id", "type": "uint256"},
        ],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


@dataclass(frozen=True)
class ContractShape:
    """ABI plus argument rules for one token standard's ``balanceOf``."""

    standard: TokenStandard
    abi: Tuple[Dict[str, Any], ...]
    takes_token_id: bool

    def balance_args(self, holder: str, token_id: Optional[int] = None) -> Tuple[Any, ...]:
        if not self.takes_token_id:
            return (holder,)
        if token_id is None:
            raise ConfigurationError(f"{self.standard.value} balanceOf requires a token id")
        return (holder, token_id)


CONTRACT_SHAPES: Dict[TokenStandard, ContractShape] = {
    TokenStandard.ERC721: ContractShape(
        standard=TokenStandard.ERC721, abi=tuple(ERC721_BALANCE_ABI), takes_token_id=False
    ),
    TokenStandard.ERC1155: ContractShape(
        standard=TokenStandard.ERC1155, abi=tuple(ERC1155_BALANCE_ABI), takes_token_id=True
    ),
}


def shape_for(standard: TokenStandard) -> ContractShape:
    return CONTRACT_SHAPES[standard]


def to_balance(raw: Any) -> int:
    """
    Coerce a contract return value into a non-negative ``int``.

    Raises:
        ContractReadError: Value is not an unsigned integer
    """
    if isinstance(raw, bool):
        raise ContractReadError(f"balanceOf returned a boolean: {raw!r}")
    try:
        if isinstance(raw, int):
            balance = raw
        elif isinstance(raw, str):
            text = raw.strip()
            balance = int(text, 16) if text.lower().startswith("0x") else int(text)
        else:
            balance = int(raw)
    except (TypeError, ValueError) as exc:
        raise ContractReadError(
            f"balanceOf returned a non-integer value: {raw!r}", details={"raw": repr(raw)}
        ) from exc
    if balance < 0:
        raise ContractReadError(
            f"balanceOf returned a negative value: {balance}", details={"raw": repr(raw)}
        )
    return balance


@runtime_checkable
class ContractReader(Protocol):
    """Performs read-only balance queries against NFT contracts."""

    async def read_balance(
        self,
        contract_address: str,
        shape: ContractShape,
        holder: str,
        token_id: Optional[int] = None,
    ) -> Any:
        """Return the raw ``balanceOf`` result for ``holder``."""


def _checksum(address: str, field: str, error_cls: Type[NFTGateError]) -> str:
    try:
        return Web3.to_checksum_address(address)
    except (TypeError, ValueError) as exc:
        raise error_cls(f"Invalid {field}: {address!r}", details={field: address}) from exc


class Web3ContractReader:
    """``ContractReader`` backed by an ``AsyncWeb3`` instance."""

    def __init__(
        self, w3: AsyncWeb3, timeout_seconds: Optional[float] = 30.0, owns_provider: bool = False
    ):
        self.w3 = w3
        self.timeout_seconds = timeout_seconds
        self._owns_provider = owns_provider

    @classmethod
    def from_rpc_url(cls, rpc_url: str, timeout_seconds: Optional[float] = 30.0) -> "Web3ContractReader":
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        return cls(w3, timeout_seconds=timeout_seconds, owns_provider=True)

    async def aclose(self) -> None:
        """Close the provider's HTTP session if this reader created it."""
        if self._owns_provider:
            await self.w3.provider.disconnect()

    async def __aenter__(self) -> "Web3ContractReader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def read_balance(
        self,
        contract_address: str,
        shape: ContractShape,
        holder: str,
        token_id: Optional[int] = None,
    ) -> Any:
        checksum_contract = _checksum(contract_address, "contract_address", ConfigurationError)
        # The holder comes from the identity service, not the caller
        checksum_holder = _checksum(holder, "holder", ContractReadError)
        args = shape.balance_args(checksum_holder, token_id)

        contract = self.w3.eth.contract(address=checksum_contract, abi=list(shape.abi))
        logger.debug(
            "Reading balance",
            contract=checksum_contract,
            standard=shape.standard.value,
            token_id=token_id,
        )
        return await run_with_timeout(
            contract.functions.balanceOf(*args).call(),
            self.timeout_seconds,
            f"{shape.standard.value} balanceOf",
        )
