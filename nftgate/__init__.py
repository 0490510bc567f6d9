"""Admin SDK for NFT minting and token-gated access control."""

from nftgate.core.models import OwnershipVerdict, TokenStandard
from nftgate.sdk import NFTGate
from nftgate.services.ownership_service import validate_token_ownership

__version__ = "0.1.0"

__all__ = [
    "NFTGate",
    "OwnershipVerdict",
    "TokenStandard",
    "validate_token_ownership",
]
