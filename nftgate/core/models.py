"""
Data models and type definitions for nftgate.

Provides type-safe data structures with validation for queries, identities,
verdicts and admin API envelopes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nftgate.core.exceptions import ConfigurationError

SUCCESS_STATUS = "ok"


class TokenStandard(str, Enum):
    """Supported NFT token standards."""

    ERC721 = "ERC721"
    ERC1155 = "ERC1155"

    @classmethod
    def parse(cls, value: Union["TokenStandard", str]) -> "TokenStandard":
        """Accept an enum member or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        allowed = ", ".join(member.value for member in cls)
        raise ConfigurationError(
            f"Unsupported contract type {value!r}; expected one of: {allowed}",
            details={"contract_type": value},
        )


class VerdictCode(str, Enum):
    """Machine-readable ownership verdict codes."""

    NONE = ""
    UNAUTHORIZED = "UNAUTHORIZED"
    NO_OWNERSHIP = "NO_OWNERSHIP"


# Ownership Models


class OwnershipQuery(BaseModel):
    """A single token-gating request."""

    did_token: str
    contract_address: str
    token_standard: TokenStandard
    token_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def requires_token_id(self) -> bool:
        return self.token_standard is TokenStandard.ERC1155

    def parsed_token_id(self) -> Optional[int]:
        """
        Return the uint256 token id for standards that need one.

        Raises:
            ConfigurationError: ERC1155 query without a usable token id
        """
        if not self.requires_token_id:
            return None
        raw = (self.token_id or "").strip()
        if not raw:
            raise ConfigurationError(
                "ERC1155 requires a tokenId", details={"contract_address": self.contract_address}
            )
        try:
            value = int(raw, 16) if raw.lower().startswith("0x") else int(raw)
        except ValueError as exc:
            raise ConfigurationError(
                f"tokenId must be an unsigned integer, got {raw!r}", details={"token_id": raw}
            ) from exc
        if value < 0:
            raise ConfigurationError(
                f"tokenId must be an unsigned integer, got {raw!r}", details={"token_id": raw}
            )
        return value


class UserMetadata(BaseModel):
    """User metadata resolved from a DID token."""

    issuer: Optional[str] = None
    email: Optional[str] = None
    public_address: Optional[str] = None
    oauth_provider: Optional[str] = None
    phone_number: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def is_complete(self) -> bool:
        """Both email and wallet address are needed downstream."""
        return bool(self.email) and bool(self.public_address)


class OwnershipVerdict(BaseModel):
    """Outcome of a token ownership check."""

    valid: bool
    error_code: VerdictCode = VerdictCode.NONE
    message: str = ""

    model_config = ConfigDict(frozen=True, use_enum_values=True, validate_default=True)

    @model_validator(mode="after")
    def check_consistency(self):
        """A valid verdict carries no error; an invalid one must explain itself."""
        if self.valid:
            if self.error_code or self.message:
                raise ValueError("valid verdicts must have empty error_code and message")
        elif not self.error_code or not self.message:
            raise ValueError("invalid verdicts need an error_code and a message")
        return self

    @classmethod
    def granted(cls) -> "OwnershipVerdict":
        return cls(valid=True)

    @classmethod
    def denied(cls, code: VerdictCode, message: str) -> "OwnershipVerdict":
        return cls(valid=False, error_code=code, message=message)

    def to_response(self) -> Dict[str, Any]:
        """Serialize to the wire response shape."""
        return {"valid": self.valid, "error_code": self.error_code, "message": self.message}


# Admin API Models


class MintRequestData(BaseModel):
    """Payload of an accepted mint request."""

    request_id: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="allow")


class MintRequest(BaseModel):
    """Admin API envelope returned when a mint job is queued."""

    status: str
    data: MintRequestData
    error_code: str = ""
    message: str = ""

    model_config = ConfigDict(extra="ignore")

    @field_validator("error_code", "message", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @property
    def request_id(self) -> str:
        return self.data.request_id

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCESS_STATUS
