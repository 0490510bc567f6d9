"""
DID token validation and user metadata lookup.

A DID token is a base64-encoded JSON array ``[proof, claim]`` where ``claim``
is a JSON string and ``proof`` is the personal-sign signature of that string
by the address named in the claim's ``iss`` (``did:ethr:<address>``).
"""

from __future__ import annotations

import base64
import binascii
import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol, runtime_checkable

import structlog
from eth_account import Account
from eth_account.messages import encode_defunct

from nftgate.core.exceptions import DIDTokenError
from nftgate.core.models import UserMetadata
from nftgate.data.admin_client import AdminApiClient

logger = structlog.get_logger(__name__)

V1_USER_INFO_PATH = "/v1/admin/auth/user/get"

_INT_CLAIM_FIELDS = ("iat", "ext", "nbf")
_STR_CLAIM_FIELDS = ("iss", "sub", "aud", "tid", "add")


def _address_from_issuer(issuer: str) -> str:
    """Lower-cased public address from a ``did:ethr:<address>`` issuer."""
    parts = issuer.split(":")
    if len(parts) < 3 or not parts[2]:
        raise ValueError(f"issuer {issuer!r} has no public address")
    return parts[2].lower()


@runtime_checkable
class IdentityVerifier(Protocol):
    """Validates DID tokens and resolves them to user metadata."""

    async def validate(self, did_token: str) -> None:
        """Raise ``DIDTokenError`` if the token cannot be accepted."""

    async def get_metadata_by_token(self, did_token: str) -> UserMetadata:
        """Resolve the token to the user's email and wallet address."""


@dataclass(frozen=True)
class DIDTokenClaim:
    """Typed claim carried by a DID token."""

    iat: int
    ext: int
    nbf: int
    iss: str
    sub: str
    aud: str
    tid: str
    add: str

    @classmethod
    def from_dict(cls, data: Any) -> "DIDTokenClaim":
        if not isinstance(data, dict):
            raise ValueError("claim must be a JSON object")
        for name in _INT_CLAIM_FIELDS:
            value = data.get(name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"claim field {name} must be an integer")
        for name in _STR_CLAIM_FIELDS:
            if not isinstance(data.get(name), str):
                raise ValueError(f"claim field {name} must be a string")
        _address_from_issuer(data["iss"])
        return cls(**{name: data[name] for name in _INT_CLAIM_FIELDS + _STR_CLAIM_FIELDS})

    @property
    def issuer_address(self) -> str:
        return _address_from_issuer(self.iss)


@dataclass(frozen=True)
class ParsedDIDToken:
    proof: str
    raw_claim: str
    claim: DIDTokenClaim


def parse_did_token(did_token: str) -> ParsedDIDToken:
    """
    Decode a DID token into its proof and typed claim.

    Raises:
        DIDTokenError: ``ERROR_MALFORMED_TOKEN`` for anything that does not parse
    """
    try:
        decoded = base64.b64decode(did_token, validate=True).decode("utf-8")
        proof, raw_claim = json.loads(decoded)
        if not isinstance(proof, str) or not isinstance(raw_claim, str):
            raise ValueError("proof and claim must be strings")
        claim = DIDTokenClaim.from_dict(json.loads(raw_claim))
    except (binascii.Error, UnicodeDecodeError, TypeError, ValueError) as exc:
        logger.debug("DID token failed to parse", error=str(exc))
        raise DIDTokenError.malformed() from exc
    return ParsedDIDToken(proof=proof, raw_claim=raw_claim, claim=claim)


def recover_signer(raw_claim: str, proof: str) -> str:
    """Recover the lower-cased address that personal-signed ``raw_claim``."""
    message = encode_defunct(text=raw_claim)
    return Account.recover_message(message, signature=proof).lower()


class DIDTokenVerifier:
    """
    Identity verifier backed by local DID token checks and the admin API.

    Token validation is purely local; metadata lookup calls
    ``GET /v1/admin/auth/user/get`` with the token's issuer.
    """

    def __init__(
        self,
        admin_client: AdminApiClient,
        nbf_leeway_seconds: int = 300,
        clock: Callable[[], float] = time.time,
    ):
        self.admin_client = admin_client
        self.nbf_leeway_seconds = nbf_leeway_seconds
        self._clock = clock

    def check(self, did_token: str) -> DIDTokenClaim:
        """Synchronously validate ``did_token`` and return its claim."""
        parsed = parse_did_token(did_token)
        claim = parsed.claim

        try:
            signer = recover_signer(parsed.raw_claim, parsed.proof)
        except Exception as exc:
            raise DIDTokenError(
                DIDTokenError.FAILED_RECOVERING_PROOF,
                "Failed to recover proof. Please check the DID token and try again.",
            ) from exc

        if signer != claim.issuer_address:
            raise DIDTokenError(
                DIDTokenError.INCORRECT_SIGNER,
                "Incorrect signer address for DID Token.",
                details={"issuer": claim.iss},
            )

        now = int(self._clock())
        if claim.ext < now:
            raise DIDTokenError(
                DIDTokenError.EXPIRED,
                "Given DID token has expired. Please generate a new one.",
                details={"ext": claim.ext},
            )
        if claim.nbf - self.nbf_leeway_seconds > now:
            raise DIDTokenError(
                DIDTokenError.CANNOT_BE_USED_YET,
                "Given DID token cannot be used at this time.",
                details={"nbf": claim.nbf},
            )
        return claim

    async def validate(self, did_token: str) -> None:
        self.check(did_token)

    def get_issuer(self, did_token: str) -> str:
        return parse_did_token(did_token).claim.iss

    def get_public_address(self, did_token: str) -> str:
        return parse_did_token(did_token).claim.issuer_address

    async def get_metadata_by_issuer(self, issuer: str) -> UserMetadata:
        data = await self.admin_client.get(V1_USER_INFO_PATH, params={"issuer": issuer})
        return UserMetadata.model_validate(data)

    async def get_metadata_by_token(self, did_token: str) -> UserMetadata:
        issuer = self.get_issuer(did_token)
        logger.debug("Looking up user metadata", issuer=issuer)
        return await self.get_metadata_by_issuer(issuer)

