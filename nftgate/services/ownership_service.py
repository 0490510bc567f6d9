"""
Token-gated access control.

Combines DID token validation, user metadata lookup and an on-chain balance
read into a single ``OwnershipVerdict``. Authorization and ownership outcomes
are returned as verdicts; anything that prevents the check from completing is
raised.
"""

from typing import Optional, Union

import structlog

from nftgate.core.exceptions import DIDTokenError, IdentityErrorKind, IdentityVerificationError
from nftgate.core.models import OwnershipQuery, OwnershipVerdict, TokenStandard, VerdictCode
from nftgate.data.contracts import ContractReader, shape_for, to_balance
from nftgate.data.identity import IdentityVerifier

logger = structlog.get_logger(__name__)

INCOMPLETE_IDENTITY_MESSAGE = "Invalid DID token. May be expired or malformed."
NO_OWNERSHIP_MESSAGE = "User does not own this token."


def malformed_token_message(code: str) -> str:
    return f"Invalid DID token: {code}"


class OwnershipValidator:
    """Stateless orchestrator for token ownership checks."""

    def __init__(self, verifier: IdentityVerifier, reader: ContractReader):
        self.verifier = verifier
        self.reader = reader

    async def validate(self, query: OwnershipQuery) -> OwnershipVerdict:
        """
        Check that the token's user holds the NFT described by ``query``.

        Raises:
            ConfigurationError: ERC1155 query without a usable token id
            IdentityVerificationError: Verifier rejected the token for a reason
                other than it being malformed
            OperationalError: Contract returned an unusable balance or timed out
        """
        token_id = query.parsed_token_id()
        log = logger.bind(contract=query.contract_address, standard=query.token_standard.value)

        try:
            await self.verifier.validate(query.did_token)
        except DIDTokenError as e:
            if e.kind is IdentityErrorKind.MALFORMED_TOKEN:
                log.info("Ownership denied", reason="malformed_token")
                return OwnershipVerdict.denied(
                    VerdictCode.UNAUTHORIZED, malformed_token_message(e.code)
                )
            log.warning("Identity verification failed", code=e.code)
            raise IdentityVerificationError(e.code, details=e.details) from e

        metadata = await self.verifier.get_metadata_by_token(query.did_token)
        if not metadata.is_complete:
            log.info("Ownership denied", reason="incomplete_identity")
            return OwnershipVerdict.denied(VerdictCode.UNAUTHORIZED, INCOMPLETE_IDENTITY_MESSAGE)

        shape = shape_for(query.token_standard)
        raw_balance = await self.reader.read_balance(
            query.contract_address, shape, metadata.public_address, token_id
        )
        balance = to_balance(raw_balance)

        if balance > 0:
            log.info("Ownership confirmed", holder=metadata.public_address)
            return OwnershipVerdict.granted()

        log.info("Ownership denied", reason="no_ownership", holder=metadata.public_address)
        return OwnershipVerdict.denied(VerdictCode.NO_OWNERSHIP, NO_OWNERSHIP_MESSAGE)


async def validate_token_ownership(
    verifier: IdentityVerifier,
    did_token: str,
    contract_address: str,
    contract_type: Union[TokenStandard, str],
    reader: ContractReader,
    token_id: Optional[str] = None,
) -> OwnershipVerdict:
    """Validate that the user behind ``did_token`` owns the given NFT."""
    query = OwnershipQuery(
        did_token=did_token,
        contract_address=contract_address,
        token_standard=TokenStandard.parse(contract_type),
        token_id=token_id,
    )
    return await OwnershipValidator(verifier, reader).validate(query)
