"""
Custom exceptions for nftgate.

Provides a hierarchy of exceptions that separates caller errors, identity
failures and operational failures from business outcomes.
"""

from enum import Enum
from typing import Any, Dict, Optional


class NFTGateError(Exception):
    """Base exception for all nftgate errors."""

    code: str = "ERROR_NFTGATE"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(NFTGateError):
    """Raised when the caller supplies an invalid query or configuration."""

    code = "ERROR_CONFIGURATION"


class ApiKeyMissingError(ConfigurationError):
    """The admin secret API key is required for this operation."""

    code = "ERROR_SECRET_API_KEY_MISSING"

    def __init__(self, message: Optional[str] = None, **kwargs):
        super().__init__(
            message
            or "Please provide a secret API key that you acquired from the developer dashboard.",
            **kwargs,
        )


class IdentityErrorKind(str, Enum):
    """Classification of identity verifier failures."""

    MALFORMED_TOKEN = "malformed_token"
    OTHER = "other"


class DIDTokenError(NFTGateError):
    """Raised by identity verifiers when a DID token cannot be accepted."""

    MALFORMED_TOKEN = "ERROR_MALFORMED_TOKEN"
    EXPIRED = "ERROR_DIDT_EXPIRED"
    CANNOT_BE_USED_YET = "ERROR_DIDT_CANNOT_BE_USED_YET"
    INCORRECT_SIGNER = "ERROR_INCORRECT_SIGNER_ADDR"
    FAILED_RECOVERING_PROOF = "ERROR_FAILED_RECOVERING_PROOF"

    def __init__(self, code: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or f"DID token rejected: {code}", **kwargs)
        self.code = code

    @property
    def kind(self) -> IdentityErrorKind:
        if self.code == self.MALFORMED_TOKEN:
            return IdentityErrorKind.MALFORMED_TOKEN
        return IdentityErrorKind.OTHER

    @classmethod
    def malformed(cls, message: Optional[str] = None) -> "DIDTokenError":
        return cls(cls.MALFORMED_TOKEN, message or "The DID token is malformed or failed to parse.")


class IdentityVerificationError(NFTGateError):
    """Identity verification failed for a reason other than a malformed token."""

    def __init__(self, code: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or code, **kwargs)
        self.code = code


class MintingError(NFTGateError):
    """The admin API did not accept a mint request."""

    code = "ERROR_MINTING"

    def __init__(self, message: Optional[str] = None, **kwargs):
        super().__init__(message or "An error occurred while minting.", **kwargs)


class OperationalError(NFTGateError):
    """Base class for failures that prevent a check from completing."""

    code = "ERROR_OPERATIONAL"


class ExternalServiceError(OperationalError):
    """External service is unavailable or returning errors."""

    code = "SERVICE_ERROR"

    def __init__(self, service: str, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(f"{service}: {message}", **kwargs)
        self.service = service
        self.status_code = status_code


class ContractReadError(OperationalError):
    """Contract returned a value that is not a valid balance."""

    code = "ERROR_CONTRACT_READ"


class TimeoutError(OperationalError):
    """Operation timeout errors."""

    code = "ERROR_TIMEOUT"
