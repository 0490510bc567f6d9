"""Validate data model invariants."""

import pytest
from pydantic import ValidationError

from nftgate.core.exceptions import ConfigurationError
from nftgate.core.models import (
    MintRequest,
    OwnershipQuery,
    OwnershipVerdict,
    TokenStandard,
    UserMetadata,
    VerdictCode,
)


class TestTokenStandard:
    """Test token standard parsing."""

    @pytest.mark.parametrize("value", ["ERC721", "erc721", " Erc721 ", TokenStandard.ERC721])
    def test_parse_erc721(self, value):
        """Test ERC721 parses from any casing or the enum itself."""
        assert TokenStandard.parse(value) is TokenStandard.ERC721

    @pytest.mark.parametrize("value", ["ERC20", "", None, 721])
    def test_parse_rejects_unknown(self, value):
        """Test unknown standards raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            TokenStandard.parse(value)


class TestOwnershipQuery:
    """Test token id rules per standard."""

    def test_erc721_has_no_token_id(self):
        """Test ERC721 queries never carry a token id."""
        query = OwnershipQuery(
            did_token="t", contract_address="0x1", token_standard="ERC721", token_id="5"
        )
        assert query.parsed_token_id() is None

    @pytest.mark.parametrize("raw,expected", [("7", 7), (" 7 ", 7), ("0x0a", 10), (str(2**200), 2**200)])
    def test_erc1155_token_id(self, raw, expected):
        """Test ERC1155 token ids parse from decimal and hex."""
        query = OwnershipQuery(
            did_token="t", contract_address="0x1", token_standard=TokenStandard.ERC1155, token_id=raw
        )
        assert query.parsed_token_id() == expected

    @pytest.mark.parametrize("raw", ["-1", "1e3", "0xZZ"])
    def test_erc1155_bad_token_id(self, raw):
        """Test negative and non-integer token ids are rejected."""
        query = OwnershipQuery(
            did_token="t", contract_address="0x1", token_standard=TokenStandard.ERC1155, token_id=raw
        )
        with pytest.raises(ConfigurationError):
            query.parsed_token_id()


class TestOwnershipVerdict:
    """Exactly one of granted or denied-with-reason."""

    def test_granted(self):
        """Test a granted verdict has an empty code and message."""
        verdict = OwnershipVerdict.granted()
        assert verdict.to_response() == {"valid": True, "error_code": "", "message": ""}

    def test_denied(self):
        """Test a denied verdict carries its code."""
        verdict = OwnershipVerdict.denied(VerdictCode.NO_OWNERSHIP, "User does not own this token.")
        assert verdict.error_code == "NO_OWNERSHIP"
        assert verdict.valid is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"valid": True, "error_code": "UNAUTHORIZED", "message": ""},
            {"valid": True, "error_code": "", "message": "oops"},
            {"valid": False, "error_code": "", "message": "why"},
            {"valid": False, "error_code": "NO_OWNERSHIP", "message": ""},
            {"valid": False, "error_code": "SOMETHING_ELSE", "message": "x"},
        ],
    )
    def test_inconsistent_verdicts_rejected(self, kwargs):
        """Test verdicts mixing granted and denied fields are rejected."""
        with pytest.raises(ValidationError):
            OwnershipVerdict(**kwargs)

    def test_verdict_is_immutable(self):
        """Test verdicts cannot be modified after construction."""
        verdict = OwnershipVerdict.granted()
        with pytest.raises(ValidationError):
            verdict.valid = False


class TestUserMetadata:
    """Test admin API user metadata parsing."""

    def test_ignores_unknown_fields(self):
        """Test extra metadata fields are ignored."""
        metadata = UserMetadata.model_validate(
            {"email": "a@b.c", "public_address": "0x1", "wallets": [{"network": "x"}]}
        )
        assert metadata.is_complete


class TestMintRequest:
    """Test mint envelope parsing."""

    def test_null_error_fields_become_empty(self):
        """Test null error fields normalize to empty strings."""
        request = MintRequest.model_validate(
            {"status": "ok", "error_code": None, "message": None, "data": {"request_id": "r1"}}
        )
        assert request.error_code == ""
        assert request.succeeded
