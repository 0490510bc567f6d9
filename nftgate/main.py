"""
Main application entry point for nftgate.

Provides CLI interface for minting and token-gating operations.
"""

import asyncio
import json
import sys
from typing import Optional

import aiohttp
import click
from rich.console import Console
from rich.table import Table
from web3.exceptions import Web3Exception

from nftgate.cli_commands.doctor import doctor
from nftgate.core.config import get_settings, print_configuration_summary, validate_required_settings
from nftgate.core.exceptions import ConfigurationError, NFTGateError
from nftgate.core.logging import set_correlation_id, setup_logging
from nftgate.core.models import MintRequest, OwnershipVerdict, TokenStandard
from nftgate.data.contracts import Web3ContractReader
from nftgate.sdk import NFTGate

console = Console()


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit JSON logs instead of rich console output")
@click.option("--correlation-id", help="Set correlation ID for request tracing")
@click.pass_context
def main(ctx, debug: bool, json_logs: bool, correlation_id: Optional[str]):
    """NFT minting and token-gated access control.

    Starts mint jobs through the admin API and checks whether the holder of a
    DID token owns a given ERC721 or ERC1155 token.
    """
    ctx.ensure_object(dict)

    setup_logging(debug=debug, rich_output=not json_logs)

    if correlation_id:
        set_correlation_id(correlation_id)

    ctx.obj["debug"] = debug
    ctx.obj["correlation_id"] = correlation_id


main.add_command(doctor)


def _fail(ctx, label: str, error: Exception) -> None:
    console.print(f"[red]{label}:[/red] {error}")
    if ctx.obj and ctx.obj.get("debug"):
        import traceback

        console.print(traceback.format_exc())
    sys.exit(1)


def _require(workflow: str) -> None:
    missing = validate_required_settings(workflow)
    if missing:
        console.print("[red]Configuration Error:[/red]")
        for item in missing:
            console.print(f"  • Missing: {item}")
        sys.exit(1)


def _display_mint_result(title: str, request: MintRequest) -> None:
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Status", request.status)
    table.add_row("Request ID", request.request_id)
    console.print(table)


def _display_verdict(verdict: OwnershipVerdict) -> None:
    if verdict.valid:
        console.print("[green]✓ Ownership confirmed[/green]")
        return
    console.print(f"[red]✗ {verdict.error_code}[/red] {verdict.message}")


async def _mint(standard: TokenStandard, **kwargs) -> MintRequest:
    async with NFTGate() as sdk:
        if standard is TokenStandard.ERC1155:
            return await sdk.nft.start_mint_1155(**kwargs)
        return await sdk.nft.start_mint_721(**kwargs)


@main.command(name="mint-721")
@click.option("--contract-id", required=True, help="Admin API contract ID")
@click.option("--quantity", type=int, default=1, show_default=True, help="Tokens to mint")
@click.option("--destination", required=True, help="Wallet address that receives the tokens")
@click.pass_context
def mint_721(ctx, contract_id: str, quantity: int, destination: str):
    """Start an ERC721 mint job."""
    _require("mint")
    try:
        request = asyncio.run(
            _mint(
                TokenStandard.ERC721,
                contract_id=contract_id,
                quantity=quantity,
                destination_address=destination,
            )
        )
        _display_mint_result("ERC721 Mint", request)
    except NFTGateError as e:
        _fail(ctx, "Minting Error", e)


@main.command(name="mint-1155")
@click.option("--contract-id", required=True, help="Admin API contract ID")
@click.option("--quantity", type=int, default=1, show_default=True, help="Tokens to mint")
@click.option("--destination", required=True, help="Wallet address that receives the tokens")
@click.option("--token-id", type=int, required=True, help="ERC1155 token ID")
@click.pass_context
def mint_1155(ctx, contract_id: str, quantity: int, destination: str, token_id: int):
    """Start an ERC1155 mint job."""
    _require("mint")
    try:
        request = asyncio.run(
            _mint(
                TokenStandard.ERC1155,
                contract_id=contract_id,
                quantity=quantity,
                destination_address=destination,
                token_id=token_id,
            )
        )
        _display_mint_result("ERC1155 Mint", request)
    except NFTGateError as e:
        _fail(ctx, "Minting Error", e)


async def _validate(
    did_token: str,
    contract_address: str,
    contract_type: str,
    token_id: Optional[str],
    rpc_url: str,
) -> OwnershipVerdict:
    settings = get_settings()
    reader = Web3ContractReader.from_rpc_url(
        rpc_url, timeout_seconds=settings.chain.read_timeout_seconds
    )
    async with reader, NFTGate(settings=settings) as sdk:
        return await sdk.nft.validate_token_ownership(
            did_token, contract_address, contract_type, reader, token_id
        )


@main.command(name="validate-ownership")
@click.option("--did-token", required=True, help="DID token presented by the user")
@click.option("--contract-address", required=True, help="NFT contract address")
@click.option(
    "--contract-type",
    type=click.Choice([s.value for s in TokenStandard], case_sensitive=False),
    required=True,
    help="Token standard of the contract",
)
@click.option("--token-id", help="Token ID (required for ERC1155)")
@click.option("--rpc-url", help="JSON-RPC endpoint (defaults to WEB3_RPC_URL)")
@click.option("--json", "as_json", is_flag=True, help="Print the verdict as JSON")
@click.pass_context
def validate_ownership(
    ctx,
    did_token: str,
    contract_address: str,
    contract_type: str,
    token_id: Optional[str],
    rpc_url: Optional[str],
    as_json: bool,
):
    """Check that the DID token's user owns the given NFT.

    Exits 0 when ownership is confirmed and 1 otherwise.
    """
    settings = get_settings()
    rpc_url = rpc_url or settings.chain.rpc_url
    if not rpc_url:
        console.print("[red]Configuration Error:[/red] --rpc-url or WEB3_RPC_URL is required")
        sys.exit(1)

    try:
        verdict = asyncio.run(
            _validate(did_token, contract_address, contract_type, token_id, rpc_url)
        )
    except ConfigurationError as e:
        _fail(ctx, "Configuration Error", e)
        return
    except NFTGateError as e:
        _fail(ctx, "Ownership Check Error", e)
        return
    except (Web3Exception, aiohttp.ClientError) as e:
        _fail(ctx, "Chain Read Error", e)
        return

    if as_json:
        click.echo(json.dumps(verdict.to_response()))
    else:
        _display_verdict(verdict)
    sys.exit(0 if verdict.valid else 1)


@main.command()
def config():
    """Print the current configuration."""
    print_configuration_summary()


if __name__ == "__main__":
    main()
