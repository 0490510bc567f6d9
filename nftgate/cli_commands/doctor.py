"""
"Doctor" command: consolidated health, config, and diagnostics.

Runs a series of checks and prints a concise, friendly report:
 - Config summary and required keys per workflow
 - JSON-RPC node connectivity and chain id (if configured)
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict

import click
from web3 import AsyncWeb3

from nftgate.core.config import (
    get_settings,
    print_configuration_summary,
    validate_required_settings,
)
from nftgate.utils.reliability import run_with_timeout


async def check_rpc(rpc_url: str, timeout_seconds: float) -> Dict[str, Any]:
    """Probe a JSON-RPC endpoint and report its chain id."""
    w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
    try:
        connected = await run_with_timeout(w3.is_connected(), timeout_seconds, "rpc is_connected")
        if not connected:
            return {"status": "unhealthy", "error": "node did not respond"}
        chain_id = await run_with_timeout(w3.eth.chain_id, timeout_seconds, "rpc chain_id")
        return {"status": "healthy", "chain_id": chain_id}
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    finally:
        await w3.provider.disconnect()


@click.command()
@click.option("--skip-network", is_flag=True, help="Only check configuration")
def doctor(skip_network: bool):
    """Run nftgate diagnostics and print a summary report."""
    click.echo("nftgate Doctor")
    click.echo("=" * 40)

    print_configuration_summary()

    cfg = get_settings()

    click.echo("\nWorkflow Requirements:")
    for workflow in ("mint", "ownership"):
        missing = validate_required_settings(workflow)
        if missing:
            click.echo(f"  ✗ {workflow}: missing {', '.join(missing)}")
        else:
            click.echo(f"  ✓ {workflow}: ready")

    if not cfg.chain.rpc_url:
        click.echo("\n- RPC node not configured")
    elif skip_network:
        click.echo("\n- RPC check skipped")
    else:
        h = asyncio.run(check_rpc(cfg.chain.rpc_url, cfg.chain.read_timeout_seconds))
        if h.get("status") == "healthy":
            click.echo(f"\n✓ RPC node healthy (chain id {h['chain_id']})")
        else:
            click.echo(f"\n✗ RPC node unhealthy: {h.get('error', 'unknown')}")

    click.echo("\nDone.")
