"""
carddraw CLI

Command-line interface for the CardDrawing NFT contract.

Configuration comes from the environment (or a .env file): RPC_URL,
PRIVATE_KEY, NETWORK, CHAIN_ID, DEPLOYMENT_FILE, CARD_CATALOG.

Commands:
  deploy        - Deploy the contract and write the deployment record
  draw          - Draw a random card
  mint          - Mint a catalog card and set its metadata
  set-metadata  - Set catalog metadata on an existing token
  details       - Show a token's card details
  info          - Show contract, network and signer information
  whoami        - Show the signer address
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from .chain.rpc import RpcClient
from .commands import env_file_from, fail, label
from .commands.deploy import deploy
from .commands.details import details
from .commands.draw import draw
from .commands.mint import mint, set_metadata_command
from .config import load_config
from .contract import CardContract
from .errors import CardDrawError, RecordError
from .records.deployment import load_deployment
from .signer import get_address


# ============ Constants ============

VERSION = "1.0.0"


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="carddraw")
@click.option(
    "--env-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Load configuration from this .env file (overrides the environment)",
)
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[Path]) -> None:
    """carddraw - deploy and play the CardDrawing NFT contract."""
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(deploy)
cli.add_command(draw)
cli.add_command(mint)
cli.add_command(set_metadata_command)
cli.add_command(details)


# ============ Identity ============


@cli.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the signer address."""
    try:
        config = load_config(env_file_from(ctx))
        address = get_address(config.require_private_key())
    except CardDrawError as exc:
        fail(exc)
    click.echo(f"Address: {address}")


# ============ Info ============


@cli.command()
@click.option(
    "--deployment",
    "deployment_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Deployment record (default: DEPLOYMENT_FILE or deployment.json)",
)
@click.pass_context
def info(ctx: click.Context, deployment_path: Optional[Path]) -> None:
    """Show contract, network and signer information."""
    try:
        config = load_config(env_file_from(ctx), require_key=False)
        signer = get_address(config.private_key) if config.private_key else None
    except CardDrawError as exc:
        fail(exc)

    click.secho("  Config ─────────────────────────────────", fg="cyan")
    click.echo(label("Network:") + config.network)
    click.echo(label("Chain ID:") + (str(config.chain_id) if config.chain_id else "(from node)"))
    click.echo(label("RPC:") + config.rpc_url)
    if signer:
        click.echo(label("Signer:") + signer)
    else:
        click.echo(label("Signer:") + click.style("not configured (set PRIVATE_KEY)", fg="yellow"))
    click.echo()

    record_path = deployment_path or config.deployment_path
    try:
        record = load_deployment(record_path)
    except RecordError as exc:
        click.secho(f"  No usable deployment record: {exc}", fg="yellow")
        click.echo("  Run 'carddraw deploy' first.")
        sys.exit(exc.exit_code)

    click.secho("  Contract ───────────────────────────────", fg="cyan")
    click.echo(label("Address:") + record.address)
    if record.network:
        click.echo(label("Deployed on:") + record.network)

    with RpcClient(config.rpc_url, timeout=config.rpc_timeout) as rpc:
        try:
            contract = CardContract.from_record(record, rpc)
            click.echo(label("Name:") + contract.name())
            click.echo(label("Symbol:") + contract.symbol())
            click.echo(label("Owner:") + contract.owner())
        except CardDrawError as exc:
            fail(exc)
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """carddraw CLI entry point."""
    # Box-drawing characters need UTF-8 output on Windows consoles
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()
