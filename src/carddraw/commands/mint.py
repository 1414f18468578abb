"""
Mint - mint a specific card from the catalog.

Flow:
1. Load config, deployment record and card catalog
2. Resolve the card (id + rarity) so a bad request costs no gas
3. mintCard(recipient, cardId), decode CardDrawn for the token id
4. setCardMetadata(tokenId, ...) with the catalog values

If step 4 fails the token exists with default metadata; the command
reports the token id and ``carddraw set-metadata`` can finish the job.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from ..chain.rpc import RpcClient, check_chain_id
from ..config import ChainConfig, load_config
from ..contract import CardContract
from ..errors import CardDrawError, MetadataNotSetError
from ..records.catalog import load_catalog
from ..records.deployment import load_deployment
from ..rarity import rarity_label
from ..signer import get_account, to_checksum_address
from ..workflows.mint import mint_card, set_metadata
from . import env_file_from, fail, label

_deployment_option = click.option(
    "--deployment",
    "deployment_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Deployment record (default: DEPLOYMENT_FILE or deployment.json)",
)
_catalog_option = click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Card catalog (default: CARD_CATALOG or cards.json)",
)
_timeout_option = click.option(
    "--timeout", type=float, default=None, help="Receipt wait timeout in seconds"
)
_gas_limit_option = click.option(
    "--gas-limit", type=int, default=None, help="Gas limit (default: per-function default)"
)


def _bind(config: ChainConfig, rpc: RpcClient, record, account, timeout) -> CardContract:
    chain_id = check_chain_id(rpc, config.chain_id)
    return CardContract.from_record(
        record, rpc, account=account, chain_id=chain_id, receipt_timeout=timeout
    )


@click.command()
@click.argument("card_id", type=int)
@click.option("--to", "recipient", default=None, help="Recipient address (default: signer)")
@_deployment_option
@_catalog_option
@_timeout_option
@_gas_limit_option
@click.option(
    "--metadata-gas-limit", type=int, default=None, help="Gas limit for the setCardMetadata tx"
)
@click.pass_context
def mint(
    ctx: click.Context,
    card_id: int,
    recipient: Optional[str],
    deployment_path: Optional[Path],
    catalog_path: Optional[Path],
    timeout: Optional[float],
    gas_limit: Optional[int],
    metadata_gas_limit: Optional[int],
) -> None:
    """Mint catalog card CARD_ID and set its on-chain metadata."""
    click.echo("=== CardDrawing Mint ===")
    click.echo("")

    try:
        config = load_config(env_file_from(ctx))
        record = load_deployment(deployment_path or config.deployment_path)
        catalog = load_catalog(catalog_path or config.catalog_path)
        account = get_account(config.require_private_key())
        metadata = catalog.metadata(card_id)
        recipient = to_checksum_address(recipient or account.address)
    except CardDrawError as exc:
        fail(exc)

    click.echo(label("Recipient:") + recipient)
    click.echo(label("Card:") + f"#{metadata.id} {metadata.name}")
    click.echo(label("Rarity:") + f"{rarity_label(metadata.rarity_code)} ({metadata.rarity_code})")
    click.echo("")

    with RpcClient(config.rpc_url, timeout=config.rpc_timeout) as rpc:
        try:
            contract = _bind(config, rpc, record, account, timeout)
            click.echo("Minting card...")
            result = mint_card(
                contract,
                catalog,
                recipient,
                card_id,
                gas_limit=gas_limit,
                metadata_gas_limit=metadata_gas_limit,
            )
        except MetadataNotSetError as exc:
            click.secho(f"WARNING: {exc}", fg="yellow")
            click.echo(
                f"  Retry with: carddraw set-metadata {exc.token_id} {card_id}"
            )
            sys.exit(exc.exit_code)
        except CardDrawError as exc:
            fail(exc)

    click.secho("Card minted successfully!", fg="green", bold=True)
    click.echo(label("Mint TX:") + result.tx_hash)
    click.echo(label("Metadata TX:") + result.metadata_tx_hash)
    click.echo(label("Token ID:") + str(result.token_id))


@click.command("set-metadata")
@click.argument("token_id", type=int)
@click.argument("card_id", type=int)
@_deployment_option
@_catalog_option
@_timeout_option
@_gas_limit_option
@click.pass_context
def set_metadata_command(
    ctx: click.Context,
    token_id: int,
    card_id: int,
    deployment_path: Optional[Path],
    catalog_path: Optional[Path],
    timeout: Optional[float],
    gas_limit: Optional[int],
) -> None:
    """Copy catalog card CARD_ID's metadata onto token TOKEN_ID."""
    click.echo("=== CardDrawing Set Metadata ===")
    click.echo("")

    try:
        config = load_config(env_file_from(ctx))
        record = load_deployment(deployment_path or config.deployment_path)
        catalog = load_catalog(catalog_path or config.catalog_path)
        account = get_account(config.require_private_key())
        metadata = catalog.metadata(card_id)
    except CardDrawError as exc:
        fail(exc)

    with RpcClient(config.rpc_url, timeout=config.rpc_timeout) as rpc:
        try:
            contract = _bind(config, rpc, record, account, timeout)
            tx_hash = set_metadata(contract, token_id, metadata, gas_limit=gas_limit)
        except CardDrawError as exc:
            fail(exc)

    click.secho(f"Metadata set on token {token_id}", fg="green", bold=True)
    click.echo(label("TX:") + tx_hash)
