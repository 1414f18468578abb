from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from ..chain.rpc import RpcClient, check_chain_id
from ..config import load_config
from ..contract import CardContract
from ..errors import CardDrawError
from ..records.deployment import load_deployment
from ..signer import get_account
from ..workflows.draw import draw_card
from . import env_file_from, fail, label, print_card


@click.command()
@click.option(
    "--deployment",
    "deployment_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Deployment record (default: DEPLOYMENT_FILE or deployment.json)",
)
@click.option("--no-details", is_flag=True, help="Skip reading card details after the draw")
@click.option("--gas-limit", type=int, default=None, help="Gas limit")
@click.option("--timeout", type=float, default=None, help="Receipt wait timeout in seconds")
@click.pass_context
def draw(
    ctx: click.Context,
    deployment_path: Optional[Path],
    no_details: bool,
    gas_limit: Optional[int],
    timeout: Optional[float],
) -> None:
    """Draw a random card.

    The contract picks the card; the new token id is read from the
    CardDrawn event in the receipt.
    """
    click.echo("=== CardDrawing Draw ===")
    click.echo("")

    try:
        config = load_config(env_file_from(ctx))
        record = load_deployment(deployment_path or config.deployment_path)
        account = get_account(config.require_private_key())
    except CardDrawError as exc:
        fail(exc)

    with RpcClient(config.rpc_url, timeout=config.rpc_timeout) as rpc:
        try:
            chain_id = check_chain_id(rpc, config.chain_id)
            contract = CardContract.from_record(
                record, rpc, account=account, chain_id=chain_id, receipt_timeout=timeout
            )
            click.echo("Drawing a random card...")
            result = draw_card(contract, fetch_details=not no_details, gas_limit=gas_limit)
        except CardDrawError as exc:
            fail(exc)

    click.secho("Card drawn successfully!", fg="green", bold=True)
    click.echo(label("TX:") + result.tx_hash)
    click.echo(label("User:") + result.recipient)
    click.echo(label("Token ID:") + str(result.token_id))
    if result.details is not None:
        click.echo("")
        print_card(result.details)
    elif result.details_error is not None:
        click.echo("")
        click.secho(f"WARNING: could not read card details: {result.details_error}", fg="yellow")
        click.echo(f"  Retry with: carddraw details {result.token_id}")
