from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from ..chain.rpc import RpcClient
from ..config import load_config
from ..contract import CardContract
from ..errors import CardDrawError
from ..records.deployment import load_deployment
from . import env_file_from, fail, label, print_card


@click.command()
@click.argument("token_id", type=int)
@click.option(
    "--deployment",
    "deployment_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Deployment record (default: DEPLOYMENT_FILE or deployment.json)",
)
@click.pass_context
def details(ctx: click.Context, token_id: int, deployment_path: Optional[Path]) -> None:
    """Show the on-chain card details of token TOKEN_ID."""
    try:
        config = load_config(env_file_from(ctx), require_key=False)
        record = load_deployment(deployment_path or config.deployment_path)
    except CardDrawError as exc:
        fail(exc)

    with RpcClient(config.rpc_url, timeout=config.rpc_timeout) as rpc:
        try:
            contract = CardContract.from_record(record, rpc)
            card = contract.get_card_details(token_id)
            holder = contract.owner_of(token_id)
        except CardDrawError as exc:
            fail(exc)

    click.echo(f"Card Details for Token ID {token_id}:")
    print_card(card)
    click.echo(label("Owner:") + str(holder))
