"""
Deploy - create a new CardDrawing contract.

Flow:
1. Load config, signer and the compiled artifact (no network yet)
2. Confirm the endpoint's chain and the deployer's balance
3. Send the creation tx and wait for it to be mined
4. Write the deployment record (only on success)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click

from ..chain.abi import load_artifact
from ..chain.rpc import RpcClient, check_chain_id
from ..chain.tx import DEFAULT_DEPLOY_GAS
from ..config import load_config
from ..errors import CardDrawError, ChainError, ValidationError
from ..signer import get_account
from ..workflows.deploy import deploy as deploy_workflow
from . import env_file_from, fail, label

DEFAULT_ARTIFACT = Path("artifacts/contracts/CardDrawing.sol/CardDrawing.json")


@click.command()
@click.option(
    "--artifact",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_ARTIFACT,
    show_default=True,
    help="Compiled contract artifact (Hardhat or Foundry JSON)",
)
@click.option(
    "--out",
    "out_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Deployment record to write (default: DEPLOYMENT_FILE or deployment.json)",
)
@click.option("--args", "args_json", default="[]", help="Constructor args as JSON array")
@click.option("--gas-limit", default=DEFAULT_DEPLOY_GAS, type=int, show_default=True, help="Gas limit")
@click.option("--timeout", type=float, default=None, help="Receipt wait timeout in seconds")
@click.pass_context
def deploy(
    ctx: click.Context,
    artifact: Path,
    out_path: Optional[Path],
    args_json: str,
    gas_limit: int,
    timeout: Optional[float],
) -> None:
    """Deploy the CardDrawing contract and save its address and ABI."""
    click.echo("=== CardDrawing Deploy ===")
    click.echo("")

    try:
        config = load_config(env_file_from(ctx))
        account = get_account(config.require_private_key())
        compiled = load_artifact(artifact)
        try:
            constructor_args = json.loads(args_json)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid --args: {exc}") from exc
        if not isinstance(constructor_args, list):
            raise ValidationError("--args must be a JSON array")
    except CardDrawError as exc:
        fail(exc)

    record_path = out_path or config.deployment_path

    with RpcClient(config.rpc_url, timeout=config.rpc_timeout) as rpc:
        try:
            chain_id = check_chain_id(rpc, config.chain_id)
            click.echo(f"Deploying to network: {config.network} (Chain ID: {chain_id})")
            click.echo(label("Deployer:") + account.address)

            balance = rpc.get_balance(account.address)
            click.echo(label("Balance:") + f"{balance / 1e18:.6f} ETH")
            if balance == 0:
                raise ChainError(f"Deployer {account.address} has zero balance. Fund it first.")

            click.echo(f"Deploying {compiled.contract_name} contract...")
            record = deploy_workflow(
                rpc,
                account,
                compiled,
                record_path=record_path,
                chain_id=chain_id,
                network=config.network,
                constructor_args=constructor_args,
                gas_limit=gas_limit,
                timeout=timeout,
            )
        except CardDrawError as exc:
            fail(exc)

    click.echo("")
    click.secho(f"{compiled.contract_name} deployed to: {record.address}", fg="green", bold=True)
    click.echo(label("TX:") + str(record.transaction_hash))
    click.echo(f"Deployment information saved to {record_path}")
