"""
Deploy - create the CardDrawing contract and record where it lives.

The record is written only after the creation receipt confirms success
and code is present at the new address.  A failure at any step leaves
the previous record (if any) untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from eth_account.signers.local import LocalAccount

from ..chain.abi import ContractArtifact
from ..chain.rpc import RpcClient
from ..chain.tx import DEFAULT_DEPLOY_GAS, deploy_contract
from ..errors import ChainError
from ..records.deployment import DeploymentRecord, write_deployment
from ..signer import to_checksum_address


def deploy(
    rpc: RpcClient,
    account: LocalAccount,
    artifact: ContractArtifact,
    record_path: Path,
    chain_id: int,
    network: Optional[str] = None,
    constructor_args: Optional[list] = None,
    gas_limit: int = DEFAULT_DEPLOY_GAS,
    timeout: Optional[float] = None,
) -> DeploymentRecord:
    """
    Deploy ``artifact`` and write its DeploymentRecord to ``record_path``.

    Args:
        rpc: Open RPC client
        account: Funded signing account
        artifact: Compiled contract (bytecode + ABI)
        record_path: Where to write the record (replaced atomically)
        chain_id: Chain id the transaction is signed for
        network: Network name stored alongside the record
        constructor_args: Constructor arguments, if the contract takes any
        gas_limit: Gas limit for the creation tx
        timeout: Receipt wait timeout; None waits until mined

    Returns:
        The record that was written

    Raises:
        TransactionRevertedError: The constructor reverted
        ChainError: No contract address or no code at it
        RpcError: Submission or polling failed
    """
    result = deploy_contract(
        rpc,
        account,
        artifact,
        chain_id=chain_id,
        constructor_args=constructor_args,
        gas_limit=gas_limit,
        timeout=timeout,
    )

    address = to_checksum_address(result.contract_address)
    code = rpc.get_code(address)
    if code in ("", "0x"):
        raise ChainError(
            f"No contract code at {address} after deployment tx {result.tx_hash}"
        )

    record = DeploymentRecord(
        address=address,
        abi=artifact.abi,
        network=network,
        chain_id=chain_id,
        transaction_hash=result.tx_hash,
    )
    write_deployment(record_path, record)
    return record
