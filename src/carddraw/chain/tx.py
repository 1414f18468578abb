"""
Transaction Builder - Build, sign, and send Ethereum transactions.

Uses eth-account for signing and the httpx JSON-RPC client for sending.
All gas is paid by the signing account.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from ..errors import ChainError, TransactionRevertedError
from ..signer import to_checksum_address
from .abi import ContractArtifact, encode_deploy_data, encode_function_call
from .rpc import RpcClient, _to_int

DEFAULT_CALL_GAS = 500_000
DEFAULT_DEPLOY_GAS = 3_000_000


@dataclass(frozen=True)
class TxResult:
    tx_hash: str
    receipt: dict[str, Any]
    status: int
    contract_address: Optional[str] = None


def build_call_tx(
    rpc: RpcClient,
    account: LocalAccount,
    contract_address: str,
    abi: list,
    function_name: str,
    args: list,
    chain_id: int,
    value: int = 0,
    gas_limit: Optional[int] = None,
) -> dict:
    """
    Build an unsigned contract call transaction.

    Nonce and gas price are looked up from the node at build time.
    """
    calldata = encode_function_call(abi, function_name, args)

    return {
        "to": to_checksum_address(contract_address),
        "data": calldata,
        "value": value,
        "nonce": rpc.get_nonce(account.address),
        "gas": gas_limit or DEFAULT_CALL_GAS,
        "gasPrice": rpc.get_gas_price(),
        "chainId": chain_id,
    }


def sign_and_send(
    rpc: RpcClient,
    account: LocalAccount,
    tx: dict,
    timeout: Optional[float] = None,
    action: str = "Transaction",
) -> TxResult:
    """
    Sign a transaction, send it and wait for the receipt.

    Raises:
        TransactionRevertedError: If the receipt status is not 1
    """
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()

    tx_hash = rpc.send_raw_transaction(raw_tx)
    receipt = rpc.wait_for_receipt(tx_hash, timeout=timeout)
    status = _to_int(receipt.get("status", "0x0"))
    if status != 1:
        raise TransactionRevertedError(tx_hash, action)

    return TxResult(
        tx_hash=tx_hash,
        receipt=receipt,
        status=status,
        contract_address=receipt.get("contractAddress"),
    )


def send_contract_tx(
    rpc: RpcClient,
    account: LocalAccount,
    contract_address: str,
    abi: list,
    function_name: str,
    args: list,
    chain_id: int,
    value: int = 0,
    gas_limit: Optional[int] = None,
    timeout: Optional[float] = None,
) -> TxResult:
    """Build, sign, and send a contract call transaction."""
    tx = build_call_tx(
        rpc,
        account,
        contract_address=contract_address,
        abi=abi,
        function_name=function_name,
        args=args,
        chain_id=chain_id,
        value=value,
        gas_limit=gas_limit,
    )
    return sign_and_send(rpc, account, tx, timeout=timeout, action=function_name)


def deploy_contract(
    rpc: RpcClient,
    account: LocalAccount,
    artifact: ContractArtifact,
    chain_id: int,
    constructor_args: Optional[list] = None,
    gas_limit: int = DEFAULT_DEPLOY_GAS,
    timeout: Optional[float] = None,
) -> TxResult:
    """
    Deploy a contract to the chain.

    Builds a creation transaction (no ``to``), signs, sends, and reads
    the deployed contract address from the receipt.

    Raises:
        TransactionRevertedError: If the constructor reverted
        ChainError: If the receipt carries no contract address
    """
    tx: dict[str, Any] = {
        "data": encode_deploy_data(artifact, constructor_args),
        "value": 0,
        "nonce": rpc.get_nonce(account.address),
        "gas": gas_limit,
        "gasPrice": rpc.get_gas_price(),
        "chainId": chain_id,
    }

    result = sign_and_send(
        rpc, account, tx, timeout=timeout, action=f"{artifact.contract_name} deployment"
    )
    if not result.contract_address:
        raise ChainError(
            f"Receipt for {result.tx_hash} has no contractAddress; "
            f"cannot record the deployment"
        )
    return result
