"""
ABI handling: compiled artifacts, ABI normalization and call encoding.

Artifacts come from Hardhat (``artifacts/contracts/X.sol/X.json``) or
Foundry (``out/X.sol/X.json``); both carry the ABI under ``abi`` and
differ only in how the bytecode is stored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_hash.auto import keccak

from ..errors import RecordError, RpcError, ValidationError


@dataclass(frozen=True)
class ContractArtifact:
    contract_name: str
    abi: list[dict[str, Any]]
    bytecode: str


def normalize_abi(value: Any) -> list[dict[str, Any]]:
    """
    Normalize an ABI value to a list of entry dicts.

    Accepts the list itself or a string holding a JSON array (some tools
    persist ``interface.format('json')`` output verbatim).

    Raises:
        RecordError: If the value is neither
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise RecordError(f"ABI string is not valid JSON: {exc}") from exc
    if not isinstance(value, list):
        raise RecordError(f"ABI must be a JSON array, got {type(value).__name__}")
    if not all(isinstance(entry, dict) for entry in value):
        raise RecordError("ABI entries must be JSON objects")
    return value


def load_artifact(path: Path) -> ContractArtifact:
    """
    Load ABI and deployment bytecode from a compiled artifact.

    Raises:
        RecordError: If the file is missing, unreadable or has no bytecode
    """
    if not path.exists():
        raise RecordError(
            f"Artifact not found: {path}. Compile the contract first "
            f"(npx hardhat compile or forge build)."
        )

    try:
        with path.open("r", encoding="utf-8") as f:
            artifact = json.load(f)
    except json.JSONDecodeError as exc:
        raise RecordError(f"Artifact {path} is not valid JSON: {exc}") from exc

    if not isinstance(artifact, dict) or "abi" not in artifact:
        raise RecordError(f"Artifact {path} has no abi field")

    bytecode = artifact.get("bytecode", "")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object", "")
    if not isinstance(bytecode, str) or bytecode in ("", "0x"):
        raise RecordError(f"No bytecode in artifact {path}")
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode

    name = artifact.get("contractName") or path.stem
    return ContractArtifact(
        contract_name=name,
        abi=normalize_abi(artifact["abi"]),
        bytecode=bytecode,
    )


def abi_type(param: dict[str, Any]) -> str:
    """Canonical type string for an ABI parameter, expanding tuples."""
    type_str = param["type"]
    if type_str.startswith("tuple"):
        inner = ",".join(abi_type(c) for c in param.get("components", []))
        return f"({inner}){type_str[len('tuple'):]}"
    return type_str


def find_function(abi: list[dict[str, Any]], function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise RecordError(f"Function {function_name} not found in ABI")


def function_selector(entry: dict[str, Any]) -> bytes:
    input_types = [abi_type(inp) for inp in entry.get("inputs", [])]
    sig = f"{entry['name']}({','.join(input_types)})"
    # Keccak-256, not NIST SHA3-256
    return keccak(sig.encode("utf-8"))[:4]


def encode_function_call(abi: list[dict[str, Any]], function_name: str, args: list) -> str:
    """ABI-encode a function call to 0x-prefixed hex calldata."""
    func = find_function(abi, function_name)
    input_types = [abi_type(inp) for inp in func.get("inputs", [])]
    if len(args) != len(input_types):
        raise ValidationError(
            f"{function_name} expects {len(input_types)} argument(s), got {len(args)}"
        )

    try:
        encoded_args = encode(input_types, args) if args else b""
    except EncodingError as exc:
        raise ValidationError(f"Cannot encode arguments for {function_name}: {exc}") from exc

    return "0x" + function_selector(func).hex() + encoded_args.hex()


def decode_function_result(abi: list[dict[str, Any]], function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        None for functions without outputs, the single value for one
        output, otherwise the decoded tuple
    """
    func = find_function(abi, function_name)
    output_types = [abi_type(out) for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    try:
        decoded = decode(output_types, raw)
    except DecodingError as exc:
        raise RpcError(f"Cannot decode {function_name} result: {exc}") from exc

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def encode_deploy_data(artifact: ContractArtifact, constructor_args: Optional[list] = None) -> str:
    """Creation payload: bytecode followed by ABI-encoded constructor args."""
    deploy_data = artifact.bytecode
    if not constructor_args:
        return deploy_data

    constructor = None
    for entry in artifact.abi:
        if entry.get("type") == "constructor":
            constructor = entry
            break

    if constructor is None:
        raise ValidationError(
            f"Constructor not found in ABI for {artifact.contract_name}, "
            f"but constructor_args were provided."
        )

    input_types = [abi_type(inp) for inp in constructor.get("inputs", [])]
    try:
        encoded_args = encode(input_types, constructor_args)
    except EncodingError as exc:
        raise ValidationError(f"Cannot encode constructor arguments: {exc}") from exc
    return deploy_data + encoded_args.hex()
