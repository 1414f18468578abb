"""
DeploymentRecord - the persisted address and ABI of the deployed contract.

Written once by ``carddraw deploy`` and read by every other command.  The
file is only ever replaced whole, never edited in place.

Known hazard: two deploys running at the same time both write the same
file and the last rename wins.  Nothing guards against that.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..chain.abi import normalize_abi
from .schemas import SchemaRegistry, load_json, write_json_atomic

SCHEMA = "deployment.schema.json"


@dataclass(frozen=True)
class DeploymentRecord:
    address: str
    abi: list[dict[str, Any]]
    network: Optional[str] = None
    chain_id: Optional[int] = None
    transaction_hash: Optional[str] = None

    @classmethod
    def from_dict(
        cls,
        payload: Any,
        registry: SchemaRegistry | None = None,
        source: str = "",
    ) -> "DeploymentRecord":
        registry = registry or SchemaRegistry.default()
        registry.validate_instance(payload, SCHEMA, source=source)
        return cls(
            address=payload["address"],
            abi=normalize_abi(payload["abi"]),
            network=payload.get("network"),
            chain_id=payload.get("chainId"),
            transaction_hash=payload.get("transactionHash"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "address": self.address,
            "abi": self.abi,
        }
        if self.network:
            result["network"] = self.network
        if self.chain_id is not None:
            result["chainId"] = self.chain_id
        if self.transaction_hash:
            result["transactionHash"] = self.transaction_hash
        return result


def load_deployment(path: Path, registry: SchemaRegistry | None = None) -> DeploymentRecord:
    """
    Read and validate a deployment record.

    Raises:
        RecordError: Missing file, bad JSON, schema violation or an ABI
            string that does not hold a JSON array
    """
    payload = load_json(path, "Deployment record")
    return DeploymentRecord.from_dict(payload, registry=registry, source=str(path))


def write_deployment(path: Path, record: DeploymentRecord) -> None:
    write_json_atomic(path, record.to_dict())
