"""
CardContract - a DeploymentRecord bound to an RPC client and a signer.

Reads go through eth_call; writes are signed locally and sent as raw
transactions.  Every write blocks until its receipt arrives and raises
if the transaction reverted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from .chain.abi import decode_function_result, encode_function_call
from .chain.rpc import RpcClient
from .chain.tx import TxResult, send_contract_tx
from .errors import ConfigError, RpcError
from .records.deployment import DeploymentRecord
from .signer import to_checksum_address

DRAW_GAS = 300_000
MINT_GAS = 300_000
SET_METADATA_GAS = 500_000


@dataclass(frozen=True)
class CardDetails:
    id: int
    name: str
    description: str
    image: str
    rarity: int


@dataclass
class CardContract:
    address: str
    abi: list[dict[str, Any]]
    rpc: RpcClient
    account: Optional[LocalAccount] = None
    chain_id: Optional[int] = None
    receipt_timeout: Optional[float] = None

    @classmethod
    def from_record(
        cls,
        record: DeploymentRecord,
        rpc: RpcClient,
        account: Optional[LocalAccount] = None,
        chain_id: Optional[int] = None,
        receipt_timeout: Optional[float] = None,
    ) -> "CardContract":
        return cls(
            address=to_checksum_address(record.address),
            abi=record.abi,
            rpc=rpc,
            account=account,
            chain_id=chain_id,
            receipt_timeout=receipt_timeout,
        )

    # ---- reads ----

    def call(self, function_name: str, *args: Any) -> Any:
        calldata = encode_function_call(self.abi, function_name, list(args))
        result = self.rpc.eth_call(self.address, calldata)
        if result == "0x":
            raise RpcError(
                f"{function_name} returned no data; is {self.address} the CardDrawing contract?"
            )
        return decode_function_result(self.abi, function_name, result)

    def owner(self) -> str:
        return self.call("owner")

    def name(self) -> str:
        return self.call("name")

    def symbol(self) -> str:
        return self.call("symbol")

    def owner_of(self, token_id: int) -> str:
        return self.call("ownerOf", token_id)

    def get_card_details(self, token_id: int) -> CardDetails:
        card = self.call("getCardDetails", token_id)
        card_id, name, description, image, rarity = card
        return CardDetails(
            id=int(card_id),
            name=name,
            description=description,
            image=image,
            rarity=int(rarity),
        )

    # ---- writes ----

    def transact(self, function_name: str, args: list, gas_limit: Optional[int] = None) -> TxResult:
        if self.account is None:
            raise ConfigError(
                f"{function_name} needs a signing account; set PRIVATE_KEY."
            )
        chain_id = self.chain_id if self.chain_id is not None else self.rpc.chain_id()
        return send_contract_tx(
            self.rpc,
            self.account,
            contract_address=self.address,
            abi=self.abi,
            function_name=function_name,
            args=args,
            chain_id=chain_id,
            gas_limit=gas_limit,
            timeout=self.receipt_timeout,
        )

    def draw_card(self, gas_limit: Optional[int] = None) -> TxResult:
        return self.transact("drawCard", [], gas_limit or DRAW_GAS)

    def mint_card(self, recipient: str, card_id: int, gas_limit: Optional[int] = None) -> TxResult:
        return self.transact(
            "mintCard", [to_checksum_address(recipient), card_id], gas_limit or MINT_GAS
        )

    def set_card_metadata(
        self,
        token_id: int,
        name: str,
        description: str,
        image: str,
        rarity: int,
        gas_limit: Optional[int] = None,
    ) -> TxResult:
        return self.transact(
            "setCardMetadata",
            [token_id, name, description, image, rarity],
            gas_limit or SET_METADATA_GAS,
        )
