"""
Shared fixtures: the CardDrawing ABI, log builders, an in-memory stand-in
for the deployed contract and a fake JSON-RPC node.

Nothing here touches the network.  ``FakeCardContract`` mirrors the
CardContract methods the workflows call and answers with receipts whose
logs are ABI-encoded the same way the real contract emits them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest
from eth_abi import encode
from eth_account import Account
from eth_hash.auto import keccak

from carddraw.chain.events import event_topic
from carddraw.chain.tx import TxResult
from carddraw.contract import CardDetails
from carddraw.errors import TransactionRevertedError

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
OTHER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
SEPOLIA_CHAIN_ID = 11155111

DEFAULT_NAME = "Card #{card_id}"
DEFAULT_DESCRIPTION = "Description for the specific card."
DEFAULT_IMAGE = "https://example.com/images/default.png"
DEFAULT_RARITY = 4


def _param(name: str, type_: str, indexed: Optional[bool] = None) -> dict[str, Any]:
    param: dict[str, Any] = {"name": name, "type": type_, "internalType": type_}
    if indexed is not None:
        param["indexed"] = indexed
    return param


CARD_TUPLE = {
    "name": "",
    "type": "tuple",
    "internalType": "struct CardDrawing.Card",
    "components": [
        _param("id", "uint256"),
        _param("name", "string"),
        _param("description", "string"),
        _param("image", "string"),
        _param("rarity", "uint8"),
    ],
}

CARD_ABI: list[dict[str, Any]] = [
    {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"},
    {
        "type": "event",
        "name": "CardDrawn",
        "anonymous": False,
        "inputs": [_param("user", "address", True), _param("tokenId", "uint256", False)],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            _param("from", "address", True),
            _param("to", "address", True),
            _param("tokenId", "uint256", True),
        ],
    },
    {
        "type": "function",
        "name": "owner",
        "inputs": [],
        "outputs": [_param("", "address")],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "name",
        "inputs": [],
        "outputs": [_param("", "string")],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "symbol",
        "inputs": [],
        "outputs": [_param("", "string")],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "ownerOf",
        "inputs": [_param("tokenId", "uint256")],
        "outputs": [_param("", "address")],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "drawCard",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "mintCard",
        "inputs": [_param("to", "address"), _param("cardId", "uint256")],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "getCardDetails",
        "inputs": [_param("tokenId", "uint256")],
        "outputs": [CARD_TUPLE],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "setCardMetadata",
        "inputs": [
            _param("tokenId", "uint256"),
            _param("name", "string"),
            _param("description", "string"),
            _param("image", "string"),
            _param("rarity", "uint8"),
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]

CARD_DRAWN_ENTRY = next(e for e in CARD_ABI if e.get("name") == "CardDrawn")
TRANSFER_ENTRY = next(e for e in CARD_ABI if e.get("name") == "Transfer")

CATALOG = {
    "cards": [
        {
            "id": 1,
            "name": "Ember Drake",
            "description": "A young drake wreathed in flame.",
            "image": "ipfs://bafy/1.png",
            "attributes": [
                {"trait_type": "Element", "value": "Fire"},
                {"trait_type": "Rarity", "value": "UR"},
            ],
        },
        {
            "id": 2,
            "name": "Tide Sprite",
            "description": "Mischief in the shallows.",
            "image": "ipfs://bafy/2.png",
            "attributes": [{"trait_type": "Rarity", "value": "N"}],
        },
        {
            "id": 3,
            "name": "Void Empress",
            "description": "She was here before the stars.",
            "image": "ipfs://bafy/3.png",
            "attributes": [{"trait_type": "Rarity", "value": "SSR"}],
        },
        {
            "id": 7,
            "name": "Glitched Golem",
            "description": "Its rarity tag is corrupted.",
            "image": "ipfs://bafy/7.png",
            "attributes": [{"trait_type": "Rarity", "value": "LEGENDARY"}],
        },
        {
            "id": 8,
            "name": "Untagged Wisp",
            "description": "No one ever graded it.",
            "image": "ipfs://bafy/8.png",
            "attributes": [],
        },
    ]
}


# ============ Log builders ============


def _topic_for_address(address: str) -> str:
    return "0x" + encode(["address"], [address]).hex()


def card_drawn_log(user: str, token_id: int, log_index: int = 0, address: str = CONTRACT_ADDRESS) -> dict:
    return {
        "address": address,
        "topics": [event_topic(CARD_DRAWN_ENTRY), _topic_for_address(user)],
        "data": "0x" + encode(["uint256"], [token_id]).hex(),
        "logIndex": hex(log_index),
    }


def transfer_log(to: str, token_id: int, log_index: int = 0, address: str = CONTRACT_ADDRESS) -> dict:
    return {
        "address": address,
        "topics": [
            event_topic(TRANSFER_ENTRY),
            _topic_for_address("0x" + "00" * 20),
            _topic_for_address(to),
            "0x" + encode(["uint256"], [token_id]).hex(),
        ],
        "data": "0x",
        "logIndex": hex(log_index),
    }


def foreign_log(log_index: int = 0) -> dict:
    """A log from some other contract whose event is not in CARD_ABI."""
    return {
        "address": OTHER_ADDRESS,
        "topics": ["0x" + keccak(b"Approval(address,address,uint256)").hex()],
        "data": "0x" + encode(["uint256"], [5]).hex(),
        "logIndex": hex(log_index),
    }


def receipt_with(logs: list[dict], tx_hash: str = "0x" + "ab" * 32, status: str = "0x1") -> dict:
    return {
        "transactionHash": tx_hash,
        "status": status,
        "blockNumber": "0x10",
        "contractAddress": None,
        "logs": logs,
    }


# ============ In-memory contract ============


class FakeCardContract:
    """Behaves like a deployed CardDrawing reached through CardContract."""

    def __init__(self, signer: str, abi: Optional[list] = None) -> None:
        self.abi = abi or CARD_ABI
        self.address = CONTRACT_ADDRESS
        self.signer = signer
        self.sent: list[tuple[str, tuple]] = []
        self.cards: dict[int, CardDetails] = {}
        self.owners: dict[int, str] = {}
        self.next_token_id = 1
        self.drawn_card_id = 3
        self.card_drawn_events = 1
        self.fail_functions: set[str] = set()
        self.gas_limits: dict[str, Optional[int]] = {}

    def _tx_hash(self) -> str:
        return "0x" + keccak(str(len(self.sent)).encode()).hex()

    def _mint(self, to: str, card_id: int, fn: str, args: tuple, gas_limit: Optional[int] = None) -> TxResult:
        self.sent.append((fn, args))
        self.gas_limits[fn] = gas_limit
        tx_hash = self._tx_hash()
        if fn in self.fail_functions:
            raise TransactionRevertedError(tx_hash, fn)
        token_id = self.next_token_id
        self.next_token_id += 1
        self.owners[token_id] = to
        self.cards[token_id] = CardDetails(
            id=card_id,
            name=DEFAULT_NAME.format(card_id=card_id),
            description=DEFAULT_DESCRIPTION,
            image=DEFAULT_IMAGE,
            rarity=DEFAULT_RARITY,
        )
        logs = [transfer_log(to, token_id, log_index=0)]
        for i in range(self.card_drawn_events):
            logs.append(card_drawn_log(to, token_id, log_index=1 + i))
        return TxResult(tx_hash=tx_hash, receipt=receipt_with(logs, tx_hash), status=1)

    def draw_card(self, gas_limit: Optional[int] = None) -> TxResult:
        return self._mint(self.signer, self.drawn_card_id, "drawCard", (), gas_limit)

    def mint_card(self, recipient: str, card_id: int, gas_limit: Optional[int] = None) -> TxResult:
        return self._mint(recipient, card_id, "mintCard", (recipient, card_id), gas_limit)

    def set_card_metadata(
        self,
        token_id: int,
        name: str,
        description: str,
        image: str,
        rarity: int,
        gas_limit: Optional[int] = None,
    ) -> TxResult:
        args = (token_id, name, description, image, rarity)
        self.sent.append(("setCardMetadata", args))
        self.gas_limits["setCardMetadata"] = gas_limit
        tx_hash = self._tx_hash()
        if "setCardMetadata" in self.fail_functions:
            raise TransactionRevertedError(tx_hash, "setCardMetadata")
        card = self.cards[token_id]
        self.cards[token_id] = CardDetails(
            id=card.id, name=name, description=description, image=image, rarity=rarity
        )
        return TxResult(tx_hash=tx_hash, receipt=receipt_with([], tx_hash), status=1)

    def get_card_details(self, token_id: int) -> CardDetails:
        return self.cards[token_id]


# ============ Fake JSON-RPC node ============


class FakeNode:
    """
    Minimal JSON-RPC endpoint for httpx.MockTransport.

    Records every request, hashes raw transactions to produce tx hashes
    and answers receipts from ``receipt_for`` (a callable taking the
    1-based index of the sent transaction).
    """

    def __init__(self, chain_id: int = SEPOLIA_CHAIN_ID) -> None:
        self.chain_id = chain_id
        self.requests: list[dict] = []
        self.raw_transactions: list[str] = []
        self.balance = 10**18
        self.code = "0x6080604052"
        self.receipt_for: Callable[[int], Optional[dict]] = lambda n: receipt_with([])
        self.call_results: dict[str, str] = {}
        self.errors: dict[str, dict] = {}
        self._hashes: dict[str, int] = {}

    @property
    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        method = payload["method"]
        params = payload["params"]

        if method in self.errors:
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": payload["id"], "error": self.errors[method]}
            )
        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": payload["id"], "result": self.result(method, params)}
        )

    def result(self, method: str, params: list) -> Any:
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method == "eth_getTransactionCount":
            return hex(len(self.raw_transactions))
        if method == "eth_gasPrice":
            return hex(1_000_000_000)
        if method == "eth_getBalance":
            return hex(self.balance)
        if method == "eth_getCode":
            return self.code
        if method == "eth_sendRawTransaction":
            raw = params[0]
            self.raw_transactions.append(raw)
            tx_hash = "0x" + keccak(bytes.fromhex(raw[2:])).hex()
            self._hashes[tx_hash] = len(self.raw_transactions)
            return tx_hash
        if method == "eth_getTransactionReceipt":
            index = self._hashes.get(params[0])
            if index is None:
                return None
            receipt = self.receipt_for(index)
            if receipt is not None:
                receipt = dict(receipt, transactionHash=params[0])
            return receipt
        if method == "eth_call":
            selector = params[0]["data"][:10]
            return self.call_results.get(selector, "0x")
        raise AssertionError(f"unexpected RPC method {method}")


def selector(signature: str) -> str:
    return "0x" + keccak(signature.encode()).hex()[:8]


# ============ Fixtures ============


@pytest.fixture()
def signer_address() -> str:
    return Account.from_key(TEST_PRIVATE_KEY).address


@pytest.fixture()
def fake_contract(signer_address: str) -> FakeCardContract:
    return FakeCardContract(signer=signer_address)


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def catalog_path(tmp_path: Path) -> Path:
    path = tmp_path / "cards.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


@pytest.fixture()
def deployment_path(tmp_path: Path) -> Path:
    path = tmp_path / "deployment.json"
    path.write_text(
        json.dumps({"address": CONTRACT_ADDRESS, "abi": CARD_ABI}), encoding="utf-8"
    )
    return path


@pytest.fixture()
def artifact_path(tmp_path: Path) -> Path:
    path = tmp_path / "CardDrawing.json"
    path.write_text(
        json.dumps(
            {
                "_format": "hh-sol-artifact-1",
                "contractName": "CardDrawing",
                "abi": CARD_ABI,
                "bytecode": "0x6080604052348015600f57600080fd5b50",
            }
        ),
        encoding="utf-8",
    )
    return path
