"""
Event log decoding.

Receipts carry raw logs: ``topics[0]`` is the Keccak-256 hash of the
event signature, indexed arguments fill the remaining topics and the
rest are ABI-encoded in ``data``.  A receipt may hold logs of several
event types (the ERC-721 Transfer alongside CardDrawn, for example), so
logs that match nothing in the ABI are skipped rather than reported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_hash.auto import keccak

from ..errors import DuplicateEventError, EventNotFoundError
from .abi import abi_type

CARD_DRAWN = "CardDrawn"


@dataclass(frozen=True)
class DecodedEvent:
    name: str
    args: tuple
    arg_names: tuple
    address: Optional[str] = None
    log_index: Optional[int] = None

    def arg(self, name: str) -> Any:
        return self.args[self.arg_names.index(name)]


def event_signature(entry: dict[str, Any]) -> str:
    types = ",".join(abi_type(inp) for inp in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def event_topic(entry: dict[str, Any]) -> str:
    return "0x" + keccak(event_signature(entry).encode("utf-8")).hex()


def _hex_bytes(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


def _is_hashed_when_indexed(type_str: str) -> bool:
    # Dynamic and composite values are stored as their Keccak hash in topics
    return type_str in ("string", "bytes") or type_str.endswith("]") or type_str.startswith("(")


def _event_index(abi: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    index = {}
    for entry in abi:
        if entry.get("type") == "event" and not entry.get("anonymous", False):
            index[event_topic(entry).lower()] = entry
    return index


def _decode_with_entry(entry: dict[str, Any], log: dict[str, Any]) -> Optional[DecodedEvent]:
    inputs = entry.get("inputs", [])
    topics = log.get("topics", [])
    indexed = [inp for inp in inputs if inp.get("indexed")]
    if len(topics) != len(indexed) + 1:
        return None

    try:
        values: dict[int, Any] = {}
        topic_iter = iter(topics[1:])
        for position, inp in enumerate(inputs):
            if not inp.get("indexed"):
                continue
            topic = _hex_bytes(next(topic_iter))
            type_str = abi_type(inp)
            if _is_hashed_when_indexed(type_str):
                values[position] = topic
            else:
                values[position] = decode([type_str], topic)[0]

        plain = [(pos, inp) for pos, inp in enumerate(inputs) if not inp.get("indexed")]
        if plain:
            decoded = decode([abi_type(inp) for _, inp in plain], _hex_bytes(log.get("data", "0x")))
            for (position, _), value in zip(plain, decoded):
                values[position] = value
    except (DecodingError, ValueError):
        return None

    log_index = log.get("logIndex")
    if isinstance(log_index, str):
        log_index = int(log_index, 16)

    return DecodedEvent(
        name=entry["name"],
        args=tuple(values[i] for i in range(len(inputs))),
        arg_names=tuple(inp.get("name", "") for inp in inputs),
        address=log.get("address"),
        log_index=log_index,
    )


def _lookup(index: dict[str, dict[str, Any]], log: dict[str, Any]) -> Optional[DecodedEvent]:
    topics = log.get("topics") or []
    if not topics:
        return None
    entry = index.get(str(topics[0]).lower())
    if entry is None:
        return None
    return _decode_with_entry(entry, log)


def decode_log(abi: list[dict[str, Any]], log: dict[str, Any]) -> Optional[DecodedEvent]:
    """Decode one raw log against the ABI; None when no event matches."""
    return _lookup(_event_index(abi), log)


def decode_receipt(abi: list[dict[str, Any]], receipt: dict[str, Any]) -> list[DecodedEvent]:
    index = _event_index(abi)
    decoded = (_lookup(index, log) for log in receipt.get("logs", []))
    return [event for event in decoded if event is not None]


def find_single_event(
    abi: list[dict[str, Any]],
    receipt: dict[str, Any],
    name: str,
    arity: Optional[int] = None,
) -> DecodedEvent:
    """
    Locate exactly one decoded event by name (and argument count).

    Raises:
        EventNotFoundError: No such event in the receipt
        DuplicateEventError: More than one; the caller must not guess
    """
    matches = [
        event for event in decode_receipt(abi, receipt)
        if event.name == name and (arity is None or len(event.args) == arity)
    ]
    tx_hash = receipt.get("transactionHash")
    if not matches:
        raise EventNotFoundError(name, tx_hash)
    if len(matches) > 1:
        raise DuplicateEventError(name, len(matches), tx_hash)
    return matches[0]


def card_drawn_token_id(abi: list[dict[str, Any]], receipt: dict[str, Any]) -> tuple[str, int]:
    """Return (recipient, token_id) from the receipt's single CardDrawn event."""
    event = find_single_event(abi, receipt, CARD_DRAWN, arity=2)
    recipient, token_id = event.args
    return str(recipient), int(token_id)
