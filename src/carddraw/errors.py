"""
Error hierarchy for carddraw.

Each class carries the process exit code the CLI uses when it is the
reason a command stops.  Workflows raise these; only the CLI turns them
into output and an exit status.
"""

from __future__ import annotations

from typing import Optional


class CardDrawError(RuntimeError):
    exit_code: int = 1


class ConfigError(CardDrawError):
    """Missing or inconsistent configuration (endpoint, key, network)."""
    exit_code = 2


class RecordError(CardDrawError):
    """Missing or malformed persisted state (deployment record, catalog, artifact)."""
    exit_code = 3


class ValidationError(CardDrawError):
    exit_code = 4


class UnknownCardError(ValidationError):
    def __init__(self, card_id: int) -> None:
        super().__init__(f"Card {card_id} is not in the card catalog")
        self.card_id = card_id


class UnknownRarityError(ValidationError):
    def __init__(self, label: Optional[str], card_id: Optional[int] = None) -> None:
        where = f" for card {card_id}" if card_id is not None else ""
        if label is None:
            message = f"No Rarity attribute{where}"
        else:
            message = f"Unknown rarity {label!r}{where} (expected one of N, R, SR, UR, SSR)"
        super().__init__(message)
        self.label = label
        self.card_id = card_id


class ChainError(CardDrawError):
    exit_code = 5


class RpcError(ChainError):
    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


class TransactionRevertedError(ChainError):
    def __init__(self, tx_hash: str, action: str = "Transaction") -> None:
        super().__init__(f"{action} reverted (tx {tx_hash})")
        self.tx_hash = tx_hash


class ReceiptTimeoutError(ChainError):
    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(f"Transaction {tx_hash} not confirmed within {timeout}s")
        self.tx_hash = tx_hash
        self.timeout = timeout


class EventDecodingError(CardDrawError):
    exit_code = 6


class EventNotFoundError(EventDecodingError):
    def __init__(self, event_name: str, tx_hash: Optional[str] = None) -> None:
        suffix = f" (tx {tx_hash})" if tx_hash else ""
        super().__init__(f"{event_name} event not found in the logs{suffix}")
        self.event_name = event_name
        self.tx_hash = tx_hash


class DuplicateEventError(EventDecodingError):
    def __init__(self, event_name: str, count: int, tx_hash: Optional[str] = None) -> None:
        suffix = f" (tx {tx_hash})" if tx_hash else ""
        super().__init__(
            f"Expected exactly one {event_name} event, found {count}{suffix}"
        )
        self.event_name = event_name
        self.count = count
        self.tx_hash = tx_hash


class MetadataNotSetError(CardDrawError):
    """The mint confirmed but setCardMetadata did not.

    The token exists on-chain with the contract's default metadata.
    """
    exit_code = 7

    def __init__(self, token_id: int, mint_tx_hash: str, cause: Exception) -> None:
        super().__init__(
            f"Token {token_id} was minted (tx {mint_tx_hash}) but its metadata "
            f"was not set: {cause}"
        )
        self.token_id = token_id
        self.mint_tx_hash = mint_tx_hash
        self.cause = cause
