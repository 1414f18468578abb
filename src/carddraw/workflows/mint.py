"""
Mint - mint a specific catalog card and copy its metadata on-chain.

Two transactions, not atomic: mintCard() then setCardMetadata().  If the
second one fails the token exists with the contract's default metadata;
that is raised as MetadataNotSetError so the operator can retry the
metadata step for the reported token id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..chain.events import card_drawn_token_id
from ..contract import CardContract
from ..errors import CardDrawError, MetadataNotSetError
from ..records.catalog import CardCatalog, CardMetadata


@dataclass(frozen=True)
class MintResult:
    tx_hash: str
    recipient: str
    token_id: int
    metadata: CardMetadata
    metadata_tx_hash: str


def set_metadata(
    contract: CardContract,
    token_id: int,
    metadata: CardMetadata,
    gas_limit: Optional[int] = None,
) -> str:
    """Store catalog metadata on an existing token; returns the tx hash."""
    result = contract.set_card_metadata(
        token_id,
        metadata.name,
        metadata.description,
        metadata.image_uri,
        metadata.rarity_code,
        gas_limit=gas_limit,
    )
    return result.tx_hash


def mint_card(
    contract: CardContract,
    catalog: CardCatalog,
    recipient: str,
    card_id: int,
    gas_limit: Optional[int] = None,
    metadata_gas_limit: Optional[int] = None,
) -> MintResult:
    """
    Mint ``card_id`` to ``recipient`` and set its metadata.

    The card and its rarity are resolved before anything is sent, so an
    unknown card or unmapped rarity costs no gas.

    ``gas_limit`` applies to mintCard and ``metadata_gas_limit`` to
    setCardMetadata; None uses the per-function defaults.

    Raises:
        UnknownCardError / UnknownRarityError: Before any transaction
        TransactionRevertedError, RpcError: The mint itself failed
        EventNotFoundError / DuplicateEventError: Mint receipt anomaly
        MetadataNotSetError: Minted, but setCardMetadata failed
    """
    metadata = catalog.metadata(card_id)

    minted = contract.mint_card(recipient, card_id, gas_limit=gas_limit)
    minted_to, token_id = card_drawn_token_id(contract.abi, minted.receipt)

    try:
        metadata_tx_hash = set_metadata(contract, token_id, metadata, gas_limit=metadata_gas_limit)
    except CardDrawError as exc:
        raise MetadataNotSetError(token_id, minted.tx_hash, exc) from exc

    return MintResult(
        tx_hash=minted.tx_hash,
        recipient=minted_to,
        token_id=token_id,
        metadata=metadata,
        metadata_tx_hash=metadata_tx_hash,
    )
