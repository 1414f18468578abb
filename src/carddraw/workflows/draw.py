from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..chain.events import card_drawn_token_id
from ..contract import CardContract, CardDetails
from ..errors import CardDrawError


@dataclass(frozen=True)
class DrawResult:
    tx_hash: str
    recipient: str
    token_id: int
    details: Optional[CardDetails] = None
    details_error: Optional[CardDrawError] = None


def draw_card(
    contract: CardContract,
    fetch_details: bool = True,
    gas_limit: Optional[int] = None,
) -> DrawResult:
    """
    Draw a random card and report the minted token.

    The contract picks the card; the token id comes from the receipt's
    single CardDrawn event.  Once the token exists a failed details read
    does not hide it: the error is returned in ``details_error``.

    Raises:
        EventNotFoundError / DuplicateEventError: The receipt does not hold
            exactly one CardDrawn event, even though the tx succeeded
    """
    result = contract.draw_card(gas_limit=gas_limit)
    recipient, token_id = card_drawn_token_id(contract.abi, result.receipt)

    details = None
    details_error = None
    if fetch_details:
        try:
            details = contract.get_card_details(token_id)
        except CardDrawError as exc:
            details_error = exc

    return DrawResult(
        tx_hash=result.tx_hash,
        recipient=recipient,
        token_id=token_id,
        details=details,
        details_error=details_error,
    )
