from __future__ import annotations

from enum import IntEnum
from typing import Optional

from .errors import UnknownRarityError


class Rarity(IntEnum):
    """On-chain rarity codes, as stored by setCardMetadata (uint8)."""

    N = 1
    R = 2
    SR = 3
    UR = 4
    SSR = 5


def rarity_code(label: Optional[str], card_id: Optional[int] = None) -> int:
    """Map a rarity label to its code; anything outside N/R/SR/UR/SSR is rejected."""
    if not isinstance(label, str) or label not in Rarity.__members__:
        raise UnknownRarityError(label, card_id)
    return int(Rarity[label])


def rarity_label(code: int) -> str:
    try:
        return Rarity(code).name
    except ValueError:
        return f"?({code})"
