"""
Card catalog - static metadata for every mintable card.

The catalog is a JSON file keyed by card id::

    {"cards": [{"id": 1, "name": "...", "description": "...",
                "image": "https://...",
                "attributes": [{"trait_type": "Rarity", "value": "UR"}]}]}

Structure is checked when the file is loaded; the rarity of an entry is
only checked when that card is resolved for minting, so one bad entry
does not block the rest of the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..errors import RecordError, UnknownCardError
from ..rarity import rarity_code
from .schemas import SchemaRegistry, load_json

SCHEMA = "card_catalog.schema.json"
RARITY_TRAIT = "Rarity"


@dataclass(frozen=True)
class CardMetadata:
    id: int
    name: str
    description: str
    image_uri: str
    rarity_code: int


@dataclass(frozen=True)
class CardCatalog:
    cards: dict[int, dict[str, Any]]

    @classmethod
    def from_dict(
        cls,
        payload: Any,
        registry: SchemaRegistry | None = None,
        source: str = "",
    ) -> "CardCatalog":
        registry = registry or SchemaRegistry.default()
        registry.validate_instance(payload, SCHEMA, source=source)

        cards: dict[int, dict[str, Any]] = {}
        for entry in payload["cards"]:
            card_id = entry["id"]
            if card_id in cards:
                raise RecordError(f"Duplicate card id {card_id} in catalog {source}".rstrip())
            cards[card_id] = entry
        return cls(cards)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self.cards

    def __len__(self) -> int:
        return len(self.cards)

    def get(self, card_id: int) -> dict[str, Any]:
        try:
            return self.cards[card_id]
        except KeyError:
            raise UnknownCardError(card_id) from None

    def metadata(self, card_id: int) -> CardMetadata:
        """
        Resolve a card into the values setCardMetadata takes.

        Raises:
            UnknownCardError: card_id is not in the catalog
            UnknownRarityError: no Rarity attribute, or an unmapped label
        """
        entry = self.get(card_id)
        return CardMetadata(
            id=card_id,
            name=entry["name"],
            description=entry["description"],
            image_uri=entry["image"],
            rarity_code=rarity_code(_rarity_label(entry), card_id),
        )


def _rarity_label(entry: dict[str, Any]) -> Optional[str]:
    for attribute in entry.get("attributes", []):
        if attribute.get("trait_type") == RARITY_TRAIT:
            return attribute.get("value")
    return None


def load_catalog(path: Path, registry: SchemaRegistry | None = None) -> CardCatalog:
    """
    Read and validate the card catalog.

    Raises:
        RecordError: Missing file, bad JSON, schema violation or duplicate ids
    """
    payload = load_json(path, "Card catalog")
    return CardCatalog.from_dict(payload, registry=registry, source=str(path))
