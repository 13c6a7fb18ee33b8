"""Read-only card catalog."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import TypeAdapter

from .catalog_data import DEFAULT_CARDS
from .enums import CardType, Rarity
from .errors import CatalogError
from .models import Card, CardID

_DRAW_EXCLUDED_RARITIES = frozenset({Rarity.CRISIS, Rarity.BOOSTER})
_STARTER_RARITIES = frozenset({Rarity.STARTER, Rarity.COMMON})


class CardCatalog:
    """Ordered lookup of every card definition available to a game.

    Ids are unique: a second definition for the same id is a configuration
    error, never a silent override.
    """

    def __init__(self, cards: Iterable[Card]) -> None:
        self._cards: dict[CardID, Card] = {}
        for card in cards:
            if card.id in self._cards:
                raise CatalogError(f"duplicate card id '{card.id}'")
            self._cards[card.id] = card

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards.values())

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def get(self, card_id: str) -> Card:
        try:
            return self._cards[CardID(card_id)]
        except KeyError:
            raise KeyError(f"unknown card id '{card_id}'") from None

    def find(self, card_id: str) -> Card | None:
        return self._cards.get(CardID(card_id))

    def by_type(self, card_type: CardType) -> list[Card]:
        return [card for card in self._cards.values() if card.type == card_type]

    def by_rarity(self, rarity: Rarity) -> list[Card]:
        return [card for card in self._cards.values() if card.rarity == rarity]

    def starter_pool(self) -> list[Card]:
        """Cards a new game may be dealt, excluding events and landmarks."""

        return [
            card
            for card in self._cards.values()
            if card.rarity in _STARTER_RARITIES
            and card.type not in (CardType.EVENT, CardType.LANDMARK)
        ]

    def draw_pool(self) -> list[Card]:
        """Cards eligible for a shuffled deck."""

        return [
            card
            for card in self._cards.values()
            if card.rarity not in _DRAW_EXCLUDED_RARITIES
            and card.type not in (CardType.EVENT, CardType.LANDMARK)
        ]

    def event_cards(self) -> list[Card]:
        return self.by_type(CardType.EVENT)

    def landmarks(self) -> list[Card]:
        return self.by_type(CardType.LANDMARK)


def load_catalog(source: str | bytes | list[dict[str, Any]]) -> CardCatalog:
    """Validate an external catalog (JSON text or decoded list) and build it.

    Raises:
        pydantic.ValidationError: if an entry is malformed
        CatalogError: if the catalog repeats an id
    """

    from famand.schemas.card import CardSchema  # the schemas import this package

    raw = json.loads(source) if isinstance(source, (str, bytes)) else source
    schemas = TypeAdapter(list[CardSchema]).validate_python(raw)
    return CardCatalog(schema.to_domain() for schema in schemas)


DEFAULT_CATALOG = CardCatalog(DEFAULT_CARDS)
