"""Game models and data structures"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .constants import MAX_RANK, MIN_RANK

if TYPE_CHECKING:
    from .deck import Deck


class Category(IntEnum):
    RED = 0
    BLUE = 1
    GREEN = 2
    YELLOW = 3


@dataclass(frozen=True)
class Card:
    category: Category
    rank: int

    def __post_init__(self):
        if not MIN_RANK <= self.rank <= MAX_RANK:
            raise ValueError(f"rank must be between {MIN_RANK} and {MAX_RANK}, got {self.rank}")
        # Accept plain ints from callers building cards by hand
        object.__setattr__(self, 'category', Category(self.category))

    def to_dict(self) -> Dict[str, int]:
        return {"category": int(self.category), "rank": self.rank}


@dataclass
class Tile:
    owner: Optional[str] = None  # player id
    card: Optional[Card] = None  # unit standing on the tile
    river: bool = False

    @property
    def is_claimed(self) -> bool:
        return self.owner is not None

    def clear(self):
        self.owner = None
        self.card = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "card": self.card.to_dict() if self.card else None,
            "river": self.river,
        }


@dataclass
class Player:
    id: str
    name: str
    coins: int = 0
    hand: List[Card] = field(default_factory=list)

    def buy_card(self, deck: "Deck", price: int) -> Optional[Card]:
        """Spend `price` coins on the top card of `deck`.

        Either both the coin balance and the hand change, or neither does.
        """
        if self.coins < price or deck.remaining == 0:
            return None
        card = deck.deal(1)[0]
        self.coins -= price
        self.hand.append(card)
        return card

    def take_card(self, index: int) -> Optional[Card]:
        """Remove and return the card at `index`, or None if out of range."""
        if not 0 <= index < len(self.hand):
            return None
        return self.hand.pop(index)

    def card_at(self, index: int) -> Optional[Card]:
        if not 0 <= index < len(self.hand):
            return None
        return self.hand[index]
