"""
Card shuffling and dealing utilities.
"""

import random
from typing import Iterable, List, Optional

from .constants import MAX_RANK, MIN_RANK
from .models import Card, Category


def create_cards() -> List[Card]:
    """Create the full 52-card set, ordered by category then rank."""
    return [
        Card(category, rank)
        for category in Category
        for rank in range(MIN_RANK, MAX_RANK + 1)
    ]


class Deck:
    """Draw pile plus discard pile.

    Cards are dealt from the front of the draw pile. Dealing past the end of
    the pile returns a short hand rather than reshuffling the discards; callers
    that care about exhaustion check `remaining` first.
    """

    def __init__(self, cards: Optional[List[Card]] = None, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.draw_pile: List[Card] = list(cards) if cards is not None else create_cards()
        self.discard_pile: List[Card] = []

    @classmethod
    def fresh(cls, rng: Optional[random.Random] = None) -> "Deck":
        """Create a full deck, already shuffled."""
        deck = cls(rng=rng)
        deck.shuffle()
        return deck

    @property
    def remaining(self) -> int:
        return len(self.draw_pile)

    def shuffle(self):
        """Shuffle the draw pile in place (uniform Fisher-Yates)."""
        self.rng.shuffle(self.draw_pile)

    def deal(self, n: int) -> List[Card]:
        """
        Remove up to `n` cards from the top of the draw pile.

        Args:
            n: Number of cards requested

        Returns:
            The dealt cards; fewer than `n` when the pile runs out
        """
        if n <= 0:
            return []
        dealt = self.draw_pile[:n]
        del self.draw_pile[:n]
        return dealt

    def discard(self, cards: Iterable[Card]):
        self.discard_pile.extend(cards)

    def reset(self):
        """Rebuild the full card set and shuffle it. Discards are dropped."""
        self.draw_pile = create_cards()
        self.discard_pile = []
        self.shuffle()
