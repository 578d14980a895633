"""
Board grid and the placement/movement rules that operate on it.

Both rule operations are total over any integer coordinates: illegal
requests return False and leave the grid untouched.
"""

from typing import Any, Dict, List, Optional

from .models import Card, Tile
from .rules import RuleConfig, default_rules


class Board:
    def __init__(self, rules: Optional[RuleConfig] = None):
        self.rules = rules or default_rules
        self.size = self.rules.board_size
        # grid[x][y], matching the client's indexing
        self.grid: List[List[Tile]] = [
            [Tile(river=self.rules.is_river(x, y)) for y in range(self.size)]
            for x in range(self.size)
        ]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        if not self.in_bounds(x, y):
            return None
        return self.grid[x][y]

    def _river_blocked(self, tile: Tile) -> bool:
        return tile.river and not self.rules.river_claimable

    def place_card(self, x: int, y: int, card: Card, owner_id: str) -> bool:
        """Claim an unowned tile for `owner_id` and put `card` on it."""
        tile = self.tile_at(x, y)
        if tile is None or tile.is_claimed or self._river_blocked(tile):
            return False
        tile.owner = owner_id
        tile.card = card
        return True

    def can_move(self, from_x: int, from_y: int, to_x: int, to_y: int, owner_id: str) -> bool:
        source = self.tile_at(from_x, from_y)
        target = self.tile_at(to_x, to_y)
        if source is None or target is None:
            return False
        if source.owner != owner_id or source.card is None:
            return False

        distance = abs(to_x - from_x) + abs(to_y - from_y)
        if distance == 0 or distance > self.rules.move_range:
            return False

        # Moving onto an occupied tile would overwrite a card
        if target.card is not None:
            return False
        if target.owner is not None and target.owner != owner_id:
            return False
        return not self._river_blocked(target)

    def move_unit(self, from_x: int, from_y: int, to_x: int, to_y: int, owner_id: str) -> bool:
        """Move the unit owned by `owner_id` and its claim to the target tile."""
        if not self.can_move(from_x, from_y, to_x, to_y, owner_id):
            return False
        source = self.grid[from_x][from_y]
        target = self.grid[to_x][to_y]
        target.owner = source.owner
        target.card = source.card
        source.clear()
        return True

    def cards_on_board(self) -> List[Card]:
        return [tile.card for column in self.grid for tile in column if tile.card is not None]

    def occupied_count(self) -> int:
        return len(self.cards_on_board())

    def owned_by(self, owner_id: str) -> int:
        return sum(1 for column in self.grid for tile in column if tile.owner == owner_id)

    def to_grid(self) -> List[List[Dict[str, Any]]]:
        return [[tile.to_dict() for tile in column] for column in self.grid]
