"""
Turn order tracking.

Every mutating session operation goes through `validate_actor` before it
touches any state.
"""

from typing import List, Optional

from .errors import NO_ACTIVE_PLAYERS, raise_error


class TurnAuthority:
    def __init__(self):
        self._order: List[str] = []
        self.current_index = 0

    @property
    def order(self) -> List[str]:
        return list(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._order

    def current_actor(self) -> Optional[str]:
        if not self._order:
            return None
        return self._order[self.current_index]

    def validate_actor(self, player_id: str) -> bool:
        return player_id is not None and player_id == self.current_actor()

    def advance(self) -> str:
        """Pass the turn to the next slot and return its id."""
        if not self._order:
            raise_error(NO_ACTIVE_PLAYERS)
        self.current_index = (self.current_index + 1) % len(self._order)
        return self._order[self.current_index]

    def add(self, player_id: str):
        if player_id not in self._order:
            self._order.append(player_id)

    def remove(self, player_id: str) -> bool:
        """
        Drop a slot from the order, keeping the index in range.

        A slot removed before the current one shifts the index down so the
        same player keeps the turn. If the current player is removed the turn
        passes to whoever took their position, wrapping to the first slot.
        """
        if player_id not in self._order:
            return False
        index = self._order.index(player_id)
        self._order.pop(index)
        if index < self.current_index:
            self.current_index -= 1
        if self.current_index >= len(self._order):
            self.current_index = 0
        return True

    def clear(self):
        self._order = []
        self.current_index = 0
