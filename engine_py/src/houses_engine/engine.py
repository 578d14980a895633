"""Session engine: the single owner of board, deck, players and turn order"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .board import Board
from .constants import UPDATE_BOARD, UPDATE_HAND, UPDATE_TURN_INFO, default_player_name
from .deck import Deck
from .errors import (
    DECK_EXHAUSTED, DEV_MODE_NOT_ENABLED, DEV_MODE_NOT_THIS_SLOTS_TURN,
    INSUFFICIENT_COINS, INVALID_MOVE, INVALID_PLACEMENT, NOT_YOUR_TURN,
    UNKNOWN_SLOT, GameError, message_for
)
from .models import Player
from .rules import RuleConfig, default_rules
from .serialization import tile_info
from .turns import TurnAuthority

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActingIdentity:
    """Who an intent acts as.

    In normal mode a connection acts as its own slot. Dev mode intents name
    the target slot explicitly and arrive flagged with `via_dev_mode`.
    """
    player_id: str
    connection_id: str
    via_dev_mode: bool = False

    @classmethod
    def connection(cls, connection_id: str) -> 'ActingIdentity':
        return cls(player_id=connection_id, connection_id=connection_id)

    @classmethod
    def slot(cls, player_id: str, connection_id: str) -> 'ActingIdentity':
        return cls(player_id=player_id, connection_id=connection_id, via_dev_mode=True)


class ActionResult:
    """Outcome of an intent: applied with snapshots to emit, or rejected."""

    def __init__(
        self,
        success: bool,
        updates: Optional[List[str]] = None,
        player_id: Optional[str] = None,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None
    ):
        self.success = success
        self.updates = updates or []
        self.player_id = player_id
        self.error_code = error_code
        self.error_message = error_message
        self.data = data or {}

    @classmethod
    def applied(cls, player_id: str, *updates: str, **data) -> 'ActionResult':
        return cls(success=True, updates=list(updates), player_id=player_id, data=data)

    @classmethod
    def error(cls, error_code: str, error_message: Optional[str] = None) -> 'ActionResult':
        return cls(success=False, error_code=error_code,
                   error_message=error_message or message_for(error_code))

    def __repr__(self):
        if self.success:
            return f"ActionResult(applied, updates={self.updates})"
        return f"ActionResult(rejected, {self.error_code})"


class SessionEngine:
    def __init__(self, rules: Optional[RuleConfig] = None, seed: Optional[int] = None):
        self.rules = rules or default_rules
        self.rng = random.Random(seed)
        self.board = Board(self.rules)
        self.deck = Deck.fresh(self.rng)
        self.players: Dict[str, Player] = {}
        self.turns = TurnAuthority()
        self.dev_mode = False

    # ---- membership ----

    @property
    def turn_order(self) -> List[str]:
        return self.turns.order

    @property
    def current_player(self) -> Optional[str]:
        return self.turns.current_actor()

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    def add_player(self, player_id: str, name: Optional[str] = None) -> Player:
        """Seat a new player at the end of the turn order and deal their hand."""
        if player_id in self.players:
            return self.players[player_id]
        player = Player(
            id=player_id,
            name=name or default_player_name(player_id),
            coins=self.rules.starting_coins,
            hand=self.deck.deal(self.rules.starting_hand_size),
        )
        if len(player.hand) < self.rules.starting_hand_size:
            logger.warning(f"Deck ran short dealing to {player_id}: {len(player.hand)} cards")
        self.players[player_id] = player
        self.turns.add(player_id)
        return player

    def remove_player(self, player_id: str) -> bool:
        """Drop a player; their hand goes to the discard pile."""
        player = self.players.pop(player_id, None)
        if player is None:
            return False
        self.deck.discard(player.hand)
        player.hand = []
        self.turns.remove(player_id)
        return True

    def reset(self):
        """Replace board and deck with new instances and drop every player."""
        self.players.clear()
        self.turns.clear()
        self.board = Board(self.rules)
        self.deck = Deck.fresh(self.rng)

    # ---- intents ----

    def _authorize(self, identity: ActingIdentity) -> Optional[ActionResult]:
        """Return a rejection if `identity` may not act right now."""
        if identity.via_dev_mode:
            if not self.dev_mode:
                return ActionResult.error(DEV_MODE_NOT_ENABLED)
            if identity.player_id not in self.players:
                return ActionResult.error(UNKNOWN_SLOT)
            if not self.turns.validate_actor(identity.player_id):
                return ActionResult.error(DEV_MODE_NOT_THIS_SLOTS_TURN)
            return None
        if not self.turns.validate_actor(identity.player_id):
            return ActionResult.error(NOT_YOUR_TURN)
        return None

    def _hand_update(self, identity: ActingIdentity) -> str:
        # Dev mode clients read every hand out of turnInfo
        return UPDATE_TURN_INFO if identity.via_dev_mode else UPDATE_HAND

    def end_turn(self, identity: ActingIdentity) -> ActionResult:
        rejection = self._authorize(identity)
        if rejection:
            return rejection
        try:
            next_player = self.turns.advance()
        except GameError as e:
            return ActionResult.error(e.code, e.message)
        logger.debug(f"Turn passed from {identity.player_id} to {next_player}")
        return ActionResult.applied(identity.player_id, UPDATE_TURN_INFO, current_player=next_player)

    def place_card(self, identity: ActingIdentity, x: int, y: int, card_index: int) -> ActionResult:
        rejection = self._authorize(identity)
        if rejection:
            return rejection
        player = self.players[identity.player_id]
        # Index is checked against the hand as it is now, not as the client saw it
        card = player.card_at(card_index)
        if card is None or not self.board.place_card(x, y, card, player.id):
            return ActionResult.error(INVALID_PLACEMENT)
        player.take_card(card_index)
        return ActionResult.applied(player.id, UPDATE_BOARD, self._hand_update(identity), card=card)

    def move_unit(self, identity: ActingIdentity, from_x: int, from_y: int, to_x: int, to_y: int) -> ActionResult:
        rejection = self._authorize(identity)
        if rejection:
            return rejection
        if not self.board.move_unit(from_x, from_y, to_x, to_y, identity.player_id):
            return ActionResult.error(INVALID_MOVE)
        return ActionResult.applied(identity.player_id, UPDATE_BOARD)

    def buy_card(self, identity: ActingIdentity) -> ActionResult:
        rejection = self._authorize(identity)
        if rejection:
            return rejection
        player = self.players[identity.player_id]
        if self.deck.remaining == 0:
            return ActionResult.error(DECK_EXHAUSTED)
        card = player.buy_card(self.deck, self.rules.card_price)
        if card is None:
            return ActionResult.error(INSUFFICIENT_COINS)
        return ActionResult.applied(player.id, self._hand_update(identity), card=card)

    # ---- queries ----

    def click_tile(self, x: int, y: int, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        return tile_info(self, x, y, viewer_id)
