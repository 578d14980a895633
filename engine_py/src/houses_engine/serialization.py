"""
State serialization and sanitization utilities.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .models import Card

if TYPE_CHECKING:
    from .engine import SessionEngine


def serialize_hand(hand: List[Card]) -> List[Dict[str, int]]:
    return [card.to_dict() for card in hand]


def serialize_board(engine: "SessionEngine") -> List[List[Dict[str, Any]]]:
    return engine.board.to_grid()


def turn_info(engine: "SessionEngine") -> Dict[str, Any]:
    """
    Build the turn-info snapshot broadcast after turn changes.

    Hands are only included while dev mode is enabled, when one client
    drives every slot.
    """
    players = {}
    for player_id, player in engine.players.items():
        players[player_id] = {
            "name": player.name,
            "coins": player.coins,
            "handSize": len(player.hand),
        }
        if engine.dev_mode:
            players[player_id]["hand"] = serialize_hand(player.hand)

    return {
        "currentPlayer": engine.current_player,
        "turnOrder": engine.turn_order,
        "players": players,
        "devMode": engine.dev_mode,
    }


def dev_mode_snapshot(engine: "SessionEngine") -> Dict[str, Any]:
    """Payload of the devModeEnabled notification."""
    return {
        "players": {
            player_id: {
                "name": player.name,
                "coins": player.coins,
                "hand": serialize_hand(player.hand),
            }
            for player_id, player in engine.players.items()
        },
        "turnOrder": engine.turn_order,
        "currentPlayer": engine.current_player,
    }


def tile_info(engine: "SessionEngine", x: int, y: int, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Describe one tile plus the hand summary of every seated player.

    Args:
        engine: Session to read from
        x, y: Tile coordinate; out of range yields {"tile": None}
        viewer_id: Player asking; only their own hand is revealed unless
            dev mode is on or the rules opt into revealing all hands
    """
    tile = engine.board.tile_at(x, y)
    if tile is None:
        return {"tile": None}

    reveal_all = engine.dev_mode or engine.rules.reveal_hands_on_tile_query
    combatants = []
    for player_id in engine.turn_order:
        player = engine.players[player_id]
        combatant = {"playerId": player_id, "handSize": len(player.hand)}
        if reveal_all or player_id == viewer_id:
            combatant["hand"] = serialize_hand(player.hand)
        combatants.append(combatant)

    return {"tile": tile.to_dict(), "combatants": combatants}
