"""
Dev mode: a fixed set of slots that any connection may act for.

Enabling is a hard reset of the session. Disabling removes the slots again
but does not bring back whatever was there before; the transition only goes
one way.
"""

import logging
from typing import Any, Dict, List, Optional

from .constants import DEV_PLAYER_IDS, DEV_PLAYER_NAMES
from .engine import SessionEngine
from .serialization import serialize_hand

logger = logging.getLogger(__name__)


def dev_slots(engine: SessionEngine) -> List[Dict[str, str]]:
    count = engine.rules.dev_player_count
    return [
        {"id": player_id, "name": name}
        for player_id, name in zip(DEV_PLAYER_IDS[:count], DEV_PLAYER_NAMES[:count])
    ]


def enable_dev_mode(engine: SessionEngine) -> bool:
    """
    Switch the session into dev mode.

    Clears players and turn order, replaces board and deck, then seats the
    fixed slots with a starting hand each.

    Returns:
        False if dev mode was already enabled (nothing changes)
    """
    if engine.dev_mode:
        return False

    engine.reset()
    engine.dev_mode = True
    for slot in dev_slots(engine):
        engine.add_player(slot["id"], slot["name"])

    logger.info(f"Dev mode enabled with {len(engine.players)} players")
    return True


def disable_dev_mode(engine: SessionEngine) -> bool:
    """
    Leave dev mode, removing exactly the fixed slots.

    Returns:
        False if dev mode was not enabled
    """
    if not engine.dev_mode:
        return False

    engine.dev_mode = False
    for slot in dev_slots(engine):
        engine.remove_player(slot["id"])

    logger.info(f"Dev mode disabled, {len(engine.turn_order)} players remain")
    return True


def dev_mode_status(engine: SessionEngine) -> Dict[str, Any]:
    players = []
    if engine.dev_mode:
        for slot in dev_slots(engine):
            player = engine.get_player(slot["id"])
            players.append({
                "id": slot["id"],
                "name": slot["name"],
                "coins": player.coins if player else 0,
                "handSize": len(player.hand) if player else 0,
            })
    return {
        "enabled": engine.dev_mode,
        "players": players,
        "currentPlayer": engine.current_player,
    }


def dev_player_hand(engine: SessionEngine, player_id: str) -> Optional[List[Dict[str, int]]]:
    """Hand of one slot, or None if no such player is seated."""
    player = engine.get_player(player_id)
    if player is None:
        return None
    return serialize_hand(player.hand)
