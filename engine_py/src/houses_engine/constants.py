"""Game constants"""

from typing import List, Tuple

BOARD_SIZE = 9
RIVER_POSITION: Tuple[int, int] = (5, 5)

MIN_RANK = 1
MAX_RANK = 13

STARTING_HAND_SIZE = 5
STARTING_COINS = 10
CARD_PRICE = 3

# Fixed slots used while dev mode is enabled
DEV_PLAYER_IDS: List[str] = ['dev-player-1', 'dev-player-2', 'dev-player-3', 'dev-player-4']
DEV_PLAYER_NAMES: List[str] = ['Player 1 (Red)', 'Player 2 (Blue)', 'Player 3 (Green)', 'Player 4 (Yellow)']

# Snapshot kinds an applied intent asks the sync layer to emit
UPDATE_BOARD = "board"
UPDATE_TURN_INFO = "turn_info"
UPDATE_HAND = "hand"


def default_player_name(player_id: str) -> str:
    return f"Player-{player_id}"
