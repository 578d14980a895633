# engine_py/src/houses_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
NOT_YOUR_TURN = "NOT_YOUR_TURN"
INVALID_PLACEMENT = "INVALID_PLACEMENT"
INVALID_MOVE = "INVALID_MOVE"
INSUFFICIENT_COINS = "INSUFFICIENT_COINS"
DECK_EXHAUSTED = "DECK_EXHAUSTED"
DEV_MODE_NOT_ENABLED = "DEV_MODE_NOT_ENABLED"
DEV_MODE_NOT_THIS_SLOTS_TURN = "DEV_MODE_NOT_THIS_SLOTS_TURN"
UNKNOWN_SLOT = "UNKNOWN_SLOT"
NO_ACTIVE_PLAYERS = "NO_ACTIVE_PLAYERS"
INVALID_EVENT = "INVALID_EVENT"
INTERNAL_ERROR = "INTERNAL"

# User-facing text sent in error frames
ERROR_MESSAGES = {
    NOT_YOUR_TURN: "Not your turn",
    INVALID_PLACEMENT: "Invalid placement",
    INVALID_MOVE: "Invalid move",
    INSUFFICIENT_COINS: "Not enough coins",
    DECK_EXHAUSTED: "No cards left in the deck",
    DEV_MODE_NOT_ENABLED: "Dev mode not enabled",
    DEV_MODE_NOT_THIS_SLOTS_TURN: "Not this player's turn",
    UNKNOWN_SLOT: "Player not found",
    NO_ACTIVE_PLAYERS: "No active players",
    INVALID_EVENT: "Invalid event",
    INTERNAL_ERROR: "Internal server error",
}


def message_for(code: str) -> str:
    return ERROR_MESSAGES.get(code, code)


# Helper function to raise common errors
def raise_error(code: str, message: str = None):
    raise GameError(code, message or message_for(code))
