"""
Game rule configuration and validation.
"""

import os
from typing import Tuple

from pydantic import BaseModel, Field, field_validator

from .constants import (
    BOARD_SIZE, CARD_PRICE, DEV_PLAYER_IDS, RIVER_POSITION,
    STARTING_COINS, STARTING_HAND_SIZE
)


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    board_size: int = Field(
        default=BOARD_SIZE,
        ge=2,
        le=64,
        description="Width and height of the square board"
    )
    river: Tuple[int, int] = Field(
        default=RIVER_POSITION,
        description="Coordinate of the river landmark tile"
    )
    river_claimable: bool = Field(
        default=False,
        description="Whether cards may be placed on or moved onto the river"
    )
    move_range: int = Field(
        default=1,
        ge=1,
        description="Maximum orthogonal steps a unit may move in one action"
    )
    starting_hand_size: int = Field(
        default=STARTING_HAND_SIZE,
        ge=0,
        le=52,
        description="Cards dealt to a player when they take a slot"
    )
    starting_coins: int = Field(
        default=STARTING_COINS,
        ge=0,
        description="Coin balance of a newly created player"
    )
    card_price: int = Field(
        default=CARD_PRICE,
        ge=0,
        description="Coins spent to buy one card from the deck"
    )
    dev_player_count: int = Field(
        default=len(DEV_PLAYER_IDS),
        ge=len(DEV_PLAYER_IDS),
        le=len(DEV_PLAYER_IDS),
        description="Number of fixed slots created when dev mode is enabled"
    )
    reveal_hands_on_tile_query: bool = Field(
        default=False,
        description="Include every player's full hand in tile query responses"
    )

    @field_validator('river')
    @classmethod
    def validate_river(cls, v, info):
        """Validate the river lies on the board."""
        size = info.data.get('board_size', BOARD_SIZE)
        x, y = v
        if not (0 <= x < size and 0 <= y < size):
            raise ValueError(f'river {v} must lie on a {size}x{size} board')
        return v

    def is_river(self, x: int, y: int) -> bool:
        return (x, y) == tuple(self.river)


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_rules_from_env(prefix: str = "HOUSES_") -> RuleConfig:
    """Build a RuleConfig from HOUSES_* environment variables."""
    overrides = {}
    int_fields = ["board_size", "move_range", "starting_hand_size", "starting_coins", "card_price"]
    for name in int_fields:
        raw = os.getenv(f"{prefix}{name.upper()}")
        if raw is not None:
            overrides[name] = int(raw)

    raw = os.getenv(f"{prefix}RIVER")
    if raw is not None:
        x, y = raw.split(",")
        overrides["river"] = (int(x), int(y))

    for name in ["river_claimable", "reveal_hands_on_tile_query"]:
        raw = os.getenv(f"{prefix}{name.upper()}")
        if raw is not None:
            overrides[name] = _env_bool(raw)

    return create_rules(**overrides)
