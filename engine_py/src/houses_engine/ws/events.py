"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Inbound event types."""
    END_TURN = "endTurn"
    PLACE_CARD = "placeCard"
    MOVE_UNIT = "moveUnit"
    BUY_CARD = "buyCard"
    DEV_END_TURN = "devEndTurn"
    DEV_PLACE_CARD = "devPlaceCard"
    DEV_MOVE_UNIT = "devMoveUnit"
    DEV_BUY_CARD = "devBuyCard"
    CLICK_TILE = "clickTile"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    CONNECTED = "connected"
    UPDATE_BOARD = "updateBoard"
    UPDATE_HAND = "updateHand"
    TURN_INFO = "turnInfo"
    TILE_INFO = "tileInfo"
    DEV_MODE_ENABLED = "devModeEnabled"
    DEV_MODE_DISABLED = "devModeDisabled"
    ERROR = "error"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    model_config = ConfigDict(populate_by_name=True)

    type: EventType


class EndTurnEvent(BaseEvent):
    type: EventType = EventType.END_TURN


class PlaceCardEvent(BaseEvent):
    type: EventType = EventType.PLACE_CARD
    x: int
    y: int
    card_index: int = Field(..., alias="cardIndex")


class MoveUnitEvent(BaseEvent):
    type: EventType = EventType.MOVE_UNIT
    from_x: int = Field(..., alias="fromX")
    from_y: int = Field(..., alias="fromY")
    to_x: int = Field(..., alias="toX")
    to_y: int = Field(..., alias="toY")


class BuyCardEvent(BaseEvent):
    type: EventType = EventType.BUY_CARD


class DevEndTurnEvent(BaseEvent):
    """End turn on behalf of a dev mode slot."""
    type: EventType = EventType.DEV_END_TURN
    player_id: str = Field(..., alias="playerId", min_length=1)


class DevPlaceCardEvent(PlaceCardEvent):
    type: EventType = EventType.DEV_PLACE_CARD
    player_id: str = Field(..., alias="playerId", min_length=1)


class DevMoveUnitEvent(MoveUnitEvent):
    type: EventType = EventType.DEV_MOVE_UNIT
    player_id: str = Field(..., alias="playerId", min_length=1)


class DevBuyCardEvent(BaseEvent):
    type: EventType = EventType.DEV_BUY_CARD
    player_id: str = Field(..., alias="playerId", min_length=1)


class ClickTileEvent(BaseEvent):
    """Read-only tile query."""
    type: EventType = EventType.CLICK_TILE
    x: int
    y: int


# Union type for all inbound events
InboundEvent = Union[
    EndTurnEvent,
    PlaceCardEvent,
    MoveUnitEvent,
    BuyCardEvent,
    DevEndTurnEvent,
    DevPlaceCardEvent,
    DevMoveUnitEvent,
    DevBuyCardEvent,
    ClickTileEvent,
]

DEV_EVENTS = (DevEndTurnEvent, DevPlaceCardEvent, DevMoveUnitEvent, DevBuyCardEvent)


# Outbound event models
class OutboundEvent(BaseModel):
    type: OutboundEventType
    timestamp: float = Field(default_factory=time.time)


class ConnectedEvent(OutboundEvent):
    """Tells a new connection which id it acts as in normal mode."""
    type: OutboundEventType = OutboundEventType.CONNECTED
    playerId: str


class UpdateBoardEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.UPDATE_BOARD
    grid: List[List[Dict[str, Any]]]


class UpdateHandEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.UPDATE_HAND
    hand: List[Dict[str, int]]


class TurnInfoEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.TURN_INFO
    currentPlayer: Optional[str] = None
    turnOrder: List[str]
    players: Dict[str, Dict[str, Any]]
    devMode: bool


class TileInfoEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.TILE_INFO
    tile: Optional[Dict[str, Any]] = None
    combatants: Optional[List[Dict[str, Any]]] = None


class DevModeEnabledEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.DEV_MODE_ENABLED
    players: Dict[str, Dict[str, Any]]
    turnOrder: List[str]
    currentPlayer: Optional[str] = None


class DevModeDisabledEvent(OutboundEvent):
    type: OutboundEventType = OutboundEventType.DEV_MODE_DISABLED


class ErrorEvent(OutboundEvent):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: str
    message: str


EVENT_MAP = {
    EventType.END_TURN: EndTurnEvent,
    EventType.PLACE_CARD: PlaceCardEvent,
    EventType.MOVE_UNIT: MoveUnitEvent,
    EventType.BUY_CARD: BuyCardEvent,
    EventType.DEV_END_TURN: DevEndTurnEvent,
    EventType.DEV_PLACE_CARD: DevPlaceCardEvent,
    EventType.DEV_MOVE_UNIT: DevMoveUnitEvent,
    EventType.DEV_BUY_CARD: DevBuyCardEvent,
    EventType.CLICK_TILE: ClickTileEvent,
}


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_class = EVENT_MAP[event_type]

    try:
        return event_class(**data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def create_error_event(code: str, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message)


def create_turn_info_event(snapshot: Dict[str, Any]) -> TurnInfoEvent:
    return TurnInfoEvent(**snapshot)


def create_dev_mode_enabled_event(snapshot: Dict[str, Any]) -> DevModeEnabledEvent:
    return DevModeEnabledEvent(**snapshot)
