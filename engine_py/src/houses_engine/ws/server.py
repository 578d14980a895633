"""
FastAPI WebSocket server for Safe As Houses.

One process hosts one session. Every inbound frame is parsed, resolved to an
acting identity and handed to the engine synchronously, so intents are
applied one at a time in the order the event loop receives them.
"""

import logging
import uuid
from typing import Callable, Dict, List, Optional

import orjson
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..constants import UPDATE_BOARD, UPDATE_HAND, UPDATE_TURN_INFO
from ..devmode import (
    dev_mode_status, dev_player_hand, dev_slots, disable_dev_mode, enable_dev_mode
)
from ..engine import ActingIdentity, ActionResult, SessionEngine
from ..errors import INTERNAL_ERROR, INVALID_EVENT
from ..rules import RuleConfig, load_rules_from_env
from ..serialization import dev_mode_snapshot, serialize_board, serialize_hand, turn_info
from .events import (
    DEV_EVENTS, BuyCardEvent, ClickTileEvent, ConnectedEvent, DevModeDisabledEvent,
    EndTurnEvent, EventType, MoveUnitEvent, PlaceCardEvent, TileInfoEvent,
    UpdateBoardEvent, UpdateHandEvent, create_dev_mode_enabled_event,
    create_error_event, create_turn_info_event, parse_inbound_event
)

logger = logging.getLogger(__name__)


def encode(event: BaseModel) -> str:
    return orjson.dumps(event.model_dump(mode="json")).decode()


class ConnectionManager:
    """Manages WebSocket connections and broadcasting."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    def connect(self, connection_id: str, websocket: WebSocket):
        self.active_connections[connection_id] = websocket
        logger.info(f"Connection {connection_id} opened")

    def disconnect(self, connection_id: str):
        if self.active_connections.pop(connection_id, None) is not None:
            logger.info(f"Connection {connection_id} closed")

    async def send(self, connection_id: str, event: BaseModel):
        """Send an event to a single connection."""
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return
        try:
            await websocket.send_text(encode(event))
        except Exception as e:
            logger.error(f"Error sending to {connection_id}: {e}")
            self.disconnect(connection_id)

    async def broadcast(self, event: BaseModel):
        """Send an event to every open connection."""
        # Encode once; the payload is the same for everyone
        text = encode(event)
        disconnected = []
        for connection_id, websocket in list(self.active_connections.items()):
            try:
                await websocket.send_text(text)
            except Exception as e:
                logger.error(f"Error broadcasting to {connection_id}: {e}")
                disconnected.append(connection_id)

        # Clean up dead connections
        for connection_id in disconnected:
            self.disconnect(connection_id)


class SyncLayer:
    """Turns inbound frames into engine calls and engine results into frames.

    Reads session state to build snapshots but never mutates it directly.
    """

    def __init__(self, engine: SessionEngine, manager: ConnectionManager):
        self.engine = engine
        self.manager = manager
        self.handlers: Dict[EventType, Callable] = {
            EventType.END_TURN: self._end_turn,
            EventType.PLACE_CARD: self._place_card,
            EventType.MOVE_UNIT: self._move_unit,
            EventType.BUY_CARD: self._buy_card,
            EventType.DEV_END_TURN: self._end_turn,
            EventType.DEV_PLACE_CARD: self._place_card,
            EventType.DEV_MOVE_UNIT: self._move_unit,
            EventType.DEV_BUY_CARD: self._buy_card,
        }

    # ---- snapshot builders ----

    def board_event(self) -> UpdateBoardEvent:
        return UpdateBoardEvent(grid=serialize_board(self.engine))

    def turn_info_event(self):
        return create_turn_info_event(turn_info(self.engine))

    def hand_event(self, player_id: str) -> UpdateHandEvent:
        player = self.engine.get_player(player_id)
        return UpdateHandEvent(hand=serialize_hand(player.hand) if player else [])

    async def broadcast_turn_info(self):
        await self.manager.broadcast(self.turn_info_event())

    async def broadcast_dev_mode_enabled(self):
        # Build every snapshot before the first await
        events = [
            create_dev_mode_enabled_event(dev_mode_snapshot(self.engine)),
            self.board_event(),
            self.turn_info_event(),
        ]
        for event in events:
            await self.manager.broadcast(event)

    async def broadcast_dev_mode_disabled(self):
        events = [DevModeDisabledEvent(), self.turn_info_event()]
        for event in events:
            await self.manager.broadcast(event)

    # ---- connection lifecycle ----

    async def on_connect(self, connection_id: str, websocket: WebSocket):
        self.manager.connect(connection_id, websocket)
        await self.manager.send(connection_id, ConnectedEvent(playerId=connection_id))

        # In dev mode, connecting clients observe and drive the fixed slots
        if not self.engine.dev_mode:
            self.engine.add_player(connection_id)
            await self.manager.send(connection_id, self.hand_event(connection_id))

        await self.manager.send(connection_id, self.board_event())
        if self.engine.dev_mode:
            await self.manager.send(
                connection_id,
                create_dev_mode_enabled_event(dev_mode_snapshot(self.engine))
            )
        await self.broadcast_turn_info()

    async def on_disconnect(self, connection_id: str):
        self.manager.disconnect(connection_id)
        # Dev mode slots outlive the connections that drive them
        if self.engine.dev_mode:
            return
        if self.engine.remove_player(connection_id):
            await self.broadcast_turn_info()

    # ---- inbound ----

    def resolve_identity(self, connection_id: str, event) -> ActingIdentity:
        if isinstance(event, DEV_EVENTS):
            return ActingIdentity.slot(event.player_id, connection_id)
        return ActingIdentity.connection(connection_id)

    async def handle_frame(self, connection_id: str, raw: str):
        try:
            data = orjson.loads(raw)
            event = parse_inbound_event(data)
        except ValueError as e:
            # orjson.JSONDecodeError is a ValueError too
            await self.manager.send(connection_id, create_error_event(INVALID_EVENT, str(e)))
            return

        try:
            await self.handle_event(connection_id, event)
        except Exception as e:
            logger.exception(f"Error handling {event.type.value} from {connection_id}: {e}")
            await self.manager.send(
                connection_id, create_error_event(INTERNAL_ERROR, "Internal server error")
            )

    async def handle_event(self, connection_id: str, event):
        if isinstance(event, ClickTileEvent):
            info = self.engine.click_tile(event.x, event.y, viewer_id=connection_id)
            await self.manager.send(connection_id, TileInfoEvent(**info))
            return

        identity = self.resolve_identity(connection_id, event)
        result = self.handlers[event.type](identity, event)
        await self.emit_result(identity, event, result)

    async def emit_result(self, identity: ActingIdentity, event, result: ActionResult):
        if not result.success:
            logger.info(
                f"Rejected {event.type.value} from {identity.connection_id} "
                f"as {identity.player_id}: {result.error_code}"
            )
            await self.manager.send(
                identity.connection_id,
                create_error_event(result.error_code, result.error_message)
            )
            return

        events: List[tuple] = []
        if UPDATE_BOARD in result.updates:
            events.append((None, self.board_event()))
        if UPDATE_HAND in result.updates:
            events.append((identity.connection_id, self.hand_event(result.player_id)))
        if UPDATE_TURN_INFO in result.updates:
            events.append((None, self.turn_info_event()))

        for target, outbound in events:
            if target is None:
                await self.manager.broadcast(outbound)
            else:
                await self.manager.send(target, outbound)

    # ---- intent handlers ----

    def _end_turn(self, identity: ActingIdentity, event: EndTurnEvent) -> ActionResult:
        return self.engine.end_turn(identity)

    def _place_card(self, identity: ActingIdentity, event: PlaceCardEvent) -> ActionResult:
        return self.engine.place_card(identity, event.x, event.y, event.card_index)

    def _move_unit(self, identity: ActingIdentity, event: MoveUnitEvent) -> ActionResult:
        return self.engine.move_unit(identity, event.from_x, event.from_y, event.to_x, event.to_y)

    def _buy_card(self, identity: ActingIdentity, event: BuyCardEvent) -> ActionResult:
        return self.engine.buy_card(identity)


def create_app(engine: Optional[SessionEngine] = None, rules: Optional[RuleConfig] = None) -> FastAPI:
    """Build the FastAPI app around one session engine."""
    if engine is None:
        engine = SessionEngine(rules or load_rules_from_env())

    app = FastAPI(title="Safe As Houses Game Engine", version="1.0.0")

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    sync = SyncLayer(engine, ConnectionManager())
    app.state.engine = engine
    app.state.sync = sync

    # Control endpoints are async so they run on the same loop as the sockets

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "players": len(engine.players),
            "connections": len(sync.manager.active_connections),
            "devMode": engine.dev_mode,
        }

    @app.post("/api/dev-mode/enable")
    async def enable_dev_mode_endpoint():
        if not enable_dev_mode(engine):
            return {"success": True, "message": "Dev mode already enabled"}
        await sync.broadcast_dev_mode_enabled()
        return {
            "success": True,
            "players": dev_slots(engine),
            "currentPlayer": engine.current_player,
        }

    @app.post("/api/dev-mode/disable")
    async def disable_dev_mode_endpoint():
        if not disable_dev_mode(engine):
            return {"success": True, "message": "Dev mode already disabled"}
        await sync.broadcast_dev_mode_disabled()
        return {"success": True}

    @app.get("/api/dev-mode/status")
    async def dev_mode_status_endpoint():
        return dev_mode_status(engine)

    @app.get("/api/dev-mode/player/{player_id}/hand")
    async def dev_player_hand_endpoint(player_id: str):
        if not engine.dev_mode:
            return JSONResponse(status_code=403, content={"error": "Dev mode not enabled"})
        hand = dev_player_hand(engine, player_id)
        if hand is None:
            return JSONResponse(status_code=404, content={"error": "Player not found"})
        return {"hand": hand}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Main WebSocket endpoint."""
        await websocket.accept()
        connection_id = str(uuid.uuid4())[:8]

        try:
            await sync.on_connect(connection_id, websocket)
            while True:
                raw_data = await websocket.receive_text()
                await sync.handle_frame(connection_id, raw_data)
        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected for {connection_id}")
        except Exception as e:
            logger.error(f"WebSocket error for {connection_id}: {e}")
        finally:
            await sync.on_disconnect(connection_id)

    return app


app = create_app()
