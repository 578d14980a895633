"""
Sync layer routing tests with in-memory sockets.
"""

import asyncio
import json

from houses_engine.devmode import enable_dev_mode
from houses_engine.engine import SessionEngine
from houses_engine.ws.server import ConnectionManager, SyncLayer


class FakeWebSocket:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(text))

    def types(self):
        return [m["type"] for m in self.sent]


def make_sync():
    return SyncLayer(SessionEngine(seed=4), ConnectionManager())


def run(coro):
    return asyncio.run(coro)


def test_disconnect_broadcasts_turn_info():
    """Test remaining players hear when someone leaves in normal mode."""
    sync = make_sync()
    alice, bob = FakeWebSocket(), FakeWebSocket()
    run(sync.on_connect("alice", alice))
    run(sync.on_connect("bob", bob))
    alice.sent.clear()

    run(sync.on_disconnect("bob"))

    assert alice.types() == ["turnInfo"]
    assert alice.sent[0]["turnOrder"] == ["alice"]
    assert "bob" not in sync.engine.players


def test_disconnect_in_dev_mode_keeps_slots():
    sync = make_sync()
    ws = FakeWebSocket()
    enable_dev_mode(sync.engine)
    run(sync.on_connect("observer", ws))
    other = FakeWebSocket()
    run(sync.on_connect("other", other))
    other.sent.clear()

    run(sync.on_disconnect("observer"))

    assert other.sent == []
    assert len(sync.engine.players) == 4


def test_rejection_goes_only_to_sender():
    sync = make_sync()
    alice, bob = FakeWebSocket(), FakeWebSocket()
    run(sync.on_connect("alice", alice))
    run(sync.on_connect("bob", bob))
    alice.sent.clear()
    bob.sent.clear()

    run(sync.handle_frame("bob", json.dumps({"type": "endTurn"})))

    assert bob.types() == ["error"]
    assert alice.sent == []


def test_dead_connection_is_dropped_on_broadcast():
    sync = make_sync()
    good, dead = FakeWebSocket(), FakeWebSocket()
    run(sync.on_connect("good", good))
    run(sync.on_connect("dead", dead))
    dead.fail = True

    run(sync.broadcast_turn_info())

    assert "dead" not in sync.manager.active_connections
    assert good.types()[-1] == "turnInfo"


def test_dev_intent_resolves_to_named_slot():
    sync = make_sync()
    ws = FakeWebSocket()
    enable_dev_mode(sync.engine)
    run(sync.on_connect("observer", ws))
    ws.sent.clear()

    run(sync.handle_frame("observer", json.dumps({"type": "devEndTurn", "playerId": "dev-player-1"})))

    assert ws.types() == ["turnInfo"]
    assert ws.sent[0]["currentPlayer"] == "dev-player-2"
