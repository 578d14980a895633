"""
Snapshot and rule configuration tests.
"""

import pytest
from pydantic import ValidationError
from houses_engine.devmode import enable_dev_mode
from houses_engine.engine import SessionEngine
from houses_engine.rules import create_rules, load_rules_from_env
from houses_engine.serialization import dev_mode_snapshot, turn_info
from houses_engine.ws.events import parse_inbound_event, EventType


def test_turn_info_normal_mode_hides_hands():
    engine = SessionEngine(seed=2)
    engine.add_player("A", "Alice")
    engine.add_player("B", "Bob")

    info = turn_info(engine)

    assert info["currentPlayer"] == "A"
    assert info["turnOrder"] == ["A", "B"]
    assert info["devMode"] is False
    assert info["players"]["B"] == {"name": "Bob", "coins": engine.rules.starting_coins, "handSize": 5}


def test_turn_info_empty_session():
    info = turn_info(SessionEngine())
    assert info == {"currentPlayer": None, "turnOrder": [], "players": {}, "devMode": False}


def test_turn_info_dev_mode_includes_hands():
    engine = SessionEngine(seed=2)
    enable_dev_mode(engine)

    info = turn_info(engine)

    assert info["devMode"] is True
    hand = info["players"]["dev-player-1"]["hand"]
    assert len(hand) == 5
    assert set(hand[0]) == {"category", "rank"}


def test_dev_mode_snapshot():
    engine = SessionEngine(seed=2)
    enable_dev_mode(engine)
    snapshot = dev_mode_snapshot(engine)
    assert snapshot["currentPlayer"] == "dev-player-1"
    assert snapshot["players"]["dev-player-4"]["name"] == "Player 4 (Yellow)"


def test_board_snapshot_shape():
    engine = SessionEngine()
    grid = engine.board.to_grid()
    assert len(grid) == 9 and all(len(column) == 9 for column in grid)
    assert grid[5][5] == {"owner": None, "card": None, "river": True}


def test_river_must_be_on_board():
    with pytest.raises(ValidationError):
        create_rules(board_size=4, river=(5, 5))


def test_dev_player_count_is_fixed():
    with pytest.raises(ValidationError):
        create_rules(dev_player_count=6)


def test_rules_from_env(monkeypatch):
    monkeypatch.setenv("HOUSES_CARD_PRICE", "7")
    monkeypatch.setenv("HOUSES_RIVER_CLAIMABLE", "true")
    monkeypatch.setenv("HOUSES_RIVER", "2,3")

    rules = load_rules_from_env()

    assert rules.card_price == 7
    assert rules.river_claimable is True
    assert rules.is_river(2, 3)


def test_parse_inbound_event_aliases():
    event = parse_inbound_event({"type": "devPlaceCard", "playerId": "dev-player-1", "x": 1, "y": 2, "cardIndex": 3})
    assert event.type == EventType.DEV_PLACE_CARD
    assert (event.player_id, event.x, event.y, event.card_index) == ("dev-player-1", 1, 2, 3)


@pytest.mark.parametrize("data", [
    {},
    {"type": "fly"},
    {"type": "placeCard", "x": 1},
    {"type": "devBuyCard"},
    {"type": "moveUnit", "fromX": "a", "fromY": 0, "toX": 0, "toY": 1},
    ["endTurn"],
])
def test_parse_inbound_event_rejects_bad_frames(data):
    with pytest.raises(ValueError):
        parse_inbound_event(data)
