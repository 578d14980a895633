"""
Dev mode (multiplexed slots) tests.
"""

import pytest
from houses_engine.constants import DEV_PLAYER_IDS, UPDATE_BOARD, UPDATE_TURN_INFO
from houses_engine.devmode import (
    dev_mode_status, dev_player_hand, disable_dev_mode, enable_dev_mode
)
from houses_engine.engine import ActingIdentity, SessionEngine
from houses_engine.errors import (
    DEV_MODE_NOT_ENABLED, DEV_MODE_NOT_THIS_SLOTS_TURN, INSUFFICIENT_COINS,
    NOT_YOUR_TURN, UNKNOWN_SLOT
)
from houses_engine.rules import create_rules


def as_slot(player_id, connection_id="observer"):
    return ActingIdentity.slot(player_id, connection_id)


@pytest.fixture
def engine():
    return SessionEngine(seed=5)


def test_enable_replaces_session(engine):
    """Test enabling wipes players, board and deck and seats four slots."""
    engine.add_player("conn1")
    engine.place_card(ActingIdentity.connection("conn1"), 0, 0, 0)
    old_board, old_deck = engine.board, engine.deck

    assert enable_dev_mode(engine)

    assert engine.dev_mode
    assert engine.turn_order == DEV_PLAYER_IDS
    assert set(engine.players) == set(DEV_PLAYER_IDS)
    assert engine.current_player == "dev-player-1"
    assert engine.board is not old_board
    assert engine.deck is not old_deck
    assert engine.board.occupied_count() == 0
    assert engine.deck.remaining == 52 - 4 * 5
    assert engine.players["dev-player-3"].name == "Player 3 (Green)"
    assert all(len(p.hand) == 5 for p in engine.players.values())
    assert all(p.coins == engine.rules.starting_coins for p in engine.players.values())


def test_enable_twice_is_a_no_op(engine):
    enable_dev_mode(engine)
    engine.end_turn(as_slot("dev-player-1"))

    assert not enable_dev_mode(engine)
    assert engine.current_player == "dev-player-2"


def test_dev_intent_acts_for_named_slot(engine):
    """Test the turn check uses the named slot, not the connection."""
    enable_dev_mode(engine)

    result = engine.end_turn(as_slot("dev-player-1", connection_id="whoever"))
    assert result.success
    assert engine.current_player == "dev-player-2"

    result = engine.place_card(as_slot("dev-player-2"), 1, 1, 0)
    assert result.success
    assert result.updates == [UPDATE_BOARD, UPDATE_TURN_INFO]
    assert engine.board.tile_at(1, 1).owner == "dev-player-2"


def test_dev_intent_wrong_slot(engine):
    enable_dev_mode(engine)
    result = engine.move_unit(as_slot("dev-player-3"), 0, 0, 0, 1)
    assert result.error_code == DEV_MODE_NOT_THIS_SLOTS_TURN
    assert result.error_message == "Not this player's turn"


def test_dev_intent_unknown_slot(engine):
    enable_dev_mode(engine)
    assert engine.end_turn(as_slot("dev-player-9")).error_code == UNKNOWN_SLOT
    assert engine.current_player == "dev-player-1"


def test_dev_intent_while_disabled(engine):
    engine.add_player("dev-player-1")
    result = engine.end_turn(as_slot("dev-player-1"))
    assert result.error_code == DEV_MODE_NOT_ENABLED
    assert engine.current_player == "dev-player-1"


def test_normal_intent_from_observer_in_dev_mode(engine):
    """Test a plain connection has no slot of its own while dev mode is on."""
    enable_dev_mode(engine)
    result = engine.end_turn(ActingIdentity.connection("observer"))
    assert result.error_code == NOT_YOUR_TURN


def test_dev_buy_card_with_no_coins():
    """Test a broke slot cannot buy and its hand is untouched."""
    engine = SessionEngine(create_rules(starting_coins=0), seed=5)
    enable_dev_mode(engine)

    result = engine.buy_card(as_slot("dev-player-1"))

    assert result.error_code == INSUFFICIENT_COINS
    assert len(engine.players["dev-player-1"].hand) == 5
    assert engine.players["dev-player-1"].coins == 0


def test_dev_buy_card_updates_turn_info(engine):
    enable_dev_mode(engine)
    result = engine.buy_card(as_slot("dev-player-1"))
    assert result.success
    assert result.updates == [UPDATE_TURN_INFO]
    assert len(engine.players["dev-player-1"].hand) == 6


def test_disable_removes_exactly_the_slots(engine):
    """Test disabling drops the four slots and leaves others seated."""
    enable_dev_mode(engine)
    engine.add_player("late-joiner")
    for slot in DEV_PLAYER_IDS:
        engine.end_turn(as_slot(slot))
    assert engine.current_player == "late-joiner"

    assert disable_dev_mode(engine)

    assert not engine.dev_mode
    assert engine.turn_order == ["late-joiner"]
    assert engine.current_player == "late-joiner"
    assert list(engine.players) == ["late-joiner"]


def test_disable_clamps_to_empty_range(engine):
    """Test disabling from the last slot's turn leaves an empty, valid order."""
    enable_dev_mode(engine)
    for slot in DEV_PLAYER_IDS[:3]:
        engine.end_turn(as_slot(slot))
    assert engine.turns.current_index == 3

    assert disable_dev_mode(engine)

    assert engine.turn_order == []
    assert engine.turns.current_index == 0
    assert engine.current_player is None


def test_disable_is_one_way(engine):
    """Test players from before dev mode are not restored."""
    engine.add_player("conn1")
    enable_dev_mode(engine)
    disable_dev_mode(engine)
    assert engine.players == {}
    assert not disable_dev_mode(engine)


def test_status_and_hand_lookup(engine):
    assert dev_mode_status(engine) == {"enabled": False, "players": [], "currentPlayer": None}

    enable_dev_mode(engine)
    status = dev_mode_status(engine)

    assert status["enabled"]
    assert [p["id"] for p in status["players"]] == DEV_PLAYER_IDS
    assert all(p["handSize"] == 5 for p in status["players"])
    assert status["currentPlayer"] == "dev-player-1"
    assert len(dev_player_hand(engine, "dev-player-2")) == 5
    assert dev_player_hand(engine, "nobody") is None


def test_tile_query_reveals_hands_in_dev_mode(engine):
    enable_dev_mode(engine)
    info = engine.click_tile(0, 0, viewer_id="observer")
    assert all("hand" in c for c in info["combatants"])
