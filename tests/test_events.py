from dataclasses import replace

from core.events import log_event, log_game_over, log_warning, make_event, money
from core.rng import stable_int_seed, turn_rng
from core.state import EventType, Origin, Severity


def test_make_event_relabels_ai_decisions():
    ev = make_event(3, 0, EventType.PLAYER_DECISION, "Bonds issued", "x", origin=Origin.AI)
    assert ev.type == EventType.AI_ACTION
    assert ev.title == "AI delegate: Bonds issued"
    assert ev.id == "evt-3-0"


def test_make_event_keeps_other_types_for_ai():
    ev = make_event(3, 0, EventType.MARKET_NEWS, "News", "x", origin=Origin.AI)
    assert ev.type == EventType.MARKET_NEWS
    assert ev.title == "News"


def test_log_event_appends_with_unique_ids(state):
    s = state
    for i in range(3):
        s = log_event(s, EventType.GAME_MESSAGE, f"m{i}", "d")
    assert len(s.event_log) == 4
    assert len({e.id for e in s.event_log}) == 4
    assert all(e.turn == state.current_turn for e in s.event_log[1:])
    assert len(state.event_log) == 1


def test_log_warning_only_for_player(state):
    assert log_warning(state, EventType.STOCK_TRADE, "t", "d", Origin.AI) is state
    out = log_warning(state, EventType.STOCK_TRADE, "t", "d", Origin.PLAYER)
    assert out.event_log[-1].severity == Severity.WARNING


def test_log_game_over_once(state):
    assert log_game_over(state) is state
    over = replace(state, is_game_over=True, game_over_message="bye")
    once = log_game_over(over)
    assert once.event_log[-1].description == "bye"
    assert once.event_log[-1].severity == Severity.CRITICAL
    assert log_game_over(once) is once


def test_money():
    assert money(1234567.891) == "$1,234,568"
    assert money(5, 2) == "$5.00"


def test_turn_rng_is_stable():
    a = turn_rng("Acme", 4, base_seed=9)
    b = turn_rng("Acme", 4, base_seed=9)
    assert [a.random() for _ in range(3)] == [b.random() for _ in range(3)]
    assert stable_int_seed(9, "turn", "Acme", 4) != stable_int_seed(9, "turn", "Acme", 5)
