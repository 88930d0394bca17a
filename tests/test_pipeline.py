from dataclasses import replace

import pytest

from core.rules import BANKRUPTCY_MESSAGE, LOSS_OF_CONTROL_MESSAGE, MAX_TURNS, TERM_ENDED_MESSAGE
from core.state import AIDirective, EventType, Severity
from engine.config import EngineConfig
from engine.pipeline import advance_turn, new_game, set_ai_directive, toggle_delegation

CFG = EngineConfig(base_seed=7, company_name="Test Corp")


def _game_over_entries(s):
    return [e for e in s.event_log if e.type == EventType.GAME_MESSAGE and e.title == "Game over"]


def test_new_game_uses_config_name():
    s = new_game(CFG)
    assert s.company_name == "Test Corp"
    assert s.current_turn == 1
    assert not s.is_delegated


def test_advance_turn_moves_one_month(state):
    out = advance_turn(state, config=CFG)

    assert out.current_turn == 2
    assert not out.is_game_over
    assert out.event_log[-1].title == "Month 2 begins"
    assert any(e.type == EventType.FINANCIAL_REPORT and e.turn == 2 for e in out.event_log)
    # input untouched
    assert state.current_turn == 1
    assert len(state.event_log) == 1


def test_advance_turn_is_deterministic_per_seed(state):
    assert advance_turn(state, config=CFG) == advance_turn(state, config=CFG)


def test_monthly_accumulators_restart_each_turn(state, set_fin):
    s = set_fin(state, monthly_revenue=1e9, monthly_costs=1e9, monthly_profit=1e9)
    out = advance_turn(s, config=CFG)
    assert out.financials.monthly_revenue < 1e6
    assert out.financials.monthly_profit == pytest.approx(
        out.financials.monthly_revenue - out.financials.monthly_costs
    )


def test_delegated_actions_can_end_the_month_early(state, set_fin):
    s = replace(set_fin(state, ceo_shares=40_000), is_delegated=True)

    out = advance_turn(s, config=CFG)

    assert out.current_turn == 2
    assert out.is_game_over
    assert out.game_over_message == LOSS_OF_CONTROL_MESSAGE
    assert not any(e.type == EventType.FINANCIAL_REPORT for e in out.event_log)
    assert out.financials.monthly_revenue == 0.0
    assert len(_game_over_entries(out)) == 1
    assert out.event_log[-1].severity == Severity.CRITICAL


def test_bankruptcy_after_market(state, set_fin):
    products = (replace(state.products[0], production_cost=1_000.0),)
    s = replace(set_fin(state, cash=-1_000_000.0), products=products)

    out = advance_turn(s, config=CFG)

    assert out.is_game_over
    assert out.game_over_message == BANKRUPTCY_MESSAGE
    assert any(e.type == EventType.FINANCIAL_REPORT and e.turn == 2 for e in out.event_log)
    assert out.event_log[-1].title == "Game over"


def test_advance_turn_after_game_over_is_a_no_op(state):
    over = replace(state, is_game_over=True, game_over_message="done")
    assert advance_turn(over, config=CFG) is over


def test_term_ends_at_max_turns(state):
    s = replace(state, current_turn=MAX_TURNS - 1)
    out = advance_turn(s, config=CFG)
    assert out.current_turn == MAX_TURNS
    assert out.game_over_message == TERM_ENDED_MESSAGE
    assert len(_game_over_entries(out)) == 1
    assert advance_turn(out, config=CFG) is out


def test_toggle_delegation_logs_both_ways(state):
    on = toggle_delegation(state)
    off = toggle_delegation(on)
    assert on.is_delegated and not off.is_delegated
    assert on.event_log[-1].title == "AI delegation enabled"
    assert off.event_log[-1].title == "AI delegation disabled"


def test_session_ops_ignore_finished_games(state):
    over = replace(state, is_game_over=True, game_over_message="done")
    assert toggle_delegation(over) is over
    assert set_ai_directive(over, AIDirective.COST_REDUCTION) is over


def test_set_ai_directive_accepts_value(state):
    out = set_ai_directive(state, "cost_reduction")
    assert out.current_ai_directive == AIDirective.COST_REDUCTION
    assert len(out.event_log) == len(state.event_log)


@pytest.mark.parametrize("seed", [1, 2, 3, 11, 42])
@pytest.mark.parametrize("directive", list(AIDirective))
def test_delegated_run_keeps_invariants(state, seed, directive):
    cfg = EngineConfig(base_seed=seed)
    s = replace(state, is_delegated=True, current_ai_directive=directive)
    for _ in range(30):
        before = s
        s = advance_turn(s, config=cfg)
        if before.is_game_over:
            assert s is before
            break
        fin = s.financials
        assert s.current_turn == before.current_turn + 1
        assert s.event_log[: len(before.event_log)] == before.event_log
        assert 0 <= fin.ceo_shares <= fin.shares_outstanding
        assert all(v > 0 for v in fin.competitor_share_holdings.values())
        assert fin.stock_price >= 0.1
        assert all(c.stock_price >= 0.01 for c in s.competitors)
        assert all(0.0 <= seg.player_market_share <= 100.0 for seg in s.market_segments)
        assert all(0.0 <= p.progress <= 100.0 for p in s.rd_projects)
        assert len({e.id for e in s.event_log}) == len(s.event_log)
        assert len(_game_over_entries(s)) == (1 if s.is_game_over else 0)
