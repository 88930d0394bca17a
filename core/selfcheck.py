"""
core.selfcheck
Minimal "it runs" proof for the simulation core.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from dataclasses import replace

from .decisions import apply_strategic_decision, get_available_decisions
from .effects import apply_directive, simulate_market
from .events import log_event, log_game_over
from .policy import run_delegated_actions
from .rng import turn_rng
from .rules import check_win_loss
from .state import AIDirective, EventType, GameState, default_start_state


def _check_invariants(state: GameState) -> None:
    fin = state.financials
    assert 0 <= fin.ceo_shares <= fin.shares_outstanding
    assert all(v > 0 for v in fin.competitor_share_holdings.values())
    assert fin.stock_price > 0
    assert all(c.stock_price > 0 for c in state.competitors)
    assert all(0.0 <= p.progress <= 100.0 for p in state.rd_projects)
    assert all(0.0 <= s.player_market_share <= 100.0 for s in state.market_segments)
    assert len({e.id for e in state.event_log}) == len(state.event_log)


def play_month(state: GameState, base_seed: int) -> GameState:
    """One month, step for step the same as engine.pipeline.advance_turn (core cannot import engine)."""
    if state.is_game_over:
        return state
    turn = state.current_turn + 1
    rng = turn_rng(state.company_name, turn, base_seed=base_seed)

    fin = replace(state.financials, monthly_revenue=0.0, monthly_costs=0.0, monthly_profit=0.0)
    state = replace(state, current_turn=turn, financials=fin)
    if state.is_delegated:
        state = run_delegated_actions(state, rng)
    state = check_win_loss(state)
    if not state.is_game_over:
        state = simulate_market(apply_directive(state), rng)
        state = check_win_loss(state)
    if state.is_game_over:
        return log_game_over(state)
    return log_event(state, EventType.GAME_MESSAGE, f"Month {turn} begins", "Review the reports and make your strategic decisions.")


def run_24_months_smoke() -> None:
    base_seed = 42
    state = replace(
        default_start_state("Selfcheck Corp"),
        current_ai_directive=AIDirective.TECH_INNOVATION_PRIORITY,
        is_delegated=True,
    )

    for _ in range(24):
        if state.is_game_over:
            break
        before = state
        state = play_month(state, base_seed)

        # invariants
        _check_invariants(state)
        assert state.current_turn == before.current_turn + 1
        assert len(state.event_log) >= len(before.event_log)

        # catalog must always be applicable without touching the input
        for d in get_available_decisions(state):
            snapshot = state
            apply_strategic_decision(state, d.key)
            assert state is snapshot

    print("OK: 24-month core smoke test passed.")
    print("Final turn:", state.current_turn, "game over:", state.is_game_over)
    print("Final cash:", round(state.financials.cash, 2), "price:", round(state.financials.stock_price, 2))
    print("Events logged:", len(state.event_log))


if __name__ == "__main__":
    run_24_months_smoke()
