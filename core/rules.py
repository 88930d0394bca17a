"""
core.rules
Terminal conditions (win / loss / term end).

check_win_loss() runs after every state-changing operation. It is idempotent:
once the game is over the state is returned untouched.
"""

from __future__ import annotations

from dataclasses import replace

from .events import money
from .state import GameState

MAX_TURNS = 100
TARGET_MARKET_SHARE_FOR_WIN = 70.0
CONTROL_FLOOR = 0.5                 # CEO must hold at least half the company
GLOBAL_LEADER_MARKET_CAP = 10_000_000.0
GLOBAL_LEADER_SEGMENT_SHARE = 50.0

BANKRUPTCY_MESSAGE = "Bankrupt! The company ran out of cash while still losing money. Game over."
LOSS_OF_CONTROL_MESSAGE = "Loss of control! The CEO no longer holds a majority stake (below 50%). Game over."
GLOBAL_LEADER_MESSAGE = "Congratulations, CEO! You built the company into a global leader. Victory!"
TERM_ENDED_MESSAGE = "Your term as CEO has ended. The company's future looks stable. Game over."


def _market_share_win_message(state: GameState, segment_name: str) -> str:
    fin = state.financials
    return (
        f"Victory! You reached {TARGET_MARKET_SHARE_FOR_WIN:g}% market share in {segment_name} "
        f"in {state.current_turn} months!\n\n"
        f"Final financial overview:\n"
        f"  Cash: {money(fin.cash)}\n"
        f"  Debt: {money(fin.debt)}\n"
        f"  Monthly profit: {money(fin.monthly_profit)}\n"
        f"  Stock price: {money(fin.stock_price, 2)}\n"
        f"  Market cap: {money(fin.market_cap)}"
    )


def _end(state: GameState, message: str) -> GameState:
    return replace(state, is_game_over=True, game_over_message=message)


def check_win_loss(state: GameState) -> GameState:
    """First matching condition ends the game; precedence is fixed."""
    if state.is_game_over:
        return state

    for segment in state.market_segments:
        if segment.player_market_share >= TARGET_MARKET_SHARE_FOR_WIN:
            return _end(state, _market_share_win_message(state, segment.name))

    fin = state.financials
    if fin.cash < 0 and fin.monthly_profit < 0:
        return _end(state, BANKRUPTCY_MESSAGE)

    if fin.shares_outstanding > 0 and fin.ceo_shares < fin.shares_outstanding * CONTROL_FLOOR:
        return _end(state, LOSS_OF_CONTROL_MESSAGE)

    if state.current_turn >= MAX_TURNS:
        if fin.market_cap > GLOBAL_LEADER_MARKET_CAP and any(
            s.player_market_share > GLOBAL_LEADER_SEGMENT_SHARE for s in state.market_segments
        ):
            return _end(state, GLOBAL_LEADER_MESSAGE)
        return _end(state, TERM_ENDED_MESSAGE)

    return state
