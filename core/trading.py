"""
core.trading
CEO share trading: own-company stock and competitor stock.

Validation failures never raise. They return the state unchanged, plus a
warning event when the CEO (not the AI delegate) made the call.
Own-share trades re-run the win/loss check (selling can cost the CEO control);
competitor trades cannot end the game and skip it.
"""

from __future__ import annotations

import math
from dataclasses import replace

from .events import log_event, log_warning, money
from .rules import check_win_loss
from .state import EventType, GameState, Origin, Severity


def _who(origin: Origin) -> str:
    return "CEO (AI)" if origin is Origin.AI else "CEO"


def buy_ceo_shares(state: GameState, shares: int, origin: Origin = Origin.PLAYER) -> GameState:
    if state.is_game_over:
        return state
    fin = state.financials
    shares = int(shares)
    if shares <= 0:
        return log_warning(state, EventType.STOCK_TRADE, "Share purchase error", "Enter a positive number of shares to buy.", origin)
    if fin.ceo_shares + shares > fin.shares_outstanding:
        return log_warning(
            state,
            EventType.STOCK_TRADE,
            "Share purchase error",
            f"Only {fin.shares_outstanding - fin.ceo_shares:,} shares are available to buy.",
            origin,
        )

    cost = shares * fin.stock_price
    if fin.cash < cost:
        return log_warning(
            state,
            EventType.STOCK_TRADE,
            "Share purchase failed",
            f"Not enough cash to buy the shares. (Required: {money(cost)})",
            origin,
        )

    state = replace(state, financials=replace(fin, cash=fin.cash - cost, ceo_shares=fin.ceo_shares + shares))
    state = log_event(
        state,
        EventType.STOCK_TRADE,
        "Own shares bought",
        f"{_who(origin)} bought {shares:,} {state.company_name} shares at {money(fin.stock_price, 2)} each. (Total {money(cost)})",
        severity=Severity.SUCCESS,
        origin=origin,
    )
    return check_win_loss(state)


def sell_ceo_shares(state: GameState, percentage: float, origin: Origin = Origin.PLAYER) -> GameState:
    """Sell a percentage (0, 100] of the CEO's own-company holding."""
    if state.is_game_over:
        return state
    fin = state.financials
    if not (0 < percentage <= 100):
        return log_warning(
            state,
            EventType.STOCK_TRADE,
            "Share sale error",
            "The percentage to sell must be above 0% and at most 100%.",
            origin,
        )

    shares = int(math.floor(fin.ceo_shares * (percentage / 100.0)))
    if shares <= 0:
        return log_warning(
            state,
            EventType.STOCK_TRADE,
            "Share sale error",
            f"No shares to sell (computed quantity: {shares}). Check your holding.",
            origin,
        )
    return sell_ceo_share_count(state, shares, origin=origin)


def sell_ceo_share_count(state: GameState, shares: int, origin: Origin = Origin.PLAYER) -> GameState:
    """Sell an exact number of the CEO's own-company shares."""
    if state.is_game_over:
        return state
    fin = state.financials
    shares = int(shares)
    if shares <= 0 or shares > fin.ceo_shares:
        return log_warning(
            state,
            EventType.STOCK_TRADE,
            "Share sale error",
            f"Cannot sell {shares:,} shares. (Held: {fin.ceo_shares:,})",
            origin,
        )

    percentage = shares / fin.ceo_shares * 100.0
    proceeds = shares * fin.stock_price
    state = replace(state, financials=replace(fin, cash=fin.cash + proceeds, ceo_shares=fin.ceo_shares - shares))
    state = log_event(
        state,
        EventType.STOCK_TRADE,
        "Own shares sold",
        f"{_who(origin)} sold {shares:,} {state.company_name} shares ({percentage:.1f}%) at {money(fin.stock_price, 2)} each. (Total {money(proceeds)})",
        severity=Severity.SUCCESS,
        origin=origin,
    )
    return check_win_loss(state)


def buy_competitor_shares(state: GameState, competitor_id: str, shares: int, origin: Origin = Origin.PLAYER) -> GameState:
    if state.is_game_over:
        return state
    fin = state.financials
    competitor = state.competitor(competitor_id)
    if competitor is None:
        return log_warning(state, EventType.STOCK_TRADE, "Competitor purchase error", "The selected competitor could not be found.", origin)
    shares = int(shares)
    if shares <= 0:
        return log_warning(state, EventType.STOCK_TRADE, "Competitor purchase error", "Enter a positive number of shares to buy.", origin)

    cost = shares * competitor.stock_price
    if fin.cash < cost:
        return log_warning(
            state,
            EventType.STOCK_TRADE,
            "Competitor purchase failed",
            f"Not enough cash to buy {competitor.name} shares. (Required: {money(cost)})",
            origin,
        )

    holdings = dict(fin.competitor_share_holdings)
    holdings[competitor_id] = holdings.get(competitor_id, 0) + shares
    state = replace(state, financials=replace(fin, cash=fin.cash - cost, competitor_share_holdings=holdings))
    return log_event(
        state,
        EventType.STOCK_TRADE,
        "Competitor shares bought",
        f"{_who(origin)} bought {shares:,} {competitor.name} shares at {money(competitor.stock_price, 2)} each. (Total {money(cost)})",
        severity=Severity.SUCCESS,
        origin=origin,
    )


def sell_competitor_shares(state: GameState, competitor_id: str, shares: int, origin: Origin = Origin.PLAYER) -> GameState:
    if state.is_game_over:
        return state
    fin = state.financials
    competitor = state.competitor(competitor_id)
    if competitor is None:
        return log_warning(state, EventType.STOCK_TRADE, "Competitor sale error", "The selected competitor could not be found.", origin)
    shares = int(shares)
    if shares <= 0:
        return log_warning(state, EventType.STOCK_TRADE, "Competitor sale error", "Enter a positive number of shares to sell.", origin)

    owned = fin.competitor_share_holdings.get(competitor_id, 0)
    if owned < shares:
        return log_warning(
            state,
            EventType.STOCK_TRADE,
            "Competitor sale failed",
            f"You do not hold enough {competitor.name} shares. (Held: {owned:,}, requested: {shares:,})",
            origin,
        )

    proceeds = shares * competitor.stock_price
    holdings = dict(fin.competitor_share_holdings)
    holdings[competitor_id] = owned - shares
    if holdings[competitor_id] <= 0:
        del holdings[competitor_id]
    state = replace(state, financials=replace(fin, cash=fin.cash + proceeds, competitor_share_holdings=holdings))
    return log_event(
        state,
        EventType.STOCK_TRADE,
        "Competitor shares sold",
        f"{_who(origin)} sold {shares:,} {competitor.name} shares at {money(competitor.stock_price, 2)} each. (Total {money(proceeds)})",
        severity=Severity.SUCCESS,
        origin=origin,
    )
