from dataclasses import replace

import pytest

from core.decisions import DecisionKind
from core.policy import (
    affordable_decisions,
    choose_decision,
    run_delegated_actions,
    trade_competitor_shares,
    trade_own_shares,
)
from core.state import AIDirective, EventType, Severity


def _directive(s, d):
    return replace(s, current_ai_directive=d)


# =============================================================================
# Decision choice
# =============================================================================


@pytest.mark.parametrize(
    "directive, expected",
    [
        (AIDirective.STABILIZE_COMPANY, DecisionKind.REPAY_DEBT),
        (AIDirective.TECH_INNOVATION_PRIORITY, DecisionKind.FUND_RD),
        (AIDirective.MARKET_SHARE_EXPANSION, DecisionKind.MARKETING_CAMPAIGN),
        (AIDirective.AGGRESSIVE_MARKET_EXPANSION, DecisionKind.MARKETING_CAMPAIGN),
        # everything scores 0 here, so the cheapest wins the tie
        (AIDirective.PROFIT_MAXIMIZATION, DecisionKind.FUND_RD),
    ],
)
def test_choose_decision_follows_directive(state, directive, expected):
    choice = choose_decision(_directive(state, directive))
    assert choice is not None
    assert choice.key.kind == expected


def test_ai_keeps_a_cash_buffer(state, set_fin):
    s = set_fin(state, cash=40_000.0)
    kinds = {d.key.kind for d in affordable_decisions(s)}
    # marketing costs 20k and would leave less than the 25k buffer
    assert DecisionKind.MARKETING_CAMPAIGN not in kinds
    assert DecisionKind.ISSUE_DEBT in kinds


def test_no_candidates_means_no_choice(state, set_fin):
    s = set_fin(state, cash=60_000.0, debt=5_000.0)
    s = replace(s, rd_projects=())
    # only marketing is offered (cash > 20k) and it is affordable
    assert choose_decision(s).key.kind == DecisionKind.MARKETING_CAMPAIGN
    assert choose_decision(set_fin(s, cash=10_000.0, debt=1_000_000.0)) is None


# =============================================================================
# Own shares
# =============================================================================


def test_buys_own_shares_below_target(state, set_fin, scripted):
    s = set_fin(state, cash=200_000.0)
    out = trade_own_shares(s, scripted([]))
    # budget min(125k, 20k) -> 4000 shares, capped at 1% of the float
    assert out.financials.ceo_shares == 61_000
    assert out.financials.cash == pytest.approx(195_000.0)
    assert out.event_log[-1].type == EventType.AI_ACTION


def test_no_own_buy_when_losing_money(state, set_fin, scripted):
    s = set_fin(state, cash=200_000.0, monthly_profit=-1.0)
    assert trade_own_shares(s, scripted([])) is s


def test_sells_own_shares_when_cash_poor(state, set_fin, scripted):
    s = set_fin(state, cash=10_000.0, ceo_shares=80_000)
    out = trade_own_shares(s, scripted([0.0]))
    # 0.5% of 80,000, sold as an exact count
    assert out.financials.ceo_shares == 79_600
    assert out.financials.cash == pytest.approx(10_000.0 + 400 * 5.0)
    assert out.financials.ceo_ownership_pct >= 55.0


def test_comfortable_stake_is_left_alone(state, set_fin, scripted):
    s = set_fin(state, cash=50_000.0, ceo_shares=70_000)
    assert trade_own_shares(s, scripted([])) is s


# =============================================================================
# Competitor shares
# =============================================================================


def test_buys_weak_competitor(state, set_fin, scripted):
    s = set_fin(state, cash=200_000.0)
    out = trade_competitor_shares(s, scripted([]))
    assert out.financials.competitor_share_holdings == {"comp3": 833}
    assert out.financials.cash == pytest.approx(200_000.0 - 833 * 12.0)


def test_buys_competitor_dip(state, set_fin, scripted):
    comps = (state.competitors[0], replace(state.competitors[1], stock_price=30.0), state.competitors[2])
    s = replace(set_fin(state, cash=200_000.0), competitors=comps)
    out = trade_competitor_shares(s, scripted([]))
    assert "comp2" in out.financials.competitor_share_holdings
    assert state.competitors[1].listing_price == 40.0


def test_takes_profit_on_competitor(state, set_fin, scripted):
    comps = (replace(state.competitors[0], stock_price=80.0), *state.competitors[1:])
    s = replace(set_fin(state, cash=50_000.0, competitor_share_holdings={"comp1": 100}), competitors=comps)
    out = trade_competitor_shares(s, scripted([0.0]))
    assert out.financials.competitor_share_holdings == {"comp1": 75}
    assert out.financials.cash == pytest.approx(50_000.0 + 25 * 80.0)


# =============================================================================
# Whole delegate month
# =============================================================================


def test_delegate_applies_one_decision(state, scripted):
    out = run_delegated_actions(state, scripted([0.1, 0.9, 0.9]))
    assert out.financials.debt == pytest.approx(75_000.0)
    assert out.financials.cash == pytest.approx(75_000.0)
    assert out.event_log[-1].title == "AI delegate: Debt repaid"


def test_delegate_does_nothing_when_no_roll_fires(state, scripted):
    assert run_delegated_actions(state, scripted([0.9, 0.9, 0.9])) is state


def test_delegate_failures_stay_out_of_the_log(state, set_fin, scripted):
    s = set_fin(state, cash=1_000.0, debt=1_000_000.0)
    out = run_delegated_actions(s, scripted([0.0, 0.0, 0.0, 0.5]))
    assert all(e.severity != Severity.WARNING for e in out.event_log)


def test_delegate_uses_ai_origin(state, set_fin, scripted):
    s = set_fin(state, cash=200_000.0)
    out = run_delegated_actions(s, scripted([0.9, 0.0, 0.9]))
    assert out.event_log[-1].type == EventType.AI_ACTION
