import json
from dataclasses import replace

import pytest

from core.selfcheck import play_month, run_24_months_smoke
from core.state import AIDirective
from engine.config import EngineConfig
from engine.logging import CHART_FIELDS, dumps_run_export, financial_history, make_run_export
from engine.pipeline import advance_turn
from engine.sim_runner import run_headless_sim


def test_financial_history_has_one_row_per_report(state):
    cfg = EngineConfig(base_seed=5)
    s = advance_turn(advance_turn(state, config=cfg), config=cfg)

    rows = financial_history(s)

    assert [r["turn"] for r in rows] == [2, 3]
    assert set(CHART_FIELDS) <= set(rows[0])
    assert rows[-1]["cash"] == s.financials.cash


def test_start_state_has_no_history(state):
    assert financial_history(state) == []


def test_run_export_is_json(state):
    cfg = EngineConfig(base_seed=5)
    final = advance_turn(state, config=cfg)
    export = make_run_export(seed=cfg.base_seed, config=cfg, initial_state=state, final_state=final)

    loaded = json.loads(dumps_run_export(export))

    assert loaded["seed"] == 5
    assert loaded["config"]["auto_turn_interval"] == cfg.auto_turn_interval
    assert loaded["final_state"]["current_turn"] == 2
    assert loaded["initial_state"]["current_ai_directive"] == "stabilize_company"
    assert len(loaded["financial_history"]) == 1


def test_headless_sim():
    out = run_headless_sim(months=12, directive=AIDirective.MARKET_SHARE_EXPANSION)
    final = out["final"]
    assert 1 <= out["months"] <= 12
    assert final.current_turn == 1 + out["months"]
    assert final.is_delegated
    assert final.current_ai_directive == AIDirective.MARKET_SHARE_EXPANSION
    json.dumps(out["export"])


def test_selfcheck_smoke():
    run_24_months_smoke()


@pytest.mark.parametrize("seed", [3, 42])
@pytest.mark.parametrize("delegated", [False, True])
def test_selfcheck_month_matches_advance_turn(state, seed, delegated):
    cfg = EngineConfig(base_seed=seed, company_name=state.company_name)
    smoke = engine_state = replace(state, is_delegated=delegated, current_ai_directive=AIDirective.TECH_INNOVATION_PRIORITY)
    for _ in range(24):
        smoke = play_month(smoke, seed)
        engine_state = advance_turn(engine_state, config=cfg)
        assert smoke == engine_state
