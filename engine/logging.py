"""engine.logging

Small helpers for storing run logs.

A run log is JSON-serializable so it can be exported/imported later.
The per-turn financial history is read back out of the FINANCIAL_REPORT
events, which carry a financials snapshot for charting.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List

from core.state import EventType, GameState, state_to_dict

from .config import EngineConfig

CHART_FIELDS = ("cash", "debt", "monthly_revenue", "monthly_costs", "monthly_profit", "stock_price", "market_cap")


def financial_history(state: GameState) -> List[Dict[str, Any]]:
    """One row per monthly report, oldest first."""
    rows: List[Dict[str, Any]] = []
    for ev in state.event_log:
        if ev.type != EventType.FINANCIAL_REPORT or not ev.data:
            continue
        snap = dict(ev.data.get("financials") or {})
        row: Dict[str, Any] = {"turn": int(ev.turn)}
        for k in CHART_FIELDS:
            row[k] = float(snap.get(k, 0.0))
        rows.append(row)
    return rows


def make_run_export(*, seed: int, config: EngineConfig, initial_state: GameState, final_state: GameState) -> Dict[str, Any]:
    return {
        "version": 1,
        "seed": int(seed),
        "config": asdict(config),
        "initial_state": state_to_dict(initial_state),
        "final_state": state_to_dict(final_state),
        "financial_history": financial_history(final_state),
    }


def dumps_run_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)
