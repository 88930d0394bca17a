"""CEO Dashboard (Streamlit)

Principles:
- UI only renders + triggers.
- Core domain and engine are pure Python modules.
- One TurnScheduler per browser session owns the GameState; delegated play
  ticks in the scheduler's background thread and the page polls it.

Entry point: streamlit run app.py
"""

from __future__ import annotations

import os
import time
from typing import Dict, List

import streamlit as st

from core import API_VERSION
from core.decisions import apply_strategic_decision, get_available_decisions
from core.directives import DIRECTIVES, get_directive_spec
from core.events import money
from core.state import DEFAULT_COMPANY_NAME, GameState, ProductStatus, Severity
from core.trading import buy_ceo_shares, buy_competitor_shares, sell_ceo_shares, sell_competitor_shares

from engine.config import EngineConfig
from engine.logging import dumps_run_export, financial_history, make_run_export
from engine.pipeline import new_game, set_ai_directive
from engine.scheduler import TurnScheduler


APP_TITLE = "Enterprise: CEO Dashboard"
APP_SUBTITLE = "Run the company month by month, or delegate to the AI and watch."
APP_VERSION = "1.0.0"
TICKER_SYMBOL = "SNRG"

st.set_page_config(page_title=APP_TITLE, page_icon="📈", layout="wide", initial_sidebar_state="expanded")

CSS = """
<style>
.block-container {padding-top: 3.2rem; padding-bottom: 2rem;}
.pill {
  display: inline-block;
  padding: 2px 10px;
  border-radius: 999px;
  border: 1px solid rgba(255,255,255,0.12);
  font-size: 12px;
  opacity: .85;
}
.pill.warn {border-color: rgba(255,190,90,0.35);}
.pill.ok {border-color: rgba(120,255,160,0.25);}
.pill.bad {border-color: rgba(255,120,120,0.25);}
.small {font-size: 13px; opacity:.75;}
</style>
"""

st.markdown(CSS, unsafe_allow_html=True)

SEVERITY_PILL = {
    Severity.INFO: "",
    Severity.SUCCESS: "ok",
    Severity.WARNING: "warn",
    Severity.CRITICAL: "bad",
}


# =========================
# Helpers
# =========================


def _base_seed() -> int:
    # Streamlit Cloud: st.secrets, local: env
    raw = ""
    try:
        if "CEO_SIM_SEED" in st.secrets:
            raw = str(st.secrets["CEO_SIM_SEED"])  # type: ignore
    except FileNotFoundError:
        raw = ""
    raw = raw or os.getenv("CEO_SIM_SEED", "")
    try:
        return int(raw) if raw else 42
    except ValueError:
        return 42


def _scheduler() -> TurnScheduler:
    return st.session_state.scheduler


def _state() -> GameState:
    return _scheduler().state


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "started" not in ss:
        ss.started = False
    if "company_name" not in ss:
        ss.company_name = DEFAULT_COMPANY_NAME
    if "base_seed" not in ss:
        ss.base_seed = _base_seed()
    if "scheduler" not in ss:
        ss.scheduler = None


def _start_run() -> None:
    ss = st.session_state
    cfg = EngineConfig(base_seed=int(ss.base_seed), company_name=str(ss.company_name))
    ss.engine_config = cfg
    ss.initial_state = new_game(cfg)
    ss.scheduler = TurnScheduler(ss.initial_state, config=cfg)
    ss.started = True


def _reset_run() -> None:
    ss = st.session_state
    if ss.get("scheduler") is not None:
        ss.scheduler.stop()
    keep = {"company_name": ss.get("company_name", DEFAULT_COMPANY_NAME)}
    for k in list(ss.keys()):
        del ss[k]
    for k, v in keep.items():
        ss[k] = v
    _ensure_state()


# =========================
# Widgets
# =========================


def header() -> None:
    s = _state()
    sch = _scheduler()
    left, right = st.columns([3.0, 1.2])
    with left:
        st.title(APP_TITLE)
        auto = " | 🤖 AI delegation (auto-advancing)" if s.is_delegated else ""
        st.caption(f"Company: {s.company_name} | Month: {s.current_turn}{auto}")
    with right:
        if s.is_game_over:
            if st.button("Restart game", use_container_width=True):
                _reset_run()
                st.rerun()
        elif s.is_delegated:
            st.info(f"AI auto-advancing… ({sch.config.auto_turn_interval:g}s/turn)")
        else:
            if st.button(f"Advance to month {s.current_turn + 1}", disabled=sch.busy, use_container_width=True):
                with st.spinner("Processing…"):
                    sch.request_turn()
                st.rerun()

    if s.is_game_over:
        st.error(f"**Game over**\n\n{s.game_over_message}")


def delegation_widget() -> None:
    s = _state()
    st.markdown("#### AI delegation")
    if s.is_delegated:
        st.caption("The AI handles strategic decisions, stock trades and turn progression.")
    else:
        st.caption("You make the major decisions, trade stock and advance turns yourself.")
    label = "Disable delegation" if s.is_delegated else "Enable delegation"
    if st.button(label, disabled=s.is_game_over, use_container_width=True):
        _scheduler().set_delegated(not s.is_delegated)
        st.rerun()


def strategy_widget() -> None:
    s = _state()
    sch = _scheduler()
    st.markdown("#### Strategy")

    keys = list(DIRECTIVES.keys())
    ix = keys.index(s.current_ai_directive) if s.current_ai_directive in keys else 0
    choice = st.selectbox(
        "AI directive",
        keys,
        index=ix,
        format_func=lambda k: DIRECTIVES[k].label,
        disabled=s.is_game_over,
    )
    spec = get_directive_spec(choice)
    st.caption(f"{spec.desc} (revenue ×{spec.revenue_factor:g}, cost ×{spec.cost_factor:g})")
    if choice != s.current_ai_directive:
        sch.apply(set_ai_directive, choice)
        st.rerun()

    if s.is_game_over or s.is_delegated:
        return

    decisions = get_available_decisions(s)
    if not decisions:
        st.caption("No strategic decisions available right now.")
        return
    for d in decisions:
        cost = money(d.cost) if d.cost else "no cost"
        st.markdown(f"**{d.title}**  <span class='pill'>{d.category.value}</span> <span class='pill'>{cost}</span>", unsafe_allow_html=True)
        st.caption(d.description)
        if st.button("Execute", key=f"decision_{d.id}", use_container_width=True):
            sch.apply(apply_strategic_decision, d.key)
            st.rerun()


def rd_widget() -> None:
    s = _state()
    st.markdown("#### R&D")
    for p in s.rd_projects:
        st.markdown(f"**{p.name}** <span class='pill'>{p.status.value}</span>", unsafe_allow_html=True)
        st.progress(min(1.0, max(0.0, p.progress / 100.0)))
        st.caption(f"{p.description} Impact: {p.potential_impact} · funding {money(p.monthly_funding)}/mo")


def financials_widget() -> None:
    s = _state()
    f = s.financials
    st.markdown("#### Financials")
    c1, c2, c3 = st.columns(3)
    c1.metric("Cash", money(f.cash))
    c2.metric("Debt", money(f.debt))
    c3.metric("Monthly profit", money(f.monthly_profit))
    c4, c5, c6 = st.columns(3)
    c4.metric(f"{TICKER_SYMBOL} price", money(f.stock_price, 2))
    c5.metric("Market cap", money(f.market_cap))
    c6.metric("CEO stake", f"{f.ceo_ownership_pct:.1f}%")

    rows = financial_history(s)
    if rows:
        data: Dict[str, List[float]] = {k: [float(r[k]) for r in rows] for k in ("turn", "cash", "monthly_revenue", "monthly_profit")}
        st.line_chart(data, x="turn", y=["cash", "monthly_revenue", "monthly_profit"])


def market_widget() -> None:
    s = _state()
    st.markdown("#### Market")
    st.caption(f"Global sentiment: {s.global_market_sentiment.value}")
    for seg in s.market_segments:
        st.markdown(
            f"{seg.icon} **{seg.name}** · our share {seg.player_market_share:.1f}% · "
            f"value {money(seg.total_market_value)} · growth {seg.growth_potential.value}"
        )
    for c in s.competitors:
        st.markdown(f"**{c.name}** <span class='pill'>{c.strength.value}</span> share {c.market_share:.0f}% · {money(c.stock_price, 2)}", unsafe_allow_html=True)
    launched = [p for p in s.products if p.status == ProductStatus.LAUNCHED]
    st.caption(f"Launched products: {len(launched)}")
    for p in launched:
        st.caption(f"{p.name} · quality {p.quality:.0f}/100 · price {money(p.sale_price)} · last month {p.units_sold_per_quarter:,} units")


def trading_widget() -> None:
    s = _state()
    sch = _scheduler()
    locked = s.is_game_over or s.is_delegated
    f = s.financials
    st.markdown("#### Stock trading")

    st.caption(f"You hold {f.ceo_shares:,} of {f.shares_outstanding:,} {TICKER_SYMBOL} shares.")
    n_buy = st.number_input("Shares to buy", min_value=0, step=100, value=0, disabled=locked)
    if st.button("Buy own shares", disabled=locked, use_container_width=True):
        sch.apply(buy_ceo_shares, int(n_buy))
        st.rerun()
    pct = st.slider("Percent of holding to sell", min_value=0.0, max_value=100.0, value=0.0, step=0.5, disabled=locked)
    if st.button("Sell own shares", disabled=locked, use_container_width=True):
        sch.apply(sell_ceo_shares, float(pct))
        st.rerun()

    st.markdown("---")
    comp_ids = [c.id for c in s.competitors]
    if not comp_ids:
        return
    names = {c.id: c.name for c in s.competitors}
    cid = st.selectbox("Competitor", comp_ids, format_func=lambda k: names[k], disabled=locked)
    held = f.competitor_share_holdings.get(cid, 0)
    st.caption(f"Held: {held:,} shares")
    n_comp = st.number_input("Competitor shares", min_value=0, step=10, value=0, disabled=locked)
    b1, b2 = st.columns(2)
    with b1:
        if st.button("Buy", disabled=locked, use_container_width=True):
            sch.apply(buy_competitor_shares, cid, int(n_comp))
            st.rerun()
    with b2:
        if st.button("Sell", disabled=locked, use_container_width=True):
            sch.apply(sell_competitor_shares, cid, int(n_comp))
            st.rerun()


def event_log_widget(limit: int = 40) -> None:
    s = _state()
    st.markdown("#### Event log")
    for ev in list(reversed(s.event_log))[:limit]:
        pill = SEVERITY_PILL.get(ev.severity, "")
        st.markdown(
            f"<span class='pill {pill}'>M{ev.turn}</span> **{ev.title}**<br/><span class='small'>{ev.description}</span>",
            unsafe_allow_html=True,
        )


# =========================
# Pages
# =========================


def page_setup() -> None:
    ss = st.session_state
    st.title("Found your company")
    st.caption(APP_SUBTITLE)
    ss.company_name = st.text_input("Company name", value=str(ss.get("company_name", DEFAULT_COMPANY_NAME)))
    ss.base_seed = st.number_input("Seed (deterministic economy)", value=int(ss.base_seed), step=1)
    if st.button("Start game", use_container_width=True):
        _start_run()
        st.rerun()


def page_run() -> None:
    header()
    col1, col2, col3 = st.columns(3)
    with col1:
        delegation_widget()
        strategy_widget()
        rd_widget()
    with col2:
        financials_widget()
        market_widget()
    with col3:
        trading_widget()
        event_log_widget()


def page_debug() -> None:
    ss = st.session_state
    st.title("Debug")
    st.caption(f"core API: {API_VERSION} · app v{APP_VERSION}")
    export = make_run_export(
        seed=int(ss.engine_config.base_seed),
        config=ss.engine_config,
        initial_state=ss.initial_state,
        final_state=_state(),
    )
    st.download_button(
        "Download run (JSON)",
        data=dumps_run_export(export).encode("utf-8"),
        file_name=f"ceo_run_{_state().current_turn}.json",
        mime="application/json",
    )
    st.json(export)


# =========================
# Main
# =========================


def main() -> None:
    _ensure_state()
    ss = st.session_state

    if not ss.started or ss.scheduler is None:
        page_setup()
        return

    page = st.sidebar.radio("Page", ["Dashboard", "Debug"], index=0)
    if page == "Dashboard":
        page_run()
    else:
        page_debug()

    s = _state()
    if s.is_delegated and not s.is_game_over:
        # the scheduler ticks in the background; poll it
        time.sleep(float(_scheduler().config.auto_turn_interval))
        st.rerun()


if __name__ == "__main__":
    main()
