"""
core.events
Event log builder.

The log is append-only: events are created here and never edited afterwards.
AI-originated player decisions and stock trades are relabelled so the log
shows they came from the delegate, not the CEO.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional

from .state import EventType, GameEvent, GameState, Origin, Severity

AI_TITLE_PREFIX = "AI delegate: "

_RELABELLED_FOR_AI = {EventType.PLAYER_DECISION, EventType.STOCK_TRADE}


def make_event(
    turn: int,
    seq: int,
    type: EventType,
    title: str,
    description: str,
    severity: Severity = Severity.INFO,
    data: Optional[Mapping[str, Any]] = None,
    origin: Origin = Origin.PLAYER,
) -> GameEvent:
    if origin is Origin.AI and type in _RELABELLED_FOR_AI:
        type = EventType.AI_ACTION
        title = f"{AI_TITLE_PREFIX}{title}"
    return GameEvent(
        id=f"evt-{int(turn)}-{int(seq)}",
        turn=int(turn),
        type=type,
        title=title,
        description=description,
        severity=severity,
        data=dict(data) if data is not None else None,
    )


def log_event(
    state: GameState,
    type: EventType,
    title: str,
    description: str,
    severity: Severity = Severity.INFO,
    data: Optional[Mapping[str, Any]] = None,
    origin: Origin = Origin.PLAYER,
) -> GameState:
    """Return a new state with one event appended."""
    ev = make_event(
        state.current_turn,
        len(state.event_log),
        type,
        title,
        description,
        severity=severity,
        data=data,
        origin=origin,
    )
    return replace(state, event_log=(*state.event_log, ev))


def log_warning(state: GameState, type: EventType, title: str, description: str, origin: Origin) -> GameState:
    # AI callers pre-filter infeasible actions; their failures stay out of the log.
    if origin is Origin.AI:
        return state
    return log_event(state, type, title, description, severity=Severity.WARNING)


def has_game_over_entry(state: GameState) -> bool:
    return any(
        e.type == EventType.GAME_MESSAGE and e.title == "Game over" and e.description == state.game_over_message
        for e in state.event_log
    )


def log_game_over(state: GameState) -> GameState:
    """Append the terminal entry once per game-over message."""
    if not state.is_game_over or has_game_over_entry(state):
        return state
    return log_event(state, EventType.GAME_MESSAGE, "Game over", state.game_over_message, severity=Severity.CRITICAL)


def money(x: float, digits: int = 0) -> str:
    return f"${x:,.{digits}f}"
