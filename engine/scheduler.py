"""engine.scheduler

Owns the single current GameState for a session and drives turns.

- apply(): run any pure transition and swap the result in atomically
- request_turn(): single-flight turn advance (manual button or ticker)
- start()/stop(): background ticker for delegated play

Observers only ever see whole snapshots; a turn already in flight when
stop() is called is allowed to finish.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional

from core.state import GameState

from .config import EngineConfig
from .pipeline import DEFAULT_CONFIG, advance_turn, toggle_delegation

logger = logging.getLogger(__name__)

Advance = Callable[[GameState], GameState]
Listener = Callable[[GameState], None]


class TurnScheduler:
    def __init__(
        self,
        state: GameState,
        config: EngineConfig = DEFAULT_CONFIG,
        advance: Optional[Advance] = None,
        on_change: Optional[Listener] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self._advance = advance or (lambda s: advance_turn(s, config=config))
        self._on_change = on_change
        self._sleep = sleep

        self._state = state
        self._state_lock = threading.RLock()
        self._flight_lock = threading.Lock()
        self._in_flight = False

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # -------------------------
    # State access
    # -------------------------

    @property
    def state(self) -> GameState:
        with self._state_lock:
            return self._state

    @property
    def busy(self) -> bool:
        return self._in_flight

    @property
    def running(self) -> bool:
        t = self._thread
        return t is not None and t.is_alive() and not self._stop_event.is_set()

    def _swap(self, new_state: GameState) -> GameState:
        with self._state_lock:
            self._state = new_state
        if self._on_change is not None:
            self._on_change(new_state)
        return new_state

    def apply(self, fn: Callable[..., GameState], *args: Any, **kwargs: Any) -> GameState:
        """Apply a pure transition to the current state and publish the result."""
        with self._state_lock:
            new_state = fn(self._state, *args, **kwargs)
            self._state = new_state
        if self._on_change is not None:
            self._on_change(new_state)
        return new_state

    def reset(self, state: GameState) -> None:
        self.stop()
        self._swap(state)

    # -------------------------
    # Turns
    # -------------------------

    def request_turn(self, delay: Optional[float] = None) -> bool:
        """Advance one turn unless one is already running or the game is over."""
        with self._flight_lock:
            if self._in_flight or self.state.is_game_over:
                return False
            self._in_flight = True
        try:
            pause = self.config.turn_delay(self.state.is_delegated) if delay is None else float(delay)
            if pause > 0:
                self._sleep(pause)
            self.apply(self._advance)
            return True
        finally:
            with self._flight_lock:
                self._in_flight = False

    # -------------------------
    # Ticker
    # -------------------------

    def start(self) -> bool:
        """Start the delegated-play ticker. No-op if already running."""
        if self.running:
            return False
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._tick_loop, args=(self._stop_event,), daemon=True)
        self._thread.start()
        return True

    def stop(self, wait: bool = False) -> None:
        self._stop_event.set()
        t = self._thread
        if wait and t is not None and t is not threading.current_thread():
            t.join()

    def set_delegated(self, delegated: bool) -> GameState:
        """Toggle delegation (logged in state) and start/stop the ticker to match."""
        current = self.state
        if current.is_delegated != bool(delegated):
            current = self.apply(toggle_delegation)
        if current.is_delegated and not current.is_game_over:
            self.start()
        else:
            self.stop()
        return current

    def _tick_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.config.auto_turn_interval):
            s = self.state
            if not s.is_delegated or s.is_game_over:
                break
            try:
                self.request_turn()
            except Exception:
                logger.exception("delegated turn failed; stopping ticker")
                break
        stop_event.set()
