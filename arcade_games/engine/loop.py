"""
GameLoop - the Arcade Simulation Loop controller
------------------------------------------------
Owns the active Session and drives it through the session state machine:

    NOT_STARTED -> RUNNING <-> PAUSED
    RUNNING/PAUSED -> ENDED
    any -> NOT_STARTED (reset)

Illegal transitions are no-ops. Ticks are delivered by a Scheduler; every
scheduled callback is tagged with the generation that created it, so a
callback from a loop that has since been reset never touches the new Session.
"""

from __future__ import annotations

import copy
from typing import Callable, Optional, Tuple

from .entities import Entity
from .input import InputTracker
from .persistence import BestStore, record_best
from .rules import GameRules
from .scheduler import ManualScheduler, Scheduler
from .session import Outcome, Session, SessionSnapshot, SessionState
from .ui import NullUi, UiSink
from .utils import make_rng


class GameLoop:
    """Single-threaded update/render loop for one game instance"""

    def __init__(
        self,
        rules: GameRules,
        scheduler: Optional[Scheduler] = None,
        ui: Optional[UiSink] = None,
        store: Optional[BestStore] = None,
        seed: Optional[int] = None,
        on_render: Optional[Callable[[SessionSnapshot], None]] = None,
        verbose: int = 0,
    ):
        self.rules = rules
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.ui = ui if ui is not None else NullUi()
        self.store = store
        self.on_render = on_render
        self.verbose = verbose

        self.rng = make_rng(seed)
        self.input = InputTracker(actions=rules.actions)

        # Scheduling state
        self.generation = 0
        self._handle = None
        self._interval: Optional[float] = None

        self.session: Session = self._new_session()
        self.sync_ui()

    @property
    def state(self) -> SessionState:
        return self.session.state

    def _log(self, msg: str):
        if self.verbose > 0:
            print(f"[GameLoop] {self.rules.name}: {msg}")

    def _new_session(self) -> Session:
        session = self.rules.new_session(self.rng)
        session.rng = self.rng
        session.state = SessionState.NOT_STARTED
        return session

    # ----------------------------
    # State machine
    # ----------------------------

    def start(self) -> bool:
        if self.state != SessionState.NOT_STARTED:
            return False
        self.session.state = SessionState.RUNNING
        self._schedule()
        self._log("started")
        self.sync_ui()
        self.render()
        return True

    def pause(self) -> bool:
        if self.state != SessionState.RUNNING:
            return False
        self.session.state = SessionState.PAUSED
        self.input.release_all()
        self._log("paused")
        self.sync_ui()
        self.render()
        return True

    def resume(self) -> bool:
        if self.state != SessionState.PAUSED:
            return False
        self.session.state = SessionState.RUNNING
        self._log("resumed")
        self.sync_ui()
        return True

    def toggle_pause(self) -> bool:
        if self.state == SessionState.RUNNING:
            return self.pause()
        return self.resume()

    def end(self, outcome: Outcome) -> bool:
        if self.state not in (SessionState.RUNNING, SessionState.PAUSED):
            return False
        self.session.state = SessionState.ENDED
        self.session.outcome = outcome
        self._cancel()
        self._record_best()
        self._log(f"ended ({'win' if outcome.won else 'lose'}) score={outcome.score}")
        self.sync_ui()
        self.render()
        return True

    def reset(self) -> bool:
        """Discard the Session and scheduler handle and start fresh"""
        self.generation += 1
        self._cancel()
        self.input.release_all()
        self.session = self._new_session()
        self._log(f"reset (generation {self.generation})")
        self.sync_ui()
        self.render()
        return True

    # ----------------------------
    # Scheduling
    # ----------------------------

    def _schedule(self):
        generation = self.generation
        interval = self.rules.tick_interval(self.session)

        def _callback(dt: float):
            self._on_scheduled_tick(generation, dt)

        self._handle = self.scheduler.schedule_tick(_callback, interval)
        self._interval = interval

    def _cancel(self):
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
        self._handle = None
        self._interval = None

    def _on_scheduled_tick(self, generation: int, dt: float):
        if generation != self.generation:
            return
        if self.state == SessionState.PAUSED:
            self.render()
            return
        self.tick(dt)

    def _maybe_reschedule(self):
        if self._handle is None:
            return
        interval = self.rules.tick_interval(self.session)
        if interval != self._interval:
            self._log(f"tick interval {self._interval:.3f}s -> {interval:.3f}s")
            self.scheduler.cancel(self._handle)
            self._schedule()

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, dt: Optional[float] = None) -> bool:
        """Advance the Session one tick. Only runs while RUNNING."""
        if self.state != SessionState.RUNNING:
            return False

        rules = self.rules
        session = self.session
        if dt is None:
            dt = 1.0 / rules.tick_rate
        scale = dt * rules.tick_rate if rules.variable_delta else 1.0

        inputs = self.input.snapshot()
        session.tick_count += 1
        session.elapsed += dt

        rules.apply_input(session, inputs, scale)
        rules.integrate(session, scale)
        rules.apply_forces(session, scale)
        pairs = rules.collide(session)
        rules.apply_effects(session, pairs)
        outcome = rules.check_terminal(session)
        session.purge()

        if outcome is not None:
            self.end(outcome)
            return True

        self._record_best()
        self._maybe_reschedule()
        self.sync_ui()
        self.render()
        return True

    # ----------------------------
    # Collaborators
    # ----------------------------

    def best_value(self) -> Optional[float]:
        key = self.rules.best_storage_key(self.session)
        if self.store is None or key is None:
            return None
        return self.store.get(key)

    def _record_best(self):
        key = self.rules.best_storage_key(self.session)
        if self.store is None or key is None:
            return
        candidate = self.rules.best_candidate(self.session)
        if candidate is None:
            return
        if record_best(self.store, key, candidate, self.rules.higher_is_better):
            self._log(f"new best {key}={candidate}")

    def snapshot(self) -> SessionSnapshot:
        return self.session.snapshot()

    def frame(self) -> Tuple[Entity, ...]:
        """Copies of the entities to draw, in draw order"""
        return tuple(copy.deepcopy(e) for e in self.rules.render_entities(self.session))

    def render(self):
        if self.on_render is not None:
            self.on_render(self.session.snapshot())

    def sync_ui(self):
        session = self.session
        for element_id, value in self.rules.hud(session).items():
            self.ui.set_text(element_id, value)
        self.ui.set_text("best", self.rules.format_best(self.best_value()))

        state = session.state
        outcome = session.outcome
        self.ui.set_visible("start-screen", state == SessionState.NOT_STARTED)
        self.ui.set_visible("pause-screen", state == SessionState.PAUSED)
        ended = state == SessionState.ENDED
        self.ui.set_visible("game-over", ended and outcome is not None and not outcome.won)
        self.ui.set_visible("win-screen", ended and outcome is not None and outcome.won)
        if ended and outcome is not None:
            self.ui.set_text("result", outcome.message)
            self.ui.set_text("final-score", str(outcome.score))
