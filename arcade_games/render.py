"""
Arcade render surface
---------------------
- GameWindow: draws a GameLoop's entities, HUD and overlays, and feeds
  keyboard / mouse events into the loop's input tracker
- ArcadeScheduler: real-time ticks through arcade.schedule

Playfield coordinates have y pointing down; arcade has y pointing up, so
everything is flipped on the way to the screen.
"""

from __future__ import annotations

from typing import Dict, Optional

import arcade

from .configs.game_config import KEY_BINDINGS
from .engine.entities import Entity
from .engine.loop import GameLoop
from .engine.persistence import BestStore
from .engine.scheduler import Scheduler, TickCallback
from .engine.session import SessionState
from .engine.ui import RecordingUi
from .games import make_game

BACKGROUND = (18, 18, 22)
HUD_COLOR = (220, 220, 220)
OVERLAY_SHADE = (0, 0, 0, 160)


class ArcadeScheduler(Scheduler):
    """schedule_tick/cancel on top of arcade's clock"""

    def schedule_tick(self, callback: TickCallback, interval: float):
        arcade.schedule(callback, interval)
        return callback

    def cancel(self, handle):
        if handle is not None:
            arcade.unschedule(handle)


def _key_table(game: str) -> Dict[int, str]:
    """arcade key code -> logical action"""
    return {getattr(arcade.key, name): action for name, action in KEY_BINDINGS.get(game, {}).items()}


class GameWindow(arcade.Window):
    """Arcade window for one GameLoop.

    Draws from loop.frame(), copies of the entities, so drawing never touches
    the live session. interactive=False leaves start/pause/reset keys alone,
    for windows that only mirror a loop driven by someone else (ArcadeEnv
    human rendering).
    """

    def __init__(self, loop: GameLoop, title: Optional[str] = None, interactive: bool = True):
        rules = loop.rules
        super().__init__(int(rules.width), int(rules.height), title or rules.name)
        arcade.set_background_color(BACKGROUND)
        self.loop = loop
        self.interactive = interactive
        self.keys = _key_table(rules.name)

        if not isinstance(loop.ui, RecordingUi):
            loop.ui = RecordingUi()
        self.ui: RecordingUi = loop.ui
        loop.sync_ui()

    # ----------------------------
    # Drawing
    # ----------------------------

    def _flip_y(self, y: float) -> float:
        return self.height - y

    def draw_entity(self, e: Entity):
        if e.shape == "circle":
            arcade.draw_circle_filled(e.x, self._flip_y(e.y), e.radius, e.color)
            return
        left, top, w, h = e.bounds()
        bottom = self._flip_y(top + h)
        arcade.draw_lrbt_rectangle_filled(left, left + w, bottom, bottom + h, e.color)
        if e.data.get("selected"):
            arcade.draw_lrbt_rectangle_outline(left, left + w, bottom, bottom + h, HUD_COLOR, 3)
        label = e.data.get("label")
        if label:
            arcade.draw_text(label, left + w / 2, bottom + h / 2, BACKGROUND, 12,
                             anchor_x="center", anchor_y="center")

    def draw_hud(self):
        texts = self.ui.texts
        skip = {"result", "final-score"}
        parts = [f"{k}: {v}" for k, v in texts.items() if k not in skip]
        arcade.draw_text("  ".join(parts), 12, self.height - 24, HUD_COLOR, 12)

    def draw_overlay(self, title: str, lines):
        arcade.draw_lrbt_rectangle_filled(0, self.width, 0, self.height, OVERLAY_SHADE)
        cx, cy = self.width / 2, self.height / 2
        arcade.draw_text(title, cx, cy + 40, HUD_COLOR, 28, anchor_x="center")
        for i, line in enumerate(lines):
            arcade.draw_text(line, cx, cy - i * 26, HUD_COLOR, 14, anchor_x="center")

    def on_draw(self):
        self.clear()
        for e in self.loop.frame():
            self.draw_entity(e)
        self.draw_hud()

        ui = self.ui
        if ui.is_visible("start-screen"):
            self.draw_overlay(self.loop.rules.name.replace("_", " ").title(),
                              ["SPACE / ENTER to start", "P pause   R restart   ESC quit"])
        elif ui.is_visible("pause-screen"):
            self.draw_overlay("Paused", ["P to resume"])
        elif ui.is_visible("game-over") or ui.is_visible("win-screen"):
            title = "You Win!" if ui.is_visible("win-screen") else "Game Over"
            self.draw_overlay(title, [
                ui.texts.get("result", ""),
                f"Score: {ui.texts.get('final-score', '0')}   Best: {ui.texts.get('best', '--')}",
                "R or SPACE to play again",
            ])

    # ----------------------------
    # Input
    # ----------------------------

    def on_key_press(self, key: int, modifiers: int):
        loop = self.loop
        if key == arcade.key.ESCAPE:
            self.close()
            return
        if self.interactive:
            if key in (arcade.key.SPACE, arcade.key.ENTER):
                if loop.state == SessionState.NOT_STARTED:
                    loop.start()
                    return
                if loop.state == SessionState.ENDED:
                    loop.reset()
                    return
            if key == arcade.key.P:
                loop.toggle_pause()
                return
            if key == arcade.key.R:
                loop.reset()
                return
        action = self.keys.get(key)
        if action is not None and loop.state == SessionState.RUNNING:
            loop.input.press(action)

    def on_key_release(self, key: int, modifiers: int):
        action = self.keys.get(key)
        if action is not None:
            self.loop.input.release(action)

    def on_mouse_motion(self, x: float, y: float, dx: float, dy: float):
        self.loop.input.move_pointer(x, self._flip_y(y))

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        if "select" in self.loop.rules.actions and self.loop.state == SessionState.RUNNING:
            self.loop.input.click(x, self._flip_y(y))


def play(game: str, store: Optional[BestStore] = None, seed: Optional[int] = None,
         verbose: int = 0, **overrides):
    """Open a window and play a game in real time"""
    rules = make_game(game, **overrides)
    loop = GameLoop(rules, scheduler=ArcadeScheduler(), ui=RecordingUi(), store=store,
                    seed=seed, verbose=verbose)
    window = GameWindow(loop)
    arcade.run()
    return window
