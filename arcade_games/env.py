"""
ArcadeEnv - any game of the collection behind the Gymnasium API
---------------------------------------------------------------
- One step() is one tick of the game loop, driven synchronously
- MultiBinary action space: one bit per logical action of the game
  (bit on = key held; the 0 -> 1 edge is the key press)
- Vector observation from the rules' observe(), in [-1, 1]
- Reward = score gained this tick - life_penalty per life lost
- terminated when the session ends, truncated at max_steps

Quick test:
    python -m arcade_games.env
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .engine.loop import GameLoop
from .engine.persistence import BestStore
from .engine.scheduler import ManualScheduler
from .engine.session import SessionState
from .games import make_game


class ArcadeEnv(gym.Env):
    """Gymnasium wrapper around a GameLoop"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        game: str = "breakout",
        render_mode: Optional[str] = None,
        max_steps: int = 3600,  # 60s at 60 FPS
        dt: Optional[float] = None,
        life_penalty: float = 1.0,
        store: Optional[BestStore] = None,
        verbose: int = 0,
        **game_kwargs,
    ):
        super().__init__()
        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render_mode: {render_mode}"
        self.game = game
        self.rules = make_game(game, **game_kwargs)
        self.render_mode = render_mode
        self.max_steps = max_steps
        self.dt = dt
        self.life_penalty = life_penalty
        self.store = store
        self.verbose = verbose

        self.action_space = spaces.MultiBinary(len(self.rules.actions))
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(self.rules.observation_size,), dtype=np.float32
        )

        self.loop: Optional[GameLoop] = None
        self._held = np.zeros(len(self.rules.actions), dtype=bool)
        self._step_count = 0
        self._window = None

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))

        if self.loop is None:
            self.loop = GameLoop(self.rules, scheduler=ManualScheduler(), store=self.store, seed=seed,
                                 verbose=self.verbose)
        else:
            self.loop.rng.seed(seed)
            self.loop.reset()
        self.loop.start()

        self._held = np.zeros(len(self.rules.actions), dtype=bool)
        self._step_count = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        assert self.loop is not None, "Call reset() before step()"
        bits = np.asarray(action, dtype=np.int8).astype(bool).reshape(-1)
        assert bits.shape == self._held.shape, f"Expected {self._held.shape[0]} action bits"

        # Held keys stay held; the tracker reports the 0 -> 1 edge as a press
        for i, name in enumerate(self.rules.actions):
            if bits[i]:
                self.loop.input.press(name)
            elif self._held[i]:
                self.loop.input.release(name)
        self._held = bits

        session = self.loop.session
        score_before, lives_before = session.score, session.lives
        self.loop.tick(self.dt)
        self._step_count += 1

        session = self.loop.session
        reward = float(session.score - score_before)
        lost = lives_before - session.lives
        if lost > 0:
            reward -= self.life_penalty * lost

        terminated = session.state == SessionState.ENDED
        truncated = not terminated and self._step_count >= self.max_steps

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def _get_obs(self) -> np.ndarray:
        obs = self.rules.observe(self.loop.session)
        return np.clip(obs, -1.0, 1.0).astype(np.float32)

    def _get_info(self) -> Dict[str, Any]:
        session = self.loop.session
        info = {
            "score": session.score,
            "lives": session.lives,
            "level": session.level,
            "state": session.state.value,
            "tick": session.tick_count,
            "step": self._step_count,
        }
        if session.outcome is not None:
            info["won"] = session.outcome.won
        return info

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None or self.loop is None:
            return None

        if self.render_mode == "human":
            if self._window is None:
                # arcade opens a display, so only import it when asked to
                from .render import GameWindow
                self._window = GameWindow(self.loop, title=f"{self.game} - ArcadeEnv",
                                          interactive=False)
            self._window.dispatch_events()
            self._window.on_draw()
            self._window.flip()
            return None
        return self._render_rgb_array()

    def _render_rgb_array(self) -> np.ndarray:
        """Rasterize entity boxes and discs into an (H, W, 3) frame"""
        h, w = int(self.rules.height), int(self.rules.width)
        frame = np.zeros((h, w, 3), dtype=np.uint8)
        frame[:] = (18, 18, 22)
        for e in self.loop.frame():
            left, top, bw, bh = e.bounds()
            x0, x1 = max(0, int(left)), min(w, int(left + bw))
            y0, y1 = max(0, int(top)), min(h, int(top + bh))
            if x0 >= x1 or y0 >= y1:
                continue
            if e.shape == "circle":
                ys, xs = np.ogrid[y0:y1, x0:x1]
                mask = (xs + 0.5 - e.x) ** 2 + (ys + 0.5 - e.y) ** 2 <= e.radius ** 2
                frame[y0:y1, x0:x1][mask] = e.color
            else:
                frame[y0:y1, x0:x1] = e.color
        return frame

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(game: str = "breakout", seed: Optional[int] = 42, max_steps: int = 3600,
                       store: Optional[BestStore] = None, verbose: int = 0, **game_kwargs) -> float:
    """Play one episode with uniformly random actions and return its total reward"""
    env = ArcadeEnv(game=game, max_steps=max_steps, store=store, verbose=verbose, **game_kwargs)
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    terminated = truncated = False
    total = 0.0
    while not (terminated or truncated):
        obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
        total += reward
    if verbose > 0:
        print(f"[ArcadeEnv] {game}: return={total:.1f} score={info['score']} "
              f"steps={info['step']} state={info['state']}")
    env.close()
    return total


if __name__ == "__main__":
    run_random_episode(verbose=1)
