from __future__ import annotations

import numpy as np
import pytest

from arcade_games.engine import MemoryStore
from arcade_games.env import ArcadeEnv, run_random_episode
from arcade_games.games import GAMES


@pytest.fixture()
def breakout_env():
    env = ArcadeEnv("breakout")
    yield env
    env.close()


def test_spaces_follow_the_game(breakout_env) -> None:
    assert breakout_env.action_space.n == 3
    assert breakout_env.observation_space.shape == (8,)
    obs, info = breakout_env.reset(seed=0)
    assert breakout_env.observation_space.contains(obs)
    assert info["state"] == "running"
    assert info["lives"] == 3


def test_same_seed_same_trajectory() -> None:
    actions = np.random.RandomState(3).randint(0, 2, size=(40, 3))
    runs = []
    for _ in range(2):
        env = ArcadeEnv("breakout")
        obs, _ = env.reset(seed=7)
        trace = [obs]
        for a in actions:
            obs, *_ = env.step(a)
            trace.append(obs)
        runs.append(np.stack(trace))
    np.testing.assert_array_equal(runs[0], runs[1])


def test_reward_is_score_gained(breakout_env) -> None:
    breakout_env.reset(seed=0)
    session = breakout_env.loop.session
    session.extra["launched"] = True
    ball = session.first("ball")
    ball.x, ball.y, ball.vx, ball.vy = 60, 272, 0, -5
    _, reward, terminated, truncated, info = breakout_env.step(np.zeros(3, dtype=np.int8))
    assert reward == 10
    assert info["score"] == 10
    assert not terminated and not truncated


def test_lost_life_is_penalised(breakout_env) -> None:
    breakout_env.reset(seed=0)
    session = breakout_env.loop.session
    session.extra["launched"] = True
    ball = session.first("ball")
    ball.x, ball.y, ball.vx, ball.vy = 400, 620, 0, 5
    _, reward, *_ = breakout_env.step(np.zeros(3, dtype=np.int8))
    assert reward == -1.0


def test_truncation_at_max_steps() -> None:
    env = ArcadeEnv("racing", max_steps=5)
    env.reset(seed=0)
    for _ in range(5):
        _, _, terminated, truncated, info = env.step(np.zeros(8, dtype=np.int8))
    assert truncated and not terminated
    assert info["step"] == 5


def test_reset_starts_a_fresh_session(breakout_env) -> None:
    breakout_env.reset(seed=0)
    breakout_env.loop.session.score = 99
    _, info = breakout_env.reset(seed=0)
    assert info["score"] == 0
    assert info["tick"] == 0


def test_rgb_array_frame() -> None:
    env = ArcadeEnv("breakout", render_mode="rgb_array")
    env.reset(seed=0)
    frame = env.render()
    assert frame.shape == (600, 800, 3)
    assert frame.dtype == np.uint8
    # Something other than background got drawn
    assert (frame != frame[0, 0]).any()


def test_unknown_game() -> None:
    with pytest.raises(ValueError):
        ArcadeEnv("pinball")


@pytest.mark.parametrize("game", sorted(GAMES))
def test_random_episode_runs(game) -> None:
    store = MemoryStore()
    total = run_random_episode(game, seed=1, max_steps=50, store=store)
    assert isinstance(total, float)
