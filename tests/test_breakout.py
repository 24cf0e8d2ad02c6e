from __future__ import annotations

import pytest

from arcade_games.engine import SessionState


def _launched(loop):
    loop.session.extra["launched"] = True
    return loop.session.first("ball")


def test_new_session_layout(make_loop) -> None:
    loop = make_loop("breakout")
    session = loop.session
    assert session.count("brick") == 60
    assert session.lives == 3
    paddle = session.first("paddle")
    assert paddle.y == 550
    assert paddle.width == 120
    assert not session.extra["launched"]


def test_ball_rides_paddle_until_launched(running) -> None:
    loop = running("breakout")
    loop.input.press("right")
    loop.tick()
    paddle = loop.session.first("paddle")
    ball = loop.session.first("ball")
    assert paddle.x == pytest.approx(340 + 8)
    assert ball.x == pytest.approx(paddle.x + paddle.width / 2)
    assert ball.y == pytest.approx(paddle.y - ball.radius)

    loop.input.press("launch")
    loop.tick()
    assert loop.session.extra["launched"]
    assert ball.vy < 0


def test_brick_hit_scores_and_bounces(running) -> None:
    loop = running("breakout")
    ball = _launched(loop)
    # Bottom row, first column: brick spans x 28..93, y 240..262, worth 10
    ball.x, ball.y, ball.vx, ball.vy = 60, 272, 0, -5
    loop.tick()
    assert loop.session.score == 10
    assert loop.session.count("brick") == 59
    assert ball.vy == 5


def test_two_bricks_in_one_tick_both_score(running) -> None:
    loop = running("breakout")
    ball = _launched(loop)
    # Ball straddles the gap between rows 4 (20 pts) and 5 (10 pts)
    ball.x, ball.y, ball.vx, ball.vy = 60, 240, 0, -5
    loop.tick()
    assert loop.session.score == 30
    assert loop.session.count("brick") == 58
    # One flip per brick
    assert ball.vy == -5


def test_clearing_the_wall_levels_up(running) -> None:
    loop = running("breakout")
    for brick in loop.session.live("brick"):
        brick.alive = False
    loop.tick()
    session = loop.session
    assert session.level == 2
    assert session.count("brick") == 60
    assert session.extra["ball_speed"] == 6
    assert session.first("paddle").width == 110
    assert not session.extra["launched"]
    assert loop.ui.texts["blocks-remaining"] == "60"


def test_paddle_never_narrower_than_minimum(running) -> None:
    loop = running("breakout")
    loop.session.first("paddle").width = 85
    for brick in loop.session.live("brick"):
        brick.alive = False
    loop.tick()
    assert loop.session.first("paddle").width == 80


def test_ball_lost_costs_a_life(running) -> None:
    loop = running("breakout")
    ball = _launched(loop)
    ball.x, ball.y, ball.vy = 400, 620, 5
    loop.tick()
    assert loop.session.lives == 2
    assert loop.state == SessionState.RUNNING
    assert not loop.session.extra["launched"]


def test_last_life_ends_the_game(running) -> None:
    loop = running("breakout", lives=1)
    ball = _launched(loop)
    ball.x, ball.y, ball.vy = 400, 620, 5
    loop.tick()
    assert loop.state == SessionState.ENDED
    assert not loop.session.outcome.won
    assert loop.ui.is_visible("game-over")


def test_paddle_bounce_sends_ball_up(running) -> None:
    loop = running("breakout")
    ball = _launched(loop)
    paddle = loop.session.first("paddle")
    ball.x, ball.y, ball.vx, ball.vy = paddle.x + paddle.width / 2, paddle.y - 10, 0, 5
    loop.tick()
    assert ball.vy == pytest.approx(-5)
    assert ball.vx == pytest.approx(0, abs=1e-9)


def test_observation_shape(make_loop) -> None:
    loop = make_loop("breakout")
    obs = loop.rules.observe(loop.session)
    assert obs.shape == (8,)
    assert (abs(obs) <= 1).all()


def test_frame_is_a_copy_in_draw_order(make_loop) -> None:
    loop = make_loop("breakout")
    frame = loop.frame()
    assert len(frame) == loop.session.count("brick") + 2
    paddle = next(e for e in frame if e.kind == "paddle")
    paddle.x = -500
    assert loop.session.first("paddle").x == 340
