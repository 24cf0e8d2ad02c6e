from __future__ import annotations

import pytest

from arcade_games.engine import SessionState


def _player(loop):
    return loop.session.first("player")


def test_level_one_layout(make_loop) -> None:
    loop = make_loop("platform_runner")
    session = loop.session
    assert session.count("platform") == 6
    assert session.count("enemy") == 2
    assert session.count("coin") == 5
    assert (_player(loop).x, _player(loop).y) == (50, 100)
    assert loop.ui.texts["coins"] == "0/5"


def test_landing_on_the_ground(running) -> None:
    loop = running("platform_runner")
    player = _player(loop)
    player.y, player.vy = 519, 2
    loop.tick()
    assert player.y == 520
    assert player.vy == 0
    assert player.data["on_ground"]
    # Standing still keeps the player grounded
    loop.tick()
    assert player.y == 520
    assert player.data["on_ground"]


def test_jump_and_double_jump(running) -> None:
    loop = running("platform_runner")
    player = _player(loop)
    player.y, player.vy = 519, 2
    loop.tick()

    loop.input.press("jump")
    loop.tick()
    loop.input.release("jump")
    assert player.vy == pytest.approx(-14 + 0.6)
    assert player.y < 520
    assert not player.data["on_ground"]

    loop.input.press("jump")
    loop.tick()
    loop.input.release("jump")
    assert player.vy == pytest.approx(-14 + 0.6)
    assert not player.data["can_double_jump"]

    vy = player.vy
    loop.input.press("jump")
    loop.tick()
    assert player.vy == pytest.approx(vy + 0.6)


def test_coin_pickup(running) -> None:
    loop = running("platform_runner")
    player = _player(loop)
    player.x, player.y = 275, 405
    loop.tick()
    assert loop.session.score == 10
    assert loop.session.extra["coins_collected"] == 1
    assert loop.session.count("coin") == 4
    assert loop.ui.texts["coins"] == "1/5"


def test_stomping_an_enemy(running) -> None:
    loop = running("platform_runner")
    player = _player(loop)
    player.x, player.y, player.vy = 220, 393, 3
    loop.tick()
    assert loop.session.score == 50
    assert loop.session.count("enemy") == 1
    assert player.vy == pytest.approx(-8.4)
    assert loop.session.lives == 3


def test_touching_an_enemy_from_the_side_costs_a_life(running) -> None:
    loop = running("platform_runner")
    player = _player(loop)
    player.x, player.y = 200, 420
    loop.tick()
    assert loop.session.lives == 2
    assert (player.x, player.y) == (50, 100)
    assert loop.session.count("enemy") == 2


def test_falling_off_the_world(running) -> None:
    loop = running("platform_runner")
    _player(loop).y = 700
    loop.tick()
    assert loop.session.lives == 2
    assert _player(loop).y == 100


def test_last_life_lost_ends_the_game(running) -> None:
    loop = running("platform_runner", lives=1)
    _player(loop).y = 700
    loop.tick()
    assert loop.state == SessionState.ENDED
    assert not loop.session.outcome.won


def test_reaching_the_goal_loads_next_level(running) -> None:
    loop = running("platform_runner")
    player = _player(loop)
    player.x, player.y = 720, 50
    loop.tick()
    session = loop.session
    assert session.level == 2
    assert session.count("platform") == 8
    assert session.count("enemy") == 3
    assert (player.x, player.y) == (50, 100)
    assert loop.ui.texts["coins"] == "0/5"


def test_finishing_the_last_level_wins(running) -> None:
    loop = running("platform_runner")
    loop.session.level = 3
    player = _player(loop)
    player.x, player.y = 720, 50
    loop.tick()
    assert loop.state == SessionState.ENDED
    assert loop.session.outcome.won


def test_moving_platform_turns_around(make_loop) -> None:
    loop = make_loop("platform_runner")
    rules, session = loop.rules, loop.session
    rules.next_level(session)
    session.purge()
    mover = next(p for p in session.live("platform") if p.vx != 0)
    mover.x = mover.data["start_x"] + 101
    rules.apply_forces(session, 1.0)
    assert mover.vx == -2


def test_frame_draws_player_last(make_loop) -> None:
    loop = make_loop("platform_runner")
    frame = loop.frame()
    assert frame[0].kind == "platform"
    assert frame[-1].kind == "player"
    frame[-1].y = 999
    assert _player(loop).y == 100
