from __future__ import annotations

import pytest

from arcade_games.engine import Entity, SessionState


def _cells(session):
    return [(int(s.x), int(s.y)) for s in session.live("segment")]


def _set_snake(session, cells, direction, food=(0, 0)):
    segments = [Entity(kind="segment", x=x, y=y) for x, y in cells]
    session.entities = segments + [Entity(kind="food", x=food[0], y=food[1])]
    session.extra["direction"] = direction
    session.extra["next_direction"] = direction


def test_initial_snake(make_loop) -> None:
    loop = make_loop("snake")
    assert _cells(loop.session) == [(15, 15), (14, 15), (13, 15)]
    food = loop.session.first("food")
    assert (food.x, food.y) not in _cells(loop.session)


def test_moves_one_cell_per_tick(running) -> None:
    loop = running("snake")
    loop.session.first("food").x, loop.session.first("food").y = 0, 0
    loop.tick()
    assert _cells(loop.session) == [(16, 15), (15, 15), (14, 15)]


def test_cannot_reverse_onto_itself(running) -> None:
    loop = running("snake")
    loop.session.first("food").x, loop.session.first("food").y = 0, 0
    loop.input.press("left")
    loop.tick()
    assert _cells(loop.session)[0] == (16, 15)
    assert loop.state == SessionState.RUNNING


def test_turning(running) -> None:
    loop = running("snake")
    loop.session.first("food").x, loop.session.first("food").y = 0, 0
    loop.input.press("up")
    loop.tick()
    assert _cells(loop.session)[0] == (15, 14)


def test_eating_grows_and_moves_food(running, store) -> None:
    loop = running("snake")
    _set_snake(loop.session, [(15, 15), (14, 15), (13, 15)], (1, 0), food=(16, 15))
    loop.tick()
    session = loop.session
    assert session.score == 10
    assert _cells(session) == [(16, 15), (15, 15), (14, 15), (13, 15)]
    food = session.first("food")
    assert (int(food.x), int(food.y)) not in _cells(session)
    assert store.get("snakeHighScore") == 10
    assert loop.ui.texts["length"] == "4"


def test_wall_hit_ends_the_game(running) -> None:
    loop = running("snake")
    _set_snake(loop.session, [(29, 15), (28, 15), (27, 15)], (1, 0))
    loop.tick()
    assert loop.state == SessionState.ENDED
    assert not loop.session.outcome.won


def test_self_hit_ends_the_game(running) -> None:
    loop = running("snake")
    # Head at (5, 5) heading down into its own body at (5, 6)
    _set_snake(loop.session, [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)], (0, 1))
    loop.tick()
    assert loop.state == SessionState.ENDED
    assert not loop.session.outcome.won


def test_moving_right_into_own_body_ends_the_game(running) -> None:
    loop = running("snake")
    # Body coils up and back left; the cell right of the head is mid-body
    _set_snake(loop.session, [(5, 5), (5, 6), (6, 6), (6, 5), (6, 4), (7, 4)], (1, 0))
    loop.tick()
    assert loop.state == SessionState.ENDED
    assert not loop.session.outcome.won
    assert loop.ui.is_visible("game-over")


def test_speed_up_reschedules_the_loop(running, scheduler) -> None:
    loop = running("snake")
    assert list(scheduler.intervals.values()) == [pytest.approx(0.15)]
    loop.session.score = 40
    _set_snake(loop.session, [(15, 15), (14, 15), (13, 15)], (1, 0), food=(16, 15))
    generation = loop.generation
    loop.tick()
    assert loop.session.score == 50
    assert loop.session.extra["interval_ms"] == 145
    assert list(scheduler.intervals.values()) == [pytest.approx(0.145)]
    assert loop.generation == generation
    assert loop.ui.texts["speed"] == "2.0x"


def test_interval_has_a_floor(running) -> None:
    loop = running("snake")
    loop.session.extra["interval_ms"] = 50
    loop.session.score = 90
    _set_snake(loop.session, [(15, 15), (14, 15), (13, 15)], (1, 0), food=(16, 15))
    loop.tick()
    assert loop.session.extra["interval_ms"] == 50


def test_filling_the_board_wins(running) -> None:
    loop = running("snake", grid_size=2, initial_length=2)
    _set_snake(loop.session, [(1, 0), (1, 1), (0, 1)], (-1, 0), food=(0, 0))
    loop.tick()
    assert loop.state == SessionState.ENDED
    assert loop.session.outcome.won


def test_render_entities_are_in_pixels(make_loop) -> None:
    loop = make_loop("snake")
    cells = [e for e in loop.rules.render_entities(loop.session) if e.kind == "segment"]
    assert cells[0].x == 15 * 20 + 1
    assert cells[0].width == 18
