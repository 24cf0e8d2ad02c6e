from __future__ import annotations

import numpy as np

from arcade_games.engine import SessionState
from arcade_games.games.tetris import SHAPES


def _set_piece(session, kind, x, y):
    session.extra["piece"] = {"kind": kind, "shape": np.array(SHAPES[kind], dtype=np.int8),
                              "x": x, "y": y}
    return session.extra["piece"]


def test_new_board(make_loop) -> None:
    loop = make_loop("tetris")
    board = loop.session.extra["board"]
    assert board.shape == (20, 10)
    assert not board.any()
    assert loop.rules.width == 300
    assert loop.session.extra["drop_interval"] == 1000


def test_clearing_two_lines(make_loop) -> None:
    loop = make_loop("tetris")
    session = loop.session
    session.extra["board"][18:20, :] = 1
    session.extra["board"][17, 0] = 2
    assert loop.rules.clear_lines(session) == 2
    board = session.extra["board"]
    assert session.score == 300
    assert session.extra["lines"] == 2
    # The partial row falls by two
    assert board[19, 0] == 2
    assert np.count_nonzero(board) == 1


def test_line_points_scale_with_level(make_loop) -> None:
    loop = make_loop("tetris")
    session = loop.session
    session.level = 2
    session.extra["board"][19, :] = 1
    loop.rules.clear_lines(session)
    assert session.score == 200


def test_level_up_speeds_gravity(make_loop) -> None:
    loop = make_loop("tetris")
    session = loop.session
    session.extra["lines"] = 9
    session.extra["board"][19, :] = 1
    loop.rules.clear_lines(session)
    assert session.level == 2
    assert session.extra["drop_interval"] == 900


def test_rotation_is_clockwise(make_loop) -> None:
    loop = make_loop("tetris")
    piece = _set_piece(loop.session, 6, 4, 5)
    assert loop.rules.rotate(loop.session)
    assert piece["shape"].tolist() == [[6, 0], [6, 6], [6, 0]]


def test_blocked_rotation_is_rejected(make_loop) -> None:
    loop = make_loop("tetris")
    piece = _set_piece(loop.session, 1, 3, 19)
    assert not loop.rules.rotate(loop.session)
    assert piece["shape"].shape == (1, 4)


def test_walls_stop_sideways_moves(make_loop) -> None:
    loop = make_loop("tetris")
    piece = _set_piece(loop.session, 4, 0, 5)
    assert not loop.rules.move(loop.session, -1)
    assert piece["x"] == 0
    assert loop.rules.move(loop.session, 1)
    assert piece["x"] == 1


def test_hard_drop_locks_and_scores(make_loop) -> None:
    loop = make_loop("tetris")
    session = loop.session
    _set_piece(session, 4, 4, 0)
    loop.rules.hard_drop(session)
    board = session.extra["board"]
    assert session.score == 36
    assert (board[18:20, 4:6] == 4).all()
    assert session.extra["piece"]["y"] == 0


def test_soft_drop_scores_one(running) -> None:
    loop = running("tetris")
    y = loop.session.extra["piece"]["y"]
    loop.input.press("soft_drop")
    loop.tick(0.016)
    assert loop.session.extra["piece"]["y"] == y + 1
    assert loop.session.score == 1


def test_gravity_is_time_based(running) -> None:
    loop = running("tetris")
    piece = loop.session.extra["piece"]
    y = piece["y"]
    loop.tick(0.5)
    assert piece["y"] == y
    loop.tick(0.6)
    assert piece["y"] == y + 1
    assert loop.session.extra["drop_counter"] == 0


def test_blocked_spawn_tops_out(running) -> None:
    loop = running("tetris")
    session = loop.session
    session.extra["board"][0:3, :9] = 1
    loop.rules.spawn_piece(session)
    assert session.extra["topped_out"]
    loop.tick(0.016)
    assert loop.state == SessionState.ENDED
    assert not session.outcome.won


def test_observation_shape(make_loop) -> None:
    loop = make_loop("tetris")
    obs = loop.rules.observe(loop.session)
    assert obs.shape == (15,)
    assert np.allclose(obs[:10], -1.0)
