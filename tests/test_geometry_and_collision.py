from __future__ import annotations

import random

from arcade_games.engine import (
    CollisionRule,
    Entity,
    Session,
    apply_effects,
    overlaps,
    resolve_collisions,
)
from arcade_games.engine.utils import circle_collide, clamp, make_rng, rect_overlap, vec_len


def test_clamp_and_vec_len() -> None:
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    assert clamp(2, 0, 3) == 2
    assert vec_len(3.0, 4.0) == 5.0
    assert vec_len(0.0, 0.0) == 0.0


def test_rect_overlap_is_symmetric() -> None:
    cases = [
        ((0, 0, 10, 10), (5, 5, 10, 10)),
        ((0, 0, 10, 10), (10, 0, 10, 10)),
        ((0, 0, 10, 10), (20, 20, 5, 5)),
        ((0, 0, 100, 2), (50, -5, 2, 20)),
    ]
    for a, b in cases:
        assert rect_overlap(*a, *b) == rect_overlap(*b, *a)


def test_touching_rectangles_do_not_overlap() -> None:
    assert not rect_overlap(0, 0, 10, 10, 10, 0, 10, 10)
    assert not rect_overlap(0, 0, 10, 10, 0, 10, 10, 10)
    assert rect_overlap(0, 0, 10, 10, 9.9, 0, 10, 10)


def test_exactly_touching_circles_do_not_overlap() -> None:
    assert not circle_collide(0, 0, 25, 40, 0, 15)
    assert circle_collide(0, 0, 25, 39.9, 0, 15)


def test_circle_rect_uses_bounding_box() -> None:
    ball = Entity(kind="ball", x=10, y=10, radius=5)
    # Box corner region: outside the disc but inside its bounding box
    brick = Entity(kind="brick", x=14, y=14, width=10, height=10)
    assert overlaps(ball, brick)
    assert overlaps(brick, ball)


def test_make_rng_is_seedable() -> None:
    a, b = make_rng(7), make_rng(7)
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]


def _session(*entities: Entity) -> Session:
    return Session(entities=list(entities), rng=random.Random(0))


def test_one_entity_pairs_with_every_partner() -> None:
    ball = Entity(kind="ball", x=0, y=0, width=10, height=10)
    bricks = [Entity(kind="brick", x=5, y=5 * i, width=10, height=4) for i in range(2)]
    far = Entity(kind="brick", x=100, y=100, width=10, height=10)
    session = _session(ball, *bricks, far)

    hits = []
    rule = CollisionRule("ball", "brick", effect=lambda s, a, b: hits.append(b))
    pairs = resolve_collisions(session, [rule])
    assert [p.b for p in pairs] == bricks

    apply_effects(session, pairs)
    assert hits == bricks


def test_resolve_runs_immediately_effects_are_deferred() -> None:
    ball = Entity(kind="ball", x=0, y=0, width=10, height=10, vy=-3)
    brick = Entity(kind="brick", x=0, y=5, width=10, height=10)
    session = _session(ball, brick)

    def kill(s, a, b):
        b.alive = False

    rule = CollisionRule("ball", "brick", resolve=lambda s, a, b: setattr(a, "vy", -a.vy), effect=kill)
    pairs = resolve_collisions(session, [rule])
    assert ball.vy == 3
    assert brick.alive

    apply_effects(session, pairs)
    assert not brick.alive


def test_effects_still_apply_after_participant_dies() -> None:
    bullet = Entity(kind="bullet", x=0, y=0, width=10, height=10)
    aliens = [Entity(kind="alien", x=2, y=2, width=4, height=4, points=10) for _ in range(2)]
    session = _session(bullet, *aliens)

    def shot(s, b, a):
        b.alive = False
        a.alive = False
        s.add_score(a.points)

    pairs = resolve_collisions(session, [CollisionRule("bullet", "alien", effect=shot)])
    apply_effects(session, pairs)
    assert session.score == 20
    assert not any(a.alive for a in aliens)


def test_dead_entities_are_not_paired() -> None:
    ball = Entity(kind="ball", x=0, y=0, width=10, height=10)
    brick = Entity(kind="brick", x=0, y=0, width=10, height=10, alive=False)
    session = _session(ball, brick)
    assert resolve_collisions(session, [CollisionRule("ball", "brick", effect=lambda *a: None)]) == []
