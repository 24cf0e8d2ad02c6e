"""
Shape tests and data-driven collision rules
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .entities import Entity
from .session import Session
from .utils import circle_collide, rect_overlap

Resolver = Callable[[Session, Entity, Entity], None]
ShapeTest = Callable[[Entity, Entity], bool]


def overlaps(a: Entity, b: Entity) -> bool:
    """Circle/circle is exact; anything with a rectangle uses bounding boxes"""
    if a.shape == "circle" and b.shape == "circle":
        return circle_collide(a.x, a.y, a.radius, b.x, b.y, b.radius)
    return rect_overlap(*a.bounds(), *b.bounds())


def reflect(entity: Entity, axis: str):
    """Elastic bounce: flip the velocity component on the axis of impact"""
    if axis == "x":
        entity.vx = -entity.vx
    else:
        entity.vy = -entity.vy


@dataclass(frozen=True)
class CollisionRule:
    kind_a: str
    kind_b: str
    resolve: Optional[Resolver] = None
    effect: Optional[Resolver] = None
    test: ShapeTest = overlaps


@dataclass(frozen=True)
class CollisionPair:
    a: Entity
    b: Entity
    effect: Resolver


def find_pairs(entities: Sequence[Entity], rule: CollisionRule) -> List[tuple]:
    pairs = []
    for a in entities:
        if not a.alive or a.kind != rule.kind_a:
            continue
        for b in entities:
            if b is a or not b.alive or b.kind != rule.kind_b:
                continue
            if rule.test(a, b):
                pairs.append((a, b))
    return pairs


def resolve_collisions(session: Session, rules: Sequence[CollisionRule]) -> List[CollisionPair]:
    """Run every rule in table order, resolving contacts immediately.

    Entities are scanned in stable list order and an entity may be resolved
    against several partners in one tick. Effects are collected, not applied.
    """
    results: List[CollisionPair] = []
    for rule in rules:
        for a, b in find_pairs(session.entities, rule):
            if rule.resolve is not None:
                rule.resolve(session, a, b)
            if rule.effect is not None:
                results.append(CollisionPair(a, b, rule.effect))
    return results


def apply_effects(session: Session, pairs: Sequence[CollisionPair]):
    # Entities marked not-live by an earlier pair still get their later pairs
    for pair in pairs:
        pair.effect(session, pair.a, pair.b)
