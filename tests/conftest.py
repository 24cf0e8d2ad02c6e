from __future__ import annotations

import random

import pytest

from arcade_games.engine import GameLoop, ManualScheduler, MemoryStore, RecordingUi
from arcade_games.games import make_game


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def ui() -> RecordingUi:
    return RecordingUi()


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def make_loop(scheduler, ui, store):
    """Build a GameLoop for a named game wired to the test collaborators"""

    def _make(game: str, seed: int = 0, **overrides) -> GameLoop:
        rules = make_game(game, **overrides)
        return GameLoop(rules, scheduler=scheduler, ui=ui, store=store, seed=seed)

    return _make


@pytest.fixture()
def running(make_loop):
    """A started loop, ready for tick()"""

    def _make(game: str, seed: int = 0, **overrides) -> GameLoop:
        loop = make_loop(game, seed=seed, **overrides)
        assert loop.start()
        return loop

    return _make


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)
