from __future__ import annotations

from collections import Counter

import pytest

from arcade_games.engine import SessionState
from arcade_games.games.memory import format_time


def _pairs(session):
    """Card indices grouped by symbol"""
    groups = {}
    for card in session.live("card"):
        groups.setdefault(card.data["symbol"], []).append(card.data["index"])
    return list(groups.values())


def test_deck_holds_each_symbol_twice(make_loop) -> None:
    loop = make_loop("memory")
    symbols = Counter(c.data["symbol"] for c in loop.session.live("card"))
    assert len(symbols) == 8
    assert set(symbols.values()) == {2}


def test_seeded_shuffle_is_reproducible(make_loop) -> None:
    a = [c.data["symbol"] for c in make_loop("memory", seed=5).session.live("card")]
    b = [c.data["symbol"] for c in make_loop("memory", seed=5).session.live("card")]
    assert a == b


@pytest.mark.parametrize("difficulty, cards", [("easy", 16), ("medium", 24), ("hard", 36)])
def test_cards_fit_the_playfield(make_loop, difficulty, cards) -> None:
    loop = make_loop("memory", difficulty=difficulty)
    rules = loop.rules
    assert loop.session.count("card") == cards
    for card in loop.session.live("card"):
        assert card.x >= 0 and card.x + card.width <= rules.width
        assert card.y >= 0 and card.y + card.height <= rules.height


def test_matching_pair(running) -> None:
    loop = running("memory")
    first, second = _pairs(loop.session)[0]
    assert loop.rules.flip(loop.session, first)
    assert loop.rules.flip(loop.session, second)
    assert loop.session.extra["moves"] == 1
    loop.tick(1.0)
    cards = loop.rules.cards(loop.session)
    assert cards[first].data["matched"] and cards[second].data["matched"]
    assert loop.session.extra["pairs"] == 1
    assert loop.ui.texts["pairs"] == "1 / 8"


def test_mismatch_flips_back(running) -> None:
    loop = running("memory")
    groups = _pairs(loop.session)
    first, second = groups[0][0], groups[1][0]
    loop.rules.flip(loop.session, first)
    loop.rules.flip(loop.session, second)
    cards = loop.rules.cards(loop.session)
    # Still showing before the reveal delay runs out
    loop.tick(0.5)
    assert cards[first].data["face_up"]
    loop.tick(0.5)
    assert not cards[first].data["face_up"]
    assert not cards[second].data["face_up"]
    assert loop.session.extra["pairs"] == 0


def test_no_third_card_while_two_are_up(running) -> None:
    loop = running("memory")
    groups = _pairs(loop.session)
    loop.rules.flip(loop.session, groups[0][0])
    loop.rules.flip(loop.session, groups[1][0])
    assert not loop.rules.flip(loop.session, groups[2][0])


def test_face_up_card_cannot_be_flipped_again(running) -> None:
    loop = running("memory")
    index = _pairs(loop.session)[0][0]
    assert loop.rules.flip(loop.session, index)
    assert not loop.rules.flip(loop.session, index)
    assert loop.session.extra["moves"] == 0


def _solve(loop):
    for first, second in _pairs(loop.session):
        loop.rules.flip(loop.session, first)
        loop.rules.flip(loop.session, second)
        loop.tick(1.0)
    loop.tick(1.0)


def test_win_records_best_time(running, store) -> None:
    loop = running("memory")
    _solve(loop)
    assert loop.state == SessionState.ENDED
    assert loop.session.outcome.won
    assert store.get("memoryBestTime_easy") == 9
    assert loop.ui.texts["best"] == "0:09"
    assert loop.ui.is_visible("win-screen")


def test_slower_win_keeps_best_time(running, store) -> None:
    store.set("memoryBestTime_easy", 5)
    loop = running("memory")
    _solve(loop)
    assert store.get("memoryBestTime_easy") == 5


def test_click_on_card_flips_it(running) -> None:
    loop = running("memory")
    card = loop.rules.cards(loop.session)[0]
    cx, cy = card.center()
    loop.input.click(cx, cy)
    loop.tick()
    assert card.data["face_up"]


def test_click_off_the_cards_does_nothing(running) -> None:
    loop = running("memory")
    loop.input.click(5, 5)
    loop.tick()
    assert not any(c.data["face_up"] for c in loop.session.live("card"))


def test_keyboard_cursor(running) -> None:
    loop = running("memory")
    loop.input.press("left")
    loop.tick()
    # Wraps to the last column of the first row
    assert loop.session.extra["cursor"] == 3
    loop.input.press("select")
    loop.tick()
    assert loop.rules.cards(loop.session)[3].data["face_up"]


def test_format_time() -> None:
    assert format_time(9) == "0:09"
    assert format_time(125.7) == "2:05"
