"""
Memory (pairs)
--------------
Cards are shuffled with the session rng and laid out on a grid. Two face-up
cards count as one move and are compared after reveal_seconds; the game is won
win_delay_seconds after the last pair matches. The best time per difficulty is
stored, lower is better.
"""

from __future__ import annotations

import math
import random
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..configs.game_config import MEMORY_COLUMNS, MEMORY_SYMBOLS
from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session

FACE_DOWN_COLOR = (58, 134, 255)
FACE_UP_COLOR = (255, 190, 11)
MATCHED_COLOR = (6, 255, 165)

CURSOR_MOVES = {"left": (-1, 0), "right": (1, 0), "up": (0, -1), "down": (0, 1)}


def format_time(seconds: float) -> str:
    seconds = int(seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"


class MemoryRules(GameRules):
    name = "memory"
    actions = ("left", "right", "up", "down", "select")
    higher_is_better = False
    observation_size = 8

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        difficulty: str = "easy",
        card_width: float = 90,
        card_height: float = 90,
        card_gap: float = 12,
        reveal_seconds: float = 0.8,
        win_delay_seconds: float = 0.5,
        best_key_prefix: str = "memoryBestTime_",
    ):
        assert difficulty in MEMORY_SYMBOLS, f"Unknown difficulty: {difficulty}"
        super().__init__(width=width, height=height, best_key=best_key_prefix + difficulty)
        self.difficulty = difficulty
        self.symbols = MEMORY_SYMBOLS[difficulty]
        self.columns = MEMORY_COLUMNS[difficulty]
        self.total_pairs = len(self.symbols)
        self.rows = math.ceil(2 * self.total_pairs / self.columns)
        self.card_gap = card_gap
        self.reveal_seconds = reveal_seconds
        self.win_delay_seconds = win_delay_seconds

        # Shrink cards when the grid would not fit the playfield
        fit_w = (width - card_gap * (self.columns + 1)) / self.columns
        fit_h = (height - card_gap * (self.rows + 1)) / self.rows
        self.card_width = min(card_width, fit_w)
        self.card_height = min(card_height, fit_h)
        self.origin = (
            (width - self.columns * (self.card_width + card_gap) + card_gap) / 2,
            (height - self.rows * (self.card_height + card_gap) + card_gap) / 2,
        )

    # ----------------------------
    # Setup
    # ----------------------------

    def new_session(self, rng: random.Random) -> Session:
        deck = list(self.symbols) * 2
        rng.shuffle(deck)
        cards = []
        for index, symbol in enumerate(deck):
            row, col = divmod(index, self.columns)
            card = Entity(
                kind="card",
                x=self.origin[0] + col * (self.card_width + self.card_gap),
                y=self.origin[1] + row * (self.card_height + self.card_gap),
                width=self.card_width,
                height=self.card_height,
                color=FACE_DOWN_COLOR,
            )
            card.data.update(index=index, symbol=symbol, face_up=False, matched=False)
            cards.append(card)
        session = Session(entities=cards, lives=0, rng=rng)
        session.extra.update(
            flipped=[], moves=0, pairs=0, cursor=0,
            check_at=None, win_at=None, finished_at=None,
        )
        return session

    def cards(self, session: Session) -> List[Entity]:
        return list(session.live("card"))

    def card_at(self, session: Session, point: Tuple[float, float]) -> Optional[int]:
        px, py = point
        for card in session.live("card"):
            if card.x <= px < card.x + card.width and card.y <= py < card.y + card.height:
                return card.data["index"]
        return None

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        n = 2 * self.total_pairs
        cursor = session.extra["cursor"]
        for action, (dx, dy) in CURSOR_MOVES.items():
            if inputs.was_pressed(action):
                row, col = divmod(cursor, self.columns)
                col = (col + dx) % self.columns
                row = (row + dy) % self.rows
                cursor = min(row * self.columns + col, n - 1)

        hovered = None
        if inputs.pointer_moved and inputs.pointer is not None:
            hovered = self.card_at(session, inputs.pointer)
            if hovered is not None:
                cursor = hovered
        session.extra["cursor"] = cursor

        if inputs.was_pressed("select"):
            # A click that missed every card selects nothing
            if inputs.pointer_moved and hovered is None:
                return
            self.flip(session, cursor)

    def flip(self, session: Session, index: int) -> bool:
        extra = session.extra
        if extra["check_at"] is not None or extra["win_at"] is not None:
            return False
        if len(extra["flipped"]) >= 2:
            return False
        card = self.cards(session)[index]
        if card.data["face_up"] or card.data["matched"]:
            return False

        card.data["face_up"] = True
        card.color = FACE_UP_COLOR
        extra["flipped"].append(index)
        if len(extra["flipped"]) == 2:
            extra["moves"] += 1
            extra["check_at"] = session.elapsed + self.reveal_seconds
        return True

    def apply_forces(self, session: Session, scale: float):
        # Reveal timer
        extra = session.extra
        if extra["check_at"] is None or session.elapsed < extra["check_at"]:
            return
        extra["check_at"] = None
        cards = self.cards(session)
        first, second = (cards[i] for i in extra["flipped"])
        extra["flipped"] = []
        if first.data["symbol"] == second.data["symbol"]:
            for card in (first, second):
                card.data["matched"] = True
                card.color = MATCHED_COLOR
            extra["pairs"] += 1
            session.add_score(1)
            if extra["pairs"] == self.total_pairs:
                extra["win_at"] = session.elapsed + self.win_delay_seconds
        else:
            for card in (first, second):
                card.data["face_up"] = False
                card.color = FACE_DOWN_COLOR

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        win_at = session.extra["win_at"]
        if win_at is not None and session.elapsed >= win_at:
            session.extra["finished_at"] = session.elapsed
            return Outcome(won=True, score=session.score,
                           message=f"Solved in {session.extra['moves']} moves, "
                                   f"{format_time(session.elapsed)}")
        return None

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def best_candidate(self, session: Session) -> Optional[float]:
        if session.outcome is None or not session.outcome.won:
            return None
        return math.floor(session.extra["finished_at"])

    def format_best(self, value: Optional[float]) -> str:
        return "--:--" if value is None else format_time(value)

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            "moves": str(session.extra["moves"]),
            "pairs": f"{session.extra['pairs']} / {self.total_pairs}",
            "time": format_time(session.elapsed),
        }

    def render_entities(self, session: Session):
        cursor = session.extra["cursor"]
        for card in session.live("card"):
            label = card.data["symbol"] if card.data["face_up"] or card.data["matched"] else ""
            shown = Entity(kind="card", x=card.x, y=card.y, width=card.width,
                           height=card.height, color=card.color)
            shown.data.update(label=label, selected=card.data["index"] == cursor)
            yield shown

    def observe(self, session: Session) -> np.ndarray:
        extra = session.extra
        n = 2 * self.total_pairs
        row, col = divmod(extra["cursor"], self.columns)
        cards = self.cards(session)
        cursor_card = cards[extra["cursor"]]
        return np.array([
            col / max(1, self.columns - 1) * 2 - 1,
            row / max(1, self.rows - 1) * 2 - 1,
            1.0 if cursor_card.data["face_up"] else -1.0,
            1.0 if cursor_card.data["matched"] else -1.0,
            len(extra["flipped"]) - 1.0,
            extra["pairs"] / self.total_pairs * 2 - 1,
            min(extra["moves"] / n, 1.0) * 2 - 1,
            min(session.elapsed / 300.0, 1.0) * 2 - 1,
        ], dtype=np.float32)
