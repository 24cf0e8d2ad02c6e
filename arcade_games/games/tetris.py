"""
Tetris on a numpy board
-----------------------
The board is a (rows, cols) int array: 0 is empty, 1..7 the tetromino that
locked there. The falling piece lives in session.extra, not in the board,
until it locks. Gravity is time based (milliseconds) so this game runs with a
variable delta.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session

PIECE_NAMES = " IJLOSTZ"

SHAPES = [
    None,
    [[1, 1, 1, 1]],
    [[2, 0, 0], [2, 2, 2]],
    [[0, 0, 3], [3, 3, 3]],
    [[4, 4], [4, 4]],
    [[0, 5, 5], [5, 5, 0]],
    [[0, 6, 0], [6, 6, 6]],
    [[7, 7, 0], [0, 7, 7]],
]

COLORS = [
    (0, 0, 0),
    (255, 0, 110),
    (131, 56, 236),
    (58, 134, 255),
    (255, 190, 11),
    (6, 255, 165),
    (251, 86, 7),
    (255, 0, 110),
]


class TetrisRules(GameRules):
    name = "tetris"
    actions = ("left", "right", "rotate", "soft_drop", "hard_drop")

    def __init__(
        self,
        cols: int = 10,
        rows: int = 20,
        block_size: int = 30,
        base_drop_ms: float = 1000,
        drop_step_ms: float = 100,
        min_drop_ms: float = 100,
        lines_per_level: int = 10,
        line_points: Tuple[int, ...] = (0, 100, 300, 500, 800),
        soft_drop_points: int = 1,
        hard_drop_points: int = 2,
        best_key: Optional[str] = None,
    ):
        super().__init__(width=cols * block_size, height=rows * block_size,
                         variable_delta=True, best_key=best_key)
        assert cols >= 4 and rows >= 4, "Board too small for a tetromino"
        assert len(line_points) == 5, "Need points for 0..4 cleared lines"
        self.cols = cols
        self.rows = rows
        self.block_size = block_size
        self.base_drop_ms = base_drop_ms
        self.drop_step_ms = drop_step_ms
        self.min_drop_ms = min_drop_ms
        self.lines_per_level = lines_per_level
        self.line_points = line_points
        self.soft_drop_points = soft_drop_points
        self.hard_drop_points = hard_drop_points
        self.observation_size = cols + 5

    # ----------------------------
    # Pieces and board
    # ----------------------------

    def new_session(self, rng: random.Random) -> Session:
        session = Session(entities=[], lives=1, rng=rng)
        session.extra["board"] = np.zeros((self.rows, self.cols), dtype=np.int8)
        session.extra["lines"] = 0
        session.extra["drop_counter"] = 0.0
        session.extra["drop_interval"] = float(self.base_drop_ms)
        session.extra["topped_out"] = False
        session.extra["next"] = self.create_piece(rng)
        self.spawn_piece(session)
        return session

    def create_piece(self, rng: random.Random) -> Dict:
        kind = rng.randint(1, 7)
        shape = np.array(SHAPES[kind], dtype=np.int8)
        return {
            "kind": kind,
            "shape": shape,
            "x": self.cols // 2 - shape.shape[1] // 2,
            "y": 0,
        }

    def spawn_piece(self, session: Session):
        piece = session.extra["next"]
        session.extra["piece"] = piece
        session.extra["next"] = self.create_piece(session.rng)
        if self.collides(session.extra["board"], piece["shape"], piece["x"], piece["y"]):
            session.extra["topped_out"] = True

    def collides(self, board: np.ndarray, shape: np.ndarray, x: int, y: int) -> bool:
        """True when shape at (x, y) leaves the well or overlaps a locked cell"""
        for r, c in zip(*np.nonzero(shape)):
            bx, by = x + c, y + r
            if bx < 0 or bx >= self.cols or by >= self.rows:
                return True
            if by >= 0 and board[by, bx]:
                return True
        return False

    def move(self, session: Session, dx: int) -> bool:
        piece = session.extra["piece"]
        if self.collides(session.extra["board"], piece["shape"], piece["x"] + dx, piece["y"]):
            return False
        piece["x"] += dx
        return True

    def rotate(self, session: Session) -> bool:
        """Clockwise rotation in place; rejected if it would collide"""
        piece = session.extra["piece"]
        rotated = np.rot90(piece["shape"], -1)
        if self.collides(session.extra["board"], rotated, piece["x"], piece["y"]):
            return False
        piece["shape"] = rotated
        return True

    def drop(self, session: Session) -> bool:
        """Move the piece down one row. Locks and spawns when it cannot move."""
        piece = session.extra["piece"]
        if not self.collides(session.extra["board"], piece["shape"], piece["x"], piece["y"] + 1):
            piece["y"] += 1
            return True
        self.merge(session)
        self.clear_lines(session)
        self.spawn_piece(session)
        return False

    def hard_drop(self, session: Session):
        while not session.extra["topped_out"] and self.drop(session):
            session.add_score(self.hard_drop_points)

    def merge(self, session: Session):
        board = session.extra["board"]
        piece = session.extra["piece"]
        for r, c in zip(*np.nonzero(piece["shape"])):
            by, bx = piece["y"] + r, piece["x"] + c
            if by >= 0:
                board[by, bx] = piece["kind"]

    def clear_lines(self, session: Session) -> int:
        board = session.extra["board"]
        full = np.all(board != 0, axis=1)
        cleared = int(full.sum())
        if cleared == 0:
            return 0
        kept = board[~full]
        session.extra["board"] = np.vstack([
            np.zeros((cleared, self.cols), dtype=board.dtype), kept,
        ])
        session.extra["lines"] += cleared
        session.add_score(self.line_points[min(cleared, 4)] * session.level)
        session.level = session.extra["lines"] // self.lines_per_level + 1
        session.extra["drop_interval"] = max(
            self.min_drop_ms, self.base_drop_ms - (session.level - 1) * self.drop_step_ms)
        return cleared

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        if inputs.was_pressed("left"):
            self.move(session, -1)
        if inputs.was_pressed("right"):
            self.move(session, 1)
        if inputs.was_pressed("rotate"):
            self.rotate(session)
        if inputs.was_pressed("soft_drop") and not session.extra["topped_out"]:
            if self.drop(session):
                session.add_score(self.soft_drop_points)
            session.extra["drop_counter"] = 0.0
        if inputs.was_pressed("hard_drop") and not session.extra["topped_out"]:
            self.hard_drop(session)

    def integrate(self, session: Session, scale: float):
        if session.extra["topped_out"]:
            return
        # scale is dt * tick_rate, so this adds dt in milliseconds
        session.extra["drop_counter"] += scale * 1000.0 / self.tick_rate
        if session.extra["drop_counter"] > session.extra["drop_interval"]:
            self.drop(session)
            session.extra["drop_counter"] = 0.0

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        if session.extra["topped_out"]:
            return Outcome(won=False, score=session.score, message="Game Over")
        return None

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            "score": str(session.score),
            "level": str(session.level),
            "lines": str(session.extra["lines"]),
            "next": PIECE_NAMES[session.extra["next"]["kind"]],
        }

    def _cell(self, col: int, row: int, kind: int) -> Entity:
        b = self.block_size
        return Entity(kind="block", x=col * b + 1, y=row * b + 1, width=b - 2, height=b - 2,
                      color=COLORS[kind])

    def render_entities(self, session: Session) -> List[Entity]:
        board = session.extra["board"]
        cells = [self._cell(c, r, board[r, c]) for r, c in zip(*np.nonzero(board))]
        piece = session.extra["piece"]
        for r, c in zip(*np.nonzero(piece["shape"])):
            if piece["y"] + r >= 0:
                cells.append(self._cell(piece["x"] + c, piece["y"] + r, piece["kind"]))
        return cells

    def column_heights(self, board: np.ndarray) -> np.ndarray:
        filled = board != 0
        first = np.where(filled.any(axis=0), filled.argmax(axis=0), self.rows)
        return self.rows - first

    def observe(self, session: Session) -> np.ndarray:
        board = session.extra["board"]
        heights = self.column_heights(board)
        # A hole is an empty cell with a filled cell somewhere above it
        holes = int(sum(
            np.count_nonzero(board[self.rows - h:, c] == 0) for c, h in enumerate(heights)
        ))
        piece = session.extra["piece"]
        obs = list(heights / self.rows * 2 - 1)
        obs += [
            min(holes / self.cols, 1.0) * 2 - 1,
            piece["kind"] / 7.0 * 2 - 1,
            piece["x"] / self.cols * 2 - 1,
            piece["y"] / self.rows * 2 - 1,
            session.extra["next"]["kind"] / 7.0 * 2 - 1,
        ]
        return np.array(obs, dtype=np.float32)
