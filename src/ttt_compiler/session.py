"""
Headless game session: the application layer around the compiled AI.

Human moves go through the codec and the winner check directly; the AI is
consulted only when it is its turn and the game is not over.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from . import codec
from .ai import AI
from .compiler import compile_game
from .errors import GameOverError
from .graph import TEAM_A, TEAM_NAMES, CompiledTable, opponent
from .rules import DEFAULT_SIZE, TicTacToeCompilation


class Mode(Enum):
    TWO_PLAYER = "two_player"
    COMPUTER = "computer"


class GameSession:

    def __init__(self, ai: AI, size: int = DEFAULT_SIZE, mode: Mode = Mode.TWO_PLAYER,
                 ai_team: int = TEAM_A) -> None:
        self.ai = ai
        self.size = size
        self.mode = mode
        self.ai_team = ai_team
        self.board: List[int] = [0] * (size * size)
        self.turn = TEAM_A
        self.turn_count = 0
        self.state_id = 0
        self.winner: Optional[int] = None
        self.make_ai_turn()

    @classmethod
    def start(cls, size: int = DEFAULT_SIZE, **kwargs) -> "GameSession":
        """Compile the game for `size` and return a session with a loaded AI."""
        compilation = TicTacToeCompilation(size)
        table = compile_game(compilation)
        return cls.from_table(compilation, table, **kwargs)

    @classmethod
    def from_table(cls, compilation: TicTacToeCompilation, table: CompiledTable,
                   **kwargs) -> "GameSession":
        ai = AI(compilation)
        ai.load(table)
        return cls(ai, size=compilation.board_size, **kwargs)

    @property
    def cells(self) -> int:
        return self.size * self.size

    @property
    def is_draw(self) -> bool:
        return self.winner is None and self.turn_count >= self.cells

    @property
    def is_over(self) -> bool:
        return self.winner is not None or self.turn_count >= self.cells

    def restart(self) -> None:
        self.turn = TEAM_A
        self.turn_count = 0
        self.state_id = 0
        self.winner = None
        self.board = [0] * self.cells
        self.make_ai_turn()

    def toggle_mode(self) -> None:
        self.mode = Mode.COMPUTER if self.mode == Mode.TWO_PLAYER else Mode.TWO_PLAYER
        self.restart()

    def toggle_ai_team(self) -> None:
        self.ai_team = opponent(self.ai_team)
        self.restart()

    def is_ai_turn(self) -> bool:
        return self.mode == Mode.COMPUTER and self.turn == self.ai_team and not self.is_over

    def make_ai_turn(self) -> None:
        if not self.is_ai_turn():
            return
        state_id = self.ai.get_move(self.state_id, self.ai_team)
        logging.debug("ai team=%s move %d -> %d", TEAM_NAMES[self.ai_team], self.state_id, state_id)
        self.board = codec.decode(state_id, self.size)
        self._advance(state_id)

    def play(self, index: int) -> None:
        """Place the side-to-move's mark at `index`, then let the AI reply."""
        if self.is_over:
            raise GameOverError("Game is already over", context={"state_id": self.state_id})
        state_id = codec.place(self.state_id, index, self.turn, self.size)
        self.board[index] = self.turn
        self._advance(state_id)
        self.make_ai_turn()

    def _advance(self, state_id: int) -> None:
        self.state_id = state_id
        self.turn = opponent(self.turn)
        self.turn_count += 1
        winner = self.ai.compilation.get_winner(state_id)
        if winner != 0:
            self.winner = winner

    def render(self) -> str:
        marks = {0: ".", 1: TEAM_NAMES[1], 2: TEAM_NAMES[2]}
        rows = []
        for r in range(self.size):
            row = self.board[r * self.size:(r + 1) * self.size]
            rows.append(" ".join(marks[v] for v in row))
        return "\n".join(rows)
