"""
Tic-tac-toe rules on an n x n board, expressed directly on StateIds.
Teaching notes:
- Lines are scanned as (start cell, stride) pairs derived from the size:
  rows step 1 and start every `size` cells, columns step `size`, the main
  diagonal steps `size + 1` from cell 0 and the anti-diagonal steps
  `size - 1` from cell `size - 1`.
- A line wins only when all n digits are equal and nonzero. A full board
  without such a line reports no winner; the compiler classifies it as a draw.
"""
from __future__ import annotations

from typing import List

from . import codec
from .compilation import Compilation
from .errors import ConfigurationError

DEFAULT_SIZE = 3


def _line_owner(state_id: int, start: int, stride: int, size: int) -> int:
    pw = codec.powers(size)
    team = (state_id // pw[start]) % 3
    if team == 0:
        return 0
    for k in range(1, size):
        if (state_id // pw[start + k * stride]) % 3 != team:
            return 0
    return team


def get_winner_row(state_id: int, size: int) -> int:
    for r in range(size):
        team = _line_owner(state_id, r * size, 1, size)
        if team:
            return team
    return 0


def get_winner_col(state_id: int, size: int) -> int:
    for c in range(size):
        team = _line_owner(state_id, c, size, size)
        if team:
            return team
    return 0


def get_winner_diag(state_id: int, size: int) -> int:
    team = _line_owner(state_id, 0, size + 1, size)
    if team:
        return team
    return _line_owner(state_id, size - 1, size - 1, size)


def get_winner(state_id: int, size: int = DEFAULT_SIZE) -> int:
    return (
        get_winner_row(state_id, size)
        or get_winner_col(state_id, size)
        or get_winner_diag(state_id, size)
    )


def get_child_states(state_id: int, team: int, size: int = DEFAULT_SIZE) -> List[int]:
    states: List[int] = []
    n = state_id
    for p in codec.powers(size):
        if n % 3 == 0:
            states.append(state_id + team * p)
        n //= 3
    return states


def get_parent_states(state_id: int, team: int, size: int = DEFAULT_SIZE) -> List[int]:
    states: List[int] = []
    n = state_id
    for p in codec.powers(size):
        if n % 3 == team:
            states.append(state_id - team * p)
        n //= 3
    return states


class TicTacToeCompilation(Compilation):
    """Rule adapter for n-in-a-row on an n x n board."""

    def __init__(self, size: int = DEFAULT_SIZE) -> None:
        super().__init__()
        self.board_size = DEFAULT_SIZE
        self.set_board_size(size)

    def set_board_size(self, size: int) -> None:
        if not isinstance(size, int) or size < 1:
            raise ConfigurationError("Board size must be a positive integer", context={"size": size})
        if self.nodes:
            raise ConfigurationError(
                "Cannot change board size while the graph store is populated",
                context={"size": size, "nodes": len(self.nodes)},
            )
        self.board_size = size

    def get_winner(self, state_id: int) -> int:
        return get_winner(state_id, self.board_size)

    def get_child_states(self, state_id: int, team: int) -> List[int]:
        return get_child_states(state_id, team, self.board_size)

    def get_parent_states(self, state_id: int, team: int) -> List[int]:
        return get_parent_states(state_id, team, self.board_size)

    def is_full(self, state_id: int) -> bool:
        return codec.is_full(state_id, self.board_size)

    def state_space_size(self) -> int:
        return codec.state_space_size(self.board_size)

    def reset(self) -> None:
        super().reset()
        self.board_size = DEFAULT_SIZE
