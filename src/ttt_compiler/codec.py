"""
State codec: board <-> StateId.
Teaching notes:
- A board is a flat list of n*n cells: 0=empty, 1=X (team A), 2=O (team B).
- Cell i is the i-th base-3 digit of the StateId, so
  StateId = sum(cell_i * 3**i) and the empty board is 0.
- Placing team t on empty cell i adds t * 3**i; no other digit changes.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .errors import OccupiedCellError

MARKS = (0, 1, 2)
TEAMS = (1, 2)


@lru_cache(maxsize=None)
def powers(size: int) -> Tuple[int, ...]:
    return tuple(3 ** i for i in range(size * size))


def state_space_size(size: int) -> int:
    return 3 ** (size * size)


def encode(board: Sequence[int]) -> int:
    state_id = 0
    for i, mark in enumerate(board):
        if mark not in MARKS:
            raise ValueError(f"Invalid mark {mark!r} at cell {i}")
        state_id += int(mark) * 3 ** i
    return state_id


def decode(state_id: int, size: int = 3) -> List[int]:
    if state_id < 0 or state_id >= state_space_size(size):
        raise ValueError(f"StateId {state_id} out of range for a {size}x{size} board")
    board: List[int] = []
    n = state_id
    for _ in range(size * size):
        board.append(n % 3)
        n //= 3
    return board


def digit(state_id: int, index: int) -> int:
    return (state_id // 3 ** index) % 3


def place(state_id: int, index: int, team: int, size: int = 3) -> int:
    """Return the StateId after `team` marks cell `index`."""
    if not 0 <= index < size * size:
        raise ValueError(f"Cell index {index} out of range for a {size}x{size} board")
    if team not in TEAMS:
        raise ValueError(f"Invalid team {team!r}")
    if digit(state_id, index) != 0:
        raise OccupiedCellError(state_id, index)
    return state_id + team * 3 ** index


def is_full(state_id: int, size: int = 3) -> bool:
    n = state_id
    for _ in range(size * size):
        if n % 3 == 0:
            return False
        n //= 3
    return True


def serialize_board(board: Sequence[int]) -> str:
    return ''.join(str(cell) for cell in board)


def deserialize_board(board_str: str, size: int = 3) -> List[int]:
    raw = board_str.strip()
    if len(raw) != size * size or any(c not in "012" for c in raw):
        raise ValueError(f"Board must be {size * size} chars of 0/1/2")
    return [int(c) for c in raw]


def decode_many(state_ids: Iterable[int], size: int = 3) -> np.ndarray:
    """Vectorised decode: one row of cells per StateId."""
    ids = np.fromiter(state_ids, dtype=np.int64)
    digits = ids[:, None] // np.array(powers(size), dtype=np.int64)[None, :]
    return (digits % 3).astype(np.int8)
