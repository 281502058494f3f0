"""
Graph records shared by the compiler and the AI engine.

Teaching notes:
- Nodes are keyed and linked purely by integer StateId. Successors and
  predecessors are recomputed through the rule adapter, never stored.
- Values are from the perspective of the team to move at that state:
  +1 win, 0 draw, -1 loss under optimal play.
- Ranking policy (shared by compiler and AI):
  prefer win over draw over loss; among wins and draws prefer fewer plies
  to termination; among losses prefer more plies (delay the loss);
  remaining ties go to the lowest StateId.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple

from .errors import MissingNodeError

NONE = 0
TEAM_A = 1
TEAM_B = 2
DRAW = 3

TEAM_NAMES = {TEAM_A: "X", TEAM_B: "O"}


def opponent(team: int) -> int:
    return TEAM_B if team == TEAM_A else TEAM_A


def terminal_value(winner: int, team: int) -> int:
    """Value of a terminal state for the team that would move next."""
    if winner == DRAW:
        return 0
    return 1 if winner == team else -1


def move_rank(q: int, plies: int, state_id: int) -> Tuple[int, int, int]:
    # smaller sorts first
    return (-q, plies if q >= 0 else -plies, state_id)


@dataclass
class Node:
    state_id: int
    team: int
    winner: int = NONE
    scored: bool = False
    value: Optional[int] = None
    plies_to_end: Optional[int] = None
    best_child: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.winner != NONE


def _frozen(d: Mapping) -> Mapping:
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class CompiledTable:
    """Read-only StateId -> value snapshot consumed by the AI engine."""

    size: Optional[int]
    values: Mapping[int, int] = field(default_factory=dict)
    plies: Mapping[int, int] = field(default_factory=dict)
    best: Mapping[int, Optional[int]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", _frozen(self.values))
        object.__setattr__(self, "plies", _frozen(self.plies))
        object.__setattr__(self, "best", _frozen(self.best))

    def __contains__(self, state_id: object) -> bool:
        return state_id in self.values

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)

    def value(self, state_id: int) -> int:
        try:
            return self.values[state_id]
        except KeyError:
            raise MissingNodeError(state_id) from None

    def plies_to_end(self, state_id: int) -> int:
        try:
            return self.plies[state_id]
        except KeyError:
            raise MissingNodeError(state_id) from None

    def best_move(self, state_id: int) -> Optional[int]:
        try:
            return self.best[state_id]
        except KeyError:
            raise MissingNodeError(state_id) from None

    def is_terminal(self, state_id: int) -> bool:
        return self.best_move(state_id) is None
