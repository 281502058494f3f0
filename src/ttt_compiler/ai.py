"""
Play-time AI backed by a compiled table.

Moves are recomputed through the rule adapter and ranked with the same
policy the compiler used, so `get_move` agrees with the table's best child.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from .compilation import Compilation
from .errors import ConfigurationError, NoLegalMoveError
from .graph import TEAM_A, TEAM_B, CompiledTable, move_rank


class AI:

    def __init__(self, compilation: Compilation) -> None:
        self.compilation = compilation
        self.table: Optional[CompiledTable] = None

    def load(self, table: CompiledTable) -> None:
        self.table = table

    def _require_table(self) -> CompiledTable:
        if self.table is None:
            raise ConfigurationError("AI has no compiled table; call load() first")
        return self.table

    def value_of(self, state_id: int) -> int:
        return self._require_table().value(state_id)

    def ranked_moves(self, state_id: int, team: int) -> List[Tuple[int, int, int]]:
        """(child, value for `team`, plies to end) from best to worst."""
        table = self._require_table()
        if team not in (TEAM_A, TEAM_B):
            raise NoLegalMoveError(state_id, team, "unknown team")
        if self.compilation.get_winner(state_id) != 0:
            raise NoLegalMoveError(state_id, team, "game already has a winner")
        candidates = self.compilation.get_child_states(state_id, team)
        if not candidates:
            raise NoLegalMoveError(state_id, team, "board is full")
        scored = []
        for child_id in candidates:
            q = -table.value(child_id)
            plies = table.plies_to_end(child_id) + 1
            scored.append((move_rank(q, plies, child_id), child_id, q, plies))
        scored.sort()
        return [(child_id, q, plies) for _, child_id, q, plies in scored]

    def get_move(self, state_id: int, team: int) -> int:
        return self.ranked_moves(state_id, team)[0][0]
