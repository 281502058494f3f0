"""
Error hierarchy for the compiler, the AI engine and the game session.

Contract violations and non-convergence are fatal at startup: the
application has no degraded mode without a compiled table.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "TTTCompilerError",
    "ConfigurationError",
    "ContractViolationError",
    "DuplicateNodeError",
    "MissingNodeError",
    "OccupiedCellError",
    "NonConvergenceError",
    "NoLegalMoveError",
    "GameOverError",
]


class TTTCompilerError(Exception):
    """Base exception for all errors raised by this package.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra key/value details (state ids, counters)
    """
    code: str = "TTT_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"


class ConfigurationError(TTTCompilerError):
    """Invalid board size, missing rule adapter, or engine used before loading."""
    code: str = "CONFIGURATION"


class ContractViolationError(TTTCompilerError):
    """A rule adapter or store primitive was used against its contract."""
    code: str = "CONTRACT_VIOLATION"


class DuplicateNodeError(ContractViolationError):
    code: str = "DUPLICATE_NODE"

    def __init__(self, state_id: int):
        super().__init__("State is already in the graph store", context={"state_id": state_id})
        self.state_id = state_id


class MissingNodeError(ContractViolationError):
    code: str = "MISSING_NODE"

    def __init__(self, state_id: int):
        super().__init__("State is not in the graph store", context={"state_id": state_id})
        self.state_id = state_id


class OccupiedCellError(ContractViolationError):
    code: str = "OCCUPIED_CELL"

    def __init__(self, state_id: int, index: int):
        super().__init__(
            "Cell is already occupied",
            context={"state_id": state_id, "index": index},
        )
        self.state_id = state_id
        self.index = index


class NonConvergenceError(TTTCompilerError):
    """A compilation phase cannot make progress.

    Raised for runaway enumeration, a game with no terminal states, or a
    scoring queue whose dependencies never resolve (a cycle).
    """
    code: str = "NON_CONVERGENCE"


class NoLegalMoveError(TTTCompilerError):
    """The AI was asked to move in a finished game or for an unknown team."""
    code: str = "NO_LEGAL_MOVE"

    def __init__(self, state_id: int, team: int, reason: str):
        super().__init__(f"No legal move: {reason}", context={"state_id": state_id, "team": team})
        self.state_id = state_id
        self.team = team


class GameOverError(TTTCompilerError):
    code: str = "GAME_OVER"
