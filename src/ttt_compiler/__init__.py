"""ttt_compiler package.

Exhaustive state-graph compiler for tic-tac-toe on an n x n board, the AI
that plays from the compiled table, and a headless game session.

Convenience imports are exposed for common workflows.
"""

from .ai import AI
from .codec import decode, encode
from .compilation import Compilation
from .compiler import Compiler, compile_game
from .graph import CompiledTable, Node
from .rules import TicTacToeCompilation, get_child_states, get_winner
from .session import GameSession, Mode

__all__ = [
    "AI",
    "Compilation",
    "CompiledTable",
    "Compiler",
    "GameSession",
    "Mode",
    "Node",
    "TicTacToeCompilation",
    "compile_game",
    "decode",
    "encode",
    "get_child_states",
    "get_winner",
]
