from typing import Dict, NamedTuple

import pytest

from ttt_compiler.ai import AI
from ttt_compiler.compiler import Compiler
from ttt_compiler.graph import CompiledTable, Node
from ttt_compiler.rules import TicTacToeCompilation


class Compiled(NamedTuple):
    compilation: TicTacToeCompilation
    nodes: Dict[int, Node]
    table: CompiledTable
    ai: AI


def _compile(size: int) -> Compiled:
    compilation = TicTacToeCompilation(size)
    compiler = Compiler(compilation)
    compiler.run()
    # snapshot the store; export() discards it
    nodes = dict(compilation.nodes)
    table = compiler.export()
    ai = AI(compilation)
    ai.load(table)
    return Compiled(compilation, nodes, table, ai)


@pytest.fixture(scope="session")
def compiled3() -> Compiled:
    return _compile(3)


@pytest.fixture(scope="session")
def compiled2() -> Compiled:
    return _compile(2)
