"""
Rule adapter contract for the generic compiler.

A Compilation supplies the game capabilities (winner detection, move and
reverse-move generation) and owns the graph store plus progress counters
while a Compiler drives it. One concrete subclass per game.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterator, List

from .errors import DuplicateNodeError, MissingNodeError
from .graph import Node


class Compilation(ABC):

    def __init__(self) -> None:
        self.nodes: Dict[int, Node] = {}
        self.nodes_processed = 0
        self.winners_processed = 0
        self.nodes_scored = 0

    # ------------------------------------------------------------------
    #  Game capabilities
    # ------------------------------------------------------------------

    @abstractmethod
    def get_winner(self, state_id: int) -> int:
        """Team with a completed line, or 0. Never reports a draw."""

    @abstractmethod
    def get_child_states(self, state_id: int, team: int) -> List[int]:
        """States produced by one move of `team`; empty when no move exists."""

    @abstractmethod
    def get_parent_states(self, state_id: int, team: int) -> List[int]:
        """States from which one move of `team` produces `state_id`."""

    @abstractmethod
    def is_full(self, state_id: int) -> bool:
        ...

    @abstractmethod
    def state_space_size(self) -> int:
        """Upper bound on the number of distinct StateIds."""

    # ------------------------------------------------------------------
    #  Graph store
    # ------------------------------------------------------------------

    def insert_node(self, node: Node) -> None:
        if node.state_id in self.nodes:
            raise DuplicateNodeError(node.state_id)
        self.nodes[node.state_id] = node

    def contains_node(self, state_id: int) -> bool:
        return state_id in self.nodes

    def get_node(self, state_id: int) -> Node:
        try:
            return self.nodes[state_id]
        except KeyError:
            raise MissingNodeError(state_id) from None

    def iter_nodes(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def node_count(self) -> int:
        return len(self.nodes)

    def discard_nodes(self) -> None:
        self.nodes = {}

    # ------------------------------------------------------------------
    #  Progress counters
    # ------------------------------------------------------------------

    def inc_nodes_processed(self) -> None:
        self.nodes_processed += 1

    def get_nodes_processed(self) -> int:
        return self.nodes_processed

    def inc_winners_processed(self) -> None:
        self.winners_processed += 1

    def get_winners_processed(self) -> int:
        return self.winners_processed

    def inc_nodes_scored(self) -> None:
        self.nodes_scored += 1

    def get_nodes_scored(self) -> int:
        return self.nodes_scored

    def clear(self) -> None:
        """Drop the store and zero the counters, keeping game parameters."""
        self.nodes = {}
        self.nodes_processed = 0
        self.winners_processed = 0
        self.nodes_scored = 0

    def reset(self) -> None:
        self.clear()
