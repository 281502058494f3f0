"""
Game-agnostic state-graph compiler (retrograde minimax).

Three phases, each drained before the next begins:
1. process: breadth-first enumeration of every state reachable from the
   empty board, deduplicated by StateId. Terminal states are not expanded.
2. post_process: terminal states get their definitive value and their
   predecessors become scoring candidates.
3. score_nodes: a candidate whose children are all scored takes the best
   child value for its acting team; its predecessors become candidates.

The compiler only talks to the Compilation contract, so any finite
two-player perfect-information game with a rule adapter can be compiled.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional, Set, Tuple

from .compilation import Compilation
from .errors import ConfigurationError, ContractViolationError, NonConvergenceError
from .graph import DRAW, NONE, TEAM_A, CompiledTable, Node, move_rank, opponent, terminal_value


class Compiler:

    def __init__(self, compilation: Optional[Compilation] = None, progress_every: int = 1000) -> None:
        self.compilation = compilation
        self.progress_every = progress_every
        self.queue: Deque[Tuple[int, int]] = deque()
        self.winners: Deque[int] = deque()
        self.unscored_nodes: Deque[int] = deque()
        self._pending: Set[int] = set()
        self._stalled = 0
        self._finished = False

    def _require(self) -> Compilation:
        if self.compilation is None:
            raise ConfigurationError("No compilation attached to the compiler")
        return self.compilation

    def init_compilation(self) -> None:
        c = self._require()
        c.clear()
        self.queue.clear()
        self.winners.clear()
        self.unscored_nodes.clear()
        self._pending.clear()
        self._stalled = 0
        self._finished = False
        c.insert_node(Node(state_id=0, team=TEAM_A))
        self.queue.append((0, TEAM_A))

    # ------------------------------------------------------------------
    #  Phase 1: enumerate
    # ------------------------------------------------------------------

    def process(self) -> None:
        c = self._require()
        if not self.queue:
            return
        state_id, team = self.queue.popleft()
        node = c.get_node(state_id)
        c.inc_nodes_processed()
        if c.get_nodes_processed() % self.progress_every == 0:
            logging.debug("processed=%d stored=%d queued=%d",
                          c.get_nodes_processed(), c.node_count(), len(self.queue))

        winner = c.get_winner(state_id)
        if winner != NONE or c.is_full(state_id):
            node.winner = winner if winner != NONE else DRAW
            self.winners.append(state_id)
            return

        children = c.get_child_states(state_id, team)
        if not children:
            raise ContractViolationError(
                "Non-terminal state has no successors",
                context={"state_id": state_id, "team": team},
            )
        nxt = opponent(team)
        for child_id in children:
            if child_id == state_id:
                raise ContractViolationError(
                    "Move generation returned the parent state",
                    context={"state_id": state_id, "team": team},
                )
            if c.contains_node(child_id):
                stored_team = c.get_node(child_id).team
                if stored_team != nxt:
                    raise ContractViolationError(
                        "State reached with two different teams to move",
                        context={"state_id": child_id, "parent": state_id,
                                 "stored_team": stored_team, "team": nxt},
                    )
                continue
            c.insert_node(Node(state_id=child_id, team=nxt))
            self.queue.append((child_id, nxt))

        if c.node_count() > c.state_space_size():
            raise NonConvergenceError(
                "Enumeration exceeded the state space",
                context={"stored": c.node_count(), "limit": c.state_space_size()},
            )

    # ------------------------------------------------------------------
    #  Phase 2: classify terminals
    # ------------------------------------------------------------------

    def post_process(self) -> None:
        c = self._require()
        if self.queue:
            raise ConfigurationError("Enumeration still has queued states")
        if not self.winners:
            if c.get_winners_processed() == 0:
                raise NonConvergenceError(
                    "Enumeration produced no terminal states",
                    context={"stored": c.node_count()},
                )
            return
        state_id = self.winners.popleft()
        node = c.get_node(state_id)
        node.value = terminal_value(node.winner, node.team)
        node.plies_to_end = 0
        node.scored = True
        c.inc_winners_processed()
        c.inc_nodes_scored()
        self._enqueue_parents(node)

    def _enqueue_parents(self, node: Node) -> None:
        c = self._require()
        prev = opponent(node.team)
        for parent_id in c.get_parent_states(node.state_id, prev):
            if parent_id in self._pending or not c.contains_node(parent_id):
                continue
            parent = c.get_node(parent_id)
            if parent.scored or parent.is_terminal or parent.team != prev:
                continue
            self._pending.add(parent_id)
            self.unscored_nodes.append(parent_id)

    # ------------------------------------------------------------------
    #  Phase 3: backward propagation
    # ------------------------------------------------------------------

    def score_nodes(self) -> None:
        c = self._require()
        if self.queue or self.winners:
            raise ConfigurationError("Terminal classification has not finished")
        if not self.unscored_nodes:
            return
        state_id = self.unscored_nodes.popleft()
        self._pending.discard(state_id)
        node = c.get_node(state_id)
        if node.scored:
            return

        best = None
        for child_id in c.get_child_states(state_id, node.team):
            child = c.get_node(child_id)
            if not child.scored:
                self._requeue(state_id)
                return
            q = -child.value
            plies = child.plies_to_end + 1
            rank = move_rank(q, plies, child_id)
            if best is None or rank < best[0]:
                best = (rank, q, plies, child_id)

        self._stalled = 0
        _, node.value, node.plies_to_end, node.best_child = best
        node.scored = True
        c.inc_nodes_scored()
        if c.get_nodes_scored() % self.progress_every == 0:
            logging.debug("scored=%d candidates=%d", c.get_nodes_scored(), len(self.unscored_nodes))
        self._enqueue_parents(node)

    def _requeue(self, state_id: int) -> None:
        self._pending.add(state_id)
        self.unscored_nodes.append(state_id)
        self._stalled += 1
        # every queued candidate has failed since the last success
        if self._stalled >= len(self.unscored_nodes):
            raise NonConvergenceError(
                "Scoring made no progress over a full pass",
                context={"candidates": len(self.unscored_nodes), "state_id": state_id},
            )

    # ------------------------------------------------------------------
    #  Driver and export
    # ------------------------------------------------------------------

    def run(self) -> None:
        c = self._require()
        self.init_compilation()
        logging.info("Enumerating reachable states…")
        while self.queue:
            self.process()
        logging.info("Enumerated %d states", c.node_count())

        while self.winners or c.get_winners_processed() == 0:
            self.post_process()
        logging.info("Classified %d terminal states", c.get_winners_processed())

        while self.unscored_nodes:
            self.score_nodes()
        unscored = c.node_count() - c.get_nodes_scored()
        if unscored:
            raise NonConvergenceError(
                "States left unscored after propagation",
                context={"unscored": unscored, "stored": c.node_count()},
            )
        logging.info("Scored %d states", c.get_nodes_scored())
        self._finished = True

    def export(self) -> CompiledTable:
        c = self._require()
        if not self._finished:
            raise ConfigurationError("Compilation has not finished; call run() first")
        values = {}
        plies = {}
        best = {}
        for node in c.iter_nodes():
            values[node.state_id] = node.value
            plies[node.state_id] = node.plies_to_end
            best[node.state_id] = node.best_child
        table = CompiledTable(
            size=getattr(c, "board_size", None),
            values=values,
            plies=plies,
            best=best,
        )
        c.discard_nodes()
        self._finished = False
        return table


def compile_game(compilation: Compilation) -> CompiledTable:
    """Run every phase to exhaustion and export the table."""
    compiler = Compiler(compilation)
    compiler.run()
    return compiler.export()
