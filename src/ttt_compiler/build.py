"""
Startup pipeline: rule adapter -> compiler -> compiled table.

Wraps the compiler with logging, timing and optional experiment tracking.
Any compilation error propagates: there is no usable AI without a table.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from .compiler import Compiler
from .graph import CompiledTable
from .paths import default_board_size, get_git_commit, get_git_is_dirty, runs_dir
from .report import summary_counts
from .rules import TicTacToeCompilation
from .tracking import log_metrics, log_params, maybe_mlflow_run


@dataclass
class CompileArgs:
    size: int = field(default_factory=default_board_size)
    tracking: str = "none"  # one of: "none", "mlflow"
    log_dir: Optional[Path] = None
    verbose: bool = False


def run_compile(args: CompileArgs) -> Tuple[TicTacToeCompilation, CompiledTable]:
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="[%(levelname)s] %(message)s")
    if args.size > 3:
        logging.warning("Board size %d: the state space has 3^%d ids; compilation may not finish",
                        args.size, args.size * args.size)
    log_dir = args.log_dir or runs_dir()
    with maybe_mlflow_run(args.tracking == "mlflow", run_name=f"compile_{args.size}x{args.size}",
                          log_dir=log_dir) as tracking_on:
        if tracking_on:
            log_params({
                "board_size": args.size,
                "git_commit": get_git_commit() or "unknown",
                "git_dirty": get_git_is_dirty(),
            })
        compilation = TicTacToeCompilation(args.size)
        compiler = Compiler(compilation)
        t0 = time.perf_counter()
        compiler.run()
        t1 = time.perf_counter()
        metrics = {
            "nodes_processed": compilation.get_nodes_processed(),
            "winners_processed": compilation.get_winners_processed(),
            "nodes_scored": compilation.get_nodes_scored(),
        }
        table = compiler.export()
        counts = summary_counts(table)
        logging.info(
            "Compiled %dx%d: states=%d terminals=%d root_value=%d in %.3fs",
            args.size, args.size, counts["states"], counts["terminals"], counts["root_value"], t1 - t0,
        )
        if tracking_on:
            log_metrics({**metrics, **counts, "compile_seconds": t1 - t0})
    return compilation, table
