from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import codec
from .ai import AI
from .build import CompileArgs, run_compile
from .errors import TTTCompilerError
from .graph import TEAM_A, TEAM_B, TEAM_NAMES
from .paths import default_board_size
from .report import ply_summary
from .rules import get_winner
from .session import GameSession, Mode


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt-compiler", description="Tic-tac-toe state-graph compiler")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument(
        "--size",
        type=int,
        default=None,
        help="Board size n for an n x n board (default: $TTTC_BOARD_SIZE or 3)",
    )

    p_comp = sub.add_parser("compile", help="Compile the full state graph and report totals")
    p_comp.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_comp.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for tracking logs (default: $TTTC_LOG_DIR or <repo>/runs)",
    )

    p_win = sub.add_parser("winner", help="Report the winner of a board (n*n digits, 0=empty,1=X,2=O)")
    p_win.add_argument("--board", required=True, help="Board string, e.g., 111000000")

    p_move = sub.add_parser("move", help="Best move for a board from the compiled table")
    p_move.add_argument("--board", required=True, help="Board string, e.g., 100020000")
    p_move.add_argument(
        "--team",
        type=int,
        choices=[TEAM_A, TEAM_B],
        default=None,
        help="Team to move (default: inferred from piece counts)",
    )

    sub.add_parser("stats", help="Per-ply win/draw/loss counts of the compiled table")

    p_play = sub.add_parser("play", help="Play in the terminal against the compiled AI")
    p_play.add_argument(
        "--ai-team",
        type=int,
        choices=[TEAM_A, TEAM_B],
        default=TEAM_B,
        help="Team the AI plays (default: 2=O)",
    )
    p_play.add_argument("--two-player", action="store_true", help="Disable the AI")

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "pandas", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _parse_board(raw: str, size: int) -> Optional[list]:
    try:
        return codec.deserialize_board(raw, size)
    except ValueError:
        logging.error("Invalid board string. Must be %d chars of 0/1/2.", size * size)
        return None


def _play(session: GameSession) -> int:
    print(session.render())
    while True:
        if session.is_over:
            if session.winner is not None:
                print(f"Winner: {TEAM_NAMES[session.winner]}")
            else:
                print("Draw")
            return 0
        line = input(f"{TEAM_NAMES[session.turn]} to move [0-{session.cells - 1}, q=quit, r=restart]: ")
        raw = line.strip().lower()
        if raw == "q":
            return 0
        if raw == "r":
            session.restart()
            print(session.render())
            continue
        try:
            session.play(int(raw))
        except (ValueError, TTTCompilerError) as exc:
            print(f"Illegal move: {exc}")
            continue
        print(session.render())


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("ttt-compiler"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    try:
        size = ns.size if ns.size is not None else default_board_size()
    except TTTCompilerError as exc:
        logging.error("%s", exc)
        return 2
    if size < 1:
        logging.error("Board size must be positive: %s", size)
        return 2

    if ns.cmd == "winner":
        board = _parse_board(ns.board, size)
        if board is None:
            return 2
        w = get_winner(codec.encode(board), size)
        logging.info("state_id=%d winner=%s", codec.encode(board), TEAM_NAMES.get(w, "none"))
        return 0

    if ns.cmd not in ("compile", "move", "stats", "play"):
        parser.print_help()
        return 0

    board = None
    if ns.cmd == "move":
        board = _parse_board(ns.board, size)
        if board is None:
            return 2

    try:
        compilation, table = run_compile(CompileArgs(
            size=size,
            tracking=getattr(ns, "tracking", "none"),
            log_dir=getattr(ns, "log_dir", None),
            verbose=ns.verbose,
        ))
    except TTTCompilerError as exc:
        logging.error("Compilation failed: %s", exc)
        return 2

    if ns.cmd == "compile":
        return 0

    if ns.cmd == "stats":
        print(ply_summary(table).to_string())
        return 0

    if ns.cmd == "move":
        state_id = codec.encode(board)
        if state_id not in table:
            logging.error("Board is not a valid reachable state.")
            return 2
        team = ns.team
        if team is None:
            team = TEAM_A if board.count(1) == board.count(2) else TEAM_B
        ai = AI(compilation)
        ai.load(table)
        try:
            child = ai.get_move(state_id, team)
        except TTTCompilerError as exc:
            logging.error("%s", exc)
            return 2
        after = codec.decode(child, size)
        index = next(i for i in range(size * size) if after[i] != board[i])
        logging.info(
            "move=%d board=%s state_id=%d value=%d plies=%d",
            index,
            codec.serialize_board(after),
            child,
            table.value(state_id),
            table.plies_to_end(state_id),
        )
        return 0

    mode = Mode.TWO_PLAYER if ns.two_player else Mode.COMPUTER
    session = GameSession.from_table(compilation, table, mode=mode, ai_team=ns.ai_team)
    try:
        return _play(session)
    except (EOFError, KeyboardInterrupt):
        return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
