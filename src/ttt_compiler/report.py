"""
Summaries of a compiled table as pandas frames.
"""
from __future__ import annotations

from typing import Dict

import numpy as np
import pandas as pd

from .codec import decode_many
from .graph import CompiledTable

COLUMNS = ["state_id", "ply", "to_move", "value", "plies_to_end", "terminal", "best_child"]


def table_frame(table: CompiledTable) -> pd.DataFrame:
    """One row per state, ordered by StateId."""
    ids = sorted(table.values)
    if not ids:
        return pd.DataFrame(columns=COLUMNS)
    cells = decode_many(ids, table.size)
    ply = np.count_nonzero(cells, axis=1)
    df = pd.DataFrame({
        "state_id": np.array(ids, dtype=np.int64),
        "ply": ply,
        # team A moves on even plies
        "to_move": np.where(ply % 2 == 0, 1, 2),
        "value": [table.values[i] for i in ids],
        "plies_to_end": [table.plies[i] for i in ids],
        "terminal": [table.best[i] is None for i in ids],
        "best_child": pd.array([table.best[i] for i in ids], dtype="Int64"),
    })
    return df[COLUMNS]


def ply_summary(table: CompiledTable) -> pd.DataFrame:
    """Per-ply counts of states won/drawn/lost for the side to move."""
    df = table_frame(table)
    outcome = df["value"].map({1: "wins", 0: "draws", -1: "losses"})
    summary = pd.crosstab(df["ply"], outcome)
    summary = summary.reindex(columns=["wins", "draws", "losses"], fill_value=0)
    summary["states"] = summary.sum(axis=1)
    summary["terminal"] = df.groupby("ply")["terminal"].sum().astype(int)
    summary.columns.name = None
    return summary


def summary_counts(table: CompiledTable) -> Dict[str, int]:
    df = table_frame(table)
    term = df[df["terminal"]]
    # a decided terminal was won by the side that just moved
    decided = term[term["value"] == -1]
    return {
        "states": int(len(df)),
        "terminals": int(len(term)),
        "a_wins": int((decided["to_move"] == 2).sum()),
        "b_wins": int((decided["to_move"] == 1).sum()),
        "draws": int((term["value"] == 0).sum()),
        "root_value": int(table.value(0)) if 0 in table else 0,
    }
