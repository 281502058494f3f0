from ttt_compiler.graph import CompiledTable
from ttt_compiler.report import COLUMNS, ply_summary, summary_counts, table_frame


def test_table_frame_columns_and_order(compiled3):
    df = table_frame(compiled3.table)
    assert list(df.columns) == COLUMNS
    assert len(df) == 5478
    assert df["state_id"].is_monotonic_increasing
    root = df.iloc[0]
    assert root["state_id"] == 0 and root["ply"] == 0 and root["to_move"] == 1
    assert df["best_child"].isna().sum() == df["terminal"].sum() == 958


def test_ply_summary(compiled3):
    summary = ply_summary(compiled3.table)
    assert summary["states"].tolist() == [1, 9, 72, 252, 756, 1260, 1520, 1140, 390, 78]
    assert int(summary["terminal"].sum()) == 958
    assert summary.loc[0, "draws"] == 1
    # every state at ply 9 is terminal
    assert summary.loc[9, "terminal"] == 78


def test_summary_counts(compiled3):
    counts = summary_counts(compiled3.table)
    assert counts == {
        "states": 5478,
        "terminals": 958,
        "a_wins": 626,
        "b_wins": 316,
        "draws": 16,
        "root_value": 0,
    }


def test_empty_table_frame():
    assert table_frame(CompiledTable(size=3)).empty
