import random

import pytest

from ttt_compiler import codec
from ttt_compiler.ai import AI
from ttt_compiler.errors import GameOverError, OccupiedCellError
from ttt_compiler.session import GameSession, Mode


@pytest.fixture
def session(compiled3):
    return GameSession.from_table(compiled3.compilation, compiled3.table)


def test_two_player_moves_update_state(session):
    assert session.mode == Mode.TWO_PLAYER
    session.play(4)
    session.play(0)
    assert session.board == [2, 0, 0, 0, 1, 0, 0, 0, 0]
    assert session.state_id == codec.encode(session.board)
    assert session.turn == 1
    assert session.turn_count == 2
    assert session.winner is None


def test_row_completion_sets_winner_and_ends_game(session):
    for idx in (0, 3, 1, 4, 2):
        session.play(idx)
    assert session.winner == 1
    assert session.is_over and not session.is_draw
    with pytest.raises(GameOverError):
        session.play(8)


def test_occupied_cell_is_rejected(session):
    session.play(4)
    with pytest.raises(OccupiedCellError):
        session.play(4)
    with pytest.raises(ValueError):
        session.play(9)
    assert session.turn_count == 1


def test_ai_opens_when_it_plays_first(session):
    session.ai_team = 1
    session.toggle_mode()
    assert session.mode == Mode.COMPUTER
    assert session.turn_count == 1
    assert session.turn == 2
    assert session.state_id == 1


def test_toggle_ai_team_restarts(session):
    session.toggle_mode()  # computer, AI plays X and opens
    session.toggle_ai_team()
    assert session.ai_team == 2
    assert session.turn_count == 0
    session.play(0)
    assert session.turn_count == 2
    assert session.turn == 1


def test_ai_never_loses_to_random_play(compiled3):
    rng = random.Random(0)
    for game in range(40):
        ai_team = 1 + game % 2
        s = GameSession.from_table(compiled3.compilation, compiled3.table,
                                   mode=Mode.COMPUTER, ai_team=ai_team)
        while not s.is_over:
            s.play(rng.choice([i for i, v in enumerate(s.board) if v == 0]))
        assert s.winner in (None, ai_team)


def test_render(session):
    session.play(0)
    session.play(4)
    assert session.render() == "X . .\n. O .\n. . ."


def test_start_compiles_small_board():
    s = GameSession.start(2, mode=Mode.COMPUTER, ai_team=1)
    assert s.turn_count == 1
    s.play(next(i for i, v in enumerate(s.board) if v == 0))
    assert s.winner == 1
    assert s.is_over


def test_ai_opens_on_direct_construction(compiled3):
    ai = AI(compiled3.compilation)
    ai.load(compiled3.table)
    s = GameSession(ai, mode=Mode.COMPUTER, ai_team=1)
    assert s.turn_count == 1
    assert s.turn == 2
    assert s.board.count(1) == 1
    s.play(next(i for i, v in enumerate(s.board) if v == 0))
    assert s.board.count(2) == 1


def test_full_board_without_line_is_a_draw(session):
    for idx in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        session.play(idx)
    assert session.board == [1, 2, 1, 1, 2, 2, 2, 1, 1]
    assert session.winner is None
    assert session.is_draw and session.is_over
    with pytest.raises(GameOverError):
        session.play(0)
