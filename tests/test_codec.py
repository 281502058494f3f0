import numpy as np
import pytest

from ttt_compiler import codec
from ttt_compiler.errors import OccupiedCellError


def test_top_row_encodes_to_13():
    assert codec.encode([1, 1, 1, 0, 0, 0, 0, 0, 0]) == 13


def test_empty_board_is_zero_and_decodes_empty():
    assert codec.encode([0] * 9) == 0
    assert codec.decode(0, 3) == [0] * 9


def test_decode_pads_missing_high_digits_with_empty():
    # 2 * 3**1 = 6: only cell 1 is set
    assert codec.decode(6, 3) == [0, 2, 0, 0, 0, 0, 0, 0, 0]
    assert codec.decode(3 ** 9 - 1, 3) == [2] * 9


@pytest.mark.parametrize("bad", [[3, 0, 0], [-1, 0, 0], [0, 0, 7]])
def test_encode_rejects_out_of_range_marks(bad):
    with pytest.raises(ValueError):
        codec.encode(bad)


@pytest.mark.parametrize("state_id", [-1, 3 ** 9])
def test_decode_rejects_ids_outside_domain(state_id):
    with pytest.raises(ValueError):
        codec.decode(state_id, 3)


def test_place_adds_team_digit_and_rejects_occupied():
    s = codec.place(0, 4, 1)
    assert s == 81
    assert codec.place(s, 0, 2) == 81 + 2
    with pytest.raises(OccupiedCellError) as err:
        codec.place(s, 4, 2)
    assert err.value.index == 4
    with pytest.raises(ValueError):
        codec.place(s, 9, 2)
    for team in (0, 3):
        with pytest.raises(ValueError):
            codec.place(s, 0, team)


def test_is_full():
    assert not codec.is_full(0, 3)
    assert codec.is_full(codec.encode([1, 1, 2, 2, 2, 1, 1, 2, 1]), 3)
    assert not codec.is_full(codec.encode([1, 1, 2, 2, 2, 1, 1, 2, 0]), 3)


def test_serialize_roundtrip_and_validation():
    b = [1, 0, 0, 0, 2, 0, 0, 0, 0]
    assert codec.serialize_board(b) == "100020000"
    assert codec.deserialize_board("100020000") == b
    for bad in ["abc", "0123", "1000200001", "10002000x"]:
        with pytest.raises(ValueError):
            codec.deserialize_board(bad)
    assert codec.deserialize_board("1200", size=2) == [1, 2, 0, 0]


def test_decode_many_matches_decode():
    ids = [0, 13, 81, 19682]
    arr = codec.decode_many(ids, 3)
    assert arr.shape == (4, 9)
    assert arr.dtype == np.int8
    for row, s in zip(arr, ids):
        assert row.tolist() == codec.decode(s, 3)
