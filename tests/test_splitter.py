import numpy as np
import pytest

from featgroup.splitter import SplitMode, split_mat


def test_none_returns_whole_matrix():
    mat = np.arange(12).reshape(4, 3)
    parts = split_mat(mat, SplitMode.NONE)
    assert len(parts) == 1
    np.testing.assert_array_equal(parts[0], mat)


@pytest.mark.parametrize("rows", [0, 1, 2, 5, 7, 10])
def test_upper_lower_reassembles(rows):
    mat = np.arange(rows * 3).reshape(rows, 3)
    top, bottom = split_mat(mat, SplitMode.UL)
    np.testing.assert_array_equal(np.vstack([top, bottom]), mat)
    assert 0 <= len(top) - len(bottom) <= 1


def test_even_rows_split_equally():
    mat = np.arange(8).reshape(4, 2)
    top, bottom = split_mat(mat, SplitMode.UL)
    np.testing.assert_array_equal(top, mat[:2])
    np.testing.assert_array_equal(bottom, mat[2:])


def test_mode_given_by_value():
    mat = np.arange(6).reshape(3, 2)
    parts = split_mat(mat, "upper_lower")
    assert [len(part) for part in parts] == [len(p) for p in split_mat(mat, SplitMode.UL)]


def test_parts_are_views():
    mat = np.zeros((4, 2))
    top, _ = split_mat(mat, SplitMode.UL)
    top[0, 0] = 5.0
    assert mat[0, 0] == 5.0


def test_foot_split_is_rejected():
    with pytest.raises(ValueError):
        split_mat(np.zeros((3, 3)), SplitMode.ULF)


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        split_mat(np.zeros((3, 3)), "diagonal")