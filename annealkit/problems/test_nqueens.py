# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import io
import typing as tp
import numpy as np
import pytest
from annealkit.common import testing
from annealkit.common import errors
from . import nqueens


@testing.parametrized(
    solution4=([1, 3, 0, 2], 0),
    main_diagonal=([0, 1, 2, 3], 6),
    same_row=([0, 0, 0, 0], 6),
    row_and_diagonal=([0, 2, 0, 3], 2),  # columns 0/2 share a row, columns 0/3 a diagonal
    mixed=([1, 3, 0, 1], 3),  # columns 0/3 share a row, 1/3 and 2/3 share diagonals
)
def test_cost(state: tp.List[int], expected: float) -> None:
    problem = nqueens.NQueens(len(state))
    np.testing.assert_equal(problem.cost(np.array(state)), expected)


def test_cost_eight_queens_solution() -> None:
    problem = nqueens.NQueens(8)
    np.testing.assert_equal(problem.cost(np.array([0, 4, 7, 5, 2, 6, 1, 3])), 0)


@pytest.mark.parametrize("dtype", [np.uint8, np.uint32, np.int8, np.float64])  # type: ignore
def test_cost_dtypes(dtype: tp.Any) -> None:
    problem = nqueens.NQueens(4)
    np.testing.assert_equal(problem.cost(np.array([0, 1, 2, 3], dtype=dtype)), 6)
    np.testing.assert_equal(problem.cost(np.array([1, 3, 0, 2], dtype=dtype)), 0)


def test_cost_wrong_shape() -> None:
    problem = nqueens.NQueens(4)
    with pytest.raises(errors.AnnealkitValueError):
        problem.cost(np.array([0, 1, 2]))


def test_init_state() -> None:
    problem = nqueens.NQueens(12, seed=12)
    state = problem.get_init_state()
    assert state.shape == (12,)
    assert state.min() >= 0 and state.max() < 12
    assert not state.flags.writeable


@pytest.mark.parametrize("num_queens", [2, 3, 8])  # type: ignore
def test_generate_new_state(num_queens: int) -> None:
    problem = nqueens.NQueens(num_queens, seed=num_queens)
    state = problem.get_init_state()
    for _ in range(200):
        reference = state.copy()
        new_state = problem.generate_new_state(state)
        assert new_state is not state
        np.testing.assert_array_equal(state, reference, err_msg="Input state was modified")
        changed = np.nonzero(new_state != state)[0]
        assert len(changed) == 1, f"Exactly one column should change, got {changed}"
        assert 0 <= new_state[changed[0]] < num_queens
        state = new_state


def test_generate_new_state_reaches_all_rows() -> None:
    problem = nqueens.NQueens(5, seed=3)
    state = np.zeros(5, dtype=int)
    rows = {int(problem.generate_new_state(state)[0]) for _ in range(500)}
    # row 0 is kept whenever another column moved
    assert rows == {0, 1, 2, 3, 4}


def test_seed_reproducibility() -> None:
    states = []
    for _ in range(2):
        problem = nqueens.NQueens(8, seed=42)
        state = problem.get_init_state()
        states.append(problem.generate_new_state(state))
    np.testing.assert_array_equal(states[0], states[1])


def test_too_small() -> None:
    with pytest.raises(errors.AnnealkitValueError):
        nqueens.NQueens(1)


def test_render_and_print() -> None:
    problem = nqueens.NQueens(4)
    expected = "\n".join([" .  .  Q  . ", " Q  .  .  . ", " .  .  .  Q ", " .  Q  .  . "])
    assert problem.render(np.array([1, 3, 0, 2])) == expected
    stream = io.StringIO()
    problem.print_state(np.array([1, 3, 0, 2]), file=stream)
    assert stream.getvalue() == expected + "\n"


def test_repr_and_descriptors() -> None:
    problem = nqueens.NQueens(6, seed=1)
    assert repr(problem) == "NQueens(num_queens=6)"
    testing.printed_assert_equal(problem.descriptors, {"num_queens": 6, "problem_class": "NQueens"})
