# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import annealkit.common.typing as tp
from annealkit.common import errors
from . import base


def _frozen(state: np.ndarray) -> np.ndarray:
    state.flags.writeable = False
    return state


@base.registry.register_as("nqueens")
class NQueens(base.Problem[np.ndarray]):
    """Places N queens on a NxN chess board so that no two queens attack each other.

    A state is an integer array of length N: value at index c is the row
    of the queen standing in column c (there is always exactly one queen per column).
    States are returned read-only.

    Parameters
    ----------
    num_queens: int
        the number of queens, which is also the size of the board (at least 2)
    seed: int (optional)
        seed of the random state

    Note
    ----
    The cost is the number of attacking pairs, a pair being counted once if both queens
    share a row and once more if they share a diagonal. A solution has a cost of 0.
    """

    def __init__(self, num_queens: int = 8, seed: tp.Optional[int] = None) -> None:
        if num_queens < 2:
            raise errors.AnnealkitValueError(
                f"num_queens must be at least 2 for neighbors to exist (got {num_queens})"
            )
        super().__init__(seed=seed)
        self.num_queens = int(num_queens)
        # all pairs of columns (i, j) with i < j
        self._first, self._second = np.triu_indices(self.num_queens, k=1)
        self._column_gaps = self._second - self._first

    def get_init_state(self) -> np.ndarray:
        return _frozen(self.random_state.randint(self.num_queens, size=self.num_queens))

    def generate_new_state(self, current: np.ndarray) -> np.ndarray:
        """Moves the queen of a random column to another random row of this column"""
        rng = self.random_state
        column = rng.randint(self.num_queens)
        # draw among the N - 1 other rows
        row = rng.randint(self.num_queens - 1)
        if row >= current[column]:
            row += 1
        state = np.array(current, copy=True)
        state[column] = row
        return _frozen(state)

    def cost(self, state: np.ndarray) -> float:
        state = np.asarray(state, dtype=int)  # no wrap-around of unsigned differences
        if state.shape != (self.num_queens,):
            raise errors.AnnealkitValueError(
                f"Expected a state of shape ({self.num_queens},) but got {state.shape}"
            )
        first, second = state[self._first], state[self._second]
        same_row = np.sum(first == second)
        same_diagonal = np.sum(np.abs(first - second) == self._column_gaps)
        return float(same_row + same_diagonal)

    def render(self, state: np.ndarray) -> str:
        lines = []
        for row in range(self.num_queens):
            lines.append("".join(" Q " if state[col] == row else " . " for col in range(self.num_queens)))
        return "\n".join(lines)
