# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import io
import typing as tp
import numpy as np
import pytest
from annealkit.common import testing
from . import base


class LineWalk(base.Problem[int]):
    """Walk on integers, looking for the target"""

    def __init__(self, target: int = 7, name: str = "walk", seed: int = None) -> None:  # type: ignore
        super().__init__(seed=seed)
        self.target = target

    def get_init_state(self) -> int:
        return int(self.random_state.randint(-100, 100))

    def generate_new_state(self, current: int) -> int:
        return current + (1 if self.random_state.rand() < 0.5 else -1)

    def cost(self, state: int) -> float:
        return float(abs(state - self.target))


def test_problem_is_abstract() -> None:
    with pytest.raises(TypeError):
        base.Problem()  # type: ignore  # pylint: disable=abstract-class-instantiated


def test_descriptors() -> None:
    problem = LineWalk(12, seed=3)
    testing.printed_assert_equal(
        problem.descriptors, {"target": 12, "name": "walk", "problem_class": "LineWalk"}
    )
    assert repr(problem) == "LineWalk(name='walk', target=12)"
    assert problem.name == "LineWalk"
    problem.descriptors["target"] = 0  # copies do not modify the problem
    assert problem.descriptors["target"] == 12


def test_random_state_seeding() -> None:
    values = [LineWalk(seed=12).get_init_state() for _ in range(2)]
    assert values[0] == values[1]
    problem = LineWalk()
    assert problem._random_state is None
    assert isinstance(problem.random_state, np.random.RandomState)
    assert problem.random_state is problem.random_state
    replacement = np.random.RandomState(1)
    problem.random_state = replacement
    assert problem.random_state is replacement


def test_default_rendering() -> None:
    problem = LineWalk()
    stream = io.StringIO()
    problem.print_state(42, file=stream)
    assert stream.getvalue() == "42\n"


def test_print_state_defaults_to_stdout(capsys: pytest.CaptureFixture) -> None:  # type: ignore
    LineWalk().print_state(-3)
    assert capsys.readouterr().out == "-3\n"


def test_registry() -> None:
    from .nqueens import NQueens  # pylint: disable=import-outside-toplevel

    assert base.registry["nqueens"] is NQueens


class _Point:

    def __init__(self, x: int, y: tp.List[int]) -> None:
        self.x = x
        self.y = y


@testing.parametrized(
    same_ints=(3, 3, True),
    different_ints=(3, 4, False),
    ragged_lists=([[0, 1, 2], [3]], [[0, 1, 2], [3]], True),
    different_ragged_lists=([[0, 1, 2], [3]], [[0, 1], [2, 3]], False),
    arrays=(np.array([1, 2]), np.array([1, 2]), True),
    different_shapes=(np.array([1, 2]), np.array([1, 2, 3]), False),
    objects=(_Point(1, [2]), _Point(1, [2]), True),
    different_objects=(_Point(1, [2]), _Point(1, [3]), False),
    dict_of_arrays=({"a": np.zeros(2)}, {"a": np.zeros(2)}, True),
    list_and_tuple=([1, 2], (1, 2), False),
)
def test_same_state(first: tp.Any, second: tp.Any, expected: bool) -> None:
    assert LineWalk().same_state(first, second) is expected
