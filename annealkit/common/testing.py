# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import inspect
import typing as tp
try:
    import pytest
except ImportError:
    pass  # makes most of this module usable without pytest
import numpy as np


def printed_assert_equal(actual: tp.Any, desired: tp.Any, err_msg: str = '') -> None:
    try:
        np.testing.assert_equal(actual, desired, err_msg=err_msg)
    except AssertionError as e:
        print("\n" + "# " * 12 + "DEBUG MESSAGE " + "# " * 12)
        print(f"Expected: {desired}\nbut got:  {actual}")
        raise e


class parametrized:
    """Simplified decorator API for specifying named parametrized test with pytests
    (like with old "genty" package)
    See example of use in test_testing

    Parameters
    ----------
    **kwargs:
        name of the argument is converted as id of the experiments, and the provided tuple
        contains a value for each of the arguments of the underlying function (in the definition order).
    """

    def __init__(self, **kwargs: tp.Tuple[tp.Any, ...]):
        self.ids = sorted(kwargs)
        self.params = tuple(kwargs[name] for name in self.ids)
        assert self.params
        self.num_params = len(self.params[0])
        assert all(isinstance(p, (tuple, list)) for p in self.params)
        assert all(self.num_params == len(p) for p in self.params[1:])

    def __call__(self, func: tp.Callable[..., None]) -> tp.Any:  # type is lost here :(
        names = list(inspect.signature(func).parameters.keys())
        assert len(names) == self.num_params, f"Parameter names: {names}"
        return pytest.mark.parametrize(
            ",".join(names), self.params if self.num_params > 1 else [p[0] for p in self.params], ids=self.ids)(func)


class TrajectoryRecorder:
    """Callback recording what happens at each step of a search,
    to be registered on the "step" event of an Annealer.
    """

    def __init__(self) -> None:
        self.temperatures: tp.List[float] = []
        self.candidate_costs: tp.List[float] = []
        self.accepted: tp.List[bool] = []
        self.current_costs: tp.List[float] = []
        self.best_costs: tp.List[float] = []

    def __call__(self, annealer: tp.Any, candidate: tp.Any, candidate_cost: float, accepted: bool) -> None:
        self.temperatures.append(annealer.temperature)
        self.candidate_costs.append(candidate_cost)
        self.accepted.append(accepted)
        self.current_costs.append(annealer.current_cost)
        self.best_costs.append(annealer.best_cost)

    def __len__(self) -> int:
        return len(self.accepted)
