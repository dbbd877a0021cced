# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import sys
import inspect
from abc import ABC, abstractmethod
import numpy as np
import annealkit.common.typing as tp
from annealkit.common.decorators import Registry

S = tp.TypeVar("S")
P = tp.TypeVar("P", bound="Problem")  # type: ignore

registry: Registry[tp.Type["Problem"]] = Registry()  # type: ignore


def _same_value(first: tp.Any, second: tp.Any) -> bool:
    """Structural equality of two states, going through containers and
    through the attributes of objects which do not define their own equality
    """
    if first is second:
        return True
    if isinstance(first, np.ndarray) or isinstance(second, np.ndarray):
        return bool(np.array_equal(first, second))
    if type(first) is not type(second):  # pylint: disable=unidiomatic-typecheck
        return False
    if isinstance(first, dict):
        return first.keys() == second.keys() and all(_same_value(first[k], second[k]) for k in first)
    if isinstance(first, (list, tuple)):
        return len(first) == len(second) and all(_same_value(x, y) for x, y in zip(first, second))
    if type(first).__eq__ is object.__eq__ and hasattr(first, "__dict__"):
        return _same_value(vars(first), vars(second))
    return bool(np.all(first == second))


class Problem(ABC, tp.Generic[S]):
    """Search domain which can be explored by an Annealer.

    A problem provides the four capabilities the engine relies upon:

    - :code:`get_init_state()` which provides a (usually random) starting state,
    - :code:`generate_new_state(current)` which provides one neighbor of a state,
    - :code:`cost(state)` which evaluates a state (lower is better),
    - :code:`print_state(state)` which renders a state for humans.

    Parameters
    ----------
    seed: int (optional)
        seed of the random state the problem (and the engine searching it) pulls from

    Notes
    -----
    - states are opaque for the engine, which keeps references to the current and best states
      across iterations. :code:`generate_new_state` must therefore return a *new* object and never
      modify the state it was given.
    - :code:`cost` must be deterministic and free of side effects, since it can be called
      several times on the same state.
    - the bool/int/str/float init arguments are recorded as descriptors, which are used in the repr
      and in reports.
    """

    def __new__(cls: tp.Type[P], *args: tp.Any, **kwargs: tp.Any) -> P:
        """Identifies initialization parameters during initialization and store them"""
        inst = object.__new__(cls)
        sig = inspect.signature(cls.__init__)
        callargs: tp.Dict[str, tp.Any] = {}
        try:
            boundargs = sig.bind(inst, *args, **kwargs)
        except TypeError:
            pass  # either a problem which will be caught later or an unpickling
        else:
            boundargs.apply_defaults()
            callargs = dict(boundargs.arguments)
            callargs.pop("self")
        inst._descriptors = {
            x: y for x, y in callargs.items() if isinstance(y, (str, int, float, bool)) and x != "seed"
        }
        inst._descriptors["problem_class"] = cls.__name__
        return inst

    def __init__(self, seed: tp.Optional[int] = None) -> None:
        self._descriptors: tp.Dict[str, tp.Any]  # filled by __new__
        self._random_state: tp.Optional[np.random.RandomState] = None  # lazy initialization
        if seed is not None:
            self.random_state = np.random.RandomState(seed)

    @property
    def random_state(self) -> np.random.RandomState:
        """Random state the problem and the engine searching it pull from.
        It can be seeded/replaced.
        """
        if self._random_state is None:
            seed = np.random.randint(2 ** 32, dtype=np.uint32)
            self._random_state = np.random.RandomState(seed)
        return self._random_state

    @random_state.setter
    def random_state(self, random_state: np.random.RandomState) -> None:
        self._random_state = random_state

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @property
    def descriptors(self) -> tp.Dict[str, tp.Any]:
        """Description of the problem, as a dict (class name and initialization settings)"""
        return dict(self._descriptors)  # avoid external modification

    def __repr__(self) -> str:
        params = [f"{x}={y!r}" for x, y in sorted(self._descriptors.items()) if x != "problem_class"]
        return f"{self.name}({', '.join(params)})"

    @abstractmethod
    def get_init_state(self) -> S:
        """Returns a starting state for the search"""

    @abstractmethod
    def generate_new_state(self, current: S) -> S:
        """Returns a new state, neighbor of the current one.
        The provided state must not be modified.
        """

    @abstractmethod
    def cost(self, state: S) -> float:
        """Returns the cost of the state (lower is better)"""

    def render(self, state: S) -> str:
        """Human readable representation of a state"""
        return repr(state)

    def print_state(self, state: S, file: tp.Optional[tp.TextIO] = None) -> None:
        """Prints a human readable representation of the state

        Parameters
        ----------
        state: S
            the state to print
        file: text stream (optional)
            where to write the representation (defaults to stdout)
        """
        print(self.render(state), file=sys.stdout if file is None else file)

    def same_state(self, first: S, second: S) -> bool:
        """Returns True if both states hold the same value.
        This is used to check that :code:`generate_new_state` does not modify the
        state it is provided with (see :code:`check_contract` in the Annealer).
        The default compares containers, arrays and object attributes structurally,
        and can be overridden for states with a custom notion of equality.
        """
        return _same_value(first, second)
