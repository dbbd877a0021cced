# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import copy
import math
import logging
import warnings
import numpy as np
import annealkit.common.typing as tp
from annealkit.common import errors
from annealkit.problems import base as pbase


logger = logging.getLogger(__name__)

S = tp.TypeVar("S")
CALLBACK_EVENTS = ("propose", "step", "finish")
_SearchCallBack = tp.Union[
    tp.Callable[["Annealer[tp.Any]"], None],
    tp.Callable[["Annealer[tp.Any]", tp.Any, float, bool], None],
    tp.Callable[["Annealer[tp.Any]", "SearchResult"], None],
]


def acceptance_probability(delta: float, temperature: float) -> float:
    """Metropolis probability :code:`exp(delta / temperature)` of moving to a candidate
    which is not better than the current state (:code:`delta <= 0`).

    Raises
    ------
    AcceptanceProbabilityError
        if the temperature is not strictly positive or if the probability is not within [0, 1]
        (eg: because of a NaN cost)
    """
    if not temperature > 0:
        raise errors.AcceptanceProbabilityError(
            f"acceptance test requires a strictly positive temperature (got {temperature})"
        )
    probability = math.exp(delta / temperature)
    if not 0 <= probability <= 1:
        raise errors.AcceptanceProbabilityError(
            f"acceptance probability {probability} outside [0, 1] (delta={delta}, temperature={temperature})"
        )
    return probability


def metropolis_accept(delta: float, temperature: float, random_state: np.random.RandomState) -> bool:
    """Metropolis acceptance criterion

    Parameters
    ----------
    delta: float
        cost improvement :code:`cost(current) - cost(candidate)`, positive if the candidate is better
    temperature: float
        current temperature (strictly positive)
    random_state: np.random.RandomState
        random state providing the uniform draw

    Returns
    -------
    bool
        True if the candidate is better, otherwise True with probability :code:`exp(delta / temperature)`
    """
    if delta > 0:
        return True
    return acceptance_probability(delta, temperature) > random_state.rand()


class SearchResult(tp.NamedTuple):
    """Outcome of a search.

    best_cost is the cost of best_state, while current_cost is the cost of
    the state the search was on when it stopped (both can differ).
    """

    best_state: tp.Any
    best_cost: float
    current_state: tp.Any
    current_cost: float
    num_iterations: int
    num_accepted: int
    time: int
    temperature: float
    stop_reason: tp.StopReason


class SearchContext(tp.Generic[S]):
    """Mutable record of a running search, owned by the Annealer
    and discarded at the end of the search.
    """

    def __init__(self, problem: pbase.Problem[S], time: int, temperature: float) -> None:
        self.problem = problem
        self.time = time
        self.temperature = temperature
        self.current_state: S = problem.get_init_state()
        self.current_cost = float(problem.cost(self.current_state))
        self.best_state = self.current_state
        self.best_cost = self.current_cost
        self.num_iterations = 0
        self.num_accepted = 0

    @property
    def running(self) -> bool:
        return self.temperature > 0

    def update_best(self) -> bool:
        """Records the current state as best if it is strictly cheaper"""
        if self.current_cost < self.best_cost:
            self.best_state = self.current_state
            self.best_cost = self.current_cost
            return True
        return False

    def result(self, stop_reason: tp.StopReason) -> SearchResult:
        return SearchResult(
            best_state=self.best_state,
            best_cost=self.best_cost,
            current_state=self.current_state,
            current_cost=self.current_cost,
            num_iterations=self.num_iterations,
            num_accepted=self.num_accepted,
            time=self.time,
            temperature=self.temperature,
            stop_reason=stop_reason,
        )


class Annealer(tp.Generic[S]):  # pylint: disable=too-many-instance-attributes
    """Simulated annealing engine.

    At each iteration, the engine asks the problem for a neighbor of the current state,
    moves to it according to the Metropolis criterion, increments the time and
    cools down the temperature through the schedule. The search ends when the temperature
    is not strictly positive anymore, and the best state encountered is returned.

    Parameters
    ----------
    problem: Problem
        the search domain
    schedule: callable
        cooling schedule :code:`schedule(time, temperature) -> temperature`, see the schedules module.
        It must eventually return a non-positive temperature, otherwise the search never ends.
    init_time: int
        time at the start of the search
    init_temperature: float
        temperature at the start of the search, nothing is searched if it is not strictly positive
    max_iterations: int (optional)
        if provided, the search stops after this number of iterations even if the temperature
        is still positive
    seed: int (optional)
        if provided, seeds the random state of the problem, which the engine also pulls from
    check_contract: bool
        if True, checks at each iteration that the problem does not modify the current state
        while generating a neighbor, through :code:`problem.same_state` (costly: the state is copied)

    Note
    ----
    Each call to :code:`search` starts a new search from a new initial state.
    """

    def __init__(
        self,
        problem: pbase.Problem[S],
        schedule: tp.ScheduleLike,
        init_time: int = 1,
        init_temperature: float = 1.0,
        *,
        max_iterations: tp.Optional[int] = None,
        seed: tp.Optional[int] = None,
        check_contract: bool = False,
    ) -> None:
        if not isinstance(problem, pbase.Problem):
            raise errors.AnnealkitTypeError(f"problem must be a Problem instance (got {type(problem)})")
        if not callable(schedule):
            raise errors.AnnealkitTypeError(f"schedule must be callable (got {schedule!r})")
        if max_iterations is not None and max_iterations < 0:
            raise errors.AnnealkitValueError(f"max_iterations must be non-negative (got {max_iterations})")
        self.problem = problem
        self.schedule = schedule
        self.init_time = int(init_time)
        self.init_temperature = float(init_temperature)
        self.max_iterations = max_iterations
        self.check_contract = check_contract
        if seed is not None:
            self.problem.random_state = np.random.RandomState(seed)
        self.name = self.__class__.__name__  # printed name in repr
        self._callbacks: tp.Dict[str, tp.List[tp.Any]] = {}
        self._context: tp.Optional[SearchContext[S]] = None

    @property
    def _rng(self) -> np.random.RandomState:
        """np.random.RandomState: random state of the problem, the engine must pull from it."""
        return self.problem.random_state

    @property
    def context(self) -> SearchContext[S]:
        """SearchContext: state of the running search (only available during a search)"""
        if self._context is None:
            raise errors.AnnealkitRuntimeError("No search is running")
        return self._context

    @property
    def is_running(self) -> bool:
        return self._context is not None and self._context.running

    @property
    def time(self) -> int:
        return self.context.time

    @property
    def temperature(self) -> float:
        return self.context.temperature

    @property
    def current_state(self) -> S:
        return self.context.current_state

    @property
    def current_cost(self) -> float:
        return self.context.current_cost

    @property
    def best_state(self) -> S:
        return self.context.best_state

    @property
    def best_cost(self) -> float:
        return self.context.best_cost

    @property
    def num_iterations(self) -> int:
        return self.context.num_iterations

    def __repr__(self) -> str:
        return (
            f"Instance of {self.name}(problem={self.problem!r}, schedule={self.schedule!r}, "
            f"init_time={self.init_time}, init_temperature={self.init_temperature})"
        )

    def register_callback(self, name: str, callback: _SearchCallBack) -> None:
        """Add a callback method called at some point of the search. This can be useful for
        custom logging, reporting or stopping.

        Parameters
        ----------
        name: str
            event to register the callback for:

            - :code:`"propose"`: before generating a neighbor, called as :code:`callback(annealer)`
            - :code:`"step"`: after the acceptance test and cooling, called as
              :code:`callback(annealer, candidate, candidate_cost, accepted)`
            - :code:`"finish"`: at the end of the search, called as :code:`callback(annealer, result)`.
              An error raised by a "finish" callback propagates out of :code:`search` and the result is lost,
              so reporting which may fail is best done on the returned result.
        callback: callable
            a callable taking the parameters described above
        """
        assert name in CALLBACK_EVENTS, f"Only {CALLBACK_EVENTS} events can have callbacks (not {name})"
        self._callbacks.setdefault(name, []).append(callback)

    def remove_all_callbacks(self) -> None:
        """Removes all registered callables"""
        self._callbacks = {}

    def accept(self, delta: float, temperature: float) -> bool:
        """Metropolis acceptance test using the random state of the problem"""
        return metropolis_accept(delta, temperature, self._rng)

    def search(self) -> SearchResult:
        """Runs the search until the temperature is not strictly positive anymore
        (or the iteration cap / an early stopping callback ends it).

        Returns
        -------
        SearchResult
            the best state found and its cost, as well as the final state and its cost
        """
        if math.isnan(self.init_temperature):
            raise errors.TemperatureError("Initial temperature cannot be NaN")
        if self.init_temperature <= 0:
            warnings.warn(
                f"Initial temperature {self.init_temperature} is not strictly positive, "
                "the initial state will be returned without searching.",
                errors.InefficientSettingsWarning,
            )
        self._context = context = SearchContext(self.problem, self.init_time, self.init_temperature)
        logger.debug("Starting %r from cost %s", self, context.current_cost)
        stop_reason: tp.StopReason = "temperature"
        try:
            while context.running:
                if self.max_iterations is not None and context.num_iterations >= self.max_iterations:
                    stop_reason = "iteration_cap"
                    logger.info(
                        "Stopping after %s iterations (cap reached) at temperature %s",
                        context.num_iterations,
                        context.temperature,
                    )
                    break
                try:
                    for callback in self._callbacks.get("propose", []):
                        callback(self)
                except errors.AnnealkitEarlyStopping as e:
                    stop_reason = "early_stopping"
                    logger.info("Stopping after %s iterations: %s", context.num_iterations, e)
                    break
                self._step(context)
            context.update_best()  # the last accepted state was not compared yet
            result = context.result(stop_reason)
            for callback in self._callbacks.get("finish", []):
                callback(self, result)
        finally:
            self._context = None
        logger.debug(
            "Search ended (%s) after %s iterations with best cost %s",
            result.stop_reason,
            result.num_iterations,
            result.best_cost,
        )
        return result

    def _step(self, context: SearchContext[S]) -> None:
        problem = context.problem
        context.update_best()
        current = context.current_state
        snapshot = copy.deepcopy(current) if self.check_contract else None
        candidate = problem.generate_new_state(current)
        if candidate is current:
            raise errors.StateMutationError(
                f"{problem.name}.generate_new_state returned the state it was provided instead of a new one"
            )
        if snapshot is not None and not problem.same_state(snapshot, current):
            raise errors.StateMutationError(f"{problem.name}.generate_new_state modified the state it was provided")
        candidate_cost = float(problem.cost(candidate))
        accepted = self.accept(context.current_cost - candidate_cost, context.temperature)
        if accepted:
            context.current_state = candidate
            context.current_cost = candidate_cost
            context.num_accepted += 1
        context.time += 1
        context.temperature = float(self.schedule(context.time, context.temperature))
        context.num_iterations += 1
        if math.isnan(context.temperature):
            raise errors.TemperatureError(
                f"{self.schedule!r} returned a NaN temperature at time {context.time}"
            )
        for callback in self._callbacks.get("step", []):
            callback(self, candidate, candidate_cost, accepted)
