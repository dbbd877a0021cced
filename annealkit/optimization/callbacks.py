# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import sys
import time
import logging
import numpy as np
import annealkit.common.typing as tp
from annealkit.common import errors
from . import base

global_logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------------------

class SearchReport:
    """Textual report of a search result, to register as a "finish" callback
    or to call directly on a result.

    Parameters
    ----------
    file: text stream (optional)
        where to write the report (defaults to stdout at the time of the call)
    """

    def __init__(self, file: tp.Optional[tp.TextIO] = None) -> None:
        self._file = file

    def __call__(self, annealer: base.Annealer[tp.Any], result: base.SearchResult) -> None:
        self.write(annealer.problem, result)

    def write(self, problem: tp.Any, result: base.SearchResult) -> None:
        """Writes the best state and its cost, along with the cost of the final state"""
        stream = sys.stdout if self._file is None else self._file
        print("Best state found:", file=stream)
        problem.print_state(result.best_state, file=stream)
        print(f"Best cost found: {result.best_cost}", file=stream)
        print(f"Final cost: {result.current_cost}", file=stream)
        print(
            f"Iterations: {result.num_iterations} ({result.num_accepted} accepted moves), "
            f"stopped by: {result.stop_reason}",
            file=stream,
        )

# -------------------------------------------------------------------------------------

class SearchLogger:
    """Logger to register as "step" callback in an annealer, for logging
    the progress of the search regularly.

    Parameters
    ----------
    logger:
        given logger that callback will use to log
    log_level:
        log level that logger will write to
    log_interval_iterations: int
        max number of iterations before performing another log
    log_interval_seconds:
        max number of seconds before performing another log
    """

    def __init__(
        self,
        *,
        logger: logging.Logger = global_logger,
        log_level: int = logging.INFO,
        log_interval_iterations: int = 1000,
        log_interval_seconds: float = 60.0,
    ) -> None:
        assert log_interval_iterations > 0
        assert log_interval_seconds > 0
        self._logger = logger
        self._log_level = log_level
        self._log_interval_iterations = int(log_interval_iterations)
        self._log_interval_seconds = log_interval_seconds
        self._next_iteration = self._log_interval_iterations
        self._next_time = time.time() + log_interval_seconds

    def __call__(
        self, annealer: base.Annealer[tp.Any], candidate: tp.Any, candidate_cost: float, accepted: bool
    ) -> None:
        if time.time() >= self._next_time or annealer.num_iterations >= self._next_iteration:
            self._next_time = time.time() + self._log_interval_seconds
            self._next_iteration = annealer.num_iterations + self._log_interval_iterations
            self._logger.log(
                self._log_level,
                "After %s iterations (temperature %.6g), current cost is %s and best cost is %s",
                annealer.num_iterations,
                annealer.temperature,
                annealer.current_cost,
                min(annealer.best_cost, annealer.current_cost),
            )

# -------------------------------------------------------------------------------------

class EarlyStopping:
    """Callback for stopping the :code:`search` method before the temperature
    reaches 0.

    Parameters
    ----------
    stopping_criterion: func(annealer) -> bool
        function that takes the current annealer as input and returns True
        if the search must be stopped

    Note
    ----
    This callback must be registered on the "propose" event only.

    Example
    -------
    In the following code, the :code:`search` method will be stopped after 100 iterations

    >>> early_stopping = EarlyStopping(lambda ann: ann.num_iterations >= 100)
    >>> annealer.register_callback("propose", early_stopping)
    >>> annealer.search()

    Stopping as soon as a perfect N-Queens solution is found:

    >>> annealer.register_callback("propose", EarlyStopping.cost_threshold(0))
    """

    def __init__(self, stopping_criterion: tp.Callable[[base.Annealer[tp.Any]], bool]) -> None:
        self.stopping_criterion = stopping_criterion

    def __call__(self, annealer: base.Annealer[tp.Any], *args: tp.Any, **kwargs: tp.Any) -> None:
        if args or kwargs:
            raise errors.AnnealkitRuntimeError("EarlyStopping must be registered on the propose event")
        if self.stopping_criterion(annealer):
            raise errors.AnnealkitEarlyStopping("Early stopping criterion is reached")

    @classmethod
    def timer(cls, max_duration: float) -> "EarlyStopping":
        """Early stop when max_duration seconds has been reached (from the first iteration)"""
        return cls(_DurationCriterion(max_duration))

    @classmethod
    def no_improvement_stopper(cls, tolerance_window: int) -> "EarlyStopping":
        """Early stop when the best cost didn't decrease during tolerance_window iterations"""
        return cls(_CostImprovementToleranceCriterion(tolerance_window))

    @classmethod
    def cost_threshold(cls, threshold: float) -> "EarlyStopping":
        """Early stop as soon as a state with a cost lower or equal to the threshold is found"""
        return cls(_CostThresholdCriterion(threshold))


class _DurationCriterion:
    def __init__(self, max_duration: float) -> None:
        self._start = float("inf")
        self._max_duration = max_duration

    def __call__(self, annealer: base.Annealer[tp.Any]) -> bool:
        if np.isinf(self._start):
            self._start = time.time()
        return time.time() > self._start + self._max_duration


class _CostImprovementToleranceCriterion:
    def __init__(self, tolerance_window: int) -> None:
        self._tolerance_window: int = tolerance_window
        self._best_value: tp.Optional[float] = None
        self._tolerance_count: int = 0

    def __call__(self, annealer: base.Annealer[tp.Any]) -> bool:
        best = min(annealer.best_cost, annealer.current_cost)
        if self._best_value is None:
            self._best_value = best
            return False
        if self._best_value <= best:
            self._tolerance_count += 1
        else:
            self._tolerance_count = 0
            self._best_value = best
        return self._tolerance_count > self._tolerance_window


class _CostThresholdCriterion:
    def __init__(self, threshold: float) -> None:
        self._threshold = threshold

    def __call__(self, annealer: base.Annealer[tp.Any]) -> bool:
        return min(annealer.best_cost, annealer.current_cost) <= self._threshold
