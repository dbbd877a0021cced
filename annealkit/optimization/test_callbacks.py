# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import io
import os
import time
import logging
import typing as tp
import numpy as np
import pytest
from annealkit.common import errors
from annealkit.problems import base as pbase
from annealkit.problems.nqueens import NQueens
from . import base
from . import schedules
from . import callbacks


class _Constant(pbase.Problem[int]):
    """Counter with a constant cost, which therefore never improves"""

    def get_init_state(self) -> int:
        return 0

    def generate_new_state(self, current: int) -> int:
        return current + 1

    def cost(self, state: int) -> float:
        return 3.0


def _annealer(max_time: int = 50, **kwargs: tp.Any) -> base.Annealer[np.ndarray]:
    return base.Annealer(
        NQueens(8), schedules.AbsoluteLinearSchedule(1.0, max_time), init_temperature=1.0, seed=0, **kwargs
    )


def test_search_report() -> None:
    result = base.SearchResult(
        best_state=np.array([1, 3, 0, 2]),
        best_cost=0.0,
        current_state=np.array([0, 1, 2, 3]),
        current_cost=6.0,
        num_iterations=10,
        num_accepted=4,
        time=11,
        temperature=0.0,
        stop_reason="temperature",
    )
    stream = io.StringIO()
    callbacks.SearchReport(file=stream).write(NQueens(4), result)
    expected = [
        "Best state found:",
        " .  .  Q  . ",
        " Q  .  .  . ",
        " .  .  .  Q ",
        " .  Q  .  . ",
        "Best cost found: 0.0",
        "Final cost: 6.0",
        "Iterations: 10 (4 accepted moves), stopped by: temperature",
    ]
    assert stream.getvalue() == "\n".join(expected) + "\n"


def test_search_report_as_callback(capsys: tp.Any) -> None:
    annealer = _annealer()
    annealer.register_callback("finish", callbacks.SearchReport())
    result = annealer.search()
    out = capsys.readouterr().out
    assert out.startswith("Best state found:\n")
    assert f"Best cost found: {result.best_cost}\n" in out
    assert f"Final cost: {result.current_cost}\n" in out
    assert out.endswith("Iterations: 49 ({} accepted moves), stopped by: temperature\n".format(result.num_accepted))


def test_search_logger(caplog: tp.Any) -> None:
    logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"))
    logger = logging.getLogger(__name__)
    annealer = _annealer()
    annealer.register_callback(
        "step",
        callbacks.SearchLogger(
            logger=logger, log_level=logging.INFO, log_interval_iterations=10, log_interval_seconds=60
        ),
    )
    with caplog.at_level(logging.INFO):
        annealer.search()
    records = [r for r in caplog.records if r.name == __name__]
    assert len(records) == 4  # after 10, 20, 30 and 40 iterations
    assert "After 10 iterations (temperature 0.78), current cost is" in caplog.text


def test_early_stopping() -> None:
    annealer = _annealer()
    annealer.register_callback("propose", callbacks.EarlyStopping(lambda ann: ann.num_iterations >= 5))
    annealer.register_callback("propose", callbacks.EarlyStopping.timer(100))  # should not get triggered
    result = annealer.search()
    assert result.num_iterations == 5
    assert result.stop_reason == "early_stopping"


def test_early_stopping_cost_threshold() -> None:
    annealer = _annealer()
    annealer.register_callback("propose", callbacks.EarlyStopping.cost_threshold(1000))
    result = annealer.search()
    assert result.num_iterations == 0
    assert result.stop_reason == "early_stopping"


def test_early_stopping_no_improvement() -> None:
    annealer = base.Annealer(_Constant(), schedules.LinearSchedule(100), init_temperature=1.0)
    annealer.register_callback("propose", callbacks.EarlyStopping.no_improvement_stopper(3))
    result = annealer.search()
    assert result.num_iterations == 4
    assert result.current_state == 4


def test_early_stopping_timer() -> None:
    annealer = base.Annealer(
        _Constant(), schedules.ExponentialSchedule(1 - 1e-12, 1e-300), init_temperature=1.0, max_iterations=10 ** 9
    )
    annealer.register_callback("propose", callbacks.EarlyStopping.timer(0.05))
    result = annealer.search()
    assert result.stop_reason == "early_stopping"
    assert result.num_iterations > 0


def test_duration_criterion() -> None:
    crit = callbacks._DurationCriterion(0.01)
    annealer = _annealer()
    assert not crit(annealer)
    assert not crit(annealer)
    time.sleep(0.02)
    assert crit(annealer)


def test_early_stopping_on_wrong_event() -> None:
    annealer = _annealer()
    annealer.register_callback("step", callbacks.EarlyStopping.cost_threshold(1000))
    with pytest.raises(errors.AnnealkitRuntimeError):
        annealer.search()
