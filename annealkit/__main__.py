# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import os
import argparse
import logging
import annealkit.common.typing as tp
from annealkit import problems
from annealkit.optimization import Annealer
from annealkit.optimization import SearchResult
from annealkit.optimization import schedules
from annealkit.optimization import callbacks


def build_schedule(
    name: str,
    max_time: int = 100000,
    init_temperature: float = 1e10,
    alpha: float = 0.99,
    min_temperature: float = 1e-3,
) -> tp.ScheduleLike:
    """Instantiates a schedule from the registry, only forwarding the settings it uses"""
    if name == "linear":
        return schedules.LinearSchedule(max_time)
    if name == "absolute-linear":
        return schedules.AbsoluteLinearSchedule(init_temperature, max_time)
    if name == "exponential":
        return schedules.ExponentialSchedule(alpha=alpha, min_temperature=min_temperature)
    return schedules.registry[name]()  # raises a KeyError listing the available schedules


# pylint: disable=too-many-arguments
def launch(
    num_queens: int = 16,
    schedule: str = "linear",
    init_time: int = 1,
    init_temperature: float = 1e10,
    max_time: int = 100000,
    alpha: float = 0.99,
    min_temperature: float = 1e-3,
    max_iterations: tp.Optional[int] = None,
    max_duration: tp.Optional[float] = None,
    seed: tp.Optional[int] = None,
    log_interval: int = 10000,
) -> SearchResult:
    """Solves the N-Queens problem by simulated annealing and prints the report"""
    problem = problems.registry["nqueens"](num_queens)
    annealer = Annealer(
        problem,
        build_schedule(
            schedule,
            max_time=max_time,
            init_temperature=init_temperature,
            alpha=alpha,
            min_temperature=min_temperature,
        ),
        init_time=init_time,
        init_temperature=init_temperature,
        max_iterations=max_iterations,
        seed=seed,
    )
    if max_duration is not None:
        annealer.register_callback("propose", callbacks.EarlyStopping.timer(max_duration))
    annealer.register_callback("step", callbacks.SearchLogger(log_interval_iterations=log_interval))
    result = annealer.search()
    # report once the result is secured
    try:
        callbacks.SearchReport().write(problem, result)
    except Exception as e:  # pylint: disable=broad-except
        print(f"Failed to print the best state ({e!r})")
        print(f"Best cost found: {result.best_cost}\nFinal cost: {result.current_cost}")
    return result


def get_args(argv: tp.Optional[tp.Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Solve the N-Queens problem with simulated annealing.")
    parser.add_argument("--num-queens", type=int, default=16, help="Number of queens (and size of the board)")
    parser.add_argument(
        "--schedule",
        type=str,
        default="linear",
        choices=sorted(schedules.registry),
        help="Name of the cooling schedule",
    )
    parser.add_argument("--init-time", type=int, default=1, help="Time at the start of the search")
    parser.add_argument(
        "--init-temperature", type=float, default=1e10, help="Temperature at the start of the search"
    )
    parser.add_argument(
        "--max-time",
        type=int,
        default=100000,
        help="Time at which the temperature reaches 0 (linear and absolute-linear schedules)",
    )
    parser.add_argument("--alpha", type=float, default=0.99, help="Cooling factor (exponential schedule)")
    parser.add_argument(
        "--min-temperature",
        type=float,
        default=1e-3,
        help="Temperature under which the search stops (exponential schedule)",
    )
    parser.add_argument(
        "--max-iterations", type=int, default=None, help="Stop after this number of iterations"
    )
    parser.add_argument(
        "--max-duration", type=float, default=None, help="Stop after this duration (in seconds)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Use a seed for reproducibility of the search"
    )
    parser.add_argument(
        "--log-interval",
        type=int,
        default=10000,
        help="Number of iterations between two progress logs (visible with --verbosity INFO)",
    )
    parser.add_argument(
        "--verbosity",
        type=str,
        default=os.environ.get("LOGLEVEL", "WARNING"),
        help="Logging level (defaults to the LOGLEVEL environment variable, or WARNING)",
    )
    return parser.parse_args(argv)


def main(argv: tp.Optional[tp.Sequence[str]] = None) -> int:
    args = get_args(argv)
    logging.basicConfig(level=args.verbosity.upper())
    launch(
        num_queens=args.num_queens,
        schedule=args.schedule,
        init_time=args.init_time,
        init_temperature=args.init_temperature,
        max_time=args.max_time,
        alpha=args.alpha,
        min_temperature=args.min_temperature,
        max_iterations=args.max_iterations,
        max_duration=args.max_duration,
        seed=args.seed,
        log_interval=args.log_interval,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
