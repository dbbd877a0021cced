# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Cooling schedules.

A cooling schedule is any callable :code:`schedule(time, temperature) -> temperature`
which is a pure function of its inputs. The Annealer applies it once per iteration,
after incrementing the time, and stops as soon as it returns a non-positive temperature.
A schedule which never goes down to 0 makes the search run forever (unless an
iteration cap or an early stopping callback is used).
"""

import annealkit.common.typing as tp
from annealkit.common import errors
from annealkit.common.decorators import Registry


registry: Registry[tp.Callable[..., tp.ScheduleLike]] = Registry()


class _Schedule:
    """Provides a repr listing the schedule settings"""

    def __repr__(self) -> str:
        params = ", ".join(f"{x}={y!r}" for x, y in sorted(self.__dict__.items()) if not x.startswith("_"))
        return f"{self.__class__.__name__}({params})"


@registry.register_as("linear")
class LinearSchedule(_Schedule):
    """Reference schedule :code:`temperature * (1 - time / max_time)`.

    The temperature is multiplied by a factor decreasing linearly with time,
    which reaches 0 when :code:`time == max_time`. Since the factor compounds,
    the temperature drops very fast and may underflow to 0 well before :code:`max_time`.

    Parameters
    ----------
    max_time: int
        time at which the temperature is 0 at the latest
    """

    def __init__(self, max_time: int) -> None:
        if max_time <= 0:
            raise errors.AnnealkitValueError(f"max_time must be strictly positive (got {max_time})")
        self.max_time = max_time

    def __call__(self, time: int, temperature: float) -> float:
        return temperature * (1 - time / float(self.max_time))


@registry.register_as("absolute-linear")
class AbsoluteLinearSchedule(_Schedule):
    """Straight line from the initial temperature down to 0 at :code:`max_time`:
    :code:`initial_temperature * (1 - time / max_time)`.
    The temperature argument is ignored.

    Parameters
    ----------
    initial_temperature: float
        temperature of the line at time 0
    max_time: int
        time at which the temperature reaches exactly 0
    """

    def __init__(self, initial_temperature: float, max_time: int) -> None:
        if max_time <= 0:
            raise errors.AnnealkitValueError(f"max_time must be strictly positive (got {max_time})")
        if initial_temperature <= 0:
            raise errors.AnnealkitValueError(
                f"initial_temperature must be strictly positive (got {initial_temperature})"
            )
        self.initial_temperature = initial_temperature
        self.max_time = max_time

    def __call__(self, time: int, temperature: float) -> float:  # pylint: disable=unused-argument
        return self.initial_temperature * (1 - time / float(self.max_time))


@registry.register_as("exponential")
class ExponentialSchedule(_Schedule):
    """Geometric cooling :code:`temperature * alpha`, cut to 0 once
    the temperature falls below :code:`min_temperature`.

    Parameters
    ----------
    alpha: float
        cooling factor, in ]0, 1[
    min_temperature: float
        the temperature is set to 0 (which ends the search) below this value
    """

    def __init__(self, alpha: float = 0.99, min_temperature: float = 1e-3) -> None:
        if not 0 < alpha < 1:
            raise errors.AnnealkitValueError(f"alpha must be in ]0, 1[ for the search to end (got {alpha})")
        if min_temperature <= 0:
            raise errors.AnnealkitValueError(
                f"min_temperature must be strictly positive (got {min_temperature})"
            )
        self.alpha = alpha
        self.min_temperature = min_temperature

    def __call__(self, time: int, temperature: float) -> float:  # pylint: disable=unused-argument
        temperature = temperature * self.alpha
        return temperature if temperature >= self.min_temperature else 0.0
