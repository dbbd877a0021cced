# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.


# base classes


class AnnealkitError(Exception):
    """Base class for error raised by annealkit"""


class AnnealkitWarning(Warning):
    pass


# errors
# pylint: disable=too-many-ancestors


class AnnealkitEarlyStopping(StopIteration, AnnealkitError):
    """Stops the search loop if raised"""


class AnnealkitRuntimeError(RuntimeError, AnnealkitError):
    """Runtime error raised by annealkit"""


class AnnealkitTypeError(TypeError, AnnealkitError):
    """Type error raised by annealkit"""


class AnnealkitValueError(ValueError, AnnealkitError):
    """Value error raised by annealkit"""


class ContractViolationError(AssertionError, AnnealkitError):
    """A problem, a schedule or a caller broke the contract the engine relies upon.
    This is a programming error, the search cannot continue.
    """


class AcceptanceProbabilityError(ContractViolationError):
    """The Metropolis acceptance probability is not within [0, 1]
    (typically a non-positive temperature or a NaN cost)
    """


class StateMutationError(ContractViolationError):
    """The problem modified (or returned) the state it was given while generating a neighbor"""


class TemperatureError(ContractViolationError):
    """The initial temperature or a temperature returned by the schedule is NaN"""


# warnings


class AnnealkitRuntimeWarning(RuntimeWarning, AnnealkitWarning):
    """Runtime warning raised by annealkit"""


class InefficientSettingsWarning(AnnealkitRuntimeWarning):
    """Search settings make the run useless (eg: non-positive initial temperature)"""
