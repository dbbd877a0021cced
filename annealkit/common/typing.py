# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Definitions of some convenient types.
"""
# pylint: disable=unused-import
# structures
from typing import Any as Any
from typing import Generic as Generic
from typing import Type as Type
from typing import TypeVar as TypeVar
from typing import Optional as Optional
from typing import Union as Union

# containers
from typing import Dict as Dict
from typing import Tuple as Tuple
from typing import List as List
from typing import Sequence as Sequence
from typing import NamedTuple as NamedTuple
from typing import MutableMapping as MutableMapping

# iterables
from typing import Iterator as Iterator

# others
from typing import Callable as Callable
from typing import Hashable as Hashable
from typing import TextIO as TextIO
from typing_extensions import Protocol
from typing_extensions import Literal


StopReason = Literal["temperature", "iteration_cap", "early_stopping"]


# %% Protocol definitions for cooling schedules


class ScheduleLike(Protocol):
    # pylint: disable=pointless-statement, unused-argument

    def __call__(self, time: int, temperature: float) -> float:
        ...
