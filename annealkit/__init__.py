# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .common import typing as typing
from .common import errors as errors
from .problems import Problem as Problem
from . import problems as problems
from .optimization import Annealer as Annealer
from .optimization import SearchResult as SearchResult
from .optimization import schedules as schedules
from .optimization import callbacks as callbacks


__all__ = ["Annealer", "SearchResult", "Problem", "problems", "schedules", "callbacks", "errors", "typing"]


__version__ = "0.1.0"
