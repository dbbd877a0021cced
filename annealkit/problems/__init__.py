# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .base import Problem as Problem
from .base import registry as registry
from .nqueens import NQueens as NQueens
