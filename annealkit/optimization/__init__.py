# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .base import Annealer  # main engine
from .base import SearchResult  # returned by Annealer.search
from .base import metropolis_accept
from . import schedules
from . import callbacks
