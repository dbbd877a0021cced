# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import functools
from . import errors


X = tp.TypeVar("X")


# pylint does not understand Dict[str, X],
# so we reimplement the MutableMapping interface
class Registry(tp.MutableMapping[str, X]):
    """Registers schedules or problems by name, so that they can be
    selected from the command line.
    """

    def __init__(self) -> None:
        super().__init__()
        self.data: tp.Dict[str, X] = {}
        self._information: tp.Dict[str, tp.Dict[tp.Hashable, tp.Any]] = {}

    def register(self, obj: X, info: tp.Optional[tp.Dict[tp.Hashable, tp.Any]] = None) -> X:
        """Decorator method for registering a class under its own name
        (use register_name for a custom one).
        """
        name = getattr(obj, "__name__", obj.__class__.__name__)
        self.register_name(name, obj, info)
        return obj

    def register_name(self, name: str, obj: X, info: tp.Optional[tp.Dict[tp.Hashable, tp.Any]] = None) -> None:
        if name in self:
            raise errors.AnnealkitRuntimeError(f'Encountered a name collision "{name}"')
        self[name] = obj
        if info is not None:
            assert isinstance(info, dict)
            self._information[name] = info

    def register_as(self, name: str, **info: tp.Any) -> tp.Callable[[X], X]:
        """Decorator for registering an object with a provided name and optional information"""

        def _register(obj: X) -> X:
            self.register_name(name, obj, info if info else None)
            return obj

        return _register

    def register_with_info(self, **info: tp.Any) -> tp.Callable[[X], X]:
        return functools.partial(self.register, info=info)

    def get_info(self, name: str) -> tp.Dict[tp.Hashable, tp.Any]:
        if name not in self:
            raise errors.AnnealkitValueError(f'"{name}" is not registered (choose among {sorted(self)}).')
        return self._information.setdefault(name, {})

    def __getitem__(self, key: str) -> X:
        if key not in self.data:
            raise KeyError(f'"{key}" is not registered (choose among {sorted(self.data)}).')
        return self.data[key]

    def __setitem__(self, key: str, value: X) -> None:
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __iter__(self) -> tp.Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)
