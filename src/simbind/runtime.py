"""runtime.py – Support classes for generated global-state bindings.

Global-state models keep their inputs and outputs in process-wide native
storage (``<model>_U`` / ``<model>_Y``).  Generated controllers use:

- :class:`GlobalStorage` to make sure only one controller drives that storage
  at a time;
- :class:`FieldView` to expose one member of the storage as a bounded,
  indexable array tagged with its enumeration member;
- :class:`ViewSet` to group the views of one direction (inputs or outputs).
"""

from __future__ import annotations

import ctypes
import enum
import threading
from collections.abc import Iterable, Iterator
from typing import Any

from simbind.errors import SimbindError


class StorageInUseError(SimbindError):
    """A second controller tried to bind storage that is already live."""


class ControllerClosedError(SimbindError):
    """The controller was terminated and can no longer step."""


class GlobalStorage:
    """Acquire/release guard for one model's process-wide native storage."""

    def __init__(self, model: str) -> None:
        self.model = model
        self._lock = threading.Lock()
        self._live = False

    @property
    def live(self) -> bool:
        return self._live

    def acquire(self) -> None:
        with self._lock:
            if self._live:
                raise StorageInUseError(
                    f"global storage of model {self.model!r} is already bound to a live controller"
                )
            self._live = True

    def release(self) -> None:
        with self._lock:
            self._live = False


class FieldView:
    """One record member seen as a fixed-length array.

    Subclasses set ``fields`` to the enumeration of valid members.  Indexing
    is bounded by the declared length; negative or too-large indices raise
    :class:`IndexError`.
    """

    fields: type[enum.Enum]

    def __init__(self, member: enum.Enum, data: ctypes.Array) -> None:
        if member not in type(self).fields:
            raise TypeError(f"{member!r} is not a member of {type(self).fields.__name__}")
        self.member = member
        self._data = data

    @classmethod
    def bind(cls, member: enum.Enum, record: ctypes.Structure) -> FieldView:
        """Return a view of *member*'s slot inside *record* (no copy)."""
        attr = member.value
        ctype = dict(record._fields_)[attr]
        if issubclass(ctype, ctypes.Array):
            elem, length = ctype._type_, ctype._length_
        else:
            elem, length = ctype, 1
        offset = getattr(type(record), attr).offset
        return cls(member, (elem * length).from_buffer(record, offset))

    @property
    def name(self) -> str:
        return self.member.value

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, index: int) -> int:
        if not 0 <= index < len(self._data):
            raise IndexError(
                f"index {index} out of range for {self.member.name} (length {len(self._data)})"
            )
        return index

    def __getitem__(self, index: int) -> Any:
        return self._data[self._check(index)]

    def __setitem__(self, index: int, value: Any) -> None:
        self._data[self._check(index)] = value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data[:])

    def tolist(self) -> list[Any]:
        return self._data[:]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.member.name}, {self.tolist()!r})"


class ViewSet:
    """Views of one direction, addressable by member, attribute name or position.

    Attribute access cannot reach a view whose name the set itself defines
    (see :meth:`reserved`); generation rejects such fields.
    """

    _INTERNAL = ("_views", "_by_member", "_by_name")

    def __init__(self, views: Iterable[FieldView]) -> None:
        self._views = tuple(views)
        self._by_member = {v.member: v for v in self._views}
        self._by_name = {v.name: v for v in self._views}

    @classmethod
    def reserved(cls, name: str) -> bool:
        """True if ``views.<name>`` resolves to the set, not to a view."""
        return name in cls._INTERNAL or hasattr(cls, name)

    def __getitem__(self, key: enum.Enum | int) -> FieldView:
        if isinstance(key, enum.Enum):
            return self._by_member[key]
        return self._views[key]

    def __getattr__(self, name: str) -> FieldView:
        try:
            return self.__dict__["_by_name"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __iter__(self) -> Iterator[FieldView]:
        return iter(self._views)

    def __len__(self) -> int:
        return len(self._views)
