"""
The MIT License (MIT)

Copyright (c) 2024-present MCausc78

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS
OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
DEALINGS IN THE SOFTWARE.
"""

from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, ValuesView

K = typing.TypeVar('K')
V = typing.TypeVar('V')


class Collection(typing.Generic[K, V]):
    """An insertion-ordered mapping of entity IDs to entities.

    Replacing a value keeps its original position. There is no eviction
    policy, use :meth:`prune` to drop entries you do not need anymore.

    .. container:: operations

        .. describe:: x == y

            Checks if two collections hold same entries in same order.

        .. describe:: len(x)

            Returns count of entries.

        .. describe:: key in x

            Checks if key is present.

        .. describe:: iter(x)

            Iterates over keys.
    """

    __slots__ = ('_data',)

    def __init__(self, items: typing.Optional[Iterable[tuple[K, V]]] = None, /) -> None:
        self._data: dict[K, V] = dict(items) if items is not None else {}

    def __repr__(self) -> str:
        return f'<Collection size={len(self._data)}>'

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __contains__(self, key: object, /) -> bool:
        return key in self._data

    def __getitem__(self, key: K, /) -> V:
        return self._data[key]

    def __setitem__(self, key: K, value: V, /) -> None:
        self._data[key] = value

    def __delitem__(self, key: K, /) -> None:
        del self._data[key]

    def __eq__(self, other: object, /) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return list(self._data.items()) == list(other._data.items())

    def __bool__(self) -> bool:
        return bool(self._data)

    @typing.overload
    def get(self, key: K, /) -> typing.Optional[V]: ...

    @typing.overload
    def get(self, key: K, default: V, /) -> V: ...

    def get(self, key: K, default: typing.Optional[V] = None, /) -> typing.Optional[V]:
        """Optional[V]: Returns the value for key, or default."""
        return self._data.get(key, default)

    def set(self, key: K, value: V, /) -> V:
        """Inserts or replaces a value, keeping position of an existing key.

        Returns
        -------
        V
            The stored value.
        """
        self._data[key] = value
        return value

    def delete(self, key: K, /) -> typing.Optional[V]:
        """Optional[V]: Removes the key and returns its value, if any."""
        return self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> typing.KeysView[K]:
        return self._data.keys()

    def values(self) -> ValuesView[V]:
        """A live view over values. Iterating it again starts over."""
        return self._data.values()

    def items(self) -> typing.ItemsView[K, V]:
        return self._data.items()

    def to_list(self) -> list[V]:
        """List[V]: A snapshot of values, in insertion order."""
        return list(self._data.values())

    def first(self) -> typing.Optional[V]:
        for value in self._data.values():
            return value
        return None

    def find(self, predicate: Callable[[V], bool], /) -> typing.Optional[V]:
        """Optional[V]: Returns the first value matching the predicate."""
        for value in self._data.values():
            if predicate(value):
                return value
        return None

    def filter(self, predicate: Callable[[V], bool], /) -> Collection[K, V]:
        """:class:`Collection`: A new collection with entries whose value matched the predicate."""
        return Collection((k, v) for k, v in self._data.items() if predicate(v))

    def sorted(self, key: Callable[[V], typing.Any], /, *, reverse: bool = False) -> list[V]:
        return sorted(self._data.values(), key=key, reverse=reverse)

    def prune(self, predicate: Callable[[V], bool], /) -> int:
        """Removes every entry whose value matches the predicate.

        Returns
        -------
        :class:`int`
            How many entries were removed.
        """
        keys = [k for k, v in self._data.items() if predicate(v)]
        for k in keys:
            del self._data[k]
        return len(keys)


__all__ = ('Collection',)
