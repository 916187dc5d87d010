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

from datetime import datetime, timezone
from enum import Enum
import typing


class _Sentinel(Enum):
    """The library sentinels."""

    undefined = 'UNDEFINED'

    def __bool__(self) -> typing.Literal[False]:
        return False

    def __repr__(self) -> typing.Literal['UNDEFINED']:
        return self.value

    def __eq__(self, other: object, /) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)


Undefined: typing.TypeAlias = typing.Literal[_Sentinel.undefined]
UNDEFINED: Undefined = _Sentinel.undefined


T = typing.TypeVar('T')
UndefinedOr = typing.Union[Undefined, T]

# 2015-01-01T00:00:00Z in milliseconds
EPOCH: typing.Final[int] = 1420070400000

MIN_ID_LENGTH: typing.Final[int] = 17
MAX_ID_LENGTH: typing.Final[int] = 18


def snowflake_timestamp(val: typing.Union[str, int], /) -> float:
    return ((int(val) >> 22) + EPOCH) / 1000


def snowflake_time(val: typing.Union[str, int], /) -> datetime:
    return datetime.fromtimestamp(snowflake_timestamp(val), timezone.utc)


def is_single_id(val: typing.Optional[str], /) -> bool:
    """:class:`bool`: Whether the value looks like a key for a single entity.

    Anything missing, or shorter than 17 or longer than 18 characters is treated
    as a request for the whole collection by managers.
    """
    if not val:
        return False
    return MIN_ID_LENGTH <= len(val) <= MAX_ID_LENGTH


class HasID(typing.Protocol):
    id: str


U = typing.TypeVar('U', bound='HasID')
IDOr = typing.Union[str, U]


def resolve_id(resolvable: IDOr[U], /) -> str:
    if isinstance(resolvable, str):
        return resolvable
    if isinstance(resolvable, int):
        return str(resolvable)
    return resolvable.id


__version__: str = '0.3.0'

__all__ = (
    'Undefined',
    'UNDEFINED',
    'T',
    'UndefinedOr',
    'EPOCH',
    'MIN_ID_LENGTH',
    'MAX_ID_LENGTH',
    'snowflake_timestamp',
    'snowflake_time',
    'is_single_id',
    'HasID',
    'IDOr',
    'resolve_id',
    '__version__',
)
