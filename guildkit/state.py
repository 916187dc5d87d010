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

from .cache import Collection
from .parser import Parser

if typing.TYPE_CHECKING:
    from .channel import Channel
    from .guild import Guild
    from .http import HTTPClient
    from .user import ClientUser, User


class State:
    """Represents a manager for all guildkit objects.

    Every entity receives the state it was created with, and reaches shared
    caches and transport through it.

    Attributes
    ----------
    channels: :class:`Collection`
        The client-wide channel cache. Guild channel caches hold the same instances.
    guilds: :class:`Collection`
        The guild cache.
    parser: :class:`Parser`
        The parser.
    populate_managers: :class:`bool`
        Whether managers should start fetching their data once created.
    users: :class:`Collection`
        The client-wide user cache. Members reference users from here.
    """

    __slots__ = (
        '_http',
        '_me',
        'channels',
        'guilds',
        'parser',
        'populate_managers',
        'users',
    )

    def __init__(
        self,
        *,
        http: typing.Optional[HTTPClient] = None,
        parser: typing.Optional[Parser] = None,
        populate_managers: bool = True,
    ) -> None:
        self._http = http
        self._me: typing.Optional[ClientUser] = None
        self.channels: Collection[str, Channel] = Collection()
        self.guilds: Collection[str, Guild] = Collection()
        self.parser: Parser = parser if parser else Parser(state=self)
        self.populate_managers: bool = populate_managers
        self.users: Collection[str, User] = Collection()

    def setup(
        self,
        *,
        http: typing.Optional[HTTPClient] = None,
        parser: typing.Optional[Parser] = None,
    ) -> State:
        if http:
            self._http = http
        if parser:
            self.parser = parser
        return self

    @property
    def http(self) -> HTTPClient:
        assert self._http, 'State has no HTTP client attached'
        return self._http

    @property
    def me(self) -> typing.Optional[ClientUser]:
        """Optional[:class:`ClientUser`]: The currently logged in user."""
        return self._me

    @me.setter
    def me(self, value: typing.Optional[ClientUser]) -> None:
        self._me = value
        if value is not None:
            self.users.set(value.id, value)


__all__ = ('State',)
