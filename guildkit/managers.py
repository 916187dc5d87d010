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

import asyncio
from enum import Enum
import logging
import typing

from .cache import Collection
from .core import UNDEFINED, UndefinedOr, IDOr, is_single_id, resolve_id

if typing.TYPE_CHECKING:
    from .channel import GuildChannel
    from .guild import Guild, Member, Role
    from .http import Response
    from .state import State

_L = logging.getLogger(__name__)

V = typing.TypeVar('V')


class ManagerState(Enum):
    """Describes how far the manager went with fetching its entities."""

    uninitialized = 'uninitialized'
    populating = 'populating'
    populated = 'populated'


class BaseManager(typing.Generic[V]):
    """Base class for managers that mirror a guild-scoped collection.

    Once created, the manager schedules a full population on the running event loop.
    Reads never wait for it: :attr:`cache` holds whatever was fetched so far.

    Attributes
    ----------
    cache: :class:`Collection`
        The entities fetched so far.
    guild_id: :class:`str`
        The guild's ID.
    state: :class:`State`
        The state.
    """

    __slots__ = (
        '_populated',
        '_status',
        '_task',
        'cache',
        'guild_id',
        'state',
    )

    kind: typing.ClassVar[str] = 'entity'

    def __init__(self, state: State, guild_id: str, /, *, populate: UndefinedOr[bool] = UNDEFINED) -> None:
        self._populated: bool = False
        self._status: ManagerState = ManagerState.uninitialized
        self._task: typing.Optional[asyncio.Task[Collection[str, V]]] = None
        self.cache: Collection[str, V] = Collection()
        self.guild_id: str = guild_id
        self.state: State = state

        if populate is UNDEFINED:
            populate = state.populate_managers
        if populate:
            self._schedule()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} guild_id={self.guild_id!r} status={self._status.name} size={len(self.cache)}>'

    def _schedule(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: stay uninitialized until someone awaits populate()
            return
        self._task = loop.create_task(self.populate(), name=f'guildkit:{self.__class__.__name__}:{self.guild_id}')

    @property
    def status(self) -> ManagerState:
        """:class:`ManagerState`: The manager state."""
        return self._status

    async def wait_until_populated(self) -> None:
        """|coro|

        Waits for background population, if scheduled.
        """
        task = self._task
        if task is not None:
            await asyncio.shield(task)

    def _settled_status(self) -> ManagerState:
        # A failed attempt never undoes a population that completed, even an overlapping one
        return ManagerState.populated if self._populated else ManagerState.uninitialized

    async def _fetch_all(self) -> Response:
        raise NotImplementedError

    async def _fetch_one(self, id: str, /) -> Response:
        raise NotImplementedError

    def _parse(self, data: typing.Any, /) -> V:
        raise NotImplementedError

    def _store(self, entity: V, /) -> V:
        self.cache.set(entity.id, entity)  # type: ignore
        return entity

    async def populate(self) -> Collection[str, V]:
        """|coro|

        Fetches every entity and stores them in caches.

        Failures are logged and leave caches untouched.

        Returns
        -------
        :class:`Collection`
            The fetched entities. On failure, the :attr:`cache` as it was.
        """
        self._status = ManagerState.populating

        try:
            response = await self._fetch_all()
            if response.error is not None:
                _L.error('Failed to populate %s for guild %s: %s', self.kind, self.guild_id, response.error)
                self._status = self._settled_status()
                return self.cache

            entities = [self._parse(data) for data in response.data]
        except Exception:
            _L.exception('Failed to populate %s for guild %s', self.kind, self.guild_id)
            self._status = self._settled_status()
            return self.cache

        result: Collection[str, V] = Collection()
        for entity in entities:
            result.set(entity.id, self._store(entity))  # type: ignore

        self._populated = True
        self._status = ManagerState.populated
        _L.debug('Populated %i %s for guild %s', len(result), self.kind, self.guild_id)
        return result

    @typing.overload
    async def fetch(self, id: None = ..., /) -> Collection[str, V]: ...

    @typing.overload
    async def fetch(self, id: IDOr[typing.Any], /) -> typing.Union[V, Collection[str, V]]: ...

    async def fetch(self, id: typing.Optional[IDOr[typing.Any]] = None, /) -> typing.Union[V, Collection[str, V]]:
        """|coro|

        Fetches entities from API.

        Anything that does not look like an ID (missing, shorter than 17 or
        longer than 18 characters) fetches everything, like :meth:`populate`.

        Parameters
        ----------
        id: Optional[:class:`str`]
            The entity ID.

        Raises
        ------
        :class:`HTTPException`
            Fetching single entity failed.

        Returns
        -------
        Union[V, :class:`Collection`]
            The fetched entity, or every fetched entity.
        """
        if id is not None:
            id = resolve_id(id)
        if not is_single_id(id):
            return await self.populate()

        assert id is not None
        response = await self._fetch_one(id)
        return self._store(self._parse(response.unwrap()))


class GuildChannelManager(BaseManager['GuildChannel']):
    """Manages channels of a guild.

    Every channel is written to both :attr:`cache` and :attr:`State.channels`.
    """

    __slots__ = ()

    kind = 'channels'

    async def _fetch_all(self) -> Response:
        return await self.state.http.get_guild_channels(self.guild_id)

    async def _fetch_one(self, id: str, /) -> Response:
        return await self.state.http.get_channel(id)

    def _parse(self, data: typing.Any, /) -> GuildChannel:
        data.setdefault('guild_id', self.guild_id)
        return self.state.parser.parse_channel(data)  # type: ignore

    def _store(self, entity: GuildChannel, /) -> GuildChannel:
        self.cache.set(entity.id, entity)
        self.state.channels.set(entity.id, entity)
        return entity


class GuildMemberManager(BaseManager['Member']):
    """Manages members of a guild.

    Member users are written to :attr:`State.users`, and members reference them.
    """

    __slots__ = ()

    kind = 'members'

    async def _fetch_all(self) -> Response:
        return await self.state.http.get_guild_members(self.guild_id)

    async def _fetch_one(self, id: str, /) -> Response:
        return await self.state.http.get_guild_member(self.guild_id, id)

    def _parse(self, data: typing.Any, /) -> Member:
        return self.state.parser.parse_member(data, self.guild_id)

    @property
    def me(self) -> typing.Optional[Member]:
        """Optional[:class:`Member`]: The current user's member, if cached."""
        me = self.state.me
        if me is None:
            return None
        return self.cache.get(me.id)


class MemberRolesManager:
    """Manages roles of a member.

    This is a view: the member only owns role IDs, and the roles are
    resolved against :attr:`Guild.roles` on every access.

    Attributes
    ----------
    member: :class:`Member`
        The member.
    """

    __slots__ = ('_populated', '_status', 'member')

    def __init__(self, member: Member, /) -> None:
        self._populated: bool = False
        self._status: ManagerState = ManagerState.uninitialized
        self.member: Member = member

    def __repr__(self) -> str:
        return f'<MemberRolesManager member_id={self.member.id!r} roles={list(self.member.role_ids)!r}>'

    def __len__(self) -> int:
        return len(self.cache)

    def __iter__(self) -> typing.Iterator[Role]:
        return iter(self.cache.values())

    @property
    def status(self) -> ManagerState:
        return self._status

    @property
    def guild(self) -> typing.Optional[Guild]:
        return self.member.state.guilds.get(self.member.guild_id)

    @property
    def cache(self) -> Collection[str, Role]:
        """:class:`Collection`: The resolved roles, in order of member role IDs. Missing roles are skipped."""
        result: Collection[str, Role] = Collection()
        guild = self.guild
        if guild is None:
            return result
        for role_id in self.member.role_ids:
            role = guild.roles.get(role_id)
            if role is not None:
                result.set(role_id, role)
        return result

    @property
    def highest(self) -> typing.Optional[Role]:
        """Optional[:class:`Role`]: The role with highest position."""
        return max(self.cache.values(), key=lambda role: role.position, default=None)

    async def fetch(self) -> Collection[str, Role]:
        """|coro|

        Refreshes guild roles and resolves member roles against them.

        Failures are logged and leave caches untouched.
        """
        state = self.member.state
        guild_id = self.member.guild_id
        self._status = ManagerState.populating

        try:
            response = await state.http.get_guild_roles(guild_id)
            if response.error is not None:
                _L.error('Failed to fetch roles for guild %s: %s', guild_id, response.error)
                self._status = self._settled_status()
                return self.cache

            roles = [state.parser.parse_role(data, guild_id) for data in response.data]
        except Exception:
            _L.exception('Failed to fetch roles for guild %s', guild_id)
            self._status = self._settled_status()
            return self.cache

        guild = self.guild
        if guild is not None:
            for data, role in zip(response.data, roles):
                existing = guild.roles.get(role.id)
                if existing is None:
                    guild.roles.set(role.id, role)
                else:
                    existing.locally_update(data)

        self._populated = True
        self._status = ManagerState.populated
        return self.cache

    def _settled_status(self) -> ManagerState:
        return ManagerState.populated if self._populated else ManagerState.uninitialized

    async def add(self, role: IDOr[Role], /, *, reason: typing.Optional[str] = None) -> Response:
        """|coro|

        Adds a role to the member.

        The member :attr:`~Member.role_ids` stays as is; a fresh member
        replaces it in cache on next fetch.
        """
        return await self.member.state.http.add_guild_member_role(
            self.member.guild_id, self.member.id, resolve_id(role), reason=reason
        )

    async def remove(self, role: IDOr[Role], /, *, reason: typing.Optional[str] = None) -> Response:
        """|coro|

        Removes a role from the member.
        """
        return await self.member.state.http.remove_guild_member_role(
            self.member.guild_id, self.member.id, resolve_id(role), reason=reason
        )


__all__ = (
    'ManagerState',
    'BaseManager',
    'GuildChannelManager',
    'GuildMemberManager',
    'MemberRolesManager',
)
