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

from attrs import define, field
from datetime import datetime
import typing

from .base import Base
from .cache import Collection
from .core import UNDEFINED, UndefinedOr
from .flags import MemberFlags, Permissions
from .managers import MemberRolesManager
from .payloads import MemberEditPayload
from .permissions import can_moderate
from .utils import parse_time, resolve_image, utcnow

if typing.TYPE_CHECKING:
    from . import raw
    from .errors import HTTPException
    from .http import Response
    from .managers import GuildChannelManager, GuildMemberManager
    from .user import User


@define(slots=True, eq=False)
class Role(Base):
    """Represents a guild role."""

    guild_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The guild's ID the role belongs to."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The role name."""

    color: int = field(repr=False, kw_only=True)
    hoist: bool = field(repr=False, kw_only=True)
    """:class:`bool`: Whether the role is displayed separately in member list."""

    icon: typing.Optional[str] = field(repr=False, kw_only=True)
    unicode_emoji: typing.Optional[str] = field(repr=False, kw_only=True)

    position: int = field(repr=True, kw_only=True)
    """:class:`int`: The role position. Higher value means the role is ranked higher."""

    raw_permissions: int = field(repr=False, kw_only=True)
    """:class:`int`: The permissions raw value."""

    managed: bool = field(repr=False, kw_only=True)
    """:class:`bool`: Whether the role is managed by an integration."""

    mentionable: bool = field(repr=False, kw_only=True)
    tags: dict[str, typing.Any] = field(repr=False, kw_only=True)
    raw_flags: int = field(repr=False, kw_only=True)

    def __str__(self) -> str:
        return self.name

    def locally_update(self, data: raw.Role, /) -> None:
        """Locally updates role with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        self.name = data['name']
        self.color = data.get('color', 0)
        self.hoist = bool(data.get('hoist'))
        self.icon = data.get('icon') or None
        self.unicode_emoji = data.get('unicode_emoji')
        self.position = data['position']
        self.raw_permissions = int(data.get('permissions', 0))
        self.managed = bool(data.get('managed'))
        self.mentionable = bool(data.get('mentionable'))
        self.tags = dict(data.get('tags') or {})
        self.raw_flags = data.get('flags', 0)

    @property
    def guild(self) -> typing.Optional[Guild]:
        """Optional[:class:`Guild`]: The guild the role belongs to, if cached."""
        return self.state.guilds.get(self.guild_id)

    @property
    def mention(self) -> str:
        """:class:`str`: The role mention."""
        return f'<@&{self.id}>'

    @property
    def permissions(self) -> Permissions:
        """:class:`Permissions`: The role permissions."""
        return Permissions(self.raw_permissions)

    def is_default(self) -> bool:
        """:class:`bool`: Whether the role is the ``@everyone`` role."""
        return self.id == self.guild_id

    async def edit(
        self,
        *,
        name: UndefinedOr[str] = UNDEFINED,
        permissions: UndefinedOr[typing.Union[Permissions, int]] = UNDEFINED,
        color: UndefinedOr[int] = UNDEFINED,
        hoist: UndefinedOr[bool] = UNDEFINED,
        icon: UndefinedOr[typing.Optional[typing.Union[str, bytes]]] = UNDEFINED,
        unicode_emoji: UndefinedOr[typing.Optional[str]] = UNDEFINED,
        mentionable: UndefinedOr[bool] = UNDEFINED,
        position: UndefinedOr[int] = UNDEFINED,
        reason: typing.Optional[str] = None,
    ) -> typing.Union[Role, HTTPException]:
        """|coro|

        Edits the role.

        You must have :attr:`~Permissions.manage_roles` to do this.

        Parameters
        ----------
        name: UndefinedOr[:class:`str`]
            The new role name.
        permissions: UndefinedOr[:class:`Permissions`]
            The new role permissions.
        color: UndefinedOr[:class:`int`]
            The new role color.
        hoist: UndefinedOr[:class:`bool`]
            Whether the role should be displayed separately.
        icon: UndefinedOr[Optional[Union[:class:`str`, :class:`bytes`]]]
            The new role icon. Raw image bytes are turned into data URI.
        unicode_emoji: UndefinedOr[Optional[:class:`str`]]
            The new role unicode emoji.
        mentionable: UndefinedOr[:class:`bool`]
            Whether the role should be mentionable.
        position: UndefinedOr[:class:`int`]
            The new role position.
        reason: Optional[:class:`str`]
            The reason shown in audit log.

        Returns
        -------
        Union[:class:`Role`, :class:`HTTPException`]
            The updated role, or the error.
        """
        http = self.state.http

        if position is not UNDEFINED:
            response = await http.edit_role_positions(
                self.guild_id, [{'id': self.id, 'position': position}], reason=reason
            )
            if response.error is not None:
                return response.error
            for data in response.data or ():
                if data['id'] == self.id:
                    self.locally_update(data)

        payload: raw.DataEditRole = {}
        if name is not UNDEFINED:
            payload['name'] = name
        if permissions is not UNDEFINED:
            payload['permissions'] = str(int(permissions))
        if color is not UNDEFINED:
            payload['color'] = color
        if hoist is not UNDEFINED:
            payload['hoist'] = bool(hoist)
        if icon is not UNDEFINED:
            payload['icon'] = resolve_image(icon)
        if unicode_emoji is not UNDEFINED:
            payload['unicode_emoji'] = unicode_emoji
        if mentionable is not UNDEFINED:
            payload['mentionable'] = bool(mentionable)

        if not payload and position is not UNDEFINED:
            return self

        response = await http.edit_role(self.guild_id, self.id, payload, reason=reason)
        if response.error is not None:
            return response.error

        self.locally_update(response.data)
        guild = self.guild
        if guild is not None:
            guild.roles.set(self.id, self)
        return self

    async def delete(self, *, reason: typing.Optional[str] = None) -> bool:
        """|coro|

        Deletes the role.

        Returns
        -------
        :class:`bool`
            Whether the role was deleted.
        """
        response = await self.state.http.delete_role(self.guild_id, self.id, reason=reason)
        if response.error is not None:
            return False
        guild = self.guild
        if guild is not None:
            guild.roles.delete(self.id)
        return True

    async def set_name(self, name: str, /, *, reason: typing.Optional[str] = None) -> typing.Union[Role, HTTPException]:
        return await self.edit(name=name, reason=reason)

    async def set_position(
        self, position: int, /, *, reason: typing.Optional[str] = None
    ) -> typing.Union[Role, HTTPException]:
        return await self.edit(position=position, reason=reason)

    async def set_color(self, color: int, /, *, reason: typing.Optional[str] = None) -> typing.Union[Role, HTTPException]:
        return await self.edit(color=color, reason=reason)

    async def set_hoist(self, hoist: bool, /, *, reason: typing.Optional[str] = None) -> typing.Union[Role, HTTPException]:
        return await self.edit(hoist=hoist, reason=reason)

    async def set_icon(
        self, icon: typing.Optional[typing.Union[str, bytes]], /, *, reason: typing.Optional[str] = None
    ) -> typing.Union[Role, HTTPException]:
        return await self.edit(icon=icon, reason=reason)

    async def set_emoji(
        self, unicode_emoji: typing.Optional[str], /, *, reason: typing.Optional[str] = None
    ) -> typing.Union[Role, HTTPException]:
        return await self.edit(unicode_emoji=unicode_emoji, reason=reason)

    async def set_mentionable(
        self, mentionable: bool, /, *, reason: typing.Optional[str] = None
    ) -> typing.Union[Role, HTTPException]:
        return await self.edit(mentionable=mentionable, reason=reason)


@define(slots=True, eq=False)
class Guild(Base):
    """Represents a guild."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The guild name."""

    icon: typing.Optional[str] = field(repr=False, kw_only=True)
    description: typing.Optional[str] = field(repr=False, kw_only=True)

    owner_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The guild owner's ID."""

    features: list[str] = field(repr=False, kw_only=True)
    preferred_locale: typing.Optional[str] = field(repr=False, kw_only=True)

    roles: Collection[str, Role] = field(repr=False, kw_only=True)
    """:class:`Collection`: The guild roles."""

    channels: GuildChannelManager = field(repr=False, kw_only=True)
    """:class:`GuildChannelManager`: The guild channels."""

    members: GuildMemberManager = field(repr=False, kw_only=True)
    """:class:`GuildMemberManager`: The guild members."""

    def __str__(self) -> str:
        return self.name

    def locally_update(self, data: raw.Guild, /) -> None:
        if 'name' in data:
            self.name = data['name']
        if 'icon' in data:
            self.icon = data['icon']
        if 'description' in data:
            self.description = data['description']
        if 'owner_id' in data:
            self.owner_id = data['owner_id']
        if 'features' in data:
            self.features = data['features']

    @property
    def me(self) -> typing.Optional[Member]:
        """Optional[:class:`Member`]: The current user's member in this guild, if cached."""
        return self.members.me

    @property
    def default_role(self) -> typing.Optional[Role]:
        """Optional[:class:`Role`]: The ``@everyone`` role, if cached."""
        return self.roles.get(self.id)

    def get_member(self, user_id: str, /) -> typing.Optional[Member]:
        return self.members.cache.get(user_id)

    async def leave(self) -> Response:
        """|coro|

        Leaves the guild.
        """
        return await self.state.http.leave_guild(self.id)


@define(slots=True, eq=False)
class Member(Base):
    """Represents a member of a :class:`Guild`.

    The :attr:`user` is the very same object stored in client user cache.
    """

    guild_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The guild's ID the member in."""

    user: User = field(repr=True, kw_only=True)
    """:class:`User`: The member's user."""

    nick: typing.Optional[str] = field(repr=True, kw_only=True, default=None)
    """Optional[:class:`str`]: The member's nick."""

    avatar: typing.Optional[str] = field(repr=False, kw_only=True, default=None)
    """Optional[:class:`str`]: The member's guild avatar hash."""

    role_ids: tuple[str, ...] = field(repr=False, kw_only=True, converter=tuple)
    """Tuple[:class:`str`, ...]: The member's role IDs."""

    joined_at: typing.Optional[datetime] = field(repr=False, kw_only=True, default=None)
    """Optional[:class:`~datetime.datetime`]: When the member joined the guild."""

    premium_since: typing.Optional[datetime] = field(repr=False, kw_only=True, default=None)
    """Optional[:class:`~datetime.datetime`]: When the member started boosting the guild."""

    pending: bool = field(repr=False, kw_only=True, default=False)
    """:class:`bool`: Whether the member has not yet passed membership screening."""

    raw_permissions: typing.Optional[int] = field(repr=False, kw_only=True, default=None)
    """Optional[:class:`int`]: The member permissions in channel. Only sent with interactions."""

    timed_out_until: typing.Optional[datetime] = field(repr=False, kw_only=True, default=None)
    """Optional[:class:`~datetime.datetime`]: When the member timeout will expire."""

    mute: bool = field(repr=False, kw_only=True, default=False)
    deaf: bool = field(repr=False, kw_only=True, default=False)
    raw_flags: int = field(repr=False, kw_only=True, default=0)

    presence: typing.Optional[dict[str, typing.Any]] = field(repr=False, kw_only=True, default=None)
    """Optional[Dict[:class:`str`, Any]]: The last presence received for the member."""

    roles: MemberRolesManager = field(repr=False, init=False)
    """:class:`MemberRolesManager`: The member roles, resolved against guild roles."""

    def __attrs_post_init__(self) -> None:
        self.roles = MemberRolesManager(self)

    def __str__(self) -> str:
        return self.mention

    def _patch(self, data: raw.Member, /) -> None:
        """Updates member with fresh data from API.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.get('nick') is not None:
            self.nick = data['nick']
        if data.get('avatar') is not None:
            self.avatar = data['avatar']
        if data.get('premium_since') is not None:
            self.premium_since = parse_time(data['premium_since'])
        if 'pending' in data:
            self.pending = data['pending']
        if data.get('permissions'):
            self.raw_permissions = int(data['permissions'])
        if 'communication_disabled_until' in data:
            self.timed_out_until = parse_time(data['communication_disabled_until'])
        if 'mute' in data:
            self.mute = data['mute']
        if 'deaf' in data:
            self.deaf = data['deaf']
        if 'flags' in data:
            self.raw_flags = data['flags']

    @property
    def author(self) -> User:
        """:class:`User`: An alias for :attr:`user`."""
        return self.user

    @property
    def guild(self) -> typing.Optional[Guild]:
        """Optional[:class:`Guild`]: The guild the member is in, if cached."""
        return self.state.guilds.get(self.guild_id)

    @property
    def display_name(self) -> str:
        """:class:`str`: The nick if set, user display name otherwise."""
        return self.nick or self.user.display_name

    @property
    def mention(self) -> str:
        """:class:`str`: The member mention."""
        return f'<@{self.id}>'

    @property
    def flags(self) -> MemberFlags:
        return MemberFlags(self.raw_flags)

    @property
    def permissions(self) -> Permissions:
        """:class:`Permissions`: The member permissions. Uses value sent with interaction if available."""
        if self.raw_permissions is not None:
            return Permissions(self.raw_permissions)
        result = Permissions.none()
        guild = self.guild
        if guild is not None:
            default = guild.default_role
            if default is not None:
                result |= default.permissions
        for role in self.roles.cache.values():
            result |= role.permissions
        return result

    @property
    def timed_out(self) -> bool:
        """:class:`bool`: Whether the member is currently timed out."""
        return self.timed_out_until is not None and self.timed_out_until > utcnow()

    communication_disabled = timed_out

    def _can_moderate(self, permission: Permissions, /) -> bool:
        guild = self.guild
        if guild is None:
            return False
        me = guild.me
        if me is None:
            return False
        return can_moderate(self, me, owner_id=guild.owner_id, permission=permission)

    @property
    def kickable(self) -> bool:
        """:class:`bool`: Whether the current user can kick this member."""
        return self._can_moderate(Permissions(kick_members=True))

    @property
    def bannable(self) -> bool:
        """:class:`bool`: Whether the current user can ban this member."""
        return self._can_moderate(Permissions(ban_members=True))

    banneable = bannable

    @property
    def moderatable(self) -> bool:
        """:class:`bool`: Whether the current user can time out this member."""
        return self._can_moderate(Permissions(moderate_members=True))

    def is_me(self) -> bool:
        me = self.state.me
        return me is not None and me.id == self.id

    async def edit(self, data: typing.Any = None, /, **options: typing.Any) -> bool:
        """|coro|

        Edits the member.

        Parameters
        ----------
        data: Optional[Mapping[:class:`str`, Any]]
            The options. See :class:`MemberEditPayload` for recognized ones. Keyword arguments
            are merged on top.

        Returns
        -------
        :class:`bool`
            Whether the member was edited.
        """
        payload = MemberEditPayload({**(data or {}), **options})
        response = await self.state.http.edit_guild_member(
            self.guild_id, self.id, payload.build(), reason=payload.reason
        )
        if response.error is not None:
            return False
        if isinstance(response.data, dict):
            self._patch(response.data)
        return True

    async def change_nickname(self, nickname: typing.Optional[str], /, *, reason: typing.Optional[str] = None) -> Response:
        """|coro|

        Changes the member nick.

        Parameters
        ----------
        nickname: Optional[:class:`str`]
            The new nick. Pass ``None`` to remove it.
        reason: Optional[:class:`str`]
            The reason shown in audit log.
        """
        payload = MemberEditPayload({'nick': nickname, 'reason': reason})
        http = self.state.http
        if self.is_me():
            response = await http.edit_my_guild_member(self.guild_id, payload.build(), reason=payload.reason)
        else:
            response = await http.edit_guild_member(self.guild_id, self.id, payload.build(), reason=payload.reason)
        if response.error is None:
            self.nick = nickname
        return response

    async def timeout(self, until: typing.Any, /, *, reason: typing.Optional[str] = None) -> bool:
        """|coro|

        Times out the member. ``until`` may be a :class:`~datetime.datetime`,
        :class:`~datetime.timedelta` from now, or ``None`` to remove the timeout.
        """
        return await self.edit(communication_disabled_until=until, reason=reason)

    async def kick(self, *, reason: typing.Optional[str] = None) -> Response:
        """|coro|

        Kicks the member from the guild.
        """
        return await self.state.http.kick_guild_member(
            self.guild_id, self.id, reason=reason.strip() if reason else None
        )

    async def ban(self, *, reason: typing.Optional[str] = None, delete_message_seconds: int = 0) -> Response:
        """|coro|

        Bans the member from the guild.

        Parameters
        ----------
        reason: Optional[:class:`str`]
            The reason shown in audit log.
        delete_message_seconds: :class:`int`
            How many seconds of member messages to delete. Defaults to ``0``.
        """
        return await self.state.http.ban_guild_member(
            self.guild_id, self.id, delete_message_seconds=delete_message_seconds, reason=reason
        )

    async def leave(self) -> Response:
        """|coro|

        Leaves the guild. Only valid for the current user's member.

        Raises
        ------
        TypeError
            The member does not represent the current user.
        """
        if not self.is_me():
            raise TypeError('Only the current user member can leave a guild')
        return await self.state.http.leave_guild(self.guild_id)


__all__ = (
    'Role',
    'Guild',
    'Member',
)
