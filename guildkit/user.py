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
import typing

from .base import Base
from .core import UNDEFINED, UndefinedOr
from .flags import UserFlags
from .utils import resolve_image

if typing.TYPE_CHECKING:
    from . import raw
    from .errors import HTTPException


@define(slots=True, eq=False)
class User(Base):
    """Represents a user."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The username of the user."""

    discriminator: str = field(repr=False, kw_only=True)
    """:class:`str`: The user's discriminator. ``'0'`` for migrated users."""

    global_name: typing.Optional[str] = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The user's display name, if set."""

    avatar: typing.Optional[str] = field(repr=False, kw_only=True)
    """Optional[:class:`str`]: The user's avatar hash."""

    banner: typing.Optional[str] = field(repr=False, kw_only=True)
    accent_color: typing.Optional[int] = field(repr=False, kw_only=True)

    bot: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether the user is a bot."""

    system: bool = field(repr=False, kw_only=True)
    """:class:`bool`: Whether the user is an official system user."""

    raw_public_flags: int = field(repr=False, kw_only=True)
    """:class:`int`: The user's public flags raw value."""

    def __str__(self) -> str:
        return self.name

    def locally_update(self, data: raw.User, /) -> None:
        """Locally updates user with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.

        Parameters
        ----------
        data: Dict[:class:`str`, Any]
            The raw user data.
        """
        if 'username' in data:
            self.name = data['username']
        if 'discriminator' in data:
            self.discriminator = data['discriminator']
        if 'global_name' in data:
            self.global_name = data['global_name']
        if 'avatar' in data:
            self.avatar = data['avatar']
        if 'banner' in data:
            self.banner = data['banner']
        if 'accent_color' in data:
            self.accent_color = data['accent_color']
        if 'bot' in data:
            self.bot = data['bot']
        if 'public_flags' in data:
            self.raw_public_flags = data['public_flags']

    @property
    def display_name(self) -> str:
        """:class:`str`: The global name if set, username otherwise."""
        return self.global_name or self.name

    @property
    def mention(self) -> str:
        """:class:`str`: The user mention."""
        return f'<@{self.id}>'

    @property
    def public_flags(self) -> UserFlags:
        """:class:`UserFlags`: The user's public flags."""
        return UserFlags(self.raw_public_flags)


@define(slots=True, eq=False)
class ClientUser(User):
    """Represents the currently logged in user."""

    verified: bool = field(repr=False, kw_only=True, default=False)
    mfa_enabled: bool = field(repr=False, kw_only=True, default=False)
    locale: typing.Optional[str] = field(repr=False, kw_only=True, default=None)

    def locally_update(self, data: raw.User, /) -> None:
        User.locally_update(self, data)
        if 'verified' in data:
            self.verified = data['verified']  # type: ignore
        if 'mfa_enabled' in data:
            self.mfa_enabled = data['mfa_enabled']  # type: ignore
        if 'locale' in data:
            self.locale = data['locale']  # type: ignore

    async def edit(
        self,
        *,
        username: UndefinedOr[str] = UNDEFINED,
        avatar: UndefinedOr[typing.Optional[typing.Union[str, bytes]]] = UNDEFINED,
    ) -> typing.Union[ClientUser, HTTPException]:
        """|coro|

        Edits the current user.

        Parameters
        ----------
        username: UndefinedOr[:class:`str`]
            The new username.
        avatar: UndefinedOr[Optional[Union[:class:`str`, :class:`bytes`]]]
            The new avatar. Raw image bytes are turned into data URI. Pass ``None`` to remove it.

        Returns
        -------
        Union[:class:`ClientUser`, :class:`HTTPException`]
            The updated user, or the error.
        """
        payload: raw.DataEditUser = {}
        if username:
            payload['username'] = username
        if avatar is not UNDEFINED:
            payload['avatar'] = resolve_image(avatar)

        response = await self.state.http.edit_my_user(payload)
        if response.error is not None:
            return response.error

        self.locally_update(response.data)
        self.state.users.set(self.id, self)
        return self

    async def edit_username(self, username: str, /) -> typing.Union[ClientUser, HTTPException]:
        """|coro|

        Changes the username of current user.
        """
        return await self.edit(username=username)

    async def edit_avatar(self, avatar: typing.Optional[typing.Union[str, bytes]], /) -> typing.Union[ClientUser, HTTPException]:
        """|coro|

        Changes the avatar of current user.
        """
        return await self.edit(avatar=avatar)


__all__ = (
    'User',
    'ClientUser',
)
